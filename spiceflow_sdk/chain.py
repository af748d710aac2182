"""
Account and chain queries against per-chain RPC endpoints.
"""
import logging
import threading
from typing import Dict, Mapping, Optional, Union

from web3 import Web3

from .exceptions import ChainQueryError, ConfigError, NonceLookupError
from .utils import to_address

logger = logging.getLogger(__name__)


class ChainClient:
    """
    Thin Web3 wrapper answering the few questions the SDK asks a chain:
    the account nonce, a recent block number and the chain id.

    One ``Web3`` instance is created lazily per chain id and reused.
    """

    def __init__(
        self,
        rpc_urls: Mapping[int, str],
        timeout: int = 30,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            rpc_urls: Mapping of chain id to RPC endpoint URL
            timeout: RPC request timeout in seconds
            logger: Optional logger instance
        """
        self.rpc_urls: Dict[int, str] = dict(rpc_urls)
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self._web3_cache: Dict[int, Web3] = {}
        self._lock = threading.RLock()

    def register(self, chain_id: int, w3: Web3) -> None:
        """Use an existing Web3 instance for ``chain_id``."""
        with self._lock:
            self._web3_cache[chain_id] = w3

    def web3_for_chain(self, chain_id: int) -> Web3:
        """
        Get or create the Web3 instance for a chain.

        Raises:
            ConfigError: If no RPC URL is configured for the chain
        """
        with self._lock:
            if chain_id not in self._web3_cache:
                rpc_url = self.rpc_urls.get(chain_id)
                if not rpc_url:
                    raise ConfigError(
                        f"No RPC URL configured for chain {chain_id}. "
                        f"Known chains: {', '.join(str(c) for c in sorted(self.rpc_urls)) or 'none'}"
                    )
                self._web3_cache[chain_id] = Web3(
                    Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": self.timeout})
                )
            return self._web3_cache[chain_id]

    def get_account_nonce(
        self,
        address: str,
        chain_id: int,
        block_identifier: Union[str, int] = "pending"
    ) -> int:
        """
        Load the account nonce used when signing a chain delegation.

        Raises:
            NonceLookupError: If the RPC query fails
        """
        address = to_address(address)
        w3 = self.web3_for_chain(chain_id)
        try:
            nonce = w3.eth.get_transaction_count(address, block_identifier)
        except Exception as e:
            self.logger.error(f"Nonce lookup failed for {address} on chain {chain_id}: {e}")
            raise NonceLookupError(f"Failed to load nonce for {address} on chain {chain_id}: {str(e)}", chain_id=chain_id) from e
        self.logger.debug(f"Nonce for {address} on chain {chain_id} ({block_identifier}): {nonce}")
        return int(nonce)

    def get_recent_block(self, chain_id: int) -> int:
        """
        Fetch a recent block number to use as a batch freshness bound.

        Raises:
            ChainQueryError: If the RPC query fails
        """
        w3 = self.web3_for_chain(chain_id)
        try:
            block_number = w3.eth.block_number
        except Exception as e:
            self.logger.error(f"Block number query failed on chain {chain_id}: {e}")
            raise ChainQueryError(f"Failed to load recent block on chain {chain_id}: {str(e)}", chain_id=chain_id) from e
        return int(block_number)

    def verify_chain_id(self, chain_id: int) -> int:
        """
        Check that the endpoint configured for ``chain_id`` actually serves it.

        Returns:
            The chain id reported by the node

        Raises:
            ChainQueryError: If the query fails or the node reports another chain
        """
        w3 = self.web3_for_chain(chain_id)
        try:
            reported = int(w3.eth.chain_id)
        except Exception as e:
            raise ChainQueryError(f"Failed to query chain id for chain {chain_id}: {str(e)}", chain_id=chain_id) from e
        if reported != chain_id:
            raise ChainQueryError(
                f"Wrong chain. Expected {chain_id}, got {reported}. Check the RPC URL.",
                chain_id=chain_id
            )
        return reported
