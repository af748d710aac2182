"""
SpiceFlowClient - Facade tying hashing, delegation, signing and relaying together.
"""
import logging
import threading
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple, Union

from .authorization import get_authorization_hash, hash_chain_batches
from .chain import ChainClient
from .config import SpiceFlowConfig
from .delegation import DelegationBuilder, DelegationRequest
from .exceptions import SigningError
from .models import (
    Authorization,
    ChainAuthorization,
    ChainBatch,
    IntentStepStatusResponse,
    RelayerSubmitResponse,
)
from .relayer import RelayerClient
from .signer import LocalSigner, Signer
from .status import DEFAULT_POLL_INTERVAL, DEFAULT_POLL_TIMEOUT, poll_intent_step
from .submission import submit_intent
from .utils import to_bytes32, to_hex, to_uint256

BatchInput = Union[ChainBatch, Mapping[str, Any]]


class SpiceFlowClient:
    """
    Client for building, signing and submitting cross-chain intents.

    A typical flow:
    1. ``build_chain_batches`` hashes one call batch per chain and composes the digest
    2. ``sign_delegations`` produces the EIP-7702 authorizations
    3. ``submit_intent`` signs the digest and hands everything to the relayer
    4. ``wait_for_step`` blocks until the relayer reports a terminal status
    """

    def __init__(
        self,
        config: SpiceFlowConfig,
        priv_key: Optional[str] = None,
        signer: Optional[Signer] = None,
        chain_client: Optional[ChainClient] = None,
        relayer: Optional[RelayerClient] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the SpiceFlowClient

        Args:
            config: Explicit SDK configuration
            priv_key: Private key used to build a LocalSigner (optional if signer provided)
            signer: Custom signer (optional if priv_key provided)
            chain_client: Chain query client (defaults to one built from config RPC URLs)
            relayer: Relayer client (defaults to one built from config.tx_api_url)
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ValueError: If neither priv_key nor signer is provided
            SigningError: If the private key is invalid
        """
        if not priv_key and signer is None:
            raise ValueError("Either priv_key or signer must be provided")

        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.signer: Signer = signer if signer is not None else LocalSigner(priv_key, logger=self.logger)
        self.chain_client = chain_client or ChainClient(
            config.rpc_urls, timeout=int(config.request_timeout), logger=self.logger
        )
        self.relayer = relayer or RelayerClient(
            config.tx_api_url,
            timeout=config.request_timeout,
            retry_count=config.retry_count,
            logger=self.logger
        )
        self.delegations = DelegationBuilder(self.signer, self.chain_client, logger=self.logger)

    def __enter__(self) -> "SpiceFlowClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.relayer.close()

    @property
    def address(self) -> str:
        """Address of the signing account"""
        return self.signer.address

    def build_chain_batches(self, batches: Sequence[BatchInput]) -> Tuple[List[ChainAuthorization], bytes]:
        """
        Hash per-chain call batches and compose the intent digest.

        Batches given as mappings may leave out ``recentBlock``; it is then
        loaded from the chain.

        Args:
            batches: One batch per chain, in the order the chains should be presented

        Returns:
            Tuple of (chain authorizations, 32-byte intent digest)

        Raises:
            EncodingError: If a batch is malformed or the list is empty
            ChainQueryError: If a recent block cannot be loaded
        """
        resolved = [self._complete_batch(batch) for batch in batches]
        chain_authorizations = hash_chain_batches(resolved)
        digest = get_authorization_hash(chain_authorizations)
        self.logger.debug(f"Built {len(chain_authorizations)} chain batch(es), digest {to_hex(digest)}")
        return chain_authorizations, digest

    def _complete_batch(self, batch: BatchInput) -> ChainBatch:
        if isinstance(batch, ChainBatch):
            return batch
        data = dict(batch)
        chain_id = data.get("chainId", data.get("chain_id"))
        if chain_id is not None and data.get("recentBlock", data.get("recent_block")) is None:
            data.pop("recent_block", None)
            data["recentBlock"] = self.chain_client.get_recent_block(to_uint256(chain_id, "chainId"))
        return ChainBatch.model_validate(data)

    def sign_delegations(
        self,
        delegations: Sequence[Union[int, DelegationRequest]],
        user: Optional[str] = None
    ) -> List[Authorization]:
        """
        Sign EIP-7702 delegations.

        Args:
            delegations: Chain ids (delegating to the configured contract) or
                explicit DelegationRequest values
            user: Account whose nonces are loaded (defaults to the signer)

        Returns:
            Authorizations in the given order

        Raises:
            ConfigError: If a chain has no configured delegate contract
            NonceLookupError: If a nonce lookup fails
            SigningError: If signing fails
        """
        resolved = [
            d if isinstance(d, DelegationRequest)
            else DelegationRequest(d, self.config.delegate_address_for_chain(d))
            for d in delegations
        ]
        return self.delegations.sign_delegations(resolved, user=user)

    def sign_intent(self, digest: Union[bytes, str]) -> bytes:
        """
        Sign an intent digest with the client's signer.

        Raises:
            SigningError: If the signer fails
        """
        digest = to_bytes32(digest, "digest")
        try:
            signature = self.signer.sign_digest(digest)
        except SigningError:
            raise
        except Exception as e:
            self.logger.error(f"Intent signing failed: {e}")
            raise SigningError(f"Failed to sign intent digest: {str(e)}") from e
        return bytes(signature)

    def submit_intent(
        self,
        chain_authorizations: Sequence[ChainAuthorization],
        authorization: Sequence[Authorization],
        token_address: str,
        token_amount: Union[int, str],
        signature: Optional[Union[bytes, str]] = None,
        timeout: Optional[float] = None
    ) -> RelayerSubmitResponse:
        """
        Submit an intent to the relayer.

        When no signature is given the digest is recomposed from
        ``chain_authorizations`` and signed here.

        Raises:
            EncodingError: If the submission cannot be assembled
            SigningError: If signing the digest fails
            SubmissionError: If the relayer rejects the submission
        """
        if signature is None:
            signature = self.sign_intent(get_authorization_hash(chain_authorizations))

        return submit_intent(
            self.relayer,
            signature,
            authorization,
            chain_authorizations,
            token_address,
            token_amount,
            self.address,
            timeout=timeout
        )

    def wait_for_step(
        self,
        intent_id: str,
        step_id: int = 0,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: Optional[float] = DEFAULT_POLL_TIMEOUT,
        cancel_event: Optional[threading.Event] = None,
        on_update: Optional[Callable[[IntentStepStatusResponse], None]] = None
    ) -> IntentStepStatusResponse:
        """Block until an intent step is terminal. See ``poll_intent_step``."""
        return poll_intent_step(
            self.relayer,
            intent_id,
            step_id=step_id,
            interval=interval,
            timeout=timeout,
            cancel_event=cancel_event,
            on_update=on_update,
            logger_instance=self.logger
        )
