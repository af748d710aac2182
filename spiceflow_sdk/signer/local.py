"""
Local private-key signer backed by eth-account.
"""
import logging
from typing import Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from eth_account.signers.local import LocalAccount

from ..exceptions import SigningError
from ..models import Authorization
from ..utils import to_address, to_bytes32, to_uint256

logger = logging.getLogger(__name__)


class LocalSigner:
    """
    Signer holding a private key in memory.

    Delegations are signed per EIP-7702 (``keccak(0x05 || rlp([chain_id, address, nonce]))``)
    and digests as an EIP-191 personal message over the raw 32 digest bytes.
    """

    def __init__(self, priv_key: str, logger: Optional[logging.Logger] = None):
        """
        Args:
            priv_key: Hex-encoded secp256k1 private key

        Raises:
            SigningError: If the key cannot be loaded
        """
        try:
            self._account: LocalAccount = Account.from_key(priv_key)
        except Exception as e:
            raise SigningError(f"Invalid private key: {e}") from e
        self.logger = logger or logging.getLogger(__name__)

    @property
    def address(self) -> str:
        return self._account.address

    def sign_delegation(self, delegate_address: str, chain_id: int, nonce: int) -> Authorization:
        delegate_address = to_address(delegate_address, "delegate_address")
        authorization = {
            "chainId": to_uint256(chain_id, "chainId"),
            "address": delegate_address,
            "nonce": to_uint256(nonce, "nonce"),
        }
        try:
            signed = self._account.sign_authorization(authorization)
        except Exception as e:
            self.logger.error(f"Delegation signing failed for chain {chain_id}: {e}")
            raise SigningError(f"Failed to sign delegation: {str(e)}") from e

        self.logger.debug(f"Signed delegation to {delegate_address} on chain {chain_id} with nonce {nonce}")
        return Authorization(
            address=signed.address,
            chain_id=signed.chain_id,
            nonce=signed.nonce,
            r=signed.r,
            s=signed.s,
            y_parity=signed.y_parity,
        )

    def sign_digest(self, digest: bytes) -> bytes:
        message = encode_defunct(primitive=to_bytes32(digest, "digest"))
        try:
            signed = self._account.sign_message(message)
        except Exception as e:
            self.logger.error(f"Digest signing failed: {e}")
            raise SigningError(f"Failed to sign digest: {str(e)}") from e
        return bytes(signed.signature)
