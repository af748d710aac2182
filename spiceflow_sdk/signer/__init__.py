"""
Signer interface for the SpiceFlow SDK.

A signer owns an account key and produces the two signatures an intent needs:
one EIP-7702 delegation per chain and one signature over the intent digest.
"""
from typing import Protocol, runtime_checkable

from ..models import Authorization

__all__ = ["Signer", "LocalSigner"]


@runtime_checkable
class Signer(Protocol):
    """Protocol for custom signers"""
    address: str

    def sign_delegation(self, delegate_address: str, chain_id: int, nonce: int) -> Authorization:
        """Sign an EIP-7702 authorization delegating to ``delegate_address``"""
        ...

    def sign_digest(self, digest: bytes) -> bytes:
        """Sign a 32-byte intent digest and return the 65-byte signature"""
        ...


from .local import LocalSigner  # noqa: E402
