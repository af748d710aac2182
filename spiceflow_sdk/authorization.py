"""
Chain authorization hashing and intent digest composition.

A chain batch is ABI-encoded as ``(uint256 chainId, (address,uint256,bytes)[] calls,
uint256 recentBlock)`` and hashed with keccak-256. The intent digest is the
keccak-256 of the ABI-encoded ``bytes32[]`` of those hashes, in caller order.
Both encodings match what an on-chain verifier recomputes, so they must stay
bit-exact.
"""
import logging
from typing import Any, Iterable, List, Mapping, Sequence, Union

from eth_abi import encode
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_utils import keccak

from .exceptions import EncodingError
from .models import ChainAuthorization, ChainBatch
from .utils import to_bytes32, to_hex

logger = logging.getLogger(__name__)

# ABI description of the per-chain signature components
CHAIN_AUTHORIZATION_ABI_TYPES = ["uint256", "(address,uint256,bytes)[]", "uint256"]
INTENT_DIGEST_ABI_TYPES = ["bytes32[]"]

BatchLike = Union[ChainBatch, Mapping[str, Any]]


def _as_batch(batch: BatchLike) -> ChainBatch:
    if isinstance(batch, ChainBatch):
        return batch
    if isinstance(batch, Mapping):
        return ChainBatch.model_validate(dict(batch))
    raise EncodingError(f"Expected a ChainBatch or mapping, got {type(batch).__name__}")


def encode_chain_batch(batch: BatchLike) -> bytes:
    """
    ABI-encode a chain batch into the canonical preimage of its hash.

    Args:
        batch: ChainBatch (or a mapping accepted by ``ChainBatch.model_validate``)

    Returns:
        The encoded bytes

    Raises:
        EncodingError: If any field cannot be encoded
    """
    batch = _as_batch(batch)
    try:
        return encode(
            CHAIN_AUTHORIZATION_ABI_TYPES,
            [batch.chain_id, [call.as_abi_tuple() for call in batch.calls], batch.recent_block],
        )
    except AbiEncodingError as e:
        raise EncodingError(f"Failed to encode chain batch for chain {batch.chain_id}: {e}") from e


def hash_chain_batch(batch: BatchLike) -> ChainAuthorization:
    """
    Hash one chain batch into its ChainAuthorization.

    The result is not cached; identical batches always produce identical hashes.
    """
    batch = _as_batch(batch)
    digest = keccak(encode_chain_batch(batch))
    logger.debug(f"Chain {batch.chain_id}: {len(batch.calls)} call(s), recentBlock={batch.recent_block}, hash={to_hex(digest)}")
    return ChainAuthorization(
        hash=digest,
        chain_id=batch.chain_id,
        calls=batch.calls,
        recent_block=batch.recent_block,
    )


def hash_chain_batches(batches: Iterable[BatchLike]) -> List[ChainAuthorization]:
    """Hash each chain's call batch, preserving order."""
    return [hash_chain_batch(batch) for batch in batches]


def get_authorization_hash(chain_authorizations: Sequence[Union[ChainAuthorization, bytes, str]]) -> bytes:
    """
    Compose the intent digest from per-chain authorization hashes.

    Args:
        chain_authorizations: ChainAuthorization objects or raw 32-byte hashes,
            in the order the chains are presented to the relayer

    Returns:
        32-byte intent digest

    Raises:
        EncodingError: If the list is empty or a hash is not 32 bytes
    """
    if not chain_authorizations:
        raise EncodingError("Cannot compose an intent digest from an empty list of chain authorizations")

    hashes = []
    for item in chain_authorizations:
        if isinstance(item, ChainAuthorization):
            hashes.append(item.hash)
        else:
            hashes.append(to_bytes32(item, "hash"))

    try:
        encoded = encode(INTENT_DIGEST_ABI_TYPES, [hashes])
    except AbiEncodingError as e:
        raise EncodingError(f"Failed to encode chain authorization hashes: {e}") from e

    digest = keccak(encoded)
    logger.debug(f"Intent digest over {len(hashes)} chain(s): {to_hex(digest)}")
    return digest


def verify_chain_authorization(chain_authorization: ChainAuthorization) -> bool:
    """Recompute the hash from the authorization's fields and compare."""
    return hash_chain_batch(chain_authorization.batch).hash == chain_authorization.hash
