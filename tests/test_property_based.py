"""
Property-based tests for chain batch hashing.

These tests verify that properties hold true across many random inputs.
"""
from hypothesis import assume, given, settings, strategies as st

from spiceflow_sdk.authorization import get_authorization_hash, hash_chain_batch
from spiceflow_sdk.models import Call, ChainBatch

UINT256_MAX = 2**256 - 1

address_strategy = st.binary(min_size=20, max_size=20)
uint_strategy = st.integers(min_value=0, max_value=UINT256_MAX)
data_strategy = st.binary(max_size=100)
call_strategy = st.builds(Call, to=address_strategy, value=uint_strategy, data=data_strategy)
# builds() follows the model signature, which carries the aliases
batch_strategy = st.builds(
    ChainBatch,
    chainId=uint_strategy,
    calls=st.lists(call_strategy, min_size=1, max_size=4),
    recentBlock=uint_strategy,
)
hash_strategy = st.binary(min_size=32, max_size=32)


def _with_call(batch: ChainBatch, index: int, **update) -> ChainBatch:
    calls = list(batch.calls)
    calls[index] = Call(**{**calls[index].model_dump(), **update})
    return ChainBatch(chain_id=batch.chain_id, calls=calls, recent_block=batch.recent_block)


@settings(max_examples=50)
@given(batch=batch_strategy)
def test_hash_is_deterministic(batch):
    rebuilt = ChainBatch.model_validate(batch.model_dump(mode="json", by_alias=True))
    assert hash_chain_batch(batch).hash == hash_chain_batch(rebuilt).hash


@settings(max_examples=50)
@given(batch=batch_strategy, index=st.integers(min_value=0, max_value=3))
def test_value_change_changes_hash(batch, index):
    index %= len(batch.calls)
    new_value = (batch.calls[index].value + 1) % (UINT256_MAX + 1)
    changed = _with_call(batch, index, value=new_value)
    assert hash_chain_batch(changed).hash != hash_chain_batch(batch).hash


@settings(max_examples=50)
@given(batch=batch_strategy, index=st.integers(min_value=0, max_value=3))
def test_data_change_changes_hash(batch, index):
    index %= len(batch.calls)
    data = batch.calls[index].data
    if data:
        changed_data = bytes([data[0] ^ 0x01]) + data[1:]
    else:
        changed_data = b"\x00"
    changed = _with_call(batch, index, data=changed_data)
    assert hash_chain_batch(changed).hash != hash_chain_batch(batch).hash


@settings(max_examples=50)
@given(batch=batch_strategy)
def test_chain_and_block_change_hash(batch):
    base = hash_chain_batch(batch).hash
    other_chain = ChainBatch(
        chain_id=(batch.chain_id + 1) % (UINT256_MAX + 1), calls=batch.calls, recent_block=batch.recent_block
    )
    other_block = ChainBatch(
        chain_id=batch.chain_id, calls=batch.calls, recent_block=(batch.recent_block + 1) % (UINT256_MAX + 1)
    )
    assert hash_chain_batch(other_chain).hash != base
    assert hash_chain_batch(other_block).hash != base


@settings(max_examples=50)
@given(batch=batch_strategy)
def test_call_order_changes_hash(batch):
    assume(len(batch.calls) > 1 and batch.calls[0] != batch.calls[-1])
    reordered = ChainBatch(
        chain_id=batch.chain_id, calls=tuple(reversed(batch.calls)), recent_block=batch.recent_block
    )
    assert hash_chain_batch(reordered).hash != hash_chain_batch(batch).hash


@settings(max_examples=50)
@given(h1=hash_strategy, h2=hash_strategy)
def test_digest_order_sensitive(h1, h2):
    assume(h1 != h2)
    assert get_authorization_hash([h1, h2]) != get_authorization_hash([h2, h1])
    assert get_authorization_hash([h1, h2]) == get_authorization_hash([h1, h2])
