"""
Builders for SDK values shared by the tests.
"""
from spiceflow_sdk.authorization import hash_chain_batch
from spiceflow_sdk.models import Authorization, Call, ChainAuthorization, ChainBatch, IntentStepStatusResponse

# Test constants used throughout tests
TEST_CHAIN_ID = 688688
TEST_RPC_URL = "https://rpc.example.com"
TEST_TX_API_URL = "https://relayer.example.com"
TEST_PRIV_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_DELEGATE = "0x1234567890123456789012345678901234567890"
TEST_RECENT_BLOCK = 23437163
TEST_NONCE = 7

# Sample DODO route used by the end-to-end scenario
USDC = "0x72df0bcd7276f2dfbac900d1ce63c272c4bccced"
ROUTER = "0xa1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1a1"
APPROVER = "0xb2b2b2b2b2b2b2b2b2b2b2b2b2b2b2b2b2b2b2b2"
SWAP_DATA = "0x7c0252000000000000000000000000000000000000000000000000000000000000000001deadbeef"
SWAP_AMOUNT = 1000000

ONE = "0x0000000000000000000000000000000000000001"
TWO = "0x0000000000000000000000000000000000000002"


def make_batch(chain_id: int = 688688, recent_block: int = 1, calls=None) -> ChainBatch:
    if calls is None:
        calls = [Call(to=ONE, value=0, data=b"")]
    return ChainBatch(chain_id=chain_id, calls=calls, recent_block=recent_block)


def make_chain_authorization(chain_id: int = 688688, recent_block: int = 1, calls=None) -> ChainAuthorization:
    return hash_chain_batch(make_batch(chain_id, recent_block, calls))


def make_authorization(chain_id: int = 688688, nonce: int = 0, address: str = TWO) -> Authorization:
    return Authorization(address=address, chain_id=chain_id, nonce=nonce, r=1, s=2, y_parity=0)


def make_status(status: str, tx_hash=None) -> IntentStepStatusResponse:
    data = {"status": status}
    if tx_hash:
        data["transactionHash"] = tx_hash
    return IntentStepStatusResponse.model_validate({"success": True, "data": data})
