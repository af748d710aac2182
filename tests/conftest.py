"""
Pytest fixtures for the SpiceFlow SDK tests.
"""
import pytest
from unittest.mock import MagicMock

from spiceflow_sdk._rate_limited_log import reset_rate_limited_log
from spiceflow_sdk.chain import ChainClient
from spiceflow_sdk.config import ChainConfig, NetworkConfig, SpiceFlowConfig
from spiceflow_sdk.relayer import RelayerClient
from spiceflow_sdk.signer import LocalSigner
from tests.test_helpers import (
    TEST_CHAIN_ID,
    TEST_DELEGATE,
    TEST_NONCE,
    TEST_PRIV_KEY,
    TEST_RECENT_BLOCK,
    TEST_RPC_URL,
    TEST_TX_API_URL,
)


@pytest.fixture(autouse=True)
def _reset_module_state():
    """Forget rate-limited messages and cached network presets between tests."""
    reset_rate_limited_log()
    NetworkConfig._networks_cache = None
    yield
    reset_rate_limited_log()
    NetworkConfig._networks_cache = None


@pytest.fixture
def signer():
    return LocalSigner(TEST_PRIV_KEY)


@pytest.fixture
def mock_w3():
    """Web3 stand-in answering nonce, block number and chain id queries."""
    w3 = MagicMock()
    w3.eth.get_transaction_count.return_value = TEST_NONCE
    w3.eth.block_number = TEST_RECENT_BLOCK
    w3.eth.chain_id = TEST_CHAIN_ID
    return w3


@pytest.fixture
def chain_client(mock_w3):
    client = ChainClient({TEST_CHAIN_ID: TEST_RPC_URL})
    client.register(TEST_CHAIN_ID, mock_w3)
    return client


@pytest.fixture
def config():
    return SpiceFlowConfig(
        tx_api_url=TEST_TX_API_URL,
        chains={
            TEST_CHAIN_ID: ChainConfig(
                chain_id=TEST_CHAIN_ID,
                rpc_url=TEST_RPC_URL,
                delegate_address=TEST_DELEGATE,
            )
        },
    )


@pytest.fixture
def relayer():
    client = RelayerClient(TEST_TX_API_URL, retry_count=0)
    yield client
    client.close()
