"""
Tests for account and chain queries.
"""
import pytest
from unittest.mock import MagicMock, PropertyMock, patch

from spiceflow_sdk.chain import ChainClient
from spiceflow_sdk.exceptions import ChainQueryError, ConfigError, NonceLookupError
from tests.test_helpers import TEST_CHAIN_ID, TEST_NONCE, TEST_RECENT_BLOCK, TEST_RPC_URL

USER = "0x000000000000000000000000000000000000000a"


def test_unknown_chain():
    with pytest.raises(ConfigError):
        ChainClient({}).web3_for_chain(1)


def test_web3_created_lazily_once():
    client = ChainClient({1: TEST_RPC_URL}, timeout=5)
    with patch("spiceflow_sdk.chain.Web3") as MockWeb3:
        first = client.web3_for_chain(1)
        second = client.web3_for_chain(1)
    assert first is second
    MockWeb3.HTTPProvider.assert_called_once_with(TEST_RPC_URL, request_kwargs={"timeout": 5})
    MockWeb3.assert_called_once()


def test_get_account_nonce(chain_client, mock_w3):
    assert chain_client.get_account_nonce(USER, TEST_CHAIN_ID) == TEST_NONCE
    mock_w3.eth.get_transaction_count.assert_called_once_with(
        "0x000000000000000000000000000000000000000A", "pending"
    )


def test_get_account_nonce_failure(chain_client, mock_w3):
    mock_w3.eth.get_transaction_count.side_effect = ConnectionError("rpc down")
    with pytest.raises(NonceLookupError) as exc_info:
        chain_client.get_account_nonce(USER, TEST_CHAIN_ID)
    assert exc_info.value.chain_id == TEST_CHAIN_ID
    assert isinstance(exc_info.value, ChainQueryError)


def test_get_recent_block(chain_client):
    assert chain_client.get_recent_block(TEST_CHAIN_ID) == TEST_RECENT_BLOCK


def test_get_recent_block_failure():
    w3 = MagicMock()
    type(w3.eth).block_number = PropertyMock(side_effect=TimeoutError("slow node"))
    client = ChainClient({1: TEST_RPC_URL})
    client.register(1, w3)
    with pytest.raises(ChainQueryError) as exc_info:
        client.get_recent_block(1)
    assert not isinstance(exc_info.value, NonceLookupError)


def test_verify_chain_id(chain_client):
    assert chain_client.verify_chain_id(TEST_CHAIN_ID) == TEST_CHAIN_ID


def test_verify_chain_id_mismatch(chain_client, mock_w3):
    mock_w3.eth.chain_id = 1
    with pytest.raises(ChainQueryError, match="Wrong chain"):
        chain_client.verify_chain_id(TEST_CHAIN_ID)
