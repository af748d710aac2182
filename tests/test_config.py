"""
Tests for SDK configuration and bundled network presets.
"""
import pytest
from unittest.mock import patch

from spiceflow_sdk.config import TX_API_URL_ENV, ChainConfig, NetworkConfig, SpiceFlowConfig
from spiceflow_sdk.exceptions import ConfigError
from tests.test_helpers import TEST_DELEGATE, TEST_TX_API_URL

# Sample network configuration
MOCK_NETWORKS = {
    "test-network": {
        "chainId": 123,
        "rpc": "https://test.example.com",
        "delegateContract": "0x0987654321098765432109876543210987654321",
        "tokens": {"USDC": {"address": "0x72df0bcd7276f2dfbac900d1ce63c272c4bccced", "decimals": 6}},
    },
    "other-network": {
        "chainId": 456,
        "rpc": "https://other.example.com",
    },
}


class TestNetworkConfig:
    """Test NetworkConfig class."""

    def test_bundled_presets(self):
        networks = NetworkConfig.load_networks()
        assert {"pharos-testnet", "pharos-fork"} <= set(networks)
        assert NetworkConfig.get_chain_id("pharos-testnet") == 688688
        assert NetworkConfig.get_token("pharos-fork", "USDT").decimals == 6

    def test_load_networks_cached(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        with patch("importlib.resources.files") as mock_files:
            result = NetworkConfig.load_networks()
            mock_files.assert_not_called()
        assert result == MOCK_NETWORKS

    def test_get_network_not_found(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        with pytest.raises(ConfigError) as exc_info:
            NetworkConfig.get_network("non-existent")
        assert "Unknown network: non-existent" in str(exc_info.value)
        assert "Available networks: other-network, test-network" in str(exc_info.value)

    def test_get_rpc_url_precedence(self, monkeypatch):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        monkeypatch.delenv("TEST_NETWORK_RPC_URL", raising=False)
        assert NetworkConfig.get_rpc_url("test-network") == "https://test.example.com"

        monkeypatch.setenv("TEST_NETWORK_RPC_URL", "https://env.example.com")
        assert NetworkConfig.get_rpc_url("test-network") == "https://env.example.com"
        assert NetworkConfig.get_rpc_url("test-network", override="https://override.example.com") == "https://override.example.com"

    def test_get_token_unknown(self):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        with pytest.raises(ConfigError):
            NetworkConfig.get_token("other-network", "USDC")
        token = NetworkConfig.get_token("test-network", "USDC")
        assert token.address == "0x72df0bcd7276f2dFbAc900D1CE63c272C4BCcCED"


class TestSpiceFlowConfig:
    def test_rejects_plain_http(self):
        with pytest.raises(ConfigError):
            SpiceFlowConfig(tx_api_url="http://relayer.example.com")
        with pytest.raises(ConfigError):
            ChainConfig(chain_id=1, rpc_url="http://rpc.example.com")

    def test_allows_localhost(self):
        config = SpiceFlowConfig(tx_api_url="http://127.0.0.1:3000/")
        assert config.tx_api_url == "http://127.0.0.1:3000"

    def test_lookups(self, config):
        assert config.delegate_address_for_chain(688688) == TEST_DELEGATE
        assert config.rpc_url_for_chain(688688) == "https://rpc.example.com"
        assert config.rpc_urls == {688688: "https://rpc.example.com"}

    def test_unknown_chain(self, config):
        with pytest.raises(ConfigError, match="Chain 1 is not configured"):
            config.rpc_url_for_chain(1)

    def test_missing_delegate(self):
        config = SpiceFlowConfig(
            tx_api_url=TEST_TX_API_URL,
            chains={5: ChainConfig(chain_id=5, rpc_url="https://rpc.example.com")},
        )
        with pytest.raises(ConfigError, match="No delegate contract"):
            config.delegate_address_for_chain(5)

    def test_from_networks(self, monkeypatch):
        NetworkConfig._networks_cache = MOCK_NETWORKS
        monkeypatch.delenv("TEST_NETWORK_RPC_URL", raising=False)
        monkeypatch.delenv("OTHER_NETWORK_RPC_URL", raising=False)
        config = SpiceFlowConfig.from_networks(
            ["test-network", "other-network"],
            tx_api_url=TEST_TX_API_URL,
            delegate_address={456: TEST_DELEGATE},
            rpc_overrides={"other-network": "https://mine.example.com"},
            request_timeout=5,
        )
        assert config.request_timeout == 5
        assert config.chain(123).name == "test-network"
        assert config.delegate_address_for_chain(123) == "0x0987654321098765432109876543210987654321"
        assert config.delegate_address_for_chain(456) == TEST_DELEGATE
        assert config.rpc_url_for_chain(456) == "https://mine.example.com"
        assert "USDC" in config.chain(123).tokens

    def test_from_networks_single_delegate(self, monkeypatch):
        monkeypatch.delenv("PHAROS_TESTNET_RPC_URL", raising=False)
        config = SpiceFlowConfig.from_networks("pharos-testnet", tx_api_url=TEST_TX_API_URL, delegate_address=TEST_DELEGATE)
        assert config.delegate_address_for_chain(688688) == TEST_DELEGATE
        assert config.rpc_url_for_chain(688688) == "https://testnet.dplabs-internal.com"

    def test_from_networks_env_url(self, monkeypatch):
        monkeypatch.setenv(TX_API_URL_ENV, "https://env-relayer.example.com")
        config = SpiceFlowConfig.from_networks("pharos-fork")
        assert config.tx_api_url == "https://env-relayer.example.com"

    def test_from_networks_without_url(self, monkeypatch):
        monkeypatch.delenv(TX_API_URL_ENV, raising=False)
        with pytest.raises(ConfigError):
            SpiceFlowConfig.from_networks("pharos-fork")

    def test_from_networks_unknown(self):
        with pytest.raises(ConfigError):
            SpiceFlowConfig.from_networks("nowhere", tx_api_url=TEST_TX_API_URL)
