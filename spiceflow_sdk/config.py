"""
Configuration for the SpiceFlow SDK.

Components receive a ``SpiceFlowConfig`` at construction time and never look
anything up from the environment afterwards. ``NetworkConfig`` provides bundled
network presets that can be turned into such a config.
"""
import importlib.resources
import json
import logging
import os
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ConfigError
from .utils import to_address, validate_service_url

logger = logging.getLogger(__name__)

TX_API_URL_ENV = "SPICEFLOW_TX_API_URL"


class TokenConfig(BaseModel):
    """ERC-20 token known on a chain"""
    model_config = ConfigDict(frozen=True)

    address: str
    decimals: int

    @field_validator("address", mode="before")
    @classmethod
    def _check_address(cls, v: Any) -> str:
        return to_address(v, "token address")


class ChainConfig(BaseModel):
    """Per-chain settings: RPC endpoint, delegate contract and known tokens"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    chain_id: int = Field(..., alias="chainId")
    rpc_url: str = Field(..., alias="rpc")
    delegate_address: Optional[str] = Field(None, alias="delegateContract")
    name: Optional[str] = None
    tokens: Dict[str, TokenConfig] = Field(default_factory=dict)

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, v: str) -> str:
        return validate_service_url("rpc_url", v)

    @field_validator("delegate_address", mode="before")
    @classmethod
    def _check_delegate(cls, v: Any) -> Optional[str]:
        if v is None or v == "":
            return None
        return to_address(v, "delegate_address")


class SpiceFlowConfig(BaseModel):
    """
    Explicit SDK configuration.

    Attributes:
        tx_api_url: Relayer transaction API base URL
        chains: Chain settings keyed by chain id
        request_timeout: Timeout for HTTP and RPC requests in seconds
        retry_count: Retries for idempotent HTTP requests
    """
    model_config = ConfigDict(frozen=True)

    tx_api_url: str
    chains: Dict[int, ChainConfig] = Field(default_factory=dict)
    request_timeout: float = 30
    retry_count: int = 3

    @field_validator("tx_api_url")
    @classmethod
    def _check_tx_api_url(cls, v: str) -> str:
        return validate_service_url("tx_api_url", v)

    def chain(self, chain_id: int) -> ChainConfig:
        """
        Get settings for a chain.

        Raises:
            ConfigError: If the chain is not configured
        """
        try:
            return self.chains[chain_id]
        except KeyError:
            known = ", ".join(str(c) for c in sorted(self.chains)) or "none"
            raise ConfigError(f"Chain {chain_id} is not configured. Known chains: {known}")

    def delegate_address_for_chain(self, chain_id: int) -> str:
        """
        Get the EIP-7702 delegate contract for a chain.

        Raises:
            ConfigError: If the chain or its delegate contract is not configured
        """
        address = self.chain(chain_id).delegate_address
        if not address:
            raise ConfigError(f"No delegate contract configured for chain {chain_id}")
        return address

    def rpc_url_for_chain(self, chain_id: int) -> str:
        return self.chain(chain_id).rpc_url

    @property
    def rpc_urls(self) -> Dict[int, str]:
        return {chain_id: chain.rpc_url for chain_id, chain in self.chains.items()}

    @classmethod
    def from_networks(
        cls,
        names: Union[str, Iterable[str]],
        tx_api_url: Optional[str] = None,
        delegate_address: Optional[Union[str, Mapping[int, str]]] = None,
        rpc_overrides: Optional[Mapping[str, str]] = None,
        **kwargs: Any
    ) -> "SpiceFlowConfig":
        """
        Build a config from bundled network presets.

        Args:
            names: Network preset name(s), e.g. "pharos-testnet"
            tx_api_url: Relayer URL (falls back to the SPICEFLOW_TX_API_URL env var)
            delegate_address: One delegate for every chain, or a mapping per chain id
            rpc_overrides: RPC URL overrides keyed by network name
            **kwargs: Extra SpiceFlowConfig fields (request_timeout, retry_count)

        Raises:
            ConfigError: If a network is unknown or no relayer URL is available
        """
        if isinstance(names, str):
            names = [names]
        rpc_overrides = rpc_overrides or {}

        tx_api_url = tx_api_url or os.environ.get(TX_API_URL_ENV)
        if not tx_api_url:
            raise ConfigError(f"tx_api_url must be provided or set via {TX_API_URL_ENV}")

        chains: Dict[int, ChainConfig] = {}
        for name in names:
            network = NetworkConfig.get_network(name)
            chain_id = int(network["chainId"])
            if isinstance(delegate_address, Mapping):
                delegate = delegate_address.get(chain_id)
            else:
                delegate = delegate_address
            chains[chain_id] = ChainConfig(
                chain_id=chain_id,
                rpc_url=NetworkConfig.get_rpc_url(name, override=rpc_overrides.get(name)),
                delegate_address=delegate or network.get("delegateContract"),
                name=name,
                tokens=network.get("tokens", {}),
            )

        return cls(tx_api_url=tx_api_url, chains=chains, **kwargs)


class NetworkConfig:
    """Bundled network presets loaded from ``networks.json``"""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load network presets, caching them after the first read.

        Returns:
            Mapping of network name to preset
        """
        if cls._networks_cache is None:
            resource = importlib.resources.files("spiceflow_sdk").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                cls._networks_cache = json.load(f)
            logger.debug(f"Loaded {len(cls._networks_cache)} network preset(s)")
        return cls._networks_cache

    @classmethod
    def get_network(cls, name: str) -> Dict[str, Any]:
        """
        Get a network preset by name.

        Raises:
            ConfigError: If the network is unknown
        """
        networks = cls.load_networks()
        if name not in networks:
            raise ConfigError(f"Unknown network: {name}. Available networks: {', '.join(sorted(networks))}")
        return networks[name]

    @classmethod
    def get_rpc_url(cls, name: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL for a network.

        Precedence: explicit override, then ``<NAME>_RPC_URL`` environment
        variable (dashes become underscores), then the preset.
        """
        if override:
            return override
        env_var = f"{name.upper().replace('-', '_')}_RPC_URL"
        env_url = os.environ.get(env_var)
        if env_url:
            return env_url
        return cls.get_network(name)["rpc"]

    @classmethod
    def get_chain_id(cls, name: str) -> int:
        return int(cls.get_network(name)["chainId"])

    @classmethod
    def get_token(cls, name: str, symbol: str) -> TokenConfig:
        """
        Get a token preset on a network.

        Raises:
            ConfigError: If the token is unknown on that network
        """
        tokens = cls.get_network(name).get("tokens", {})
        if symbol not in tokens:
            raise ConfigError(f"Unknown token {symbol} on {name}. Available tokens: {', '.join(sorted(tokens)) or 'none'}")
        return TokenConfig.model_validate(tokens[symbol])
