"""
DODO route-service client and swap call construction.

Turns a DODO route into the ``[approve, swap]`` call pair that an intent batch
executes from the user's delegated account.
"""
import logging
from typing import Any, Dict, List, Optional, Union

import requests
from eth_abi import encode
from eth_utils import keccak
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import EncodingError, RouteError
from .models import Call
from .utils import to_address, to_bytes, to_uint256, validate_service_url

logger = logging.getLogger(__name__)

DODO_ROUTE_API_URL = "https://api.dodoex.io/route-service/developer/getdodoroute"

APPROVE_SELECTOR = keccak(text="approve(address,uint256)")[:4]


class DodoRouteRequest(BaseModel):
    """Query parameters for the DODO developer route endpoint"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_token_address: str = Field(..., alias="fromTokenAddress")
    from_token_decimals: int = Field(..., alias="fromTokenDecimals")
    to_token_address: str = Field(..., alias="toTokenAddress")
    to_token_decimals: int = Field(..., alias="toTokenDecimals")
    from_amount: int = Field(..., alias="fromAmount")
    user_addr: str = Field(..., alias="userAddr")
    chain_id: int = Field(..., alias="chainId")
    rpc: str
    slippage: float = 10

    @field_validator("from_token_address", "to_token_address", "user_addr", mode="before")
    @classmethod
    def _check_address(cls, v: Any, info) -> str:
        return to_address(v, info.field_name)

    @field_validator("from_amount", "chain_id", mode="before")
    @classmethod
    def _check_uint(cls, v: Any, info) -> int:
        return to_uint256(v, info.field_name)

    def to_params(self, api_key: str) -> Dict[str, Any]:
        params = self.model_dump(by_alias=True)
        params["fromAmount"] = str(self.from_amount)
        params["slippage"] = f"{self.slippage:g}"
        params["apikey"] = api_key
        return params


class DodoRoute(BaseModel):
    """Swap transaction returned by the route service"""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    to: str
    data: bytes
    value: int = 0
    target_approve_addr: Optional[str] = Field(None, alias="targetApproveAddr")

    @field_validator("to", mode="before")
    @classmethod
    def _check_to(cls, v: Any) -> str:
        return to_address(v, "route.to")

    @field_validator("data", mode="before")
    @classmethod
    def _check_data(cls, v: Any) -> bytes:
        return to_bytes(v, "route.data")

    @field_validator("value", mode="before")
    @classmethod
    def _check_value(cls, v: Any) -> int:
        if v is None or v == "":
            return 0
        return to_uint256(v, "route.value")

    @field_validator("target_approve_addr", mode="before")
    @classmethod
    def _check_approver(cls, v: Any) -> Optional[str]:
        # An unusable approver falls back to the router
        if not v:
            return None
        try:
            return to_address(v, "targetApproveAddr")
        except EncodingError:
            return None

    @property
    def spender(self) -> str:
        return self.target_approve_addr or self.to


def encode_approve(spender: str, amount: Union[int, str]) -> bytes:
    """ABI-encode ``approve(spender, amount)`` calldata"""
    return APPROVE_SELECTOR + encode(
        ["address", "uint256"],
        [to_address(spender, "spender"), to_uint256(amount, "amount")]
    )


def build_swap_calls(route: DodoRoute, token_address: str, amount: Union[int, str]) -> List[Call]:
    """
    Build the approve + swap call pair for an ERC-20 swap.

    Raises:
        RouteError: If the route asks for a native value
    """
    if route.value != 0:
        raise RouteError(f"Unexpected non-zero value for ERC20 swap: {route.value}")
    return [
        Call(to=token_address, value=0, data=encode_approve(route.spender, amount)),
        Call(to=route.to, value=0, data=route.data),
    ]


class DodoRouteClient:
    """Client for the DODO route-service developer API"""

    def __init__(
        self,
        api_key: str,
        api_url: str = DODO_ROUTE_API_URL,
        timeout: float = 30,
        retry_count: int = 3,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        if not api_key:
            raise ValueError("api_key must be provided")
        self.api_key = api_key
        self.api_url = validate_service_url("api_url", api_url)
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

        if session is not None:
            self.session = session
        else:
            self.session = requests.Session()
            retries = Retry(
                total=retry_count,
                backoff_factor=0.5,
                status_forcelist=[500, 502, 503, 504],
                allowed_methods=["GET"],
                raise_on_status=False
            )
            self.session.mount("http://", HTTPAdapter(max_retries=retries))
            self.session.mount("https://", HTTPAdapter(max_retries=retries))

    def close(self) -> None:
        self.session.close()

    def get_route(self, request: DodoRouteRequest) -> DodoRoute:
        """
        Ask the route service for a swap route.

        Raises:
            RouteError: On network errors, a non-200 body status or an unusable route
        """
        self.logger.debug(
            f"Querying DODO route {request.from_token_address} -> {request.to_token_address} "
            f"amount={request.from_amount} chain={request.chain_id}"
        )
        try:
            response = self.session.get(self.api_url, params=request.to_params(self.api_key), timeout=self.timeout)
        except requests.RequestException as e:
            self.logger.error(f"DODO route request failed: {e}")
            raise RouteError(f"DODO route request failed: {str(e)}") from e

        if not 200 <= response.status_code < 300:
            raise RouteError(f"DODO route-service HTTP error: {response.status_code} - {response.text}")

        try:
            body = response.json()
        except ValueError as e:
            raise RouteError(f"Invalid JSON response from DODO route-service: {str(e)}") from e

        if not isinstance(body, dict) or body.get("status") != 200:
            raise RouteError(f"DODO route-service error: {body!r}")

        try:
            route = DodoRoute.model_validate(body.get("data") or {})
        except (ValidationError, EncodingError) as e:
            raise RouteError(f"Unusable DODO route: {str(e)}") from e

        self.logger.info(f"DODO route found: router={route.to} spender={route.spender}")
        return route
