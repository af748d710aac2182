"""
Data models for the SpiceFlow SDK.

Integers are kept as Python ints and byte strings as ``bytes`` everywhere inside
the SDK. They are only turned into decimal / hex strings when a model is dumped
in JSON mode, which is what goes over the wire to the relayer.
"""
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .exceptions import EncodingError
from .utils import int_to_hex32, to_address, to_bytes, to_bytes32, to_hex, to_uint256


class Call(BaseModel):
    """A single contract invocation inside a chain batch"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    to: str
    value: int = 0
    data: bytes = b""

    @field_validator("to", mode="before")
    @classmethod
    def _check_to(cls, v: Any) -> str:
        return to_address(v, "to")

    @field_validator("value", mode="before")
    @classmethod
    def _check_value(cls, v: Any) -> int:
        return to_uint256(v, "value")

    @field_validator("data", mode="before")
    @classmethod
    def _check_data(cls, v: Any) -> bytes:
        return to_bytes(v, "data")

    @field_serializer("value", when_used="json")
    def _dump_value(self, v: int) -> str:
        return str(v)

    @field_serializer("data", when_used="json")
    def _dump_data(self, v: bytes) -> str:
        return to_hex(v)

    def as_abi_tuple(self) -> Tuple[str, int, bytes]:
        """Return the ``(address, uint256, bytes)`` tuple used for ABI encoding"""
        return (self.to, self.value, self.data)


class ChainBatch(BaseModel):
    """Ordered calls to execute on one chain, bounded by a recent block"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    chain_id: int = Field(..., alias="chainId")
    calls: Tuple[Call, ...]
    recent_block: int = Field(..., alias="recentBlock")

    @field_validator("chain_id", mode="before")
    @classmethod
    def _check_chain_id(cls, v: Any) -> int:
        return to_uint256(v, "chainId")

    @field_validator("recent_block", mode="before")
    @classmethod
    def _check_recent_block(cls, v: Any) -> int:
        return to_uint256(v, "recentBlock")

    @field_serializer("chain_id", "recent_block", when_used="json")
    def _dump_uint(self, v: int) -> str:
        return str(v)


class ChainAuthorization(ChainBatch):
    """
    A chain batch together with its canonical authorization hash.

    The original fields are kept next to the hash because the relayer needs the
    calls to execute them and to recompute the hash.
    """
    hash: bytes

    @field_validator("hash", mode="before")
    @classmethod
    def _check_hash(cls, v: Any) -> bytes:
        return to_bytes32(v, "hash")

    @field_serializer("hash", when_used="json")
    def _dump_hash(self, v: bytes) -> str:
        return to_hex(v)

    @property
    def batch(self) -> ChainBatch:
        return ChainBatch(chain_id=self.chain_id, calls=self.calls, recent_block=self.recent_block)


class Authorization(BaseModel):
    """Signed EIP-7702 delegation for one (account, chain, nonce)"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    address: str
    chain_id: int = Field(..., alias="chainId")
    nonce: int
    r: str
    s: str
    y_parity: int = Field(..., alias="yParity")

    @field_validator("address", mode="before")
    @classmethod
    def _check_address(cls, v: Any) -> str:
        return to_address(v, "address")

    @field_validator("chain_id", "nonce", mode="before")
    @classmethod
    def _check_uint(cls, v: Any, info) -> int:
        return to_uint256(v, info.field_name)

    @field_validator("r", "s", mode="before")
    @classmethod
    def _check_signature_word(cls, v: Any, info) -> str:
        if isinstance(v, int) and not isinstance(v, bool):
            return int_to_hex32(v)
        return to_hex(to_bytes32(v, info.field_name))

    @field_validator("y_parity", mode="before")
    @classmethod
    def _check_y_parity(cls, v: Any) -> int:
        if isinstance(v, bool) or v not in (0, 1):
            raise EncodingError(f"yParity must be 0 or 1, got {v!r}")
        return int(v)


class IntentAuthorization(BaseModel):
    """Digest signature plus the chain authorizations it covers"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    signature: str
    chain_batches: Tuple[ChainAuthorization, ...] = Field(..., alias="chainBatches")

    @field_validator("signature", mode="before")
    @classmethod
    def _check_signature(cls, v: Any) -> str:
        return to_hex(to_bytes(v, "signature"))


class IntentSubmission(BaseModel):
    """Request body for ``POST {tx_api_url}/transaction/submit``"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token_address: str = Field(..., alias="tokenAddress")
    token_amount: int = Field(..., alias="tokenAmount")
    address: str
    authorization: Tuple[Authorization, ...]
    intent_authorization: IntentAuthorization = Field(..., alias="intentAuthorization")

    @field_validator("token_address", "address", mode="before")
    @classmethod
    def _check_address(cls, v: Any, info) -> str:
        return to_address(v, info.field_name)

    @field_validator("token_amount", mode="before")
    @classmethod
    def _check_amount(cls, v: Any) -> int:
        return to_uint256(v, "tokenAmount")

    @field_serializer("token_amount", when_used="json")
    def _dump_amount(self, v: int) -> str:
        return str(v)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the relayer's JSON shape (integers as strings, bytes as hex)"""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_wire(cls, payload: Dict[str, Any]) -> "IntentSubmission":
        """Parse a relayer JSON payload back into typed values"""
        return cls.model_validate(payload)


class RelayerSubmitResponse(BaseModel):
    """Response from the relayer on successful submission"""
    model_config = ConfigDict(populate_by_name=True)

    hash: Optional[str] = None
    intent_id: str = Field(..., alias="intentId")


class StepStatus(str, Enum):
    """Lifecycle of a single intent step on the relayer"""
    CREATED = "created"
    EXECUTING = "executing"
    SUCCESS = "success"
    REVERTED = "reverted"

    @property
    def is_terminal(self) -> bool:
        return self in (StepStatus.SUCCESS, StepStatus.REVERTED)


class IntentStepStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: StepStatus
    transaction_hash: Optional[str] = Field(None, alias="transactionHash")


class IntentStepStatusResponse(BaseModel):
    """Response of ``GET {tx_api_url}/intent/{intent_id}/step/{step_id}/status``"""
    success: bool
    data: IntentStepStatus

    @property
    def is_terminal(self) -> bool:
        return self.data.status.is_terminal


class RFQTRequest(BaseModel):
    """RFQT request used to prepare a user-executed trade"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    user: str
    token_in: str = Field(..., alias="tokenIn")
    token_out: str = Field(..., alias="tokenOut")
    amount_in: int = Field(..., alias="amountIn")
    amount_out: int = Field(..., alias="amountOut")
    expiry: int
    quote_id: str = Field(..., alias="quoteId")

    @field_validator("user", mode="before")
    @classmethod
    def _check_user(cls, v: Any) -> str:
        return to_address(v, "user")

    @field_validator("amount_in", "amount_out", "expiry", mode="before")
    @classmethod
    def _check_uint(cls, v: Any, info) -> int:
        return to_uint256(v, info.field_name)

    @field_validator("quote_id", mode="before")
    @classmethod
    def _check_quote_id(cls, v: Any) -> str:
        return to_hex(to_bytes(v, "quoteId"))

    @field_serializer("amount_in", "amount_out", when_used="json")
    def _dump_amount(self, v: int) -> str:
        return str(v)


class RFQTResponse(BaseModel):
    """RFQT response carrying a ready-to-batch call"""
    to: str
    value: int = 0
    data: bytes = b""

    @field_validator("to", mode="before")
    @classmethod
    def _check_to(cls, v: Any) -> str:
        return to_address(v, "to")

    @field_validator("value", mode="before")
    @classmethod
    def _check_value(cls, v: Any) -> int:
        return to_uint256(v, "value")

    @field_validator("data", mode="before")
    @classmethod
    def _check_data(cls, v: Any) -> bytes:
        return to_bytes(v, "data")

    def to_call(self) -> Call:
        return Call(to=self.to, value=self.value, data=self.data)
