"""
Exceptions for the SpiceFlow SDK.
"""
from typing import Optional


class SpiceFlowError(Exception):
    """Base exception for all SpiceFlow SDK errors."""
    pass


class EncodingError(SpiceFlowError):
    """
    Raised when a value cannot be canonically encoded.

    Covers integers outside the uint256 range, malformed hex, addresses that are
    not 20 bytes, hashes that are not 32 bytes and an empty digest input.
    """
    pass


class SigningError(SpiceFlowError):
    """Raised when the signer is unavailable or rejects a signing request."""
    pass


class ChainQueryError(SpiceFlowError):
    """Raised when a query against a chain RPC endpoint fails."""

    def __init__(self, message: str, chain_id: Optional[int] = None):
        self.chain_id = chain_id
        super().__init__(message)


class NonceLookupError(ChainQueryError):
    """Raised when the account nonce cannot be read from the target chain."""
    pass


class SubmissionError(SpiceFlowError):
    """
    Raised when the relayer rejects or fails to accept a submission.

    ``status_code`` and ``body`` carry the relayer's HTTP status and raw response
    text when a response was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class SubmissionTimeoutError(SubmissionError):
    """Raised when a submission does not complete within the caller's timeout."""
    pass


class StatusPollError(SpiceFlowError):
    """Raised when the intent status endpoint fails."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class StatusPollTimeoutError(StatusPollError):
    """Raised when an intent step does not reach a terminal status in time."""
    pass


class PollCancelledError(StatusPollError):
    """Raised when polling is cancelled by the caller."""
    pass


class RouteError(SpiceFlowError):
    """Raised when the swap route service fails or returns an unusable route."""
    pass


class ConfigError(SpiceFlowError):
    """Raised for missing or invalid SDK configuration."""
    pass
