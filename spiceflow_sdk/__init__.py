"""
SpiceFlow SDK - Build, sign and submit EIP-7702 cross-chain intents.
"""
from .authorization import (
    encode_chain_batch,
    get_authorization_hash,
    hash_chain_batch,
    hash_chain_batches,
    verify_chain_authorization,
)
from .chain import ChainClient
from .client import SpiceFlowClient
from .config import ChainConfig, NetworkConfig, SpiceFlowConfig, TokenConfig
from .delegation import DelegationBuilder, DelegationRequest
from .dodo import DodoRoute, DodoRouteClient, DodoRouteRequest, build_swap_calls, encode_approve
from .exceptions import (
    ChainQueryError,
    ConfigError,
    EncodingError,
    NonceLookupError,
    PollCancelledError,
    RouteError,
    SigningError,
    SpiceFlowError,
    StatusPollError,
    StatusPollTimeoutError,
    SubmissionError,
    SubmissionTimeoutError,
)
from .models import (
    Authorization,
    Call,
    ChainAuthorization,
    ChainBatch,
    IntentAuthorization,
    IntentStepStatus,
    IntentStepStatusResponse,
    IntentSubmission,
    RelayerSubmitResponse,
    RFQTRequest,
    RFQTResponse,
    StepStatus,
)
from .relayer import RelayerClient
from .signer import LocalSigner, Signer
from .status import poll_intent_step
from .submission import assemble_submission, submit_intent
from .version import __version__

__all__ = [
    "SpiceFlowClient",
    "SpiceFlowConfig",
    "ChainConfig",
    "TokenConfig",
    "NetworkConfig",
    "ChainClient",
    "RelayerClient",
    "DelegationBuilder",
    "DelegationRequest",
    "Signer",
    "LocalSigner",
    "DodoRouteClient",
    "DodoRouteRequest",
    "DodoRoute",
    "build_swap_calls",
    "encode_approve",
    "encode_chain_batch",
    "hash_chain_batch",
    "hash_chain_batches",
    "get_authorization_hash",
    "verify_chain_authorization",
    "assemble_submission",
    "submit_intent",
    "poll_intent_step",
    "Call",
    "ChainBatch",
    "ChainAuthorization",
    "Authorization",
    "IntentAuthorization",
    "IntentSubmission",
    "RelayerSubmitResponse",
    "StepStatus",
    "IntentStepStatus",
    "IntentStepStatusResponse",
    "RFQTRequest",
    "RFQTResponse",
    "SpiceFlowError",
    "EncodingError",
    "SigningError",
    "ChainQueryError",
    "NonceLookupError",
    "SubmissionError",
    "SubmissionTimeoutError",
    "StatusPollError",
    "StatusPollTimeoutError",
    "PollCancelledError",
    "RouteError",
    "ConfigError",
    "__version__",
]
