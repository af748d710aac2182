"""
Assembling signed intents into relayer submissions.
"""
import logging
from typing import Optional, Sequence, Union

from .models import Authorization, ChainAuthorization, IntentAuthorization, IntentSubmission, RelayerSubmitResponse
from .relayer import RelayerClient

logger = logging.getLogger(__name__)


def assemble_submission(
    signature: Union[bytes, str],
    authorization: Sequence[Authorization],
    chain_batches: Sequence[ChainAuthorization],
    token_address: str,
    token_amount: Union[int, str],
    user: str
) -> IntentSubmission:
    """
    Build the relayer submission body.

    Counts of authorizations and chain batches are not cross-checked; keeping
    them consistent is up to the caller.

    Args:
        signature: Signature over the intent digest
        authorization: Signed EIP-7702 delegations
        chain_batches: Hashed chain batches, in digest order
        token_address: Token the intent is funded with
        token_amount: Token amount in base units
        user: Account submitting the intent

    Raises:
        EncodingError: If any value cannot be encoded
    """
    return IntentSubmission(
        token_address=token_address,
        token_amount=token_amount,
        address=user,
        authorization=tuple(authorization),
        intent_authorization=IntentAuthorization(
            signature=signature,
            chain_batches=tuple(chain_batches),
        ),
    )


def submit_intent(
    relayer: RelayerClient,
    signature: Union[bytes, str],
    authorization: Sequence[Authorization],
    chain_batches: Sequence[ChainAuthorization],
    token_address: str,
    token_amount: Union[int, str],
    user: str,
    timeout: Optional[float] = None
) -> RelayerSubmitResponse:
    """
    Assemble an intent and send it to the relayer exactly once.

    Raises:
        EncodingError: If the submission cannot be assembled
        SubmissionError: If the relayer rejects the submission
        SubmissionTimeoutError: If ``timeout`` elapses first
    """
    submission = assemble_submission(signature, authorization, chain_batches, token_address, token_amount, user)
    logger.debug(f"Submitting intent for {submission.address}: {len(submission.authorization)} authorization(s), "
                 f"{len(submission.intent_authorization.chain_batches)} chain batch(es)")
    return relayer.submit_transaction(submission, timeout=timeout)
