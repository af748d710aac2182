"""
RelayerClient - HTTP client for the SpiceFlow relayer (transaction API).
"""
import copy
import logging
import urllib.parse
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import EncodingError, StatusPollError, SubmissionError, SubmissionTimeoutError
from .models import (
    IntentStepStatusResponse,
    IntentSubmission,
    RelayerSubmitResponse,
    RFQTRequest,
    RFQTResponse,
)
from .utils import validate_service_url

logger = logging.getLogger(__name__)


class RelayerClient:
    """
    Client for the relayer's transaction API.

    Endpoints:
    1. ``POST /transaction/submit`` - submit a signed intent (never retried)
    2. ``GET /intent/{id}/step/{step}/status`` - read a step status (retried on 5xx)
    3. ``POST /rfqt`` - prepare an RFQT trade call
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        retry_count: int = 3,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the RelayerClient

        Args:
            base_url: Relayer transaction API URL
            timeout: Default timeout for HTTP requests in seconds
            retry_count: Number of retries for idempotent GET requests
            session: Optional session to use for every request
            logger: Optional logger instance to use for debug/info logging

        Raises:
            ConfigError: If the URL doesn't use https (unless it's localhost/127.0.0.1)
        """
        self.base_url = validate_service_url("tx_api_url", base_url)
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)

        if session is not None:
            self.session = session
            self._submit_session = session
        else:
            # Status reads are idempotent and safe to retry
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

            # Submissions are sent exactly once
            self._submit_session = requests.Session()
            self._submit_session.mount("http://", HTTPAdapter(max_retries=0))
            self._submit_session.mount("https://", HTTPAdapter(max_retries=0))

    def __enter__(self) -> "RelayerClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()
        if self._submit_session is not self.session:
            self._submit_session.close()

    def submit_transaction(self, submission: IntentSubmission, timeout: Optional[float] = None) -> RelayerSubmitResponse:
        """
        Submit a signed intent to the relayer.

        Args:
            submission: The assembled intent submission
            timeout: Request timeout in seconds (defaults to the client timeout)

        Returns:
            Relayer-assigned intent id and transaction hash (if already known)

        Raises:
            SubmissionTimeoutError: If the relayer does not answer in time
            SubmissionError: On network errors, non-2xx responses or malformed responses
        """
        payload = submission.to_wire()
        url = f"{self.base_url}/transaction/submit"
        request_timeout = timeout if timeout is not None else self.timeout
        self.logger.debug(f"Submitting intent to {url}: {self._sanitize_payload(payload)}")

        try:
            response = self._submit_session.post(url, json=payload, timeout=request_timeout)
        except requests.Timeout as e:
            self.logger.error(f"Relayer submission timed out after {request_timeout}s")
            raise SubmissionTimeoutError(f"Relayer submission timed out after {request_timeout}s") from e
        except requests.RequestException as e:
            self.logger.error(f"Relayer submission request failed: {e}")
            raise SubmissionError(f"Relayer submission failed: {str(e)}") from e

        if not 200 <= response.status_code < 300:
            self.logger.error(f"Relayer API error: {response.status_code}")
            raise SubmissionError(
                f"Relayer API error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text
            )

        content_type = response.headers.get('Content-Type', '')
        if 'application/json' not in content_type:
            self.logger.warning(f"Unexpected Content-Type: {content_type} (expected application/json)")

        try:
            result = response.json()
        except ValueError as e:
            raise SubmissionError(
                f"Invalid JSON response from relayer: {str(e)}",
                status_code=response.status_code,
                body=response.text
            ) from e

        if not isinstance(result, dict):
            raise SubmissionError(
                f"Unexpected relayer response: {result!r}",
                status_code=response.status_code,
                body=response.text
            )

        intent_id = result.get("intentId") or submission.intent_authorization.signature
        try:
            submitted = RelayerSubmitResponse(hash=result.get("hash"), intent_id=str(intent_id))
        except ValidationError as e:
            raise SubmissionError(
                f"Malformed relayer response: {str(e)}",
                status_code=response.status_code,
                body=response.text
            ) from e
        self.logger.info(f"Intent submitted: intentId={submitted.intent_id} hash={submitted.hash}")
        return submitted

    def get_intent_step_status(self, intent_id: str, step_id: int = 0, timeout: Optional[float] = None) -> IntentStepStatusResponse:
        """
        Fetch the status of a specific intent step.

        Raises:
            StatusPollError: On network errors, non-2xx responses or malformed responses
        """
        url = f"{self.base_url}/intent/{urllib.parse.quote(str(intent_id), safe='')}/step/{step_id}/status"
        self.logger.debug(f"GET {url}")
        try:
            response = self.session.get(url, timeout=timeout if timeout is not None else self.timeout)
        except requests.RequestException as e:
            raise StatusPollError(f"Status request failed: {str(e)}") from e

        if not 200 <= response.status_code < 300:
            raise StatusPollError(
                f"status {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text
            )

        try:
            return IntentStepStatusResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise StatusPollError(
                f"Malformed status response: {str(e)}",
                status_code=response.status_code,
                body=response.text
            ) from e

    def prepare_rfqt(self, request: RFQTRequest, timeout: Optional[float] = None) -> RFQTResponse:
        """
        Prepare an RFQT transaction request.

        Raises:
            SubmissionError: If the relayer rejects the request or returns a malformed call
        """
        url = f"{self.base_url}/rfqt"
        try:
            response = self._submit_session.post(
                url,
                json=request.model_dump(mode="json", by_alias=True),
                timeout=timeout if timeout is not None else self.timeout
            )
        except requests.Timeout as e:
            raise SubmissionTimeoutError("RFQT request timed out") from e
        except requests.RequestException as e:
            raise SubmissionError(f"RFQT request failed: {str(e)}") from e

        if not 200 <= response.status_code < 300:
            raise SubmissionError(f"RFQT error {response.status_code}", status_code=response.status_code, body=response.text)

        try:
            return RFQTResponse.model_validate(response.json())
        except (ValueError, ValidationError, EncodingError) as e:
            raise SubmissionError(f"Malformed RFQT response: {str(e)}", status_code=response.status_code, body=response.text) from e

    def _sanitize_payload(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Remove signature material from a submission payload for logging

        Args:
            payload: Wire payload to sanitize

        Returns:
            Sanitized payload for safe logging
        """
        if not isinstance(payload, dict):
            return {"type": str(type(payload))}

        result = copy.deepcopy(payload)

        intent_auth = result.get("intentAuthorization")
        if isinstance(intent_auth, dict) and "signature" in intent_auth:
            intent_auth["signature"] = f"[REDACTED - {len(str(intent_auth['signature']))} chars]"

        for auth in result.get("authorization") or []:
            if isinstance(auth, dict):
                for key in ("r", "s"):
                    if key in auth:
                        auth[key] = "[REDACTED]"

        return result
