"""
Polling an intent step until it reaches a terminal status.
"""
import logging
import threading
import time
from typing import Callable, Optional

from ._rate_limited_log import rate_limited_log
from .exceptions import PollCancelledError, StatusPollError, StatusPollTimeoutError
from .models import IntentStepStatusResponse, StepStatus
from .relayer import RelayerClient

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 4.0
DEFAULT_POLL_TIMEOUT = 120.0


def poll_intent_step(
    relayer: RelayerClient,
    intent_id: str,
    step_id: int = 0,
    interval: float = DEFAULT_POLL_INTERVAL,
    timeout: Optional[float] = DEFAULT_POLL_TIMEOUT,
    cancel_event: Optional[threading.Event] = None,
    on_update: Optional[Callable[[IntentStepStatusResponse], None]] = None,
    max_errors: Optional[int] = None,
    logger_instance: Optional[logging.Logger] = None
) -> IntentStepStatusResponse:
    """
    Block until an intent step is ``success`` or ``reverted``.

    Transient status endpoint failures are logged and polling continues, unless
    ``max_errors`` consecutive failures happen, in which case the last
    StatusPollError is raised.

    Args:
        relayer: Relayer client used for status requests
        intent_id: Intent identifier returned on submission
        step_id: Step index within the intent
        interval: Seconds to wait between requests
        timeout: Overall deadline in seconds, or None to wait indefinitely
        cancel_event: Set it from another thread to stop polling
        on_update: Called with every status successfully fetched
        max_errors: Consecutive failures tolerated before giving up
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        The terminal status response

    Raises:
        StatusPollTimeoutError: If the deadline passes first
        PollCancelledError: If ``cancel_event`` is set
        StatusPollError: If ``max_errors`` consecutive requests failed
    """
    log = logger_instance or logger
    cancel_event = cancel_event or threading.Event()
    started_at = time.monotonic()
    deadline = started_at + timeout if timeout is not None else None

    attempts = 0
    consecutive_errors = 0
    last_error: Optional[StatusPollError] = None
    prev_status: Optional[StepStatus] = None
    prev_tx_hash: Optional[str] = None

    log.info(f"[poll] start intent={intent_id} step={step_id} interval={interval}s timeout={timeout if timeout is not None else 'none'}")

    while True:
        if cancel_event.is_set():
            log.info(f"[poll] cancelled after {attempts} attempt(s)")
            raise PollCancelledError(f"Polling of intent {intent_id} step {step_id} was cancelled")

        attempts += 1
        try:
            status = relayer.get_intent_step_status(intent_id, step_id)
        except StatusPollError as e:
            consecutive_errors += 1
            last_error = e
            rate_limited_log(
                f"[poll] fetch error (attempt {attempts}): {e}",
                level="warning",
                key=f"poll:{intent_id}:{step_id}:{e.status_code}",
                logger_instance=log
            )
            if max_errors is not None and consecutive_errors >= max_errors:
                raise
        else:
            consecutive_errors = 0
            elapsed = time.monotonic() - started_at
            current = status.data.status
            if current != prev_status:
                log.info(f"[poll] status change {prev_status.value if prev_status else 'n/a'} -> {current.value} (attempt {attempts}, {elapsed:.1f}s)")
                prev_status = current
            else:
                log.debug(f"[poll] status unchanged ({current.value}) (attempt {attempts}, {elapsed:.1f}s)")

            tx_hash = status.data.transaction_hash
            if tx_hash and tx_hash != prev_tx_hash:
                prev_tx_hash = tx_hash
                log.info(f"[poll] tx available: {tx_hash}")

            if on_update is not None:
                on_update(status)
            if status.is_terminal:
                log.info(f"[poll] finished with status={current.value} after {attempts} attempt(s)")
                return status

        wait = interval
        if deadline is not None:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                log.warning("[poll] timeout reached")
                raise StatusPollTimeoutError(
                    f"Intent {intent_id} step {step_id} did not finish within {timeout}s"
                ) from last_error
            wait = min(interval, remaining)

        # Event.wait doubles as a cancellable sleep
        if cancel_event.wait(wait):
            log.info(f"[poll] cancelled after {attempts} attempt(s)")
            raise PollCancelledError(f"Polling of intent {intent_id} step {step_id} was cancelled")
