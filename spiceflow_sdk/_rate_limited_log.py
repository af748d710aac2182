"""
Thread-safe rate-limited logging utilities.

Used by the status poller so that an endpoint failing on every attempt does not
flood the log with the same warning.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

# At most 100 distinct messages are remembered; entries expire after the TTL
_DEFAULT_TTL = 60
_error_log_cache: TTLCache = TTLCache(maxsize=100, ttl=_DEFAULT_TTL)
_error_log_cache_lock = threading.RLock()


def rate_limited_log(
    message: str,
    level: str = "warning",
    key: Optional[str] = None,
    logger_instance: Optional[logging.Logger] = None
) -> bool:
    """
    Log a message at most once per cache TTL, in a thread-safe manner.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        key: Deduplication key, defaults to the message itself
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        True if the message was emitted, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    cache_key = f"{level}:{key or message}"

    with _error_log_cache_lock:
        if cache_key in _error_log_cache:
            return False
        log_method(message)
        _error_log_cache[cache_key] = True
    return True


def reset_rate_limited_log() -> None:
    """Forget every remembered message."""
    with _error_log_cache_lock:
        _error_log_cache.clear()
