"""
Thread-safe rate-limited logging utilities.

Pool discovery queries every fee tier of a pair on every call, so a missing
pool or a flaky node would otherwise log the same failure over and over.
"""
import logging
import threading
from typing import Dict, Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

# One TTL cache per suppression interval, at most 100 distinct messages each
_error_log_caches: Dict[int, TTLCache] = {}
_error_log_cache_lock = threading.RLock()


def _cache_for(interval: int) -> TTLCache:
    cache = _error_log_caches.get(interval)
    if cache is None:
        cache = TTLCache(maxsize=100, ttl=interval)
        _error_log_caches[interval] = cache
    return cache


def rate_limited_log(
    message: str,
    level: str = "warning",
    interval: int = 60,
    logger_instance: Optional[logging.Logger] = None
) -> bool:
    """
    Log a message unless the same message and level was logged within ``interval`` seconds.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        interval: Minimum interval between identical logs in seconds
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        True if the message was logged, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    key = f"{level}:{message}"

    with _error_log_cache_lock:
        cache = _cache_for(interval)
        if key in cache:
            return False
        log_method(message)
        cache[key] = True
        return True


def reset_rate_limits() -> None:
    """Forget all suppressed messages."""
    with _error_log_cache_lock:
        _error_log_caches.clear()
