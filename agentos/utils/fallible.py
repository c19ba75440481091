"""
Best-effort execution helper
"""
import functools
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


def fallible(default: Any = None, label: Optional[str] = None) -> Callable:
    """
    Decorator that turns any exception into `default`.

    The failure is logged at warning level. If `default` is callable it is
    invoked to build a fresh value on each failure.

    Example:
        @fallible(0.0, label="volume bonus")
        def calculate_volume_bonus(...):
            ...
    """
    def decorator(func: Callable) -> Callable:
        name = label or func.__name__

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                fallback = default() if callable(default) else default
                logger.warning(f"{name} failed, falling back to {fallback!r}: {e}")
                return fallback

        return wrapper

    return decorator
