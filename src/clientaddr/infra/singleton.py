import functools
from typing import Callable, TypeVar

T = TypeVar("T")


def singleton(func: Callable[..., T]) -> Callable[..., T]:
    """
    Decorator for a zero-state factory function.
    Caches the first return value in func._instance
    and always returns that thereafter.

    ``wrapper.reset()`` drops the cached instance so the next call builds
    a fresh one (used when configuration changes, and in tests).
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not hasattr(func, "_instance"):
            func._instance = func(*args, **kwargs)
        return func._instance

    def reset() -> None:
        if hasattr(func, "_instance"):
            delattr(func, "_instance")

    wrapper.reset = reset  # type: ignore[attr-defined]
    return wrapper
