"""Trusted proxy bookkeeping and header-name normalization."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .cidr import is_in_range
from .sanitize import IPSanitizer

logger = logging.getLogger(__name__)

HEADER_KEY_PREFIX = "HTTP_"


def normalize_header_name(name: str) -> str:
    """Turn an HTTP header name into its CGI/WSGI environ key.

    ``"X-Forwarded-For"`` becomes ``"HTTP_X_FORWARDED_FOR"``; a name that
    already carries the ``HTTP_`` prefix is only upper-cased.  An empty
    name stays empty.
    """
    key = name.strip().replace("-", "_").upper()
    if not key:
        return ""
    if not key.startswith(HEADER_KEY_PREFIX):
        key = HEADER_KEY_PREFIX + key
    return key


class TrustedProxies:
    """Ordered list of trusted proxy addresses and CIDR ranges.

    Entries are sanitized on insertion and malformed ones are dropped.
    Duplicates and overlapping ranges are kept as given.
    """

    def __init__(self, sanitizer: IPSanitizer) -> None:
        self._sanitizer = sanitizer
        self._entries: list[str] = []

    def add(self, candidates: Iterable[str]) -> None:
        for candidate in candidates:
            if isinstance(candidate, str) and "/" in candidate:
                sanitized = self._sanitizer.sanitize_network(candidate)
            elif isinstance(candidate, str):
                sanitized = self._sanitizer.sanitize_ip(candidate)
            else:
                sanitized = None

            if sanitized is None:
                logger.warning("Ignoring invalid trusted proxy entry: %r", candidate)
                continue
            self._entries.append(sanitized)

    def contains(self, ip: str | None) -> bool:
        """Return ``True`` if any entry matches ``ip``."""
        if not ip:
            return False
        canonical = self._sanitizer.sanitize_ip(ip) or ip
        for trusted in self._entries:
            if "/" in trusted:
                if is_in_range(canonical, trusted):
                    return True
            elif canonical == trusted:
                return True
        return False

    def as_tuple(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)
