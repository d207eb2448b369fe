"""Request and result types for client-address resolution."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from .trust import HEADER_KEY_PREFIX, normalize_header_name

REMOTE_ADDR_KEY = "REMOTE_ADDR"


class AddressSource(str, Enum):
    """Policy path that produced a ``ResolvedAddress``."""

    REMOTE = "remote"  # forwarding headers not trusted for this call
    OVERRIDE = "override"
    UNTRUSTED_PEER = "untrusted_peer"
    FORWARDED = "forwarded"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ResolutionRequest:
    """Connection and header metadata for a single resolution.

    ``headers`` is keyed by normalized environ-style names such as
    ``HTTP_X_FORWARDED_FOR``.
    """

    remote_address: str | None
    headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_headers(
        cls,
        remote_address: str | None,
        headers: Mapping[str, str] | Iterable[tuple[str, str]],
    ) -> ResolutionRequest:
        """Build a request from HTTP-style header names.

        Repeated headers are joined with ``", "`` as HTTP list semantics
        allow, so two ``X-Forwarded-For`` lines form one chain.
        """
        items = headers.items() if isinstance(headers, Mapping) else headers
        normalized: dict[str, str] = {}
        for name, value in items:
            key = normalize_header_name(name)
            if not key:
                continue
            if key in normalized:
                normalized[key] = f"{normalized[key]}, {value}"
            else:
                normalized[key] = value
        return cls(remote_address=remote_address, headers=normalized)

    @classmethod
    def from_environ(cls, environ: Mapping[str, object]) -> ResolutionRequest:
        """Build a request from a WSGI/CGI environ dict."""
        remote = environ.get(REMOTE_ADDR_KEY)
        headers = {
            key: value
            for key, value in environ.items()
            if key.startswith(HEADER_KEY_PREFIX) and isinstance(value, str)
        }
        return cls(
            remote_address=remote if isinstance(remote, str) and remote else None,
            headers=headers,
        )

    def header(self, key: str) -> str | None:
        return self.headers.get(key)


@dataclass(frozen=True)
class ResolvedAddress:
    """Resolution outcome.

    ``address`` is ``None`` when nothing could be determined (no remote
    address and no usable header).  ``source`` tells the policy path apart
    for callers that care; most only read ``address``.
    """

    address: str | None
    source: AddressSource

    def __str__(self) -> str:
        return self.address or ""
