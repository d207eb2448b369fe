"""Client-address resolution under proxy trust.

Resolution order when forwarding headers are trusted for a call:

1. The configured override header (e.g. ``Client-IP``), taken verbatim.
   It carries a single address and wins over everything else.
2. If trusted proxies are configured and the peer is not one of them,
   the peer address is returned and forwarding headers are ignored.
3. The forwarding chain (``X-Forwarded-For`` by default) is walked from
   the nearest hop outwards; trusted proxies are skipped and the first
   public, non-reserved address wins.
4. The peer address.

Usage::

    resolver = ClientAddressResolver(
        trusted_proxies=["10.0.0.0/8"],
        trusted_proxy_header="Client-IP",
    )
    request = ResolutionRequest.from_headers(peer, headers)
    resolver.get_client_address(request, trust_forwarded_header=True)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .metrics import record_resolution
from .models import AddressSource, ResolutionRequest, ResolvedAddress
from .sanitize import DefaultIPSanitizer, IPSanitizer
from .trust import TrustedProxies, normalize_header_name

if TYPE_CHECKING:
    from clientaddr.configs.system import ProxyConfig

logger = logging.getLogger(__name__)

DEFAULT_FORWARDED_HEADER = "X-Forwarded-For"


class ClientAddressResolver:
    """Resolve the originating client address of a request.

    Configuration (trusted proxies and header names) is meant to be set
    once during startup; ``resolve`` only reads it and is safe to call
    from many threads afterwards.
    """

    def __init__(
        self,
        sanitizer: IPSanitizer | None = None,
        *,
        trusted_proxies: Iterable[str] = (),
        trusted_proxy_header: str = "",
        forwarded_header: str = DEFAULT_FORWARDED_HEADER,
        trust_forwarded_header: bool = False,
    ) -> None:
        self._sanitizer = sanitizer or DefaultIPSanitizer()
        self._trusted_proxies = TrustedProxies(self._sanitizer)
        self._trusted_proxy_header = ""
        self._forwarded_header = normalize_header_name(DEFAULT_FORWARDED_HEADER)
        self._trust_forwarded_header = trust_forwarded_header

        self.add_trusted_proxies(trusted_proxies)
        self.set_trusted_proxy_header(trusted_proxy_header)
        self.set_forwarded_header(forwarded_header)

    @classmethod
    def from_config(
        cls, config: ProxyConfig, sanitizer: IPSanitizer | None = None
    ) -> ClientAddressResolver:
        return cls(
            sanitizer,
            trusted_proxies=config.trusted_proxies,
            trusted_proxy_header=config.trusted_proxy_header,
            forwarded_header=config.forwarded_header,
            trust_forwarded_header=config.trust_forwarded_header,
        )

    # -----------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------

    @property
    def trusted_proxies(self) -> tuple[str, ...]:
        return self._trusted_proxies.as_tuple()

    @property
    def trusted_proxy_header(self) -> str:
        return self._trusted_proxy_header

    @property
    def forwarded_header(self) -> str:
        return self._forwarded_header

    @property
    def trust_forwarded_header(self) -> bool:
        """Trust flag the resolver was configured with.

        ``resolve`` still takes the flag per call; web adapters pass this
        one so the flag and the trusted proxy list come from one config.
        """
        return self._trust_forwarded_header

    def add_trusted_proxies(self, candidates: Iterable[str]) -> None:
        """Append addresses or CIDR ranges to the trusted proxy list.

        Invalid entries are logged and skipped; nothing is raised.
        """
        self._trusted_proxies.add(candidates)

    def set_trusted_proxy_header(self, name: str) -> None:
        """Set the single-address override header; ``""`` disables it."""
        self._trusted_proxy_header = normalize_header_name(name)

    def set_forwarded_header(self, name: str) -> None:
        """Set the forwarding chain header; ``""`` restores the default."""
        self._forwarded_header = normalize_header_name(
            name or DEFAULT_FORWARDED_HEADER
        )

    def is_proxy_trusted(self, ip: str | None) -> bool:
        return self._trusted_proxies.contains(ip)

    # -----------------------------------------------------------------
    # Resolution
    # -----------------------------------------------------------------

    def resolve(
        self, request: ResolutionRequest, trust_forwarded_header: bool = False
    ) -> ResolvedAddress:
        result = self._resolve(request, trust_forwarded_header)
        record_resolution(result.source)
        logger.debug(
            "Resolved client address %s via %s (peer %s)",
            result.address,
            result.source.value,
            request.remote_address,
        )
        return result

    def get_client_address(
        self, request: ResolutionRequest, trust_forwarded_header: bool = False
    ) -> str | None:
        return self.resolve(request, trust_forwarded_header).address

    def _resolve(
        self, request: ResolutionRequest, trust_forwarded_header: bool
    ) -> ResolvedAddress:
        remote = request.remote_address

        if not trust_forwarded_header:
            return ResolvedAddress(remote, AddressSource.REMOTE)

        if self._trusted_proxy_header:
            override = request.header(self._trusted_proxy_header)
            if override:
                return ResolvedAddress(override, AddressSource.OVERRIDE)

        # Only a known proxy may assert forwarding information.
        if self._trusted_proxies and not self.is_proxy_trusted(remote):
            return ResolvedAddress(remote, AddressSource.UNTRUSTED_PEER)

        forwarded = request.header(self._forwarded_header)
        if forwarded:
            client = self._walk_forwarded_chain(forwarded)
            if client is not None:
                return ResolvedAddress(client, AddressSource.FORWARDED)

        return ResolvedAddress(remote, AddressSource.FALLBACK)

    def _walk_forwarded_chain(self, forwarded: str) -> str | None:
        # "client, proxy1, proxy2" is walked as proxy2, proxy1, client.
        hops = [hop.strip() for hop in forwarded.split(",")]
        for hop in reversed(hops):
            if self.is_proxy_trusted(hop):
                continue
            public_ip = self._sanitizer.sanitize_public_ip(hop)
            if public_ip is not None:
                return public_ip
        return None
