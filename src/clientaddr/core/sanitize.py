"""IP sanitization capability injected into the resolver.

The resolver never looks up a validator on its own; it receives an
``IPSanitizer`` at construction time.  ``DefaultIPSanitizer`` is backed by
the standard :mod:`ipaddress` module and rejects the same private and
reserved blocks that web frameworks conventionally filter out of
``X-Forwarded-For`` chains.

Note that documentation ranges (``192.0.2.0/24``, ``198.51.100.0/24``,
``203.0.113.0/24``) are *not* rejected, so ``ipaddress``'s ``is_global``
and ``is_private`` flags are deliberately not used here.
"""

from __future__ import annotations

import ipaddress
from abc import ABC, abstractmethod

_PRIVATE_NETWORKS = tuple(
    ipaddress.ip_network(cidr)
    for cidr in (
        "10.0.0.0/8",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "fc00::/7",
        "fec0::/10",
    )
)

_RESERVED_NETWORKS = tuple(
    ipaddress.ip_network(cidr)
    for cidr in (
        "0.0.0.0/8",
        "127.0.0.0/8",
        "169.254.0.0/16",
        "240.0.0.0/4",
        "::/128",
        "::1/128",
        "::ffff:0:0/96",
        "fe80::/10",
    )
)


class IPSanitizer(ABC):
    """Interface for IP validation used by ``ClientAddressResolver``."""

    @abstractmethod
    def sanitize_ip(self, value: str) -> str | None:
        """Return the canonical form of a bare IPv4/IPv6 address, or ``None``."""

    @abstractmethod
    def sanitize_network(self, value: str) -> str | None:
        """Return the canonical ``address/prefix`` form of a CIDR, or ``None``."""

    @abstractmethod
    def sanitize_public_ip(self, value: str) -> str | None:
        """Like ``sanitize_ip`` but also rejects private and reserved ranges."""


def _parse_address(
    value: str,
) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    try:
        address = ipaddress.ip_address(value.strip())
    except (ValueError, AttributeError):
        return None
    # Zone IDs (fe80::1%eth0) are free-form text, not part of the address.
    if getattr(address, "scope_id", None) is not None:
        return None
    return address


class DefaultIPSanitizer(IPSanitizer):
    """``IPSanitizer`` backed by :mod:`ipaddress`."""

    def sanitize_ip(self, value: str) -> str | None:
        address = _parse_address(value)
        return str(address) if address is not None else None

    def sanitize_network(self, value: str) -> str | None:
        if not isinstance(value, str):
            return None
        subnet, sep, prefix = value.strip().partition("/")
        if not sep or not (prefix.isascii() and prefix.isdigit()):
            return None
        address = _parse_address(subnet)
        if address is None:
            return None
        prefix_len = int(prefix)
        if prefix_len > address.max_prefixlen:
            return None
        # Host bits are allowed; containment masks them away.
        return f"{address}/{prefix_len}"

    def sanitize_public_ip(self, value: str) -> str | None:
        address = _parse_address(value)
        if address is None:
            return None
        for network in _PRIVATE_NETWORKS + _RESERVED_NETWORKS:
            if address.version == network.version and address in network:
                return None
        return str(address)
