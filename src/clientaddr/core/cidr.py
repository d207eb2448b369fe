"""CIDR containment on packed address bytes."""

from __future__ import annotations

import ipaddress


def _packed(value: str) -> bytes | None:
    try:
        address = ipaddress.ip_address(value.strip())
    except (ValueError, AttributeError):
        return None
    if getattr(address, "scope_id", None) is not None:
        return None
    return address.packed


def is_in_range(ip: str, cidr: str) -> bool:
    """Check whether ``ip`` falls inside ``cidr``.

    Both sides are reduced to their fixed-width binary form (4 bytes for
    IPv4, 16 for IPv6).  The whole bytes covered by the prefix must be
    equal; a trailing partial byte is compared under a mask.

    Never raises: unparseable input, a missing or out-of-range prefix, and
    an address-family mismatch all yield ``False``.
    """
    subnet, sep, prefix = cidr.partition("/")
    if not sep:
        return False

    ip_bin = _packed(ip)
    subnet_bin = _packed(subnet)
    if ip_bin is None or subnet_bin is None or len(ip_bin) != len(subnet_bin):
        return False

    prefix = prefix.strip()
    if not (prefix.isascii() and prefix.isdigit()):
        return False
    mask_length = int(prefix)
    if mask_length > len(ip_bin) * 8:
        return False

    mask_bytes, remaining_bits = divmod(mask_length, 8)

    if ip_bin[:mask_bytes] != subnet_bin[:mask_bytes]:
        return False

    if remaining_bits == 0:
        return True

    mask = (0xFF << (8 - remaining_bits)) & 0xFF
    return (ip_bin[mask_bytes] & mask) == (subnet_bin[mask_bytes] & mask)
