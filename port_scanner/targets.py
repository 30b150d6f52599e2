from __future__ import annotations

import ipaddress

from .errors import InvalidAddress


def parse_target(raw: str) -> ipaddress.IPv4Address:
    """
    Parses a dotted-quad IPv4 address, e.g. "172.20.0.10".
    Hostnames, CIDR blocks and IPv6 addresses are rejected.
    """
    try:
        return ipaddress.IPv4Address(raw)
    except ipaddress.AddressValueError as e:
        raise InvalidAddress(f"IP format incorrect: {e}") from e
