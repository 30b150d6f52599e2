from __future__ import annotations

import re

from .errors import InvalidPortRange
from .models import MAX_PORT, PortRange

_DIGITS = re.compile(r"[0-9]+")


def _parse_port(token: str) -> int:
    if not _DIGITS.fullmatch(token):
        raise InvalidPortRange(f"Port range format incorrect: {token!r} is not a port number")
    port = int(token)
    if port > MAX_PORT:
        raise InvalidPortRange(f"Port range format incorrect: {port} is larger than {MAX_PORT}")
    return port


def parse_port_range(spec: str) -> PortRange:
    """
    Parses "<X>-<Y>" into an inclusive PortRange, e.g. "1-1024" or "22-22".
    A reversed range ("443-80") is rejected rather than swapped.
    """
    parts = spec.split("-")
    if len(parts) != 2:
        raise InvalidPortRange(
            f"Port range format incorrect: expected <start>-<end>, got {spec!r}"
        )
    start, end = (_parse_port(p) for p in parts)
    return PortRange(start, end)
