from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from .errors import InvalidPortRange

MAX_PORT = 65535


@dataclass(frozen=True)
class PortRange:
    start: int
    end: int

    def __post_init__(self) -> None:
        for p in (self.start, self.end):
            if p < 0 or p > MAX_PORT:
                raise InvalidPortRange(f"Port {p} is outside 0-{MAX_PORT}")
        if self.start > self.end:
            raise InvalidPortRange(
                f"Start port {self.start} is greater than end port {self.end}"
            )

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end + 1))

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


@dataclass(frozen=True)
class ProbeResult:
    port: int
    reachable: bool


@dataclass
class ScanReport:
    scheduled: int
    open_ports: List[int] = field(default_factory=list)
    closed_count: int = 0
    faulted_count: int = 0
    cancelled: bool = False
    elapsed_s: float = 0.0

    @property
    def scanned(self) -> int:
        return len(self.open_ports) + self.closed_count

    def record(self, result: ProbeResult) -> None:
        if result.reachable:
            self.open_ports.append(result.port)
        else:
            self.closed_count += 1

    def record_fault(self, port: int) -> None:
        # A crashed probe still accounts for its port.
        self.faulted_count += 1
        self.record(ProbeResult(port=port, reachable=False))

    def sorted_open_ports(self) -> List[int]:
        return sorted(self.open_ports)
