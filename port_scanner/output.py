from __future__ import annotations

from typing import List

from .models import ScanReport


def format_report(report: ScanReport, sort: bool = False) -> List[str]:
    open_ports = report.sorted_open_ports() if sort else report.open_ports
    lines = [
        f"Number of closed ports: {report.closed_count}",
        f"Open ports: {open_ports}",
    ]
    if report.cancelled:
        lines.append(f"Scan cancelled: {report.scanned}/{report.scheduled} ports covered")
    return lines


def print_report(report: ScanReport, sort: bool = False) -> None:
    for line in format_report(report, sort=sort):
        print(line)
