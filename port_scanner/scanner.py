from __future__ import annotations

import ipaddress
import logging
import socket
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, Iterator, Optional

from .logger import log_event
from .models import PortRange, ProbeResult, ScanReport

logger = logging.getLogger(__name__)

PROBE_TIMEOUT_S = 1.0
DEFAULT_MAX_WORKERS = 200
PENDING_PER_WORKER = 4


def probe(target: ipaddress.IPv4Address, port: int, timeout: float = PROBE_TIMEOUT_S) -> bool:
    """
    One TCP connect attempt. True if the handshake completes within timeout.
    Refused, timed out and unreachable all count as closed.
    """
    sock: Optional[socket.socket] = None
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(timeout)
        sock.connect((str(target), port))
        return True
    except (socket.timeout, ConnectionRefusedError, OSError):
        return False
    finally:
        if sock:
            sock.close()


def probe_port(target: ipaddress.IPv4Address, port: int) -> ProbeResult:
    return ProbeResult(port=port, reachable=probe(target, port))


def scan(
    target: ipaddress.IPv4Address,
    port_range: PortRange,
    max_workers: int = DEFAULT_MAX_WORKERS,
    cancel: Optional[threading.Event] = None,
    progress_every: int = 0,
) -> ScanReport:
    """
    Probes every port in port_range, at most max_workers at a time.

    Futures are submitted in a bounded window and refilled as results come
    back, so wide ranges never hold more than max_workers * PENDING_PER_WORKER
    futures. Every probe that runs ends up in the report exactly once: a probe
    that raises is counted closed and logged.

    Setting cancel (or Ctrl-C) stops new probes from starting. Queued futures
    are cancelled, workers skip ports they pick up afterwards, probes already
    connecting finish, and the report covers what completed.
    """
    if max_workers < 1:
        raise ValueError("max_workers must be >= 1")

    total = len(port_range)
    report = ScanReport(scheduled=total)
    ports: Iterator[int] = iter(port_range)
    workers = min(max_workers, total)
    max_pending = workers * PENDING_PER_WORKER
    stop = threading.Event()
    start_all = time.perf_counter()

    def stopped() -> bool:
        return stop.is_set() or (cancel is not None and cancel.is_set())

    def run_probe(port: int) -> Optional[ProbeResult]:
        if stopped():
            return None
        return probe_port(target, port)

    log_event(logger, "scan_started", {
        "target": str(target),
        "ports": str(port_range),
        "workers": workers,
    }, level=logging.DEBUG)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        pending: Dict[Future, int] = {}

        def submit_next() -> bool:
            if stopped():
                return False
            try:
                port = next(ports)
            except StopIteration:
                return False
            pending[pool.submit(run_probe, port)] = port
            return True

        def drop_queued() -> None:
            for fut in list(pending):
                if fut.cancel():
                    del pending[fut]

        def fold(fut: Future) -> None:
            port = pending.pop(fut)
            try:
                result = fut.result()
            except Exception as e:
                log_event(logger, "probe_fault", {
                    "port": port,
                    "error": repr(e),
                }, level=logging.WARNING)
                report.record_fault(port)
                return
            # None: skipped after cancellation
            if result is not None:
                report.record(result)

        while True:
            try:
                if stopped():
                    drop_queued()
                else:
                    # Fill the queue
                    while len(pending) < max_pending and submit_next():
                        pass
                if not pending:
                    break

                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for fut in done:
                    fold(fut)

                    scanned = report.scanned
                    if progress_every > 0 and (scanned % progress_every == 0 or scanned == total):
                        elapsed = time.perf_counter() - start_all
                        rate = scanned / elapsed if elapsed > 0 else 0.0
                        logger.debug(
                            "Scanned %d/%d | open=%d | %.0f scans/s",
                            scanned, total, len(report.open_ports), rate,
                        )
            except KeyboardInterrupt:
                stop.set()
                log_event(logger, "scan_cancelled", {
                    "in_flight": len(pending),
                    "scanned": report.scanned,
                }, level=logging.WARNING)

    report.cancelled = report.scanned < total
    report.elapsed_s = round(time.perf_counter() - start_all, 4)

    log_event(logger, "scan_finished", {
        "target": str(target),
        "scanned": report.scanned,
        "open": len(report.open_ports),
        "closed": report.closed_count,
        "faulted": report.faulted_count,
        "cancelled": report.cancelled,
        "elapsed_s": report.elapsed_s,
    }, level=logging.DEBUG)
    return report
