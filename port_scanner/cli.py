from __future__ import annotations

import argparse
import sys

from .errors import UsageError, ValidationError
from .logger import create_logger
from .output import print_report
from .ports import parse_port_range
from .scanner import DEFAULT_MAX_WORKERS, scan
from .targets import parse_target

USAGE = (
    "How to use:\n"
    "\n"
    "port-scanner [-v] [--workers N] [--sort] [Ip address] <X>-<Y>\n"
    "                        X being the starting port and Y the ending port"
)


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    p = _Parser(prog="port-scanner", add_help=False)
    p.add_argument("address", help="IPv4 address, e.g. 127.0.0.1")
    p.add_argument("ports", help="Inclusive port range: <start>-<end>")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    p.add_argument("--workers", type=int, default=DEFAULT_MAX_WORKERS,
                   help=f"Max in-flight probes (default: {DEFAULT_MAX_WORKERS})")
    p.add_argument("--sort", action="store_true", help="Print open ports in ascending order")
    return p


def parse_args(argv) -> argparse.Namespace:
    if not argv or argv == ["h"] or "-h" in argv or "--help" in argv:
        raise UsageError()
    args = build_parser().parse_args(argv)
    if args.workers < 1:
        raise UsageError("--workers must be >= 1")
    return args


def main(argv=None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    try:
        args = parse_args(argv)
        target = parse_target(args.address)
        port_range = parse_port_range(args.ports)
    except UsageError as e:
        if str(e):
            print(e)
        print(USAGE)
        return 1
    except ValidationError as e:
        print(f"{e}\nEnding program.")
        return 1

    create_logger(verbose=args.verbose)
    report = scan(
        target=target,
        port_range=port_range,
        max_workers=args.workers,
        progress_every=1000 if args.verbose else 0,
    )
    print_report(report, sort=args.sort)
    return 0


def run() -> None:
    sys.exit(main())
