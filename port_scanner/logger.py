import json
import logging
import time
from typing import Any, Dict

LOGGER_NAME = "port_scanner"


def create_logger(verbose: bool = False) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Prevent duplicate handlers if main() runs more than once
    if logger.handlers:
        return logger

    # stderr, so stdout only carries the report
    sh = logging.StreamHandler()
    sh.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(sh)
    return logger


def now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime())


def log_event(
    logger: logging.Logger,
    event: str,
    fields: Dict[str, Any],
    level: int = logging.INFO,
) -> None:
    if not logger.isEnabledFor(level):
        return
    payload = {"ts": now_iso(), "event": event, **fields}
    logger.log(level, json.dumps(payload, ensure_ascii=False))
