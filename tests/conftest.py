import logging
import socket

import pytest

from port_scanner.logger import LOGGER_NAME


def _refuses(port):
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.settimeout(1.0)
    try:
        s.connect(("127.0.0.1", port))
        return False
    except OSError:
        return True
    finally:
        s.close()


@pytest.fixture
def listener():
    """
    A TCP listener on 127.0.0.1 at an ephemeral port. Yields the port.
    Both neighbouring ports refuse connections, so port-1..port+1 is a
    valid range with exactly one open port.
    """
    for _ in range(50):
        srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        srv.bind(("127.0.0.1", 0))
        port = srv.getsockname()[1]
        if 1 <= port - 1 and port + 1 <= 65535 and _refuses(port - 1) and _refuses(port + 1):
            break
        srv.close()
    else:
        pytest.skip("no loopback port with free neighbours")
    srv.listen(16)
    try:
        yield port
    finally:
        srv.close()


@pytest.fixture
def free_port():
    """A loopback port that nothing is listening on."""
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    return port


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
