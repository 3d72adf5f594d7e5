# -*- coding: utf-8 -*-
from __future__ import annotations

import socket
import sys
import threading
from pathlib import Path
from typing import Callable, Iterator, List, Tuple

import pytest


def pytest_sessionstart(session) -> None:
    # Ensure project root is importable for tests
    root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(root))


@pytest.fixture
def http_server() -> Iterator[Callable[[bytes], Tuple[str, int, List[bytes]]]]:
    """Start a one-shot TCP server on 127.0.0.1 that replies with fixed bytes.

    Returns ``(host, port, received)`` where ``received`` collects the raw
    request bytes once a client has connected.
    """
    servers: List[socket.socket] = []
    threads: List[threading.Thread] = []

    def start(reply: bytes) -> Tuple[str, int, List[bytes]]:
        srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        srv.bind(("127.0.0.1", 0))
        srv.listen(1)
        srv.settimeout(5)
        servers.append(srv)
        received: List[bytes] = []

        def serve() -> None:
            try:
                conn, _ = srv.accept()
            except OSError:
                return
            with conn:
                conn.settimeout(5)
                data = b""
                while b"\r\n\r\n" not in data:
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    data += chunk
                received.append(data)
                conn.sendall(reply)

        t = threading.Thread(target=serve, daemon=True)
        t.start()
        threads.append(t)
        host, port = srv.getsockname()
        return host, port, received

    yield start

    for t in threads:
        t.join(timeout=5)
    for s in servers:
        s.close()
