"""Raw HTTP/1.1 GET over a plain TCP socket."""
from __future__ import annotations

import socket
from typing import BinaryIO, Optional

from wordstats.core.errors import FetchError
from wordstats.infra.logging import get_unified_logger

HOST = "os1.csi.miamioh.edu"
PORT = 80
BASE_PATH = "/~raodm/cse381/hw4/SlowGet.cgi?file="


def build_request_path(file: str) -> str:
    # The file name is appended as-is, no URL encoding.
    return BASE_PATH + file


def build_request(file: str, host: str = HOST) -> bytes:
    path = build_request_path(file)
    return (
        f"GET {path} HTTP/1.1\r\n"
        f"Host: {host}\r\n"
        "Connection: Close\r\n\r\n"
    ).encode("utf-8")


def open_stream(
    file: str,
    timeout: Optional[float] = None,
    *,
    host: str = HOST,
    port: int = PORT,
) -> BinaryIO:
    """Send the GET request for ``file`` and return the raw response stream.

    The returned reader starts at the status line. Closing it closes the
    socket; the server closes its side after the body (``Connection: Close``),
    so end of stream marks the end of the response.

    Blocks until the first response byte (or end of stream) arrives, so a
    server that accepts and then stays silent or resets is a fetch failure
    rather than an empty response.

    Raises:
        FetchError: name resolution, connect, send, or waiting for the
            response failed.
    """
    get_unified_logger("fetch", "http").debug("connecting to %s:%s for %s", host, port, file)
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as e:
        raise FetchError(file, f"cannot connect to {host}:{port}: {e}") from e

    try:
        sock.sendall(build_request(file, host))
        stream = sock.makefile("rb")
    except OSError as e:
        sock.close()
        raise FetchError(file, f"cannot send request: {e}") from e
    # makefile holds its own reference; the socket closes when the stream does
    sock.close()

    try:
        stream.peek(1)
    except OSError as e:
        stream.close()
        raise FetchError(file, f"no response: {e}") from e
    return stream
