from __future__ import annotations

import functools
import socket

import pytest

from wordstats.analyze.processor import process_stream
from wordstats.core.config import AppConfig
from wordstats.core.errors import FetchError
from wordstats.dispatch import runner
from wordstats.fetch import http
from wordstats.lexicon.dictionary import Dictionary


def test_build_request_path_appends_file_verbatim():
    assert http.build_request_path("cpp.txt") == "/~raodm/cse381/hw4/SlowGet.cgi?file=cpp.txt"
    assert http.build_request_path("a b&c.txt").endswith("?file=a b&c.txt")


def test_build_request_wire_format():
    req = http.build_request("cpp.txt")
    assert req == (
        b"GET /~raodm/cse381/hw4/SlowGet.cgi?file=cpp.txt HTTP/1.1\r\n"
        b"Host: os1.csi.miamioh.edu\r\n"
        b"Connection: Close\r\n\r\n"
    )


def test_open_stream_sends_request_and_returns_raw_response(http_server):
    reply = b"HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\n\r\nthe cat sat\n"
    host, port, received = http_server(reply)

    with http.open_stream("a.txt", timeout=5, host=host, port=port) as stream:
        data = stream.read()

    assert data == reply
    assert received == [http.build_request("a.txt", host)]


def test_open_stream_feeds_processor(http_server):
    host, port, _ = http_server(b"HTTP/1.1 200 OK\r\n\r\nThe cat, the hat.\n")
    with http.open_stream("b.txt", timeout=5, host=host, port=port) as stream:
        res = process_stream(stream, "b.txt", Dictionary(["the", "cat"]))
    assert res.summary() == "b.txt: words=4, English words=3"


def test_connection_refused_raises_fetch_error():
    s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()

    with pytest.raises(FetchError) as ei:
        http.open_stream("a.txt", timeout=2, host="127.0.0.1", port=port)
    assert ei.value.name == "a.txt"
    assert "cannot connect" in ei.value.reason


@pytest.fixture
def silent_server():
    # Listening socket that never accepts: the kernel completes the handshake
    # and buffers the request, but no response byte is ever sent.
    srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    srv.bind(("127.0.0.1", 0))
    srv.listen(4)
    yield srv.getsockname()
    srv.close()


def test_silent_server_times_out_as_fetch_error(silent_server):
    host, port = silent_server
    with pytest.raises(FetchError) as ei:
        http.open_stream("a.txt", timeout=0.5, host=host, port=port)
    assert "no response" in ei.value.reason


def test_silent_server_task_is_reported_as_failed(silent_server, monkeypatch):
    host, port = silent_server
    monkeypatch.setattr(
        runner, "open_stream", functools.partial(http.open_stream, host=host, port=port)
    )

    res = runner.get_stats("a.txt", Dictionary(["x"]), AppConfig(timeout=0.5))

    assert not res.success
    assert res.summary().startswith("a.txt: failed (no response")


def test_empty_response_is_not_a_failure(http_server):
    host, port, _ = http_server(b"")
    with http.open_stream("e.txt", timeout=5, host=host, port=port) as stream:
        res = process_stream(stream, "e.txt", Dictionary())
    assert res.summary() == "e.txt: words=0, English words=0"
    assert not res.truncated
