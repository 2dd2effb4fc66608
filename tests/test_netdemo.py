import io
import socket
import threading

import pytest

from osdemos import netdemo
from osdemos.udp import UdpSocket


class _Recorder:
    """A thread-safe text sink that notices when the server is waiting."""

    def __init__(self):
        self._parts = []
        self._lock = threading.Lock()
        self.waiting = threading.Event()

    def write(self, text):
        with self._lock:
            self._parts.append(text)
            if "server:: waiting..." in text:
                self.waiting.set()
        return len(text)

    def flush(self):
        pass

    def text(self):
        with self._lock:
            return "".join(self._parts)


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
        s.bind(("", 0))
        return s.getsockname()[1]


def _start_server(max_messages):
    port = _free_port()
    rec = _Recorder()
    result = {}

    def target():
        result["handled"] = netdemo.serve(port, out=rec, max_messages=max_messages)

    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    assert rec.waiting.wait(5)
    return port, rec, thread, result


def test_client_gets_goodbye_reply():
    port, rec, thread, result = _start_server(1)
    out = io.StringIO()
    reply = netdemo.run_client("localhost", port, _free_port(), out=out)
    thread.join(5)
    assert reply == "goodbye world"
    assert result["handled"] == 1
    lines = out.getvalue().splitlines()
    assert lines[0] == "client:: send message [hello world]"
    assert lines[1] == "client:: wait for reply..."
    assert lines[2] == "client:: got reply [size:1000 contents:(goodbye world)"
    server_lines = rec.text().splitlines()
    assert "server:: read message [size:1000 contents:(hello world)]" in server_lines
    assert server_lines[-1] == "server:: reply"


def test_server_reply_fills_buffer():
    port, rec, thread, result = _start_server(1)
    with UdpSocket(0) as sock:
        sent = sock.write(("127.0.0.1", port), b"ping")
        data, _ = sock.read(netdemo.BUFFER_SIZE)
    thread.join(5)
    assert sent == 4
    assert len(data) == netdemo.BUFFER_SIZE
    assert data.startswith(b"goodbye world\x00")
    assert "server:: read message [size:4 contents:(ping)]" in rec.text()


def test_server_handles_several_messages():
    port, rec, thread, result = _start_server(2)
    replies = []
    with UdpSocket(0) as sock:
        for word in (b"first", b"second"):
            sock.write(("127.0.0.1", port), word)
            data, _ = sock.read(netdemo.BUFFER_SIZE)
            replies.append(data.split(b"\0", 1)[0])
    thread.join(5)
    assert replies == [b"goodbye world", b"goodbye world"]
    assert result["handled"] == 2
    assert rec.text().count("server:: reply") == 2


def test_serve_with_no_messages_returns_immediately():
    out = io.StringIO()
    assert netdemo.serve(_free_port(), out=out, max_messages=0) == 0
    assert out.getvalue() == ""


@pytest.mark.parametrize("argv", [["abc"], ["1", "2"], ["70000"]])
def test_server_main_rejects_bad_arguments(argv):
    assert netdemo.server_main(argv) == 1


@pytest.mark.parametrize("argv", [["localhost", "port"], ["a", "1", "2"]])
def test_client_main_rejects_bad_arguments(argv):
    assert netdemo.client_main(argv) == 1