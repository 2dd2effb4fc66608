import pytest

from osdemos.udp import UdpSocket, resolve_address


def test_resolve_none_clears_address():
    assert resolve_address(None, 10000) == ("0.0.0.0", 0)


def test_resolve_numeric_address():
    assert resolve_address("127.0.0.1", 10000) == ("127.0.0.1", 10000)


def test_bound_port_reported():
    with UdpSocket(0) as sock:
        host, port = sock.address
        assert host == "0.0.0.0"
        assert port > 0


def test_round_trip():
    with UdpSocket(0) as server, UdpSocket(0) as client:
        server_addr = ("127.0.0.1", server.address[1])
        assert client.write(server_addr, b"hello world") == len(b"hello world")
        data, sender = server.read(1000)
        assert data == b"hello world"
        assert sender[1] == client.address[1]
        server.write(sender, "goodbye world")
        reply, _ = client.read(1000)
        assert reply == b"goodbye world"


def test_read_truncates_to_n():
    with UdpSocket(0) as server, UdpSocket(0) as client:
        client.write(("127.0.0.1", server.address[1]), b"goodbye world")
        data, _ = server.read(4)
        assert data == b"good"


def test_port_in_use_raises():
    with UdpSocket(0) as first:
        with pytest.raises(OSError):
            UdpSocket(first.address[1])


def test_write_after_close_raises():
    sock = UdpSocket(0)
    sock.close()
    with pytest.raises(OSError):
        sock.write(("127.0.0.1", 9), b"x")