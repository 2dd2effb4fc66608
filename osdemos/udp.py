"""A thin datagram socket wrapper."""

import socket


def resolve_address(hostname, port):
    """Resolve ``hostname`` to an IPv4 (host, port) pair.

    With no hostname the cleared address ("0.0.0.0", 0) is returned.
    """
    if hostname is None:
        return ("0.0.0.0", 0)
    return (socket.gethostbyname(hostname), port)


class UdpSocket:
    """An IPv4 datagram socket bound to ``port`` on all interfaces."""

    def __init__(self, port):
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._sock.bind(("", port))
        except OSError:
            self._sock.close()
            raise

    @property
    def address(self):
        return self._sock.getsockname()

    def write(self, addr, data):
        """Send ``data`` to ``addr``; return the number of bytes sent."""
        if isinstance(data, str):
            data = data.encode()
        return self._sock.sendto(data, addr)

    def read(self, n):
        """Receive up to ``n`` bytes; return (data, sender address)."""
        return self._sock.recvfrom(n)

    def close(self):
        self._sock.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()