"""A datagram client and server exchanging a greeting."""

import sys

from osdemos.udp import UdpSocket, resolve_address

BUFFER_SIZE = 1000
SERVER_PORT = 10000
CLIENT_PORT = 20000


def _pad(text):
    """Encode ``text`` as a NUL-terminated message filling a whole buffer."""
    return (text.encode() + b"\0").ljust(BUFFER_SIZE, b"\0")


def _contents(data):
    """Decode a message up to its first NUL byte."""
    return data.split(b"\0", 1)[0].decode(errors="replace")


def run_client(server_host="localhost", server_port=SERVER_PORT,
               client_port=CLIENT_PORT, out=None):
    """Send "hello world" to the server and return the text of its reply."""
    out = sys.stdout if out is None else out
    message = "hello world"
    with UdpSocket(client_port) as sock:
        addr = resolve_address(server_host, server_port)
        print(f"client:: send message [{message}]", file=out)
        try:
            sock.write(addr, _pad(message))
        except OSError:
            print("client:: failed to send", file=out)
            raise
        print("client:: wait for reply...", file=out)
        data, _ = sock.read(BUFFER_SIZE)
    reply = _contents(data)
    print(f"client:: got reply [size:{len(data)} contents:({reply})", file=out)
    return reply


def serve(port=SERVER_PORT, out=None, max_messages=None):
    """Answer each message with "goodbye world".

    Runs forever unless ``max_messages`` is given; returns the number of
    messages read.
    """
    out = sys.stdout if out is None else out
    handled = 0
    with UdpSocket(port) as sock:
        while max_messages is None or handled < max_messages:
            print("server:: waiting...", file=out)
            data, addr = sock.read(BUFFER_SIZE)
            handled += 1
            print(
                f"server:: read message [size:{len(data)} "
                f"contents:({_contents(data)})]",
                file=out,
            )
            if data:
                sock.write(addr, _pad("goodbye world"))
                print("server:: reply", file=out)
    return handled


def _parse_port(text):
    port = int(text)
    if not 0 <= port <= 65535:
        raise ValueError(f"port out of range: {port}")
    return port


def client_main(argv=None):
    """Command entry for the client: optional server host and port."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        if len(args) > 2:
            raise ValueError("too many arguments")
        host = args[0] if args else "localhost"
        port = _parse_port(args[1]) if len(args) > 1 else SERVER_PORT
    except ValueError:
        print("usage: client [host [port]]", file=sys.stderr)
        return 1
    try:
        run_client(host, port)
    except OSError as exc:
        print(f"client: {exc}", file=sys.stderr)
        return 1
    return 0


def server_main(argv=None):
    """Command entry for the server: optional port to listen on."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        if len(args) > 1:
            raise ValueError("too many arguments")
        port = _parse_port(args[0]) if args else SERVER_PORT
    except ValueError:
        print("usage: server [port]", file=sys.stderr)
        return 1
    try:
        serve(port)
    except OSError as exc:
        print(f"server: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0