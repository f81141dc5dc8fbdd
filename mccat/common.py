# mccat/common.py
PING_MARKER = b"PING"
PONG_MARKER = b"PONG"


def format_source(addr):
    """Formats an address tuple from recvfrom() as host:port or [host]:port."""
    host, port = addr[0], addr[1]
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def decode_payload(data):
    """Decodes a datagram for display; invalid UTF-8 becomes U+FFFD."""
    return data.decode("utf-8", errors="replace")


def make_probe(seqnum):
    return PING_MARKER + b" " + str(seqnum).encode("ascii")


def make_pong(data):
    """
    Returns the reply for a PING probe, or None if the datagram is not one.

    The bytes after the 4-byte marker are echoed verbatim, so "PING 7"
    becomes "PONG 7" and "PINGx" becomes "PONGx".
    """
    if not data.startswith(PING_MARKER):
        return None
    return PONG_MARKER + data[len(PING_MARKER):]
