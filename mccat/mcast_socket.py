# mccat/mcast_socket.py
import socket

from .kernel_ffi import MembershipInterface


def _wildcard(family):
    if family == socket.AF_INET6:
        return "::"
    return "0.0.0.0"


def open_listener(endpoint, membership=None):
    """
    Binds a UDP socket to the wildcard address on the endpoint's port and
    joins the endpoint's group on the default interface.

    Any bind or join failure is raised to the caller; the socket is closed
    first so nothing is leaked.
    """
    if membership is None:
        membership = MembershipInterface()

    sock = socket.socket(endpoint.family, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        # Several listeners on one host may share the group port.
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((_wildcard(endpoint.family), endpoint.port))

        if endpoint.family == socket.AF_INET6:
            membership.join_v6(sock, endpoint.address)
        else:
            membership.join_v4(sock, endpoint.address)
    except OSError:
        sock.close()
        raise
    return sock


def open_sender(endpoint, connect=True):
    """
    Binds a UDP socket to the wildcard address on an ephemeral port.

    With connect=True the endpoint becomes the default destination for
    send(). The ping session passes connect=False because a connected
    socket would drop replies coming from other addresses.
    """
    sock = socket.socket(endpoint.family, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
    try:
        sock.bind((_wildcard(endpoint.family), 0))
        if connect:
            sock.connect(endpoint.sockaddr)
    except OSError:
        sock.close()
        raise
    return sock
