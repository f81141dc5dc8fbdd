# mccat/addressing.py
import ipaddress
import socket
from dataclasses import dataclass
from typing import Union


class InvalidInput(ValueError):
    """Raised for arguments that can never lead to a working session."""


@dataclass(frozen=True)
class MulticastEndpoint:
    """A multicast group address and UDP port, validated once at startup."""

    address: Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
    port: int

    @property
    def family(self):
        if self.address.version == 4:
            return socket.AF_INET
        return socket.AF_INET6

    @property
    def sockaddr(self):
        """The address tuple accepted by connect() and sendto()."""
        # str() keeps an IPv6 scope such as "ff02::1%eth0".
        return (str(self.address), self.port)

    def __str__(self):
        if self.address.version == 6:
            return f"[{self.address}]:{self.port}"
        return f"{self.address}:{self.port}"


def parse_address(text):
    """Parses an IPv4 or IPv6 address, raising InvalidInput if it is malformed."""
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        raise InvalidInput(f"invalid IP address syntax: {text!r}")


def check_multicast(address):
    """
    Checks that an address lies in the multicast range of its family
    (224.0.0.0/4 for IPv4, ff00::/8 for IPv6).
    """
    if not address.is_multicast:
        raise InvalidInput(f"{address} is not a multicast address")


def resolve_endpoint(address_text, port):
    """
    Builds the MulticastEndpoint for a session. This must succeed before any
    socket is created.
    """
    address = parse_address(address_text)
    check_multicast(address)
    return MulticastEndpoint(address=address, port=port)
