# mccat/kernel_ffi.py
import os
import sys

from cffi import FFI

# --- C-level Constants for setsockopt ---
# Source: <uapi/linux/in.h>
IPPROTO_IP = 0  # Dummy protocol for IPv4 socket options.
IP_ADD_MEMBERSHIP = 35  # Join an IPv4 multicast group (takes ip_mreqn).

# Source: <uapi/linux/in6.h>
IPPROTO_IPV6 = 41  # Protocol level for IPv6 socket options.
IPV6_ADD_MEMBERSHIP = 20  # Join an IPv6 multicast group (a.k.a. IPV6_JOIN_GROUP).

INADDR_ANY = 0
DEFAULT_IFINDEX = 0  # Let the kernel pick the interface from the routing table.


class MembershipInterface:
    """
    Encapsulates the low-level group-join calls made on a UDP socket.

    The IPv4 and IPv6 joins take different C structures and live at
    different protocol levels, so each family has its own method. This class
    only translates Python addresses into those structures and hands them to
    libc's setsockopt; choosing which family to use is up to the caller.
    """

    # Minimal subset of the kernel headers needed for group membership.
    # Source: <uapi/linux/in.h> and <uapi/linux/in6.h>
    C_HEADER_CODE = """
        typedef unsigned int socklen_t;

        struct in_addr {
            unsigned int s_addr; // IPv4 address in network byte order
        };

        /*
         * ip_mreqn selects the interface by index, which makes the IPv4
         * join symmetrical with the IPv6 one.
         */
        struct ip_mreqn {
            struct in_addr imr_multiaddr; // Group to join.
            struct in_addr imr_address;   // Local interface address, or INADDR_ANY.
            int imr_ifindex;              // Interface index, or 0 for any.
        };

        struct in6_addr {
            unsigned char s6_addr[16];
        };

        struct ipv6_mreq {
            struct in6_addr ipv6mr_multiaddr; // Group to join.
            unsigned int ipv6mr_interface;    // Interface index, or 0 for any.
        };

        int setsockopt(int sockfd, int level, int optname, const void *optval,
                       socklen_t optlen);
    """

    def __init__(self):
        self.ffi = FFI()
        self.ffi.cdef(self.C_HEADER_CODE)
        self.libc = self.ffi.dlopen("c")

    def _check_call(self, description, ret_code):
        """Checks the return code of a C call and raises an OSError if it failed."""
        if ret_code < 0:
            errno = self.ffi.errno
            raise OSError(errno, f"[{description}] {os.strerror(errno)}")

    def join_v4(self, sock, group, ifindex=DEFAULT_IFINDEX):
        """
        Joins an IPv4 multicast group using IP_ADD_MEMBERSHIP.

        :param sock: A bound AF_INET datagram socket.
        :param group: An ipaddress.IPv4Address in 224.0.0.0/4.
        :param ifindex: Interface to join on; 0 leaves the choice to the kernel.
        """
        mreq = self.ffi.new("struct ip_mreqn *")
        # s_addr must hold the packed bytes in memory order, whatever the host.
        mreq.imr_multiaddr.s_addr = int.from_bytes(group.packed, sys.byteorder)
        mreq.imr_address.s_addr = INADDR_ANY
        mreq.imr_ifindex = ifindex

        ret = self.libc.setsockopt(
            sock.fileno(),
            IPPROTO_IP,
            IP_ADD_MEMBERSHIP,
            mreq,
            self.ffi.sizeof("struct ip_mreqn"),
        )
        self._check_call(f"IP_ADD_MEMBERSHIP for {group}", ret)

    def join_v6(self, sock, group, ifindex=DEFAULT_IFINDEX):
        """
        Joins an IPv6 multicast group using IPV6_ADD_MEMBERSHIP.

        :param sock: A bound AF_INET6 datagram socket.
        :param group: An ipaddress.IPv6Address in ff00::/8.
        :param ifindex: Interface to join on; 0 leaves the choice to the kernel.
        """
        mreq = self.ffi.new("struct ipv6_mreq *")
        self.ffi.memmove(mreq.ipv6mr_multiaddr.s6_addr, group.packed, 16)
        mreq.ipv6mr_interface = ifindex

        ret = self.libc.setsockopt(
            sock.fileno(),
            IPPROTO_IPV6,
            IPV6_ADD_MEMBERSHIP,
            mreq,
            self.ffi.sizeof("struct ipv6_mreq"),
        )
        self._check_call(f"IPV6_ADD_MEMBERSHIP for {group}", ret)
