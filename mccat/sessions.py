# mccat/sessions.py
import socket
import sys
import threading

from .common import decode_payload, format_source, make_pong, make_probe
from .config import DEFAULT_BUFFER_SIZE, DEFAULT_PING_INTERVAL

RECEIVER_JOIN_TIMEOUT = 1.0  # Seconds run() waits for the ping receiver to exit.


class ListenSession:
    """
    Receives datagrams on a socket that has already joined the group, echoes
    every one of them to stdout and answers PING probes with a unicast PONG.
    """

    def __init__(self, sock, endpoint, buffer_size=DEFAULT_BUFFER_SIZE):
        self.sock = sock
        self.endpoint = endpoint
        self.buffer_size = buffer_size
        self._running = False

    def run(self):
        """
        The receive loop. Socket errors are not handled here: they end the
        session and propagate to the caller.
        """
        self._running = True
        print(f"Listening on {self.endpoint}", flush=True)

        while self._running:
            # Anything beyond buffer_size is silently truncated by the kernel.
            data, src = self.sock.recvfrom(self.buffer_size)

            reply = make_pong(data)
            if reply is not None:
                self.sock.sendto(reply, src)

            print(f"{format_source(src)} said: {decode_payload(data)}", flush=True)

    def stop(self):
        """Ends the loop once the datagram being handled has been logged."""
        self._running = False


class SendSession:
    """Forwards chunks read from a binary stream to a connected socket."""

    def __init__(self, sock, stream=None, buffer_size=DEFAULT_BUFFER_SIZE):
        self.sock = sock
        self.stream = stream
        self.buffer_size = buffer_size

    def run(self):
        """
        Sends one datagram per read until the stream reaches end of input.
        Returns the number of datagrams sent.
        """
        stream = self.stream if self.stream is not None else sys.stdin.buffer
        sent = 0

        while True:
            chunk = stream.read1(self.buffer_size)
            if not chunk:
                return sent

            # Drop exactly one trailing newline; "\r\n" keeps its "\r".
            if chunk.endswith(b"\n"):
                chunk = chunk[:-1]

            self.sock.send(chunk)
            sent += 1


class PingSession:
    """
    Sends "PING <n>" to the group every interval while a background thread
    prints whatever comes back.

    The receiver works on a duplicate of the socket handle, so the two
    directions never contend. The only thing they share is the event that
    ends the session; if the receiver fails, the sender stops and re-raises
    the receiver's error.
    """

    def __init__(
        self,
        sock,
        endpoint,
        buffer_size=DEFAULT_BUFFER_SIZE,
        interval=DEFAULT_PING_INTERVAL,
    ):
        self.sock = sock
        self.endpoint = endpoint
        self.buffer_size = buffer_size
        self.interval = interval
        self.seqnum = 0
        self._done = threading.Event()
        self._error = None

    def _receive_loop(self, recv_sock):
        try:
            while not self._done.is_set():
                data, src = recv_sock.recvfrom(self.buffer_size)
                if self._done.is_set():
                    # Woken by the shutdown in run(), not by a reply
                    break
                print(f"{decode_payload(data)} from {format_source(src)}", flush=True)
        except OSError as e:
            if not self._done.is_set():
                print(f"[ERROR] Ping receiver failed: {e}", file=sys.stderr)
                self._error = e
                self._done.set()

    def _release_receiver(self, receiver, recv_sock):
        """Wakes the receiver out of recvfrom, waits for it and closes its handle."""
        try:
            recv_sock.shutdown(socket.SHUT_RD)
        except OSError:
            # Unconnected UDP sockets report ENOTCONN but the reader still wakes.
            pass
        receiver.join(timeout=RECEIVER_JOIN_TIMEOUT)
        recv_sock.close()

    def run(self):
        recv_sock = self.sock.dup()
        receiver = threading.Thread(
            target=self._receive_loop,
            args=(recv_sock,),
            name="mccat-ping-receiver",
            daemon=True,
        )
        receiver.start()

        try:
            while not self._done.is_set():
                self.seqnum += 1
                self.sock.sendto(make_probe(self.seqnum), self.endpoint.sockaddr)
                # Only the sender sleeps; the receiver keeps running.
                self._done.wait(self.interval)
        finally:
            self._done.set()
            self._release_receiver(receiver, recv_sock)

        if self._error is not None:
            raise self._error

    def stop(self):
        """
        Ends the session after the probe currently in flight. run() then
        shuts down the receiver's handle so its thread exits as well.
        """
        self._done.set()
