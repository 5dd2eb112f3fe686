"""A threaded UDP receiver for transport streams, with optional RTP header stripping."""

from __future__ import annotations

import ipaddress
import logging
import select
import socket
import threading
from typing import Callable

import psutil

log = logging.getLogger(__name__)

_RX_BUFFER_SIZE = 2048
_RTP_HEADER_SIZE = 12
_PACKET_SIZE = 188
_POLL_SECS = 0.25


class UdpReceiver:
    """Receives UDP datagrams on a background thread and hands them to a callback.

    When strip_rtp_header is set, the 12-byte RTP header is removed and any
    trailing bytes that do not make a whole 188-byte packet are dropped.
    """

    def __init__(
        self,
        ip_addr: str,
        ip_port: int,
        callback: Callable[[bytes], object] | None = None,
        socket_buffer_size: int | None = None,
        strip_rtp_header: bool = False,
    ) -> None:
        if ip_addr is None:
            raise ValueError("an ip address is required")
        self.ip_addr = ip_addr[:31]
        self.ip_port = ip_port
        self.callback = callback
        self.strip_rtp_header = strip_rtp_header
        self.rx_buffer_size = _RX_BUFFER_SIZE
        self._group = ipaddress.IPv4Address(self.ip_addr)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            if socket_buffer_size is not None:
                self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, socket_buffer_size)
            self.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self.sock.bind((self.ip_addr, self.ip_port))
            self.sock.setblocking(False)
        except OSError:
            self.sock.close()
            raise

    @property
    def address(self) -> tuple[str, int]:
        """The address and port the socket is bound to."""
        return self.sock.getsockname()

    @property
    def is_multicast(self) -> bool:
        """True if the bound address is a multicast group."""
        return self._group.is_multicast

    def _modify_membership(self, option: int, ifname: str | None) -> None:
        stats = psutil.net_if_stats()
        modified = 0
        verb = "join" if option == socket.IP_ADD_MEMBERSHIP else "leave"
        for name, addrs in psutil.net_if_addrs().items():
            stat = stats.get(name)
            if stat is None or not stat.isup:
                continue
            if ifname is not None and ifname.lower() != name.lower():
                continue
            for addr in addrs:
                if addr.family != socket.AF_INET or not addr.broadcast:
                    continue
                mreq = socket.inet_aton(str(self._group)) + socket.inet_aton(addr.address)
                try:
                    self.sock.setsockopt(socket.IPPROTO_IP, option, mreq)
                except OSError as exc:
                    raise OSError(f"cannot {verb} multicast group {self.ip_addr} on iface {name}") from exc
                modified += 1
                log.info("%s multicast group %s ok on iface %s", verb, self.ip_addr, name)
        if not modified:
            raise OSError(f"no interface available to {verb} multicast group {self.ip_addr}")

    def join_multicast(self, ifname: str) -> None:
        """Join the bound multicast group on the named interface."""
        if not self.is_multicast:
            raise ValueError(f"{self.ip_addr} is not a multicast address")
        self._modify_membership(socket.IP_ADD_MEMBERSHIP, ifname)

    def drop_multicast(self, ifname: str) -> None:
        """Leave the bound multicast group on the named interface."""
        if not self.is_multicast:
            raise ValueError(f"{self.ip_addr} is not a multicast address")
        self._modify_membership(socket.IP_DROP_MEMBERSHIP, ifname)

    def _deliver(self, data: bytes) -> None:
        if not data or self.callback is None:
            return
        if not self.strip_rtp_header:
            self.callback(data)
            return
        if len(data) < _RTP_HEADER_SIZE:
            return
        whole = (len(data) - _RTP_HEADER_SIZE) // _PACKET_SIZE * _PACKET_SIZE
        self.callback(data[_RTP_HEADER_SIZE : _RTP_HEADER_SIZE + whole])

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                ready, _, _ = select.select([self.sock], [], [], _POLL_SECS)
            except (OSError, ValueError):
                continue
            if not ready:
                continue
            try:
                data = self.sock.recv(self.rx_buffer_size)
            except OSError:
                continue
            self._deliver(data)

    def start(self) -> None:
        """Start the receive thread."""
        if self._thread is not None:
            raise RuntimeError("receiver already started")
        self._thread = threading.Thread(target=self._run, name="udp-receiver", daemon=True)
        self._thread.start()

    def close(self) -> None:
        """Stop the receive thread, leave any multicast group and close the socket."""
        self._stop.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join()
        if self.sock.fileno() != -1:
            if self.is_multicast:
                try:
                    self._modify_membership(socket.IP_DROP_MEMBERSHIP, None)
                except OSError:
                    pass
            self.sock.close()

    def __enter__(self) -> UdpReceiver:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()