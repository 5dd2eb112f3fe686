"""Small networking helpers: interface lookup and UDP stream descriptions."""

from __future__ import annotations

import ipaddress
import socket
import sys
from dataclasses import dataclass
from typing import TextIO

import psutil


def character_replace(text: str, src: str, dst: str) -> tuple[str, int]:
    """Replace every src character in text with dst.

    Returns the new text and the number of substitutions made.
    """
    if len(src) != 1 or len(dst) != 1:
        raise ValueError("src and dst must be single characters")
    return text.replace(src, dst), text.count(src)


def network_interfaces() -> list[tuple[str, str]]:
    """Return (interface name, IPv4 address) pairs for every interface that is up."""
    stats = psutil.net_if_stats()
    found = []
    for name, addrs in psutil.net_if_addrs().items():
        stat = stats.get(name)
        if stat is None or not stat.isup:
            continue
        for addr in addrs:
            if addr.family == socket.AF_INET and addr.address:
                found.append((name, addr.address))
    return found


def network_interface_exists(ifname: str) -> bool:
    """Return True if an interface of that exact name is up with an IPv4 address."""
    return any(name == ifname for name, _ in network_interfaces())


def network_interface_list(file: TextIO | None = None) -> None:
    """Write one line per up IPv4 interface to file, or standard output."""
    out = file or sys.stdout
    for name, host in network_interfaces():
        out.write(f"\t{name} : {host}\n")


@dataclass(frozen=True)
class UdpStream:
    """The addressing of a UDP stream: IPv4 source and destination with ports."""

    src_addr: str
    src_port: int
    dst_addr: str
    dst_port: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "src_addr", str(ipaddress.IPv4Address(self.src_addr)))
        object.__setattr__(self, "dst_addr", str(ipaddress.IPv4Address(self.dst_addr)))
        for port in (self.src_port, self.dst_port):
            if not 0 <= port <= 0xFFFF:
                raise ValueError(f"port {port} out of range")


def network_addr_compare(a: UdpStream, b: UdpStream) -> bool:
    """Return True if both streams have the same addresses and ports."""
    return (
        a.src_addr == b.src_addr
        and a.dst_addr == b.dst_addr
        and a.src_port == b.src_port
        and a.dst_port == b.dst_port
    )


def network_stream_ascii(stream: UdpStream) -> str:
    """Return the stream as 'src:port -> dst:port'."""
    return f"{stream.src_addr}:{stream.src_port} -> {stream.dst_addr}:{stream.dst_port}"