"""Split a buffer of bytes into 188-byte transport packets."""

from __future__ import annotations

_PACKET_SIZE = 188
_HEADER_SIZE = 4


def packetize(data: bytes, pid: int, cc: int = 0, packet_size: int = _PACKET_SIZE) -> tuple[list[bytes], int]:
    """Packetize data onto pid, padding the last packet with 0xff.

    The first packet carries the payload_unit_start flag. Returns the
    packets and the continuity counter to use next. Raises ValueError on
    empty data, a packet size other than 188, or a PID above 0x1fff.
    """
    if not data:
        raise ValueError("no data to packetize")
    if packet_size != _PACKET_SIZE:
        raise ValueError(f"unsupported packet size {packet_size}")
    if not 0 <= pid <= 0x1FFF:
        raise ValueError(f"pid 0x{pid:x} out of range")

    payload_size = packet_size - _HEADER_SIZE
    packets = []
    for start in range(0, len(data), payload_size):
        chunk = bytes(data[start : start + payload_size])
        pid_hi = pid >> 8
        if not packets:
            pid_hi |= 0x40
        header = bytes((0x47, pid_hi, pid & 0xFF, 0x10 | (cc & 0x0F)))
        packets.append(header + chunk + b"\xff" * (payload_size - len(chunk)))
        cc = (cc + 1) & 0xFF
    return packets, cc