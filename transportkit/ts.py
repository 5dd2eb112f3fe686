"""Helpers for building, inspecting and searching MPEG transport stream packets."""

from __future__ import annotations

from dataclasses import dataclass

PACKET_SIZE = 188
SYNC_BYTE = 0x47
NULL_PID = 0x1FFF

_U64_MASK = (1 << 64) - 1
_PES_START_CODE = b"\x00\x00\x01"
_COUNTER_FILL = b"\xff" * (PACKET_SIZE - 16)
_RTP_HEADER_SIZE = 12

_VIDEO_TYPES = frozenset({0x01, 0x02, 0x1B, 0x21, 0x24, 0x25, 0x27, 0x28, 0x29, 0x2A, 0xDB})

_ES_DESCRIPTIONS = {
    0x00: "Reserved",
    0x01: "ISO/IEC 11172 Video",
    0x02: "ISO/IEC 13818-2 Video",
    0x03: "ISO/IEC 11172 Audio",
    0x04: "ISO/IEC 13818-3 Audio",
    0x05: "ISO/IEC 13818-1 Private Section",
    0x06: "ISO/IEC 13818-1 Private PES data packets",
    0x07: "ISO/IEC 13522 MHEG",
    0x08: "ISO/IEC 13818-1 Annex A DSM CC",
    0x09: "H222.1",
    0x0A: "ISO/IEC 13818-6 type A",
    0x0B: "ISO/IEC 13818-6 type B",
    0x0C: "ISO/IEC 13818-6 type C",
    0x0D: "ISO/IEC 13818-6 type D",
    0x0E: "ISO/IEC 13818-1 auxillary",
    0x0F: "ISO/IEC 13818-7 Audio with ADTS transport syntax",
    0x10: "ISO/IEC 14496-2 (MPEG-4) Visual",
    0x11: "ISO/IEC 14496-3 Audio with the LATM transport syntax as defined in ISO/IEC 14496-3 / AMD 1",
    0x12: "ISO/IEC 14496-1 SL-packetized stream or FlexMux stream carried in PES packets",
    0x13: "ISO/IEC 14496-1 SL-packetized stream or FlexMux stream carried in ISO/IEC14496_sections",
    0x14: "ISO/IEC 13818-6 Synchronized Download Protocol",
    0x1B: "H.264 Video",
    0x21: "JPEG 2000",
    0x24: "HEVC Video",
    0x25: "HEVC Video",
    0x27: "HEVC Video",
    0x28: "HEVC Video",
    0x29: "HEVC Video",
    0x2A: "HEVC Video",
    0x81: "ATSC AC-3 Audio",
    0xC1: "ATSC AC-3 Audio (HLS TS Encryption)",
    0xC2: "ATSC EAC-3 Audio (HLS TS Encryption)",
    0xCF: "ISO/IEC 13818-7 Audio with ADTS transport syntax (HLS TS Encryption)",
    0xDB: "H.264 Video (HLS TS Encryption)",
}


@dataclass(frozen=True)
class PcrPosition:
    """A PCR value found in a buffer, with its PID and byte offset."""

    pid: int
    offset: int
    pcr: int


def packet_pid(pkt: bytes) -> int:
    """Return the 13-bit PID of a transport packet."""
    return ((pkt[1] & 0x1F) << 8) | pkt[2]


def sync_present(pkt: bytes) -> bool:
    """Return True if the packet starts with the sync byte."""
    return len(pkt) > 0 and pkt[0] == SYNC_BYTE


def adaptation_field_control(pkt: bytes) -> int:
    """Return the two-bit adaptation_field_control value."""
    return (pkt[3] >> 4) & 0x03


def has_adaptation(pkt: bytes) -> bool:
    """Return True if the packet carries an adaptation field."""
    return adaptation_field_control(pkt) >= 2


def adaptation_field_length(pkt: bytes) -> int:
    """Return the adaptation field length byte."""
    return pkt[4]


def transport_scrambling_control(pkt: bytes) -> int:
    """Return the two-bit transport_scrambling_control value."""
    return (pkt[3] >> 6) & 0x03


def pcr_to_scr(data: bytes) -> int:
    """Convert six raw PCR bytes (33-bit base, 9-bit extension) into a 27MHz clock value."""
    base = (data[0] << 25) | (data[1] << 17) | (data[2] << 9) | (data[3] << 1) | (data[4] >> 7)
    base &= 0x1FFFFFFFF
    ext = ((data[4] << 8) | data[5]) & 0x1FF
    return base * 300 + ext


def scr(pkt: bytes) -> int | None:
    """Return the 27MHz PCR carried in the packet's adaptation field, or None if absent."""
    if len(pkt) < 12 or not sync_present(pkt):
        return None
    if adaptation_field_control(pkt) < 2:
        return None
    if adaptation_field_length(pkt) == 0:
        return None
    if not pkt[5] & 0x10:
        return None
    return pcr_to_scr(pkt[6:12])


def pack_pcr(pcr: int) -> bytes:
    """Pack a 27MHz clock value into the six bytes of an adaptation field PCR."""
    pcr &= _U64_MASK
    base = pcr // 300
    ext = pcr & 0x1FF
    return bytes(
        (
            (base >> 25) & 0xFF,
            (base >> 17) & 0xFF,
            (base >> 9) & 0xFF,
            (base >> 1) & 0xFF,
            ((base << 7) & 0xFF) | 0x7E | ((ext & 0x100) >> 8),
            ext & 0xFF,
        )
    )


def generate_pcr_only_packet(pid: int, cc: int, pcr: int) -> tuple[bytes, int]:
    """Build an adaptation-only packet carrying a PCR.

    Returns the packet and the continuity counter to use next.
    """
    pkt = bytearray(b"\xff" * PACKET_SIZE)
    pkt[0] = SYNC_BYTE
    pkt[1] = (pid & 0x1FFF) >> 8
    pkt[2] = pid & 0xFF
    pkt[3] = 0x20 | (cc & 0x0F)
    pkt[4] = 1 + 6
    pkt[5] = 0x10
    pkt[6:12] = pack_pcr(pcr)
    return bytes(pkt), (cc + 1) & 0xFF


def contains_pes_header(buf: bytes) -> int | None:
    """Return the offset of the first 00 00 01 start code, or None.

    The final possible position in the buffer is not considered.
    """
    pos = bytes(buf).find(_PES_START_CODE, 0, max(len(buf) - 1, 0))
    return None if pos < 0 else pos


def contains_pes_header_reverse(buf: bytes) -> int | None:
    """Return the offset of the last 00 00 01 start code, or None."""
    pos = bytes(buf).rfind(_PES_START_CODE)
    return None if pos < 0 else pos


def get_section_tableid(pkt: bytes) -> int:
    """Return the table_id byte of a section packet, skipping any adaptation field."""
    offset = 5
    if has_adaptation(pkt):
        offset += 1 + adaptation_field_length(pkt)
    return pkt[offset]


def is_es_payload_type_video(es_type: int) -> bool:
    """Return True if the PMT stream type denotes video."""
    return es_type in _VIDEO_TYPES


def es_payload_type_description(es_type: int) -> str:
    """Return a human readable description of a PMT stream type."""
    try:
        return _ES_DESCRIPTIONS[es_type]
    except KeyError:
        return "ISO/IEC 13818-1 reserved" if es_type < 0x80 else "User Private"


def generate_null_packet() -> bytes:
    """Build a null packet on PID 0x1FFF."""
    pkt = bytearray(b"\xff" * PACKET_SIZE)
    pkt[0:4] = bytes((SYNC_BYTE, 0x1F, 0xFF, 0x10))
    return bytes(pkt)


def generate_packet_with_64b_counter(pid: int, cc: int, counter: int) -> tuple[bytes, int]:
    """Build a payload packet carrying a big-endian 64-bit counter at byte 8.

    Returns the packet and the continuity counter to use next.
    """
    pkt = bytearray(b"\xff" * PACKET_SIZE)
    pkt[0] = SYNC_BYTE
    pkt[1] = (pid & 0x1FFF) >> 8
    pkt[2] = pid & 0xFF
    pkt[3] = 0x10 | (cc & 0x0F)
    pkt[8:16] = (counter & _U64_MASK).to_bytes(8, "big")
    return bytes(pkt), (cc + 1) & 0xFF


def verify_packet_with_64b_counter(pkt: bytes, pid: int, last_counter: int) -> int:
    """Check a counter packet and return its counter.

    Raises ValueError if the packet is malformed, on the wrong PID, or its
    counter does not follow last_counter.
    """
    if len(pkt) < PACKET_SIZE:
        raise ValueError("packet is shorter than a transport packet")
    if pkt[0] != SYNC_BYTE:
        raise ValueError("missing sync byte")
    if pkt[1] != (pid & 0x1FFF) >> 8 or pkt[2] != pid & 0xFF:
        raise ValueError("unexpected pid")
    if pkt[3] & 0xF0 != 0x10:
        raise ValueError("unexpected adaptation/scrambling flags")
    current = int.from_bytes(bytes(pkt[8:16]), "big")
    if (last_counter + 1) & _U64_MASK != current:
        raise ValueError(f"counter {current} does not follow {last_counter}")
    if bytes(pkt[16:PACKET_SIZE]) != _COUNTER_FILL:
        raise ValueError("packet payload is corrupt")
    return current


def find_sync_position(buf: bytes) -> int | None:
    """Return the offset of the first sync byte repeated three packets in a row, or None."""
    if len(buf) < 3 * PACKET_SIZE:
        return None
    for i in range(PACKET_SIZE):
        if buf[i] == SYNC_BYTE and buf[i + PACKET_SIZE] == SYNC_BYTE and buf[i + 2 * PACKET_SIZE] == SYNC_BYTE:
            return i
    return None


def _is_rtp_header(pkt: bytes) -> bool:
    return len(pkt) > _RTP_HEADER_SIZE and pkt[0] == 0x80 and pkt[_RTP_HEADER_SIZE] == SYNC_BYTE


def _walk_packets(buf: bytes, start: int):
    """Yield (offset, packet) pairs, stepping over RTP headers."""
    end = len(buf) - start
    i = start
    while i < end:
        pkt = bytes(buf[i : i + PACKET_SIZE])
        if _is_rtp_header(pkt):
            i += _RTP_HEADER_SIZE + PACKET_SIZE
            continue
        yield i, pkt
        i += PACKET_SIZE


def query_pcrs(buf: bytes, addr: int = 0) -> list[PcrPosition]:
    """Find every PCR in a buffer of packets; offsets are relative to addr.

    Raises ValueError if no packet alignment can be found.
    """
    offset = find_sync_position(buf)
    if offset is None:
        raise ValueError("unable to find transport packet alignment")
    positions = []
    for i, pkt in _walk_packets(buf, offset):
        value = scr(pkt)
        if value is not None:
            positions.append(PcrPosition(packet_pid(pkt), addr + i, value))
    return positions


def query_pcr_pid(buf: bytes, pcr_pid: int, pkt_aligned: bool = True) -> PcrPosition | None:
    """Return the first PCR on pcr_pid in the buffer, or None.

    Packets are walked from the start of the buffer. When pkt_aligned is
    false, a ValueError is raised if the buffer shows no packet alignment.
    """
    if not pkt_aligned and find_sync_position(buf) is None:
        raise ValueError("unable to find transport packet alignment")
    for i, pkt in _walk_packets(buf, 0):
        if len(pkt) < 12 or packet_pid(pkt) != pcr_pid:
            continue
        value = scr(pkt)
        if value is not None:
            return PcrPosition(pcr_pid, i, value)
    return None


def _cdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _cmod(a: int, b: int) -> int:
    return a - b * _cdiv(a, b)


def pts_to_ascii(pts: int) -> str:
    """Format a 90kHz timestamp as days.hh:mm:ss.mmm."""
    t = _cdiv(pts, 90000)
    ms = _cmod(_cdiv(pts, 90), 1000)
    secs = _cmod(t, 60)
    mins = _cmod(_cdiv(t, 60), 60)
    hrs = _cmod(_cdiv(t, 3600), 24)
    days = _cdiv(t, 86400)
    return "%d.%02d:%02d:%02d.%03d" % (days, hrs, mins, secs, ms)


def pcr_to_ascii(pcr: int) -> str:
    """Format a 27MHz clock value as days.hh:mm:ss.mmm."""
    return pts_to_ascii(_cdiv(pcr, 300))