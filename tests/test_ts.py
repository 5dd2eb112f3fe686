import pytest

from transportkit.ts import (
    PcrPosition,
    adaptation_field_control,
    adaptation_field_length,
    contains_pes_header,
    contains_pes_header_reverse,
    es_payload_type_description,
    find_sync_position,
    generate_null_packet,
    generate_packet_with_64b_counter,
    generate_pcr_only_packet,
    get_section_tableid,
    has_adaptation,
    is_es_payload_type_video,
    pack_pcr,
    packet_pid,
    pcr_to_ascii,
    pcr_to_scr,
    pts_to_ascii,
    query_pcr_pid,
    query_pcrs,
    scr,
    sync_present,
    transport_scrambling_control,
    verify_packet_with_64b_counter,
)

# Multiples of 38400 survive the base/extension split unchanged.
ROUND_TRIP_PCRS = [0, 38400, 38400 * 12345, 38400 * 999999]


@pytest.mark.parametrize("pcr", ROUND_TRIP_PCRS)
def test_pack_pcr_round_trip(pcr):
    packed = pack_pcr(pcr)
    assert len(packed) == 6
    assert pcr_to_scr(packed) == pcr


def test_pack_pcr_reserved_bits_set():
    packed = pack_pcr(0)
    assert packed[4] & 0x7E == 0x7E


@pytest.mark.parametrize("pcr", ROUND_TRIP_PCRS)
def test_pcr_only_packet(pcr):
    pkt, next_cc = generate_pcr_only_packet(0x31, 4, pcr)
    assert len(pkt) == 188
    assert sync_present(pkt)
    assert packet_pid(pkt) == 0x31
    assert adaptation_field_control(pkt) == 2
    assert has_adaptation(pkt)
    assert adaptation_field_length(pkt) == 7
    assert pkt[3] & 0x0F == 4
    assert next_cc == 5
    assert scr(pkt) == pcr


def test_pcr_only_packet_cc_wraps():
    pkt, next_cc = generate_pcr_only_packet(0x31, 255, 0)
    assert next_cc == 0
    assert pkt[3] & 0x0F == 0x0F


def test_scr_absent_on_null_packet():
    assert scr(generate_null_packet()) is None


def test_scr_requires_pcr_flag():
    pkt = bytearray(generate_pcr_only_packet(0x31, 0, 38400)[0])
    pkt[5] = 0x00
    assert scr(bytes(pkt)) is None


def test_null_packet():
    pkt = generate_null_packet()
    assert len(pkt) == 188
    assert packet_pid(pkt) == 0x1FFF
    assert pkt[3] == 0x10
    assert set(pkt[4:]) == {0xFF}
    assert transport_scrambling_control(pkt) == 0


def test_counter_packet_round_trip():
    pkt, next_cc = generate_packet_with_64b_counter(0x100, 7, 1000)
    assert next_cc == 8
    assert verify_packet_with_64b_counter(pkt, 0x100, 999) == 1000


def test_counter_wraps_at_64_bits():
    pkt, _ = generate_packet_with_64b_counter(0x100, 0, 0)
    assert verify_packet_with_64b_counter(pkt, 0x100, (1 << 64) - 1) == 0


def test_counter_out_of_sequence():
    pkt, _ = generate_packet_with_64b_counter(0x100, 0, 10)
    with pytest.raises(ValueError):
        verify_packet_with_64b_counter(pkt, 0x100, 10)


def test_counter_wrong_pid():
    pkt, _ = generate_packet_with_64b_counter(0x100, 0, 10)
    with pytest.raises(ValueError):
        verify_packet_with_64b_counter(pkt, 0x101, 9)


def test_counter_corrupt_payload():
    pkt = bytearray(generate_packet_with_64b_counter(0x100, 0, 10)[0])
    pkt[100] = 0x00
    with pytest.raises(ValueError):
        verify_packet_with_64b_counter(bytes(pkt), 0x100, 9)


def test_counter_short_packet():
    pkt, _ = generate_packet_with_64b_counter(0x100, 0, 10)
    with pytest.raises(ValueError):
        verify_packet_with_64b_counter(pkt[:100], 0x100, 9)


def test_find_sync_position_with_leading_junk():
    junk = b"\x01\x02\x03\x04\x05"
    buf = junk + generate_null_packet() * 3
    assert find_sync_position(buf) == len(junk)


def test_find_sync_position_too_short():
    assert find_sync_position(generate_null_packet() * 2) is None


def test_query_pcrs_finds_all():
    pcrs = [38400, 38400 * 2, 38400 * 3]
    packets = [generate_null_packet()]
    for cc, value in enumerate(pcrs):
        packets.append(generate_pcr_only_packet(0x21, cc, value)[0])
    buf = b"".join(packets)
    found = query_pcrs(buf, addr=1000)
    assert found == [
        PcrPosition(0x21, 1000 + 188 * (n + 1), value) for n, value in enumerate(pcrs)
    ]


def test_query_pcrs_unaligned_raises():
    with pytest.raises(ValueError):
        query_pcrs(b"\x00" * 600)


def test_query_pcr_pid_first_match():
    buf = b"".join(
        [
            generate_pcr_only_packet(0x22, 0, 38400)[0],
            generate_pcr_only_packet(0x21, 0, 38400 * 5)[0],
            generate_pcr_only_packet(0x21, 1, 38400 * 6)[0],
        ]
    )
    assert query_pcr_pid(buf, 0x21) == PcrPosition(0x21, 188, 38400 * 5)
    assert query_pcr_pid(buf, 0x99) is None


def test_query_pcr_pid_unaligned_raises():
    with pytest.raises(ValueError):
        query_pcr_pid(b"\x00" * 600, 0x21, pkt_aligned=False)


def test_contains_pes_header():
    buf = b"\xff\x00\x00\x01\xe0\x00\x00\x01\xe0"
    assert contains_pes_header(buf) == 1
    assert contains_pes_header_reverse(buf) == 5


def test_contains_pes_header_excludes_tail_position():
    buf = b"\x00\x00\x01"
    assert contains_pes_header(buf) is None
    assert contains_pes_header_reverse(buf) == 0


def test_contains_pes_header_absent():
    assert contains_pes_header(b"\xff" * 20) is None
    assert contains_pes_header_reverse(b"\xff" * 20) is None


def test_section_tableid_without_adaptation():
    pkt = bytearray(generate_null_packet())
    pkt[5] = 0x02
    assert get_section_tableid(bytes(pkt)) == 0x02


def test_section_tableid_with_adaptation():
    pkt = bytearray(generate_null_packet())
    pkt[3] = 0x30
    pkt[4] = 7
    pkt[5 + 1 + 7] = 0x42
    assert get_section_tableid(bytes(pkt)) == 0x42


def test_video_payload_types():
    assert is_es_payload_type_video(0x1B)
    assert is_es_payload_type_video(0x24)
    assert not is_es_payload_type_video(0x03)
    assert not is_es_payload_type_video(0x81)


@pytest.mark.parametrize(
    "es_type, description",
    [
        (0x00, "Reserved"),
        (0x1B, "H.264 Video"),
        (0x2A, "HEVC Video"),
        (0x81, "ATSC AC-3 Audio"),
        (0x7F, "ISO/IEC 13818-1 reserved"),
        (0x90, "User Private"),
    ],
)
def test_es_payload_type_description(es_type, description):
    assert es_payload_type_description(es_type) == description


@pytest.mark.parametrize(
    "days, hours, mins, secs, ms",
    [(0, 0, 0, 0, 0), (1, 2, 3, 4, 5), (3, 23, 59, 59, 999)],
)
def test_pts_to_ascii_components(days, hours, mins, secs, ms):
    total_ms = (((days * 24 + hours) * 60 + mins) * 60 + secs) * 1000 + ms
    pts = total_ms * 90
    assert pts_to_ascii(pts) == f"{days}.{hours:02d}:{mins:02d}:{secs:02d}.{ms:03d}"


def test_pcr_to_ascii_matches_pts():
    pts = 90 * 123456789
    assert pcr_to_ascii(pts * 300) == pts_to_ascii(pts)