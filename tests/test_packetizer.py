import pytest

from transportkit.packetizer import packetize


def _payloads(packets):
    return b"".join(p[4:] for p in packets)


@pytest.mark.parametrize("length", [1, 183, 184, 185, 368, 1000])
def test_packet_count_and_size(length):
    data = bytes(range(256)) * 4
    data = data[:length]
    packets, _ = packetize(data, 0x100)
    assert len(packets) == -(-length // 184)
    assert all(len(p) == 188 for p in packets)


def test_payload_round_trip_with_padding():
    data = bytes(range(200))
    packets, _ = packetize(data, 0x100)
    joined = _payloads(packets)
    assert joined[: len(data)] == data
    assert set(joined[len(data) :]) == {0xFF}


def test_headers():
    packets, _ = packetize(b"\x00" * 400, 0x1234, cc=14)
    for n, pkt in enumerate(packets):
        assert pkt[0] == 0x47
        assert ((pkt[1] & 0x1F) << 8) | pkt[2] == 0x1234
        assert pkt[3] & 0xF0 == 0x10
        assert pkt[3] & 0x0F == (14 + n) & 0x0F
    assert packets[0][1] & 0x40
    assert not any(p[1] & 0x40 for p in packets[1:])


def test_continuity_counter_returned():
    packets, next_cc = packetize(b"\x00" * 400, 0x100, cc=254)
    assert next_cc == (254 + len(packets)) & 0xFF


def test_empty_data_rejected():
    with pytest.raises(ValueError):
        packetize(b"", 0x100)


def test_bad_packet_size_rejected():
    with pytest.raises(ValueError):
        packetize(b"\x00", 0x100, packet_size=204)


def test_bad_pid_rejected():
    with pytest.raises(ValueError):
        packetize(b"\x00", 0x2000)