import io
import socket
from collections import namedtuple
from unittest import mock

import pytest

from transportkit.netutils import (
    UdpStream,
    character_replace,
    network_addr_compare,
    network_interface_exists,
    network_interface_list,
    network_interfaces,
    network_stream_ascii,
)

_Addr = namedtuple("_Addr", "family address netmask broadcast ptp")
_Stat = namedtuple("_Stat", "isup")

_FAKE_ADDRS = {
    "eth0": [_Addr(socket.AF_INET, "192.0.2.10", "255.255.255.0", "192.0.2.255", None)],
    "eth1": [_Addr(socket.AF_INET, "198.51.100.7", "255.255.255.0", None, None)],
    "down0": [_Addr(socket.AF_INET, "203.0.113.5", "255.255.255.0", None, None)],
    "v6only": [_Addr(socket.AF_INET6, "fe80::1", None, None, None)],
}
_FAKE_STATS = {
    "eth0": _Stat(True),
    "eth1": _Stat(True),
    "down0": _Stat(False),
    "v6only": _Stat(True),
}


def _fake():
    return (
        mock.patch("transportkit.netutils.psutil.net_if_addrs", return_value=_FAKE_ADDRS),
        mock.patch("transportkit.netutils.psutil.net_if_stats", return_value=_FAKE_STATS),
    )


def test_character_replace_counts():
    assert character_replace("a.b.c", ".", "_") == ("a_b_c", 2)


def test_character_replace_no_match():
    assert character_replace("abc", "x", "y") == ("abc", 0)


def test_character_replace_rejects_strings():
    with pytest.raises(ValueError):
        character_replace("abc", "ab", "y")


def test_network_interfaces_filters_down_and_ipv6():
    p1, p2 = _fake()
    with p1, p2:
        result = network_interfaces()
    assert sorted(result) == [("eth0", "192.0.2.10"), ("eth1", "198.51.100.7")]


def test_network_interface_exists_with_fake_table():
    p1, p2 = _fake()
    with p1, p2:
        assert network_interface_exists("eth1") is True
        assert network_interface_exists("down0") is False
        assert network_interface_exists("v6only") is False


def test_network_interface_list_format():
    p1, p2 = _fake()
    out = io.StringIO()
    with p1, p2:
        network_interface_list(out)
    lines = out.getvalue().splitlines(keepends=True)
    assert "\teth0 : 192.0.2.10\n" in lines
    assert len(lines) == 2


def test_real_interfaces_are_consistent():
    for name, host in network_interfaces():
        assert network_interface_exists(name)
        socket.inet_aton(host)
    assert network_interface_exists("no-such-interface-xyz") is False


def test_stream_ascii():
    stream = UdpStream("192.0.2.1", 5000, "239.1.1.1", 4001)
    assert network_stream_ascii(stream) == "192.0.2.1:5000 -> 239.1.1.1:4001"


def test_addr_compare_equal_and_different():
    a = UdpStream("192.0.2.1", 5000, "239.1.1.1", 4001)
    assert network_addr_compare(a, UdpStream("192.0.2.1", 5000, "239.1.1.1", 4001)) is True
    assert network_addr_compare(a, UdpStream("192.0.2.2", 5000, "239.1.1.1", 4001)) is False
    assert network_addr_compare(a, UdpStream("192.0.2.1", 5001, "239.1.1.1", 4001)) is False
    assert network_addr_compare(a, UdpStream("192.0.2.1", 5000, "239.1.1.1", 4002)) is False


def test_stream_rejects_bad_port_and_address():
    with pytest.raises(ValueError):
        UdpStream("192.0.2.1", 70000, "239.1.1.1", 4001)
    with pytest.raises(ValueError):
        UdpStream("not-an-address", 1, "239.1.1.1", 4001)