import time

import pytest

from transportkit.timestamps import get_timestamp, get_timestamp_separated

WHEN = 1_600_000_000


def test_compact_shape():
    stamp = get_timestamp(WHEN)
    assert len(stamp) == 15
    assert stamp[8] == "-"
    assert stamp[:8].isdigit()
    assert stamp[9:].isdigit()


def test_separated_shape():
    stamp = get_timestamp_separated(WHEN)
    assert len(stamp) == 19
    assert [stamp[4], stamp[7], stamp[10], stamp[13], stamp[16]] == ["-", "-", " ", ":", ":"]
    digits = stamp.replace("-", "").replace(" ", "").replace(":", "")
    assert digits.isdigit()
    assert len(digits) == 14


def test_compact_round_trip():
    parsed = time.mktime(time.strptime(get_timestamp(WHEN), "%Y%m%d-%H%M%S"))
    assert parsed == pytest.approx(WHEN, abs=3600)
    assert time.localtime(parsed)[:6] == time.localtime(WHEN)[:6]


def test_separated_round_trip():
    parsed = time.mktime(time.strptime(get_timestamp_separated(WHEN), "%Y-%m-%d %H:%M:%S"))
    assert time.localtime(parsed)[:6] == time.localtime(WHEN)[:6]


def test_forms_agree():
    compact = get_timestamp(WHEN)
    separated = get_timestamp_separated(WHEN)
    assert separated.replace("-", "").replace(":", "").replace(" ", "-") == compact


def test_default_is_now():
    before = time.time()
    stamp = get_timestamp_separated()
    parsed = time.mktime(time.strptime(stamp, "%Y-%m-%d %H:%M:%S"))
    assert before - 5 <= parsed <= time.time() + 5