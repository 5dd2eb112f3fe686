# transportkit

A library of helpers for MPEG transport streams: building and inspecting
188-byte packets, reading and writing PCRs, splitting payloads into packets,
measuring throughput and timing, tracking TR 101 290 alarm state, and
receiving streams over UDP.

## Modules

- `transportkit.ts` handles single packets and buffers of packets.
  - Inspection: `packet_pid`, `sync_present`, `adaptation_field_control`,
    `has_adaptation`, `adaptation_field_length`,
    `transport_scrambling_control` and `get_section_tableid`.
  - PCRs: `pcr_to_scr` decodes six raw PCR bytes into a 27 MHz value.
    `scr` returns the PCR carried in a packet, or `None` when the packet has
    none. `pack_pcr` encodes a value into six bytes; it stores `pcr // 300`
    as the base and the low nine bits of the value as the extension.
  - Buffer searches: `find_sync_position` finds the packet alignment.
    `query_pcrs` returns every PCR as a list of `PcrPosition` (pid, offset,
    pcr), and `query_pcr_pid` returns the first PCR on a given PID. Both
    step over 12-byte RTP headers.
  - `contains_pes_header` and `contains_pes_header_reverse` find a
    `00 00 01` start code from the front or from the back.
  - Packet builders: `generate_null_packet`, `generate_pcr_only_packet` and
    `generate_packet_with_64b_counter`. The last two return the packet
    together with the next continuity counter.
    `verify_packet_with_64b_counter` checks a counter packet and returns its
    counter. It raises `ValueError` when the packet is malformed or out of
    sequence.
  - `pts_to_ascii` and `pcr_to_ascii` format a timestamp as
    `days.hh:mm:ss.mmm`.
  - `is_es_payload_type_video` and `es_payload_type_description` describe
    PMT stream types.
- `transportkit.packetizer`: `packetize(data, pid, cc=0)` splits data into
  packets on one PID. It sets the payload-unit-start flag on the first packet
  and pads the last with `0xff`. It returns the packets and the next
  continuity counter.
- `transportkit.timestamps`: `get_timestamp` returns `YYYYMMDD-HHMMSS` and
  `get_timestamp_separated` returns `YYYY-MM-DD HH:MM:SS`. Both use local
  time, for a given epoch time or for now.
- `transportkit.throughput`: `Throughput` totals writes per wall-clock
  second. `write` counts bytes, so `mbps()` gives megabits per second.
  `write_value` counts arbitrary units. The figures fall to zero after more
  than two seconds without a write.
- `transportkit.throughput_hires`: `HiresThroughput` keeps timestamped
  per-channel values. It provides `sum_total` and `min_max_avg` over a time
  window, and `expire` to drop old items.
- `transportkit.histogram`: `Histogram` counts millisecond measurements into
  buckets. It measures in three ways:
  - intervals, with `interval_update`;
  - samples, with `sample_begin` / `sample_end`;
  - cumulative totals, with `cumulative_initialize` / `cumulative_begin` /
    `cumulative_end` / `cumulative_finalize`.

  Output comes from `format_interval`, `print_interval` and `print_summary`.
  `Histogram.video_defaults(name)` covers 0 to 16 seconds.
- `transportkit.events`: the `Event` enumeration of TR 101 290 priority 1
  and 2 events, `default_events()`, `event_name` and `event_priority`.
- `transportkit.alarms`: `AlarmBoard` holds one `EventState` per event.
  - Each event can be turned on or off with `enable`, `disable`,
    `enable_all` and `disable_all`.
  - Alarms change with `raise_alarm`, `clear_alarm`, `raise_all` and
    `clear_event`.
  - `should_report` says whether an event has changed since it was last
    reported.
  - A raised alarm stays raised for its auto-clear period before a clear
    takes effect.
  - `Alarm` and `format_alarm` describe a single report.
- `transportkit.summary`: `summary_items` takes a snapshot of a board as
  `SummaryItem`s. `format_summary_item` formats one item, and
  `summary_report` writes one line per event.
- `transportkit.netutils`:
  - `character_replace` replaces characters and counts the replacements.
  - `network_interfaces`, `network_interface_exists` and
    `network_interface_list` cover interfaces that are up and have an IPv4
    address.
  - `UdpStream`, `network_addr_compare` and `network_stream_ascii` describe
    UDP streams.
- `transportkit.udp_receiver`: `UdpReceiver` binds a UDP socket and hands
  each datagram to a callback on a background thread.
  - With `strip_rtp_header=True` it removes the 12-byte RTP header and any
    trailing partial packet before the callback.
  - `join_multicast` and `drop_multicast` manage group membership on a named
    interface.
  - It is a context manager; `close` stops the thread and closes the socket.

## Installation

```
pip install .
```

## Examples

```python
from transportkit.ts import generate_pcr_only_packet, packet_pid, scr

pkt, cc = generate_pcr_only_packet(0x31, 0, 27_648_000)
assert packet_pid(pkt) == 0x31
assert scr(pkt) == 27_648_000
assert cc == 1
```

```python
from transportkit.packetizer import packetize

packets, cc = packetize(b"\x00\x00\x01\xe0" + bytes(400), pid=0x100, cc=0)
assert len(packets) == 3 and cc == 3
```

```python
from transportkit.alarms import AlarmBoard
from transportkit.events import Event
from transportkit.summary import summary_report

board = AlarmBoard()
board.raise_alarm(Event.P1_6_PID_ERROR, "0x0100 ")
summary_report(board)
```

```python
from transportkit.udp_receiver import UdpReceiver

def on_data(buf: bytes) -> None:
    print(len(buf))

with UdpReceiver("0.0.0.0", 4001, on_data) as rx:
    rx.start()
    ...
```

## What it does not do

This is a library only; it installs no command-line tool. It does not
decode PAT, PMT or SDT tables into a stream model. It also has no analyser
that feeds packets through TR 101 290 checks. `AlarmBoard` keeps and reports
alarm state, but deciding when to raise or clear each alarm is left to the
caller.

## Running the tests

```
pip install .[test]
pytest
```