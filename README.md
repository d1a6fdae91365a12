# spongetcp

Building blocks for a user-space TCP implementation, in plain Python with no
third-party dependencies. All data is handled as `bytes`.

## What is inside

- `spongetcp.byte_stream.ByteStream`: a bounded, in-order byte stream. The
  writer side has `write` (accepts only what fits and returns the count),
  `remaining_capacity`, `end_input` and `set_error`; the reader side has
  `peek_output`, `pop_output`, `read`, `buffer_size`, `buffer_empty`,
  `input_ended`, `eof` and `error`. `bytes_written` and `bytes_read` keep
  running totals.
- `spongetcp.stream_reassembler.StreamReassembler`: accepts substrings with
  `push_substring(data, index, eof)` that may arrive out of order or overlap,
  and writes the bytes that have become contiguous into its output stream
  (`stream_out()`). It keeps to a fixed capacity and drops bytes beyond it.
  `left_bound()` is the index of the first byte not yet delivered and
  `unassembled_bytes()` counts what is held back.
- `spongetcp.tcp_receiver.TCPReceiver`: feeds incoming `TCPSegment`s into a
  reassembler and reports the `ackno()` (None before a SYN) and
  `window_size()` to advertise. `wrap(n, isn)` and `unwrap(n, isn, checkpoint)`
  convert between absolute sequence numbers and 32-bit wire sequence numbers.
- `spongetcp.ipv4_header.IPv4Header`, `spongetcp.ipv4_datagram.IPv4Datagram`,
  `spongetcp.tcp_header.TCPHeader` and `spongetcp.tcp_segment.TCPSegment`:
  dataclasses that parse (`parse` class methods) and serialize IPv4 and TCP
  packets. Serializing a datagram or segment fills in its checksum; parsing
  checks it. Malformed input raises `spongetcp.wire.ParseError`, whose
  `result` attribute is a `spongetcp.wire.ParseResult`.
  `spongetcp.wire.internet_checksum(data, initial)` computes the 16-bit
  Internet checksum.
- `spongetcp.tcp_config.TCPConfig` and `spongetcp.tcp_config.FdAdapterConfig`:
  connection settings (timeouts, capacities) and adapter settings (source and
  destination as `(host, port)` pairs, loss rates out of 65535).
- `spongetcp.tcp_state.TCPState`: summarizes a connection's sender and
  receiver (`SenderSummary`, `ReceiverSummary`) together with its active and
  linger bits, and compares equal to the official state names in
  `spongetcp.tcp_state.State`.
- `spongetcp.tcp_over_ip.TCPOverIPv4Adapter`: `wrap_tcp_in_ip` sets a
  segment's ports and wraps it in an IPv4 datagram; `unwrap_tcp_in_ip`
  returns the segment carried by a datagram, or None if it is invalid or
  belongs to another connection. While listening, the first SYN fixes the
  connection's addresses and ports.
- `spongetcp.lossy_adapter.LossyAdapter`: wraps another adapter and drops
  reads and writes at random at the loss rates in its configuration; an
  optional `random.Random` makes the drops reproducible.

## Examples

```python
from spongetcp.stream_reassembler import StreamReassembler

reassembler = StreamReassembler(8)
reassembler.push_substring(b"bc", 1, False)
reassembler.push_substring(b"a", 0, False)
print(reassembler.stream_out().read(3))   # b"abc"
```

```python
from spongetcp.byte_stream import ByteStream

stream = ByteStream(4)
stream.write(b"hello")       # returns 4: only what fits is accepted
stream.end_input()
print(stream.read(10))       # b"hell"
print(stream.eof())          # True
```

## What it does not do

The package has no TCP sender and no complete connection object: nothing here
sends data, retransmits or runs the handshake. `TCPState.from_parts` and
`TCPState.sender_summary` take a sender object that the caller provides. There
are no sockets, no TUN device access, no event loop and no command-line
programs; the adapters only convert and filter packets held in memory.

## Running the tests

```
pip install -e .[test]
pytest
```