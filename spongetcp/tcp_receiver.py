"""The receiving half of a TCP endpoint, and 32-bit sequence number arithmetic."""

from __future__ import annotations

from typing import Optional

from .byte_stream import ByteStream
from .stream_reassembler import StreamReassembler
from .tcp_segment import TCPSegment

_MOD = 1 << 32


def wrap(n: int, isn: int) -> int:
    """Convert the absolute sequence number ``n`` to a 32-bit sequence number."""
    return (isn + n) % _MOD


def unwrap(n: int, isn: int, checkpoint: int) -> int:
    """Return the non-negative absolute sequence number for ``n`` closest to ``checkpoint``."""
    offset = (n - isn) % _MOD
    candidate = checkpoint - checkpoint % _MOD + offset
    options = [c for c in (candidate - _MOD, candidate, candidate + _MOD) if c >= 0]
    return min(options, key=lambda c: abs(c - checkpoint))


class TCPReceiver:
    """Reassembles inbound segments into a ByteStream and computes the ackno and window."""

    def __init__(self, capacity: int) -> None:
        self._reassembler = StreamReassembler(capacity)
        self._capacity = capacity
        self._ack = 0
        self._isn = 0
        self._syn = False
        self._fin = False

    def segment_received(self, seg: TCPSegment) -> None:
        """Handle an inbound segment."""
        header = seg.header
        seqno = header.seqno
        if not self._syn and header.syn:
            self._reassembler.clear_eof()
            self._fin = False
            self._isn = header.seqno
            seqno = wrap(1, seqno)
            self._syn = True
        if header.fin:
            self._fin = True
        if not self._syn:
            return
        abs_seqno = unwrap(seqno, self._isn, self._ack)
        if abs_seqno != 0:
            self._reassembler.push_substring(bytes(seg.payload), abs_seqno - 1, header.fin)
        self._ack = self._reassembler.left_bound() + 1
        if self._reassembler.empty() and self._fin:
            self._ack += 1

    def ackno(self) -> Optional[int]:
        """The ackno to send to the peer, or None before a SYN has arrived."""
        if not self._syn:
            return None
        return wrap(self._ack, self._isn)

    def window_size(self) -> int:
        """Room left in the reassembled stream."""
        return self.stream_out().remaining_capacity()

    def unassembled_bytes(self) -> int:
        """Number of bytes stored but not yet reassembled."""
        return self._reassembler.unassembled_bytes()

    def is_fin(self) -> bool:
        """True once a segment carrying FIN has been seen."""
        return self._fin

    def stream_out(self) -> ByteStream:
        """The reassembled inbound byte stream."""
        return self._reassembler.stream_out()