"""Reassembly of possibly out-of-order, overlapping substrings into a byte stream."""

from __future__ import annotations

from dataclasses import dataclass

from .byte_stream import ByteStream


@dataclass
class _Span:
    """Bytes held for the stream range [left, right)."""

    left: int
    right: int
    data: bytes


class StreamReassembler:
    """Assembles excerpts of a byte stream into an in-order ``ByteStream``.

    ``capacity`` limits both the bytes already reassembled and those still
    waiting; bytes beyond it are silently discarded.
    """

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._output = ByteStream(capacity)
        self._is_eof = False
        self._left_bound = 0
        self._spans: dict[int, _Span] = {}

    def stream_out(self) -> ByteStream:
        """The reassembled in-order byte stream."""
        return self._output

    def left_bound(self) -> int:
        """Index of the first byte not yet written to the output stream."""
        return self._left_bound

    def unassembled_bytes(self) -> int:
        """Number of bytes stored but not yet reassembled."""
        return sum(span.right - span.left for span in self._spans.values())

    def empty(self) -> bool:
        """True if nothing waits to be assembled and the final byte has been seen."""
        return not self._spans and self._is_eof

    def clear_eof(self) -> None:
        """Forget that the end of the stream has been seen."""
        self._is_eof = False

    def push_substring(self, data: bytes, index: int, eof: bool) -> None:
        """Accept ``data`` starting at stream position ``index``.

        ``eof`` marks the last byte of ``data`` as the last byte of the stream.
        Newly contiguous bytes are written to the output stream.
        """
        if eof:
            self._is_eof = True

        remaining = max(self._capacity - self.unassembled_bytes(), 0)

        o_left = index
        right = index + len(data)
        if right < self._left_bound:
            return
        left = max(index, self._left_bound)
        right = min(right, self._left_bound + self._capacity)
        o_right = right
        res = data[left - o_left : right - o_left] if right >= left else b""

        if data and res and o_left < self._left_bound + self._capacity:
            self._store(data, o_left, left, right, o_right, res, remaining, eof)

        self._deliver_front()
        if self._is_eof and not self._spans:
            self._output.end_input()

    # -- internals --------------------------------------------------------

    def _ordered(self) -> list[_Span]:
        return [self._spans[key] for key in sorted(self._spans)]

    def _insert(self, span: _Span) -> None:
        # A span starting where another already starts is not stored.
        self._spans.setdefault(span.left, span)

    def _store(
        self,
        data: bytes,
        o_left: int,
        left: int,
        right: int,
        o_right: int,
        res: bytes,
        remaining: int,
        eof: bool,
    ) -> None:
        start = left

        # Merge with a span that contains the new start.
        for span in self._ordered():
            if span.left <= left <= span.right:
                old_left, old_right = left, right
                right = max(right, span.right)
                left = min(left, span.left)
                start = o_right if right == span.right else span.right
                head = span.data[: old_left - span.left]
                if old_right <= span.right:
                    tail = span.data[old_right - span.left : span.right - span.left]
                    res = head + data[old_left - o_left :] + tail
                else:
                    res = head + data[old_left - o_left :]
                del self._spans[span.left]
                break

        # Absorb spans that start inside the new range.
        for span in self._ordered():
            if not left <= span.left <= right:
                continue
            if span.left > start:
                gap = span.left - start
                need = gap if start > o_right else min(gap, o_right - start)
                if remaining < need:
                    fits = False
                    if left == self._left_bound:
                        out_mem = self._output.remaining_capacity()
                        if out_mem > 0:
                            chunk = min(out_mem, need)
                            self._output.write(res[:chunk])
                            res = res[chunk:]
                            self._left_bound += chunk
                            left = self._left_bound
                            remaining += chunk
                            fits = remaining >= need
                    if not fits:
                        kept = _Span(left, start + remaining, res[: start - left + remaining])
                        if eof:
                            self._is_eof = False
                        if left < start:
                            self._insert(kept)
                        return
                remaining -= need
            start = span.right
            if span.right > right:
                res += span.data[right - span.left : span.right - span.left]
                right = span.right
            del self._spans[span.left]

        if start < o_right and remaining < o_right - start:
            right = start + remaining
            if eof:
                self._is_eof = False
        if left < right:
            self._insert(_Span(left, right, res))

    def _deliver_front(self) -> None:
        if not self._spans:
            return
        first = self._spans[min(self._spans)]
        if first.left != self._left_bound:
            return
        room = self._output.remaining_capacity()
        if room < len(first.data):
            self._output.write(first.data[:room])
            self._left_bound = first.left + room
            if self._left_bound < first.right:
                self._insert(_Span(self._left_bound, first.right, first.data[room:]))
            del self._spans[first.left]
        else:
            self._output.write(first.data)
            self._left_bound = first.right
            del self._spans[first.left]