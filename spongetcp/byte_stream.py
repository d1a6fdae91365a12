"""A flow-controlled, in-memory, in-order byte stream."""

from __future__ import annotations


class ByteStream:
    """Bytes are written on the input side and read from the output side.

    The stream holds at most ``capacity`` bytes at a time. The writer can
    end the input; once the buffered bytes are drained the stream is at EOF.
    """

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._buffer = bytearray()
        self._total_written = 0
        self._total_read = 0
        self._input_ended = False
        self._error = False

    # -- input side -------------------------------------------------------

    def write(self, data: bytes) -> int:
        """Write as many bytes of ``data`` as fit and return how many were accepted."""
        accepted = data[: self.remaining_capacity()]
        self._buffer.extend(accepted)
        self._total_written += len(accepted)
        return len(accepted)

    def remaining_capacity(self) -> int:
        """Number of additional bytes the stream has room for."""
        return max(self._capacity - len(self._buffer), 0)

    def end_input(self) -> None:
        """Signal that the writer has reached the end of the stream."""
        self._input_ended = True

    def set_error(self) -> None:
        """Mark the stream as having suffered an error."""
        self._error = True

    # -- output side ------------------------------------------------------

    def peek_output(self, length: int) -> bytes:
        """Return up to ``length`` bytes from the output side without removing them."""
        return bytes(self._buffer[:length])

    def pop_output(self, length: int) -> None:
        """Remove up to ``length`` bytes from the output side."""
        removed = min(length, len(self._buffer))
        del self._buffer[:removed]
        self._total_read += removed

    def read(self, length: int) -> bytes:
        """Remove and return up to ``length`` bytes from the output side."""
        data = self.peek_output(length)
        self.pop_output(length)
        return data

    def input_ended(self) -> bool:
        return self._input_ended

    def error(self) -> bool:
        return self._error

    def buffer_size(self) -> int:
        """Number of bytes that can currently be read."""
        return len(self._buffer)

    def buffer_empty(self) -> bool:
        return not self._buffer

    def eof(self) -> bool:
        """True once input has ended and every byte has been read."""
        return self._input_ended and not self._buffer

    # -- accounting -------------------------------------------------------

    def bytes_written(self) -> int:
        """Total number of bytes accepted by ``write``."""
        return self._total_written

    def bytes_read(self) -> int:
        """Total number of bytes popped from the output side."""
        return self._total_read