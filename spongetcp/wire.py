"""Shared pieces of the wire formats: parse results and the Internet checksum."""

from __future__ import annotations

import enum
import struct


class ParseResult(enum.IntEnum):
    """Outcome of parsing a header or packet; every value above NO_ERROR is a failure."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5


class ParseError(ValueError):
    """Raised when bytes cannot be parsed; ``result`` tells why."""

    def __init__(self, result: ParseResult) -> None:
        super().__init__(f"parse failed: {result.name}")
        self.result = result


def internet_checksum(data: bytes, initial: int = 0) -> int:
    """Return the 16-bit one's-complement Internet checksum of ``data``.

    ``initial`` is a running sum (such as a pseudo-header's contribution)
    added before the data; an odd trailing byte is padded with zero.
    """
    data = bytes(data)
    if len(data) % 2:
        data += b"\x00"
    total = initial + sum(struct.unpack(f"!{len(data) // 2}H", data))
    while total >> 16:
        total = (total & 0xFFFF) + (total >> 16)
    return ~total & 0xFFFF