"""An IPv4 datagram: header plus payload."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .ipv4_header import IPv4Header
from .wire import ParseError, ParseResult, internet_checksum


@dataclass
class IPv4Datagram:
    """An IPv4 header and the bytes it carries."""

    header: IPv4Header = field(default_factory=IPv4Header)
    payload: bytes = b""

    @classmethod
    def parse(cls, data: bytes) -> "IPv4Datagram":
        """Parse a datagram; raise ParseError on failure."""
        data = bytes(data)
        header = IPv4Header.parse(data)
        payload = data[4 * header.hlen :]
        if len(payload) != header.payload_length():
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        return cls(header, payload)

    def serialize(self) -> bytes:
        """Serialize the datagram, computing the header checksum."""
        if len(self.payload) != self.header.payload_length():
            raise ValueError("IPv4 datagram payload is the wrong size")
        header_out = replace(self.header, cksum=0)
        header_out.cksum = internet_checksum(header_out.serialize())
        return header_out.serialize() + bytes(self.payload)