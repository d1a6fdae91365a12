"""A TCP segment: header plus payload."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .tcp_header import TCPHeader
from .wire import ParseError, ParseResult, internet_checksum


@dataclass
class TCPSegment:
    """A TCP header and the bytes it carries."""

    header: TCPHeader = field(default_factory=TCPHeader)
    payload: bytes = b""

    @classmethod
    def parse(cls, data: bytes, datagram_layer_checksum: int = 0) -> "TCPSegment":
        """Parse a segment, checking its checksum against the lower layer's pseudo-checksum."""
        data = bytes(data)
        if internet_checksum(data, datagram_layer_checksum):
            raise ParseError(ParseResult.BAD_CHECKSUM)
        header = TCPHeader.parse(data)
        return cls(header, data[4 * header.doff :])

    def serialize(self, datagram_layer_checksum: int = 0) -> bytes:
        """Serialize the segment, computing the checksum over header and payload."""
        header_out = replace(self.header, cksum=0)
        header_out.cksum = internet_checksum(
            header_out.serialize() + bytes(self.payload), datagram_layer_checksum
        )
        return header_out.serialize() + bytes(self.payload)

    def length_in_sequence_space(self) -> int:
        """Payload length plus one for SYN and one for FIN."""
        return len(self.payload) + int(self.header.syn) + int(self.header.fin)