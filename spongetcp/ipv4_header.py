"""The IPv4 datagram header (options are not supported)."""

from __future__ import annotations

import ipaddress
import struct
from dataclasses import dataclass
from typing import ClassVar

from .wire import ParseError, ParseResult, internet_checksum

_FORMAT = struct.Struct("!BBHHHBBHII")


@dataclass
class IPv4Header:
    """IPv4 header fields; ``hlen`` counts 32-bit words."""

    LENGTH: ClassVar[int] = 20
    DEFAULT_TTL: ClassVar[int] = 128
    PROTO_TCP: ClassVar[int] = 6

    ver: int = 4
    hlen: int = 5
    tos: int = 0
    length: int = 0
    ident: int = 0
    df: bool = True
    mf: bool = False
    offset: int = 0
    ttl: int = DEFAULT_TTL
    proto: int = PROTO_TCP
    cksum: int = 0
    src: int = 0
    dst: int = 0

    @classmethod
    def parse(cls, data: bytes) -> "IPv4Header":
        """Parse a header from the start of a complete datagram; raise ParseError on failure."""
        data = bytes(data)
        size = len(data)
        if size < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        first, tos, length, ident, fo_val, ttl, proto, cksum, src, dst = _FORMAT.unpack_from(data)
        header = cls(
            ver=first >> 4,
            hlen=first & 0x0F,
            tos=tos,
            length=length,
            ident=ident,
            df=bool(fo_val & 0x4000),
            mf=bool(fo_val & 0x2000),
            offset=fo_val & 0x1FFF,
            ttl=ttl,
            proto=proto,
            cksum=cksum,
            src=src,
            dst=dst,
        )
        if size < 4 * header.hlen:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        if header.ver != 4:
            raise ParseError(ParseResult.WRONG_IP_VERSION)
        if header.hlen < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if size != header.length:
            raise ParseError(ParseResult.TRUNCATED_PACKET)
        if internet_checksum(data[: 4 * header.hlen]):
            raise ParseError(ParseResult.BAD_CHECKSUM)
        return header

    def serialize(self) -> bytes:
        """Serialize the header, padded to ``4 * hlen`` bytes; the checksum is not recomputed."""
        if self.ver != 4:
            raise ValueError("wrong IP version")
        if 4 * self.hlen < self.LENGTH:
            raise ValueError("IP header too short")
        fo_val = (0x4000 if self.df else 0) | (0x2000 if self.mf else 0) | (self.offset & 0x1FFF)
        raw = _FORMAT.pack(
            ((self.ver << 4) | (self.hlen & 0x0F)) & 0xFF,
            self.tos & 0xFF,
            self.length & 0xFFFF,
            self.ident & 0xFFFF,
            fo_val,
            self.ttl & 0xFF,
            self.proto & 0xFF,
            self.cksum & 0xFFFF,
            self.src & 0xFFFFFFFF,
            self.dst & 0xFFFFFFFF,
        )
        return raw.ljust(4 * self.hlen, b"\x00")

    def payload_length(self) -> int:
        """Length of the payload implied by the total length and header length."""
        return (self.length - 4 * self.hlen) & 0xFFFF

    def pseudo_cksum(self) -> int:
        """The pseudo-header's contribution to an encapsulated TCP checksum."""
        total = (self.src >> 16) + (self.src & 0xFFFF)
        total += (self.dst >> 16) + (self.dst & 0xFFFF)
        total += self.proto
        total += self.payload_length()
        return total & 0xFFFFFFFF

    def to_string(self) -> str:
        """Multi-line, human-readable dump of the header (numbers in hex)."""
        df = str(bool(self.df)).lower()
        mf = str(bool(self.mf)).lower()
        return (
            f"IP version: {self.ver:x}\n"
            f"IP hdr len: {self.hlen:x}\n"
            f"IP tos: {self.tos:x}\n"
            f"IP dgram len: {self.length:x}\n"
            f"IP id: {self.ident:x}\n"
            f"Flags: df: {df} mf: {mf}\n"
            f"Offset: {self.offset:x}\n"
            f"TTL: {self.ttl:x}\n"
            f"Protocol: {self.proto:x}\n"
            f"Checksum: {self.cksum:x}\n"
            f"Src addr: {self.src:x}\n"
            f"Dst addr: {self.dst:x}\n"
        )

    def summary(self) -> str:
        """One-line summary of the header."""
        ttl = "" if self.ttl >= 10 else f"ttl={self.ttl}, "
        return (
            f"IPv{self.ver:x}, len={self.length:x}, protocol={self.proto:x}, {ttl}"
            f"src={ipaddress.IPv4Address(self.src & 0xFFFFFFFF)}, "
            f"dst={ipaddress.IPv4Address(self.dst & 0xFFFFFFFF)}"
        )