"""The TCP segment header (options are not supported)."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from .wire import ParseError, ParseResult

_FORMAT = struct.Struct("!HHIIBBHHH")

_URG, _ACK, _PSH, _RST, _SYN, _FIN = 0x20, 0x10, 0x08, 0x04, 0x02, 0x01


@dataclass(eq=False)
class TCPHeader:
    """TCP header fields; sequence numbers are raw 32-bit values, ``doff`` counts 32-bit words."""

    LENGTH: ClassVar[int] = 20

    sport: int = 0
    dport: int = 0
    seqno: int = 0
    ackno: int = 0
    doff: int = 5
    urg: bool = False
    ack: bool = False
    psh: bool = False
    rst: bool = False
    syn: bool = False
    fin: bool = False
    win: int = 0
    cksum: int = 0
    uptr: int = 0

    @classmethod
    def parse(cls, data: bytes) -> "TCPHeader":
        """Parse a header from the start of ``data``; raise ParseError on failure."""
        data = bytes(data)
        if len(data) < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        sport, dport, seqno, ackno, doff_b, fl_b, win, cksum, uptr = _FORMAT.unpack_from(data)
        header = cls(
            sport=sport,
            dport=dport,
            seqno=seqno,
            ackno=ackno,
            doff=doff_b >> 4,
            urg=bool(fl_b & _URG),
            ack=bool(fl_b & _ACK),
            psh=bool(fl_b & _PSH),
            rst=bool(fl_b & _RST),
            syn=bool(fl_b & _SYN),
            fin=bool(fl_b & _FIN),
            win=win,
            cksum=cksum,
            uptr=uptr,
        )
        if header.doff < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if len(data) < 4 * header.doff:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        return header

    def serialize(self) -> bytes:
        """Serialize the header, padded to ``4 * doff`` bytes; the checksum is not recomputed."""
        if self.doff < 5:
            raise ValueError("TCP header too short")
        flags = (
            (_URG if self.urg else 0)
            | (_ACK if self.ack else 0)
            | (_PSH if self.psh else 0)
            | (_RST if self.rst else 0)
            | (_SYN if self.syn else 0)
            | (_FIN if self.fin else 0)
        )
        raw = _FORMAT.pack(
            self.sport & 0xFFFF,
            self.dport & 0xFFFF,
            self.seqno & 0xFFFFFFFF,
            self.ackno & 0xFFFFFFFF,
            (self.doff << 4) & 0xFF,
            flags,
            self.win & 0xFFFF,
            self.cksum & 0xFFFF,
            self.uptr & 0xFFFF,
        )
        return raw.ljust(4 * self.doff, b"\x00")

    def to_string(self) -> str:
        """Multi-line, human-readable dump of the header (numbers in hex)."""
        flags = " ".join(
            f"{name}: {str(bool(value)).lower()}"
            for name, value in (
                ("urg", self.urg),
                ("ack", self.ack),
                ("psh", self.psh),
                ("rst", self.rst),
                ("syn", self.syn),
                ("fin", self.fin),
            )
        )
        return (
            f"TCP source port: {self.sport:x}\n"
            f"TCP dest port: {self.dport:x}\n"
            f"TCP seqno: {self.seqno:x}\n"
            f"TCP ackno: {self.ackno:x}\n"
            f"TCP doff: {self.doff:x}\n"
            f"Flags: {flags}\n"
            f"TCP winsize: {self.win:x}\n"
            f"TCP cksum: {self.cksum:x}\n"
            f"TCP uptr: {self.uptr:x}\n"
        )

    def summary(self) -> str:
        """One-line summary of flags, sequence numbers and window."""
        flags = ("S" if self.syn else "") + ("A" if self.ack else "") + ("R" if self.rst else "")
        flags += "F" if self.fin else ""
        return f"Header(flags={flags},seqno={self.seqno},ack={self.ackno},win={self.win})"

    def __eq__(self, other: object) -> bool:
        """Compare every field except the ports and the checksum."""
        if not isinstance(other, TCPHeader):
            return NotImplemented
        return (
            self.seqno == other.seqno
            and self.ackno == other.ackno
            and self.doff == other.doff
            and self.urg == other.urg
            and self.ack == other.ack
            and self.psh == other.psh
            and self.rst == other.rst
            and self.syn == other.syn
            and self.fin == other.fin
            and self.win == other.win
            and self.uptr == other.uptr
        )

    __hash__ = None  # type: ignore[assignment]