"""Conversion between TCP segments and IPv4 datagrams for a single connection."""

from __future__ import annotations

import ipaddress
import socket
from typing import Optional

from .ipv4_datagram import IPv4Datagram
from .ipv4_header import IPv4Header
from .tcp_config import FdAdapterConfig
from .tcp_segment import TCPSegment
from .wire import ParseError


def _ipv4_numeric(host: str) -> int:
    try:
        packed = socket.inet_aton(host)
    except OSError:
        packed = socket.inet_aton(socket.gethostbyname(host))
    return int.from_bytes(packed, "big")


def _dotted(address: int) -> str:
    return str(ipaddress.IPv4Address(address & 0xFFFFFFFF))


class TCPOverIPv4Adapter:
    """Wraps outgoing segments in IPv4 datagrams and filters incoming ones.

    While listening, the first SYN from any peer fixes the connection's
    addresses and ports; after that only datagrams of that connection pass.
    """

    def __init__(self, config: Optional[FdAdapterConfig] = None) -> None:
        self.config = config if config is not None else FdAdapterConfig()
        self._listening = False
        self.elapsed_ms = 0

    def listening(self) -> bool:
        """Whether the adapter waits for a new connection."""
        return self._listening

    def set_listening(self, listening: bool) -> None:
        self._listening = listening

    def tick(self, ms_since_last_tick: int) -> None:
        """Record the passage of time."""
        self.elapsed_ms += ms_since_last_tick

    def unwrap_tcp_in_ip(self, datagram: IPv4Datagram) -> Optional[TCPSegment]:
        """Return the segment carried by ``datagram``, or None if it is invalid or unrelated."""
        header = datagram.header
        src_host, src_port = self.config.source
        dst_host, dst_port = self.config.destination

        if not self._listening:
            if header.dst != _ipv4_numeric(src_host):
                return None
            if header.src != _ipv4_numeric(dst_host):
                return None
        if header.proto != IPv4Header.PROTO_TCP:
            return None
        try:
            seg = TCPSegment.parse(datagram.payload, header.pseudo_cksum())
        except ParseError:
            return None
        if seg.header.dport != int(src_port):
            return None

        if self._listening:
            if not (seg.header.syn and not seg.header.rst):
                return None
            self.config.source = (_dotted(header.dst), int(src_port))
            self.config.destination = (_dotted(header.src), seg.header.sport)
            dst_port = seg.header.sport
            self._listening = False

        if seg.header.sport != int(dst_port):
            return None
        return seg

    def wrap_tcp_in_ip(self, seg: TCPSegment) -> IPv4Datagram:
        """Set the segment's ports and wrap it in an IPv4 datagram."""
        src_host, src_port = self.config.source
        dst_host, dst_port = self.config.destination
        seg.header.sport = int(src_port)
        seg.header.dport = int(dst_port)

        datagram = IPv4Datagram()
        datagram.header.src = _ipv4_numeric(src_host)
        datagram.header.dst = _ipv4_numeric(dst_host)
        datagram.header.length = 4 * datagram.header.hlen + 4 * seg.header.doff + len(seg.payload)
        datagram.payload = seg.serialize(datagram.header.pseudo_cksum())
        return datagram