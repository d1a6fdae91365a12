"""Summaries of a TCP connection's state, compared against the official state names."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Protocol

from .byte_stream import ByteStream


class State(enum.Enum):
    """Official state names of a TCP connection."""

    LISTEN = 0
    SYN_RCVD = 1
    SYN_SENT = 2
    ESTABLISHED = 3
    CLOSE_WAIT = 4
    LAST_ACK = 5
    FIN_WAIT_1 = 6
    FIN_WAIT_2 = 7
    CLOSING = 8
    TIME_WAIT = 9
    CLOSED = 10
    RESET = 11


class ReceiverSummary(str, enum.Enum):
    """State of the receiving half."""

    ERROR = "error (connection was reset)"
    LISTEN = "waiting for SYN: ackno is empty"
    SYN_RECV = "SYN received (ackno exists), and input to stream hasn't ended"
    FIN_RECV = "input to stream has ended"


class SenderSummary(str, enum.Enum):
    """State of the sending half."""

    ERROR = "error (connection was reset)"
    CLOSED = "waiting for stream to begin (no SYN sent)"
    SYN_SENT = "stream started but nothing acknowledged"
    SYN_ACKED = "stream ongoing"
    FIN_SENT = "stream finished (FIN sent) but not fully acknowledged"
    FIN_ACKED = "stream finished and fully acknowledged"


class _Sender(Protocol):
    def stream_in(self) -> ByteStream: ...

    def next_seqno_absolute(self) -> int: ...

    def bytes_in_flight(self) -> int: ...


class _Receiver(Protocol):
    def stream_out(self) -> ByteStream: ...

    def ackno(self) -> Optional[int]: ...


_R, _S = ReceiverSummary, SenderSummary

_OFFICIAL = {
    State.LISTEN: (_S.CLOSED, _R.LISTEN, True, True),
    State.SYN_RCVD: (_S.SYN_SENT, _R.SYN_RECV, True, True),
    State.SYN_SENT: (_S.SYN_SENT, _R.LISTEN, True, True),
    State.ESTABLISHED: (_S.SYN_ACKED, _R.SYN_RECV, True, True),
    State.CLOSE_WAIT: (_S.SYN_ACKED, _R.FIN_RECV, True, False),
    State.LAST_ACK: (_S.FIN_SENT, _R.FIN_RECV, True, False),
    State.CLOSING: (_S.FIN_SENT, _R.FIN_RECV, True, True),
    State.FIN_WAIT_1: (_S.FIN_SENT, _R.SYN_RECV, True, True),
    State.FIN_WAIT_2: (_S.FIN_ACKED, _R.SYN_RECV, True, True),
    State.TIME_WAIT: (_S.FIN_ACKED, _R.FIN_RECV, True, True),
    State.RESET: (_S.ERROR, _R.ERROR, False, False),
    State.CLOSED: (_S.FIN_ACKED, _R.FIN_RECV, False, False),
}


@dataclass(frozen=True, eq=False)
class TCPState:
    """Sender and receiver summaries plus the connection's active and linger bits."""

    sender: SenderSummary
    receiver: ReceiverSummary
    active: bool = True
    linger_after_streams_finish: bool = True

    @classmethod
    def from_state(cls, state: State) -> "TCPState":
        """The summary that corresponds to an official state name."""
        return cls(*_OFFICIAL[state])

    @classmethod
    def from_parts(cls, sender: _Sender, receiver: _Receiver, active: bool, linger: bool) -> "TCPState":
        """Summarize a live sender and receiver; an inactive connection never lingers."""
        return cls(
            cls.sender_summary(sender),
            cls.receiver_summary(receiver),
            active,
            linger if active else False,
        )

    def name(self) -> str:
        """Describe the state in one line."""
        return (
            f"sender=`{self.sender.value}`, receiver=`{self.receiver.value}`, "
            f"active={int(self.active)}, "
            f"linger_after_streams_finish={int(self.linger_after_streams_finish)}"
        )

    @staticmethod
    def receiver_summary(receiver: _Receiver) -> ReceiverSummary:
        """Summarize the state of a receiver."""
        stream = receiver.stream_out()
        if stream.error():
            return ReceiverSummary.ERROR
        if receiver.ackno() is None:
            return ReceiverSummary.LISTEN
        if stream.input_ended():
            return ReceiverSummary.FIN_RECV
        return ReceiverSummary.SYN_RECV

    @staticmethod
    def sender_summary(sender: _Sender) -> SenderSummary:
        """Summarize the state of a sender."""
        stream = sender.stream_in()
        next_seqno = sender.next_seqno_absolute()
        if stream.error():
            return SenderSummary.ERROR
        if next_seqno == 0:
            return SenderSummary.CLOSED
        if next_seqno == sender.bytes_in_flight():
            return SenderSummary.SYN_SENT
        if not stream.eof():
            return SenderSummary.SYN_ACKED
        if next_seqno < stream.bytes_written() + 2:
            return SenderSummary.SYN_ACKED
        if sender.bytes_in_flight():
            return SenderSummary.FIN_SENT
        return SenderSummary.FIN_ACKED

    def _key(self) -> tuple:
        return (self.sender, self.receiver, self.active, self.linger_after_streams_finish)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, State):
            other = TCPState.from_state(other)
        if not isinstance(other, TCPState):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())