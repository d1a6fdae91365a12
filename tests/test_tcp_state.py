from dataclasses import dataclass

import pytest

from spongetcp.byte_stream import ByteStream
from spongetcp.tcp_header import TCPHeader
from spongetcp.tcp_receiver import TCPReceiver
from spongetcp.tcp_segment import TCPSegment
from spongetcp.tcp_state import ReceiverSummary, SenderSummary, State, TCPState


@dataclass
class FakeSender:
    stream: ByteStream
    next_seqno: int = 0
    in_flight: int = 0

    def stream_in(self):
        return self.stream

    def next_seqno_absolute(self):
        return self.next_seqno

    def bytes_in_flight(self):
        return self.in_flight


def _finished_stream(data=b"abc"):
    stream = ByteStream(100)
    stream.write(data)
    stream.end_input()
    stream.read(len(data))
    return stream


def test_receiver_summary_progression():
    receiver = TCPReceiver(100)
    assert TCPState.receiver_summary(receiver) == ReceiverSummary.LISTEN
    receiver.segment_received(TCPSegment(TCPHeader(seqno=9, syn=True)))
    assert TCPState.receiver_summary(receiver) == ReceiverSummary.SYN_RECV
    receiver.segment_received(TCPSegment(TCPHeader(seqno=10, fin=True)))
    assert TCPState.receiver_summary(receiver) == ReceiverSummary.FIN_RECV
    receiver.stream_out().set_error()
    assert TCPState.receiver_summary(receiver) == ReceiverSummary.ERROR


def test_sender_summary_cases():
    open_stream = ByteStream(100)
    assert TCPState.sender_summary(FakeSender(open_stream)) == SenderSummary.CLOSED
    assert TCPState.sender_summary(FakeSender(open_stream, 1, 1)) == SenderSummary.SYN_SENT
    assert TCPState.sender_summary(FakeSender(open_stream, 1, 0)) == SenderSummary.SYN_ACKED

    done = _finished_stream(b"abc")
    assert TCPState.sender_summary(FakeSender(done, len(b"abc") + 1, 0)) == SenderSummary.SYN_ACKED
    assert TCPState.sender_summary(FakeSender(done, len(b"abc") + 2, 1)) == SenderSummary.FIN_SENT
    assert TCPState.sender_summary(FakeSender(done, len(b"abc") + 2, 0)) == SenderSummary.FIN_ACKED

    done.set_error()
    assert TCPState.sender_summary(FakeSender(done, len(b"abc") + 2, 0)) == SenderSummary.ERROR


def test_established_name():
    assert TCPState.from_state(State.ESTABLISHED).name() == (
        "sender=`stream ongoing`, "
        "receiver=`SYN received (ackno exists), and input to stream hasn't ended`, "
        "active=1, linger_after_streams_finish=1"
    )


def test_reset_name():
    assert TCPState.from_state(State.RESET).name() == (
        "sender=`error (connection was reset)`, receiver=`error (connection was reset)`, "
        "active=0, linger_after_streams_finish=0"
    )


def test_official_states_are_distinct():
    states = [TCPState.from_state(s) for s in State]
    assert len(set(states)) == len(list(State))


def test_closing_and_last_ack_differ_only_by_linger():
    closing = TCPState.from_state(State.CLOSING)
    last_ack = TCPState.from_state(State.LAST_ACK)
    assert closing != last_ack
    assert closing.sender == last_ack.sender
    assert closing.receiver == last_ack.receiver


def test_compare_with_state_name():
    assert TCPState.from_state(State.TIME_WAIT) == State.TIME_WAIT
    assert TCPState.from_state(State.TIME_WAIT) != State.CLOSED


def test_from_parts_inactive_means_no_linger():
    receiver = TCPReceiver(100)
    receiver.segment_received(TCPSegment(TCPHeader(seqno=0, syn=True, fin=True)))
    sender = FakeSender(_finished_stream(b"xy"), len(b"xy") + 2, 0)
    state = TCPState.from_parts(sender, receiver, False, True)
    assert state == State.CLOSED
    assert not state.linger_after_streams_finish


def test_from_parts_active_lingering_is_time_wait():
    receiver = TCPReceiver(100)
    receiver.segment_received(TCPSegment(TCPHeader(seqno=0, syn=True, fin=True)))
    sender = FakeSender(_finished_stream(b"xy"), len(b"xy") + 2, 0)
    assert TCPState.from_parts(sender, receiver, True, True) == State.TIME_WAIT


@pytest.mark.parametrize("state", list(State))
def test_from_state_round_trips_through_equality(state):
    assert TCPState.from_state(state) == state