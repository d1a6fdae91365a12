import pytest

from spongetcp.tcp_header import TCPHeader
from spongetcp.tcp_receiver import TCPReceiver, unwrap, wrap
from spongetcp.tcp_segment import TCPSegment

ISNS = [0, 12345, 2**32 - 2]


def _seg(seqno, payload=b"", *, syn=False, fin=False):
    return TCPSegment(TCPHeader(seqno=seqno, syn=syn, fin=fin), payload)


@pytest.mark.parametrize("isn", ISNS)
@pytest.mark.parametrize("n", [0, 1, 2**31, 2**32 - 1, 2**32, 3 * 2**32 + 17])
def test_unwrap_inverts_wrap(isn, n):
    assert unwrap(wrap(n, isn), isn, n) == n


@pytest.mark.parametrize("isn", ISNS)
def test_wrap_is_periodic(isn):
    assert wrap(2**32, isn) == isn
    assert wrap(0, isn) == isn


def test_unwrap_never_negative():
    assert unwrap(wrap(2**32 - 1, 0), 0, 0) == 2**32 - 1


def test_unwrap_picks_closest_to_checkpoint():
    isn = 100
    n = 5 * 2**32 + 9
    assert unwrap(wrap(n, isn), isn, n + 1000) == n
    assert unwrap(wrap(n, isn), isn, n - 1000) == n


def test_no_ackno_before_syn():
    receiver = TCPReceiver(4000)
    assert receiver.ackno() is None
    assert receiver.window_size() == 4000


def test_data_before_syn_is_ignored():
    receiver = TCPReceiver(4000)
    receiver.segment_received(_seg(5, b"hello"))
    assert receiver.ackno() is None
    assert receiver.stream_out().buffer_size() == 0


@pytest.mark.parametrize("isn", ISNS)
def test_syn_sets_ackno(isn):
    receiver = TCPReceiver(4000)
    receiver.segment_received(_seg(isn, syn=True))
    assert receiver.ackno() == wrap(1, isn)


@pytest.mark.parametrize("isn", ISNS)
def test_in_order_data(isn):
    receiver = TCPReceiver(4000)
    receiver.segment_received(_seg(isn, syn=True))
    receiver.segment_received(_seg(wrap(1, isn), b"abcd"))
    assert receiver.ackno() == wrap(1 + len(b"abcd"), isn)
    assert receiver.window_size() == 4000 - len(b"abcd")
    assert receiver.stream_out().read(10) == b"abcd"
    assert receiver.window_size() == 4000


@pytest.mark.parametrize("isn", ISNS)
def test_out_of_order_data(isn):
    receiver = TCPReceiver(4000)
    receiver.segment_received(_seg(isn, syn=True))
    receiver.segment_received(_seg(wrap(3, isn), b"cd"))
    assert receiver.unassembled_bytes() == 2
    assert receiver.ackno() == wrap(1, isn)
    receiver.segment_received(_seg(wrap(1, isn), b"ab"))
    assert receiver.unassembled_bytes() == 0
    assert receiver.ackno() == wrap(5, isn)
    assert receiver.stream_out().read(10) == b"abcd"


def test_payload_on_syn_segment():
    isn = 77
    receiver = TCPReceiver(4000)
    receiver.segment_received(_seg(isn, b"ab", syn=True))
    assert receiver.stream_out().read(10) == b"ab"
    assert receiver.ackno() == wrap(3, isn)


@pytest.mark.parametrize("isn", ISNS)
def test_fin_counts_in_ackno(isn):
    receiver = TCPReceiver(4000)
    receiver.segment_received(_seg(isn, syn=True))
    receiver.segment_received(_seg(wrap(1, isn), b"hi", fin=True))
    assert receiver.is_fin()
    assert receiver.stream_out().input_ended()
    assert receiver.ackno() == wrap(len(b"hi") + 2, isn)


def test_syn_and_fin_together():
    isn = 1000
    receiver = TCPReceiver(4000)
    receiver.segment_received(_seg(isn, syn=True, fin=True))
    assert receiver.ackno() == wrap(2, isn)
    assert receiver.stream_out().eof()


def test_fin_waits_for_missing_bytes():
    isn = 0
    receiver = TCPReceiver(4000)
    receiver.segment_received(_seg(isn, syn=True))
    receiver.segment_received(_seg(wrap(3, isn), b"cd", fin=True))
    assert not receiver.stream_out().input_ended()
    assert receiver.ackno() == wrap(1, isn)
    receiver.segment_received(_seg(wrap(1, isn), b"ab"))
    assert receiver.stream_out().input_ended()
    assert receiver.ackno() == wrap(6, isn)