import pytest

from spongetcp.ipv4_datagram import IPv4Datagram
from spongetcp.ipv4_header import IPv4Header
from spongetcp.wire import ParseError, ParseResult, internet_checksum


def _datagram(payload):
    header = IPv4Header(src=0x0A000001, dst=0x0A000002, length=20 + len(payload), proto=17)
    return IPv4Datagram(header, payload)


def test_round_trip():
    dgram = _datagram(b"hello, world")
    raw = dgram.serialize()
    parsed = IPv4Datagram.parse(raw)
    assert parsed.payload == b"hello, world"
    assert parsed.header.src == dgram.header.src
    assert parsed.header.proto == 17
    assert parsed.serialize() == raw


def test_header_checksum_is_valid():
    raw = _datagram(b"abc").serialize()
    assert internet_checksum(raw[:20]) == 0


def test_serialize_does_not_change_header():
    dgram = _datagram(b"abc")
    dgram.serialize()
    assert dgram.header.cksum == 0


def test_serialize_rejects_wrong_payload_size():
    dgram = _datagram(b"abc")
    dgram.payload = b"abcd"
    with pytest.raises(ValueError):
        dgram.serialize()


def test_parse_rejects_corruption():
    raw = bytearray(_datagram(b"abc").serialize())
    raw[8] ^= 0x01
    with pytest.raises(ParseError) as info:
        IPv4Datagram.parse(bytes(raw))
    assert info.value.result is ParseResult.BAD_CHECKSUM


def test_parse_rejects_truncation():
    raw = _datagram(b"abcdef").serialize()
    with pytest.raises(ParseError) as info:
        IPv4Datagram.parse(raw[:-2])
    assert info.value.result is ParseResult.TRUNCATED_PACKET