import pytest

from dabradio.crc24q import crc24q_check, crc24q_hash, crc24q_sign


def test_check_value():
    assert crc24q_hash(b"123456789") == 0xCDE703


def test_empty_is_zero():
    assert crc24q_hash(b"") == 0


def test_single_byte_one_is_polynomial():
    assert crc24q_hash(b"\x01") == 0x1864CFB & 0xFFFFFF


@pytest.mark.parametrize("data", [b"", b"\x00", b"hello", bytes(range(256))])
def test_result_is_24_bit(data):
    assert 0 <= crc24q_hash(data) <= 0xFFFFFF


@pytest.mark.parametrize("data", [b"", b"a", b"RTCM message", bytes(range(100))])
def test_sign_then_check(data):
    signed = crc24q_sign(data)
    assert len(signed) == len(data) + 3
    assert signed[: len(data)] == data
    assert crc24q_check(signed)


def test_signed_message_hashes_to_zero():
    assert crc24q_hash(crc24q_sign(b"payload")) == 0


def test_check_detects_single_bit_error():
    signed = bytearray(crc24q_sign(b"some data to protect"))
    for index in range(len(signed)):
        for bit in range(8):
            corrupted = bytearray(signed)
            corrupted[index] ^= 1 << bit
            assert not crc24q_check(corrupted)


def test_check_too_short_raises():
    with pytest.raises(ValueError):
        crc24q_check(b"\x00\x00")


def test_accepts_bytearray():
    assert crc24q_hash(bytearray(b"123456789")) == crc24q_hash(b"123456789")