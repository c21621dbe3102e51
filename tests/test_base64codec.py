import base64

import pytest

from dabradio.base64codec import (
    base64_decode,
    base64_encode,
    base64_encode_mime,
    base64_encode_pem,
)

SAMPLES = [b"", b"f", b"fo", b"foo", b"foob", b"fooba", b"foobar", bytes(range(256)), b"\xff\xfe\xfd"]


@pytest.mark.parametrize("data", SAMPLES)
def test_encode_matches_standard_library(data):
    assert base64_encode(data) == base64.b64encode(data).decode("ascii")


@pytest.mark.parametrize("data", SAMPLES)
def test_url_encode_uses_url_alphabet_and_dot_padding(data):
    expected = base64.urlsafe_b64encode(data).decode("ascii").replace("=", ".")
    assert base64_encode(data, url=True) == expected


def test_known_vector():
    assert base64_encode(b"foobar") == "Zm9vYmFy"
    assert base64_encode("f") == "Zg=="


@pytest.mark.parametrize("data", SAMPLES)
@pytest.mark.parametrize("url", [False, True])
def test_round_trip(data, url):
    assert base64_decode(base64_encode(data, url)) == data


def test_decode_without_padding():
    assert base64_decode("Zm9vYg") == b"foob"
    assert base64_decode("Zg") == b"f"


def test_decode_accepts_mixed_alphabets():
    data = bytes([0xFB, 0xFF, 0xBF])
    standard = base64_encode(data)
    url = base64_encode(data, url=True)
    assert standard != url
    assert base64_decode(standard) == data
    assert base64_decode(url) == data


def test_decode_bytes_input():
    assert base64_decode(b"Zm9vYmFy") == b"foobar"


def test_decode_empty():
    assert base64_decode("") == b""


def test_decode_invalid_character_raises():
    with pytest.raises(ValueError):
        base64_decode("Zm9v*mFy")


def test_decode_single_trailing_character_raises():
    with pytest.raises(ValueError):
        base64_decode("Zm9vY")


def test_decode_linebreaks_removed():
    data = bytes(range(200))
    assert base64_decode(base64_encode_mime(data), remove_linebreaks=True) == data


def test_decode_linebreaks_rejected_without_flag():
    with pytest.raises(ValueError):
        base64_decode(base64_encode_pem(bytes(range(100))))


def test_pem_line_lengths():
    data = bytes(range(256)) * 2
    lines = base64_encode_pem(data).split("\n")
    assert all(len(line) == 64 for line in lines[:-1])
    assert 0 < len(lines[-1]) <= 64
    assert "".join(lines) == base64_encode(data)


def test_mime_line_lengths():
    data = bytes(range(256)) * 2
    lines = base64_encode_mime(data).split("\n")
    assert all(len(line) == 76 for line in lines[:-1])
    assert "".join(lines) == base64_encode(data)


def test_no_trailing_linebreak_at_exact_multiple():
    data = bytes(48)  # encodes to exactly 64 characters
    assert base64_encode_pem(data) == base64_encode(data)


def test_pem_empty():
    assert base64_encode_pem(b"") == ""