"""Base64 encoding and decoding with standard, URL-safe, PEM and MIME variants."""

from __future__ import annotations

_STANDARD_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ" "abcdefghijklmnopqrstuvwxyz" "0123456789" "+/"
)
_URL_ALPHABET = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ" "abcdefghijklmnopqrstuvwxyz" "0123456789" "-_"
)

# Decoding is liberal: both alphabets are accepted at the same time.
_CHAR_VALUES = {char: value for value, char in enumerate(_STANDARD_ALPHABET)}
_CHAR_VALUES.update({"-": 62, "_": 63})

_PADDING_CHARS = "=."

_PEM_LINE_LENGTH = 64
_MIME_LINE_LENGTH = 76


def _as_bytes(data: bytes | bytearray | memoryview | str) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _char_value(char: str) -> int:
    try:
        return _CHAR_VALUES[char]
    except KeyError:
        raise ValueError("Input is not valid base64-encoded data.") from None


def _insert_linebreaks(text: str, distance: int) -> str:
    return "\n".join(text[start:start + distance] for start in range(0, len(text), distance))


def base64_encode(data: bytes | bytearray | memoryview | str, url: bool = False) -> str:
    """Encode data as base64; the URL variant uses '-', '_' and '.' padding."""
    raw = _as_bytes(data)
    alphabet = _URL_ALPHABET if url else _STANDARD_ALPHABET
    trailing = "." if url else "="
    out: list[str] = []
    for start in range(0, len(raw), 3):
        chunk = raw[start:start + 3]
        first = chunk[0]
        out.append(alphabet[(first & 0xFC) >> 2])
        if len(chunk) == 1:
            out.append(alphabet[(first & 0x03) << 4])
            out.append(trailing * 2)
            continue
        second = chunk[1]
        out.append(alphabet[((first & 0x03) << 4) + ((second & 0xF0) >> 4)])
        if len(chunk) == 2:
            out.append(alphabet[(second & 0x0F) << 2])
            out.append(trailing)
            continue
        third = chunk[2]
        out.append(alphabet[((second & 0x0F) << 2) + ((third & 0xC0) >> 6)])
        out.append(alphabet[third & 0x3F])
    return "".join(out)


def base64_encode_pem(data: bytes | bytearray | memoryview | str) -> str:
    """Encode data as base64 with a line break every 64 characters."""
    return _insert_linebreaks(base64_encode(data, False), _PEM_LINE_LENGTH)


def base64_encode_mime(data: bytes | bytearray | memoryview | str) -> str:
    """Encode data as base64 with a line break every 76 characters."""
    return _insert_linebreaks(base64_encode(data, False), _MIME_LINE_LENGTH)


def base64_decode(encoded: str | bytes | bytearray, remove_linebreaks: bool = False) -> bytes:
    """Decode base64 text in either alphabet; padding in the last chunk is optional.

    Raises ValueError when the input is not valid base64.
    """
    if isinstance(encoded, (bytes, bytearray)):
        encoded = bytes(encoded).decode("latin-1")
    if not encoded:
        return b""
    if remove_linebreaks:
        encoded = encoded.replace("\n", "")

    out = bytearray()
    for start in range(0, len(encoded), 4):
        chunk = encoded[start:start + 4]
        if len(chunk) < 2:
            raise ValueError("Input is not valid base64-encoded data.")
        value_1 = _char_value(chunk[1])
        out.append((_char_value(chunk[0]) << 2) + ((value_1 & 0x30) >> 4))
        if len(chunk) > 2 and chunk[2] not in _PADDING_CHARS:
            value_2 = _char_value(chunk[2])
            out.append(((value_1 & 0x0F) << 4) + ((value_2 & 0x3C) >> 2))
            if len(chunk) > 3 and chunk[3] not in _PADDING_CHARS:
                out.append(((value_2 & 0x03) << 6) + _char_value(chunk[3]))
    return bytes(out)