"""CRC-24Q checksum (polynomial 0x1864CFB, seed 0) as used by RTCM 3."""

from __future__ import annotations

_CRC_POLY = 0x1864CFB
_CRC_SEED = 0


def _build_table() -> tuple[int, ...]:
    table = [0] * 256
    table[0] = _CRC_SEED
    table[1] = h = _CRC_POLY
    i = 2
    while i < 256:
        h <<= 1
        if h & 0x1000000:
            h ^= _CRC_POLY
        for j in range(i):
            table[i + j] = table[j] ^ h
        i *= 2
    return tuple(table)


_TABLE = _build_table()


def crc24q_hash(data: bytes | bytearray | memoryview) -> int:
    """Return the 24-bit CRC-24Q of data."""
    crc = 0
    for byte in bytes(data):
        crc = ((crc << 8) ^ _TABLE[byte ^ ((crc >> 16) & 0xFF)]) & 0xFFFFFF
    return crc


def crc24q_sign(data: bytes | bytearray | memoryview) -> bytes:
    """Return data followed by its CRC-24Q, most significant byte first."""
    raw = bytes(data)
    return raw + crc24q_hash(raw).to_bytes(3, "big")


def crc24q_check(data: bytes | bytearray | memoryview) -> bool:
    """Check that the last three bytes of data hold the CRC-24Q of the rest."""
    raw = bytes(data)
    if len(raw) < 3:
        raise ValueError("data must hold at least the three CRC bytes")
    return crc24q_hash(raw[:-3]).to_bytes(3, "big") == raw[-3:]