"""CRC-CCITT and Fire code checks used by DAB and DAB+ frames."""

from __future__ import annotations

_CCITT_POLY = 0x1021
_FIRECODE_POLY = 0x782F


def _build_msb_table(poly: int) -> tuple[int, ...]:
    table = []
    for byte in range(256):
        crc = byte << 8
        for _ in range(8):
            crc = ((crc << 1) ^ poly) if crc & 0x8000 else (crc << 1)
            crc &= 0xFFFF
        table.append(crc)
    return tuple(table)


_CRC_CCITT_TABLE = _build_msb_table(_CCITT_POLY)
_FIRECODE_TABLE = _build_msb_table(_FIRECODE_POLY)

_FIRECODE_SPAN = 11


def crc_ccitt_check(data: bytes | bytearray | memoryview) -> bool:
    """Check a block whose last two bytes hold its inverted CRC-CCITT.

    Blocks shorter than two bytes never pass.
    """
    raw = bytes(data)
    if len(raw) < 2:
        return False
    crc = 0xFFFF
    for byte in raw[:-2]:
        crc = ((crc << 8) ^ _CRC_CCITT_TABLE[(crc >> 8) ^ byte]) & 0xFFFF
    stored = int.from_bytes(raw[-2:], "big")
    return crc == stored ^ 0xFFFF


def check_firecode(frame: bytes | bytearray | memoryview) -> bool:
    """Check the DAB+ superframe Fire code held in the first two bytes of frame."""
    raw = bytes(frame)
    if len(raw) < _FIRECODE_SPAN:
        raise ValueError(f"frame must hold at least {_FIRECODE_SPAN} bytes")
    state = (raw[2] << 8) | raw[3]
    for byte in raw[4:_FIRECODE_SPAN] + raw[0:2]:
        table_value = _FIRECODE_TABLE[state >> 8]
        state = ((table_value & 0x00FF) ^ byte) | ((table_value ^ (state << 8)) & 0xFF00)
    return state == 0