"""MSC packet-mode data packets (EN 300 401, clause 5.3.2)."""

from __future__ import annotations

from .checksums import crc_ccitt_check

HEADER_LENGTH = 3
FEC_PACKET_ADDRESS = 0x3FE
PADDING_ADDRESS = 0x000


def _hexdump(data: bytes, width: int = 16) -> str:
    lines = []
    for offset in range(0, len(data), width):
        chunk = data[offset:offset + width]
        hex_part = " ".join(f"{byte:02x}" for byte in chunk)
        text = "".join(chr(byte) if 0x20 <= byte < 0x7F else "." for byte in chunk)
        lines.append(f"{offset:04x}: {hex_part:<{width * 3 - 1}} |{text}|")
    return "\n".join(lines)


class DataPacket:
    """One packet of a packet-mode sub-channel together with its FEC state."""

    def __init__(self, seq: int, data):
        buffer = bytearray(data)
        if len(buffer) < HEADER_LENGTH:
            raise ValueError(f"a data packet holds at least {HEADER_LENGTH} header bytes")
        self.seq = seq
        self.data = buffer
        self.fec_handled = False
        self.fec_bytes = 0

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        header = (
            f"Length {len(self.data)} Seq {self.seq}"
            f" CRC Valid {str(self.crc_correct).lower()}"
            f" Continuity {self.continuity} FEC Handled {int(self.fec_handled)}"
            f" First {str(self.is_first).lower()}"
            f" Last {str(self.is_last).lower()}"
            f" Only {str(self.is_only).lower()}"
        )
        return header + "\n" + _hexdump(bytes(self.data))

    @property
    def address(self) -> int:
        """The 10-bit packet address."""
        return ((self.data[0] & 0x3) << 8) | self.data[1]

    @property
    def is_fec(self) -> bool:
        """True for packets carrying Reed-Solomon parity (address 1022)."""
        return self.address == FEC_PACKET_ADDRESS

    @property
    def is_padding(self) -> bool:
        return self.address == PADDING_ADDRESS

    @property
    def continuity(self) -> int:
        return (self.data[0] >> 4) & 0x3

    @property
    def length(self) -> int:
        """Packet length in bytes as announced by the header."""
        return (((self.data[0] >> 6) & 0x3) + 1) * 24

    @property
    def data_len(self) -> int:
        """Useful data length field."""
        return self.data[2] & 0x7F

    @property
    def first_last(self) -> int:
        return (self.data[0] >> 2) & 0x3

    @property
    def is_first(self) -> bool:
        return self.first_last == 0x2

    @property
    def is_last(self) -> bool:
        return self.first_last == 0x1

    @property
    def is_only(self) -> bool:
        return self.first_last == 0x3

    @property
    def fec_count(self) -> int:
        """Counter of a FEC packet within its group."""
        return (self.data[0] >> 2) & 0xF

    @property
    def crc_correct(self) -> bool:
        return crc_ccitt_check(self.data)