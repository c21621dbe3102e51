"""Reed-Solomon error correction for MSC packet-mode data (EN 300 401, 5.3.5)."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from .datapacket import DataPacket
from .reedsolomon import ReedSolomon, ReedSolomonError

_log = logging.getLogger(__name__)

FEC_DATA_SIZE = 2256
FEC_DATA_COLUMNS = 239
FEC_COLUMNS = 16
FEC_ROWS = 12
FEC_PAD = 51
FEC_PKT_HDR_LENGTH = 2
FEC_PKT_BYTES = 22
FEC_MAX_FEC_PKT = 8


class DataFec:
    """Collects data and FEC packets and corrects the data once a group is complete."""

    def __init__(self):
        self._codec = ReedSolomon(8, 0x11D, 0, 1, FEC_COLUMNS, 0)
        self._packets: list[DataPacket] = []

    def __iter__(self) -> Iterator[DataPacket]:
        return iter(self._packets)

    def __len__(self) -> int:
        return len(self._packets)

    def clear(self) -> None:
        self._packets.clear()

    def packet_input(self, packet: DataPacket) -> bool:
        """Add a packet; returns True when the collected packets are ready.

        Processing happens when the last FEC packet of a group arrives. It
        returns False if more data arrived than a group can hold, in which
        case the collected packets are dropped.
        """
        self._packets.append(packet)
        if packet.is_fec and packet.fec_count == FEC_MAX_FEC_PKT:
            return self._process()
        return False

    def _mark_handled(self) -> None:
        for packet in self._packets:
            packet.fec_handled = True

    def _process(self) -> bool:
        table = [bytearray(FEC_DATA_COLUMNS + FEC_COLUMNS) for _ in range(FEC_ROWS)]
        data_bytes = 0
        for packet in self._packets:
            if packet.is_fec:
                number = packet.fec_count
                if number > FEC_MAX_FEC_PKT:
                    continue
                offset = number * FEC_PKT_BYTES
                payload = packet.data[FEC_PKT_HDR_LENGTH:FEC_PKT_HDR_LENGTH + FEC_PKT_BYTES]
                for index, byte in enumerate(payload, start=offset):
                    column = index // FEC_ROWS
                    if column >= FEC_COLUMNS:
                        break
                    table[index % FEC_ROWS][FEC_DATA_COLUMNS + column] = byte
                continue
            if data_bytes + len(packet) > FEC_DATA_SIZE:
                self.clear()
                return False
            for byte in packet.data:
                table[data_bytes % FEC_ROWS][FEC_PAD + data_bytes // FEC_ROWS] = byte
                data_bytes += 1

        if data_bytes != FEC_DATA_SIZE:
            _log.info("unable to run FEC - did not receive all packets")
            self._mark_handled()
            return True

        for row_index, row in enumerate(table):
            try:
                corrected, positions = self._codec.decode(row)
            except ReedSolomonError:
                _log.info("row %d holds uncorrectable errors", row_index)
                continue
            if positions:
                self._apply(row_index, set(positions), corrected)

        self._mark_handled()
        return True

    def _apply(self, row_index: int, columns: set[int], corrected: bytes) -> None:
        position = 0
        for packet in self._packets:
            if packet.is_fec:
                continue
            for offset in range(len(packet)):
                column = FEC_PAD + position // FEC_ROWS
                if position % FEC_ROWS == row_index and column in columns:
                    byte = corrected[column]
                    if packet.data[offset] != byte:
                        packet.fec_bytes += 1
                        packet.data[offset] = byte
                position += 1