"""Decoder for DAB+ (HE-AAC v2) stream audio components."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from .checksums import check_firecode, crc_ccitt_check
from .componentdecoder import ServiceComponentDecoder
from .reedsolomon import SuperframeDecoder

_log = logging.getLogger(__name__)

FRAMES_PER_SUPERFRAME = 5
SUPERFRAME_BYTES_PER_INDEX = 110
AAC_AUDIO_OBJECT_TYPE = 63

_FIRECODE_SPAN = 11
_DATA_STREAM_ELEMENT = 0x04
_AU_CRC_LENGTH = 2

# First access unit start by number of access units per superframe.
_FIRST_AU_START = {2: 5, 3: 6, 4: 8, 6: 11}

PadDataCallback = Callable[[bytes], None]
AudioDataCallback = Callable[[bytes, int, int, int, bool, bool], None]


def _register(callbacks: list, callback) -> Callable[[], None]:
    callbacks.append(callback)

    def unregister() -> None:
        if callback in callbacks:
            callbacks.remove(callback)

    return unregister


@dataclass
class _SuperFrame:
    data: bytearray = field(default_factory=bytearray)
    num_aus: int = 0
    au_starts: list[int] = field(default_factory=list)
    au_lengths: list[int] = field(default_factory=list)
    sbr_used: bool = False
    ps_used: bool = False
    sampling_rate: int = -1
    channels: int = -1


class DabPlusServiceComponentDecoder(ServiceComponentDecoder):
    """Assembles DAB+ superframes and splits them into access units.

    Incoming data is synchronised on the superframe Fire code and whole
    logical frames are queued; ``process_pending`` assembles five frames
    into a superframe, corrects it with Reed-Solomon, hands PAD found in
    data stream elements to the PAD callbacks and the concatenated access
    units to the audio callbacks.
    """

    def __init__(self):
        super().__init__()
        self._superframe_size = 0
        self._pending: deque[bytes] = deque()
        self._unsync = bytearray()
        self._unsync_sync = False
        self._unsync_frame_count = 0
        self._current = _SuperFrame()
        self._is_sync = False
        self._frame_count = 0
        self._rs_decoder = SuperframeDecoder()
        self._pad_callbacks: list[PadDataCallback] = []
        self._audio_callbacks: list[AudioDataCallback] = []

    @property
    def superframe_size(self) -> int:
        """Audio superframe size in bytes, without Reed-Solomon parity."""
        return self._superframe_size

    @property
    def pending(self) -> int:
        """Number of synchronised frames waiting to be processed."""
        return len(self._pending)

    def _bitrate_changed(self) -> None:
        self._superframe_size = (self._subchannel_bitrate // 8) * SUPERFRAME_BYTES_PER_INDEX
        _log.info(
            "superframe size %d for subchannel bitrate %d",
            self._superframe_size,
            self._subchannel_bitrate,
        )

    def register_pad_data_callback(self, callback: PadDataCallback) -> Callable[[], None]:
        """Register a callback for PAD bytes; returns a function that unregisters it."""
        return _register(self._pad_callbacks, callback)

    def register_audio_data_callback(self, callback: AudioDataCallback) -> Callable[[], None]:
        """Register a callback for the access units of a superframe.

        The callback receives the access units, the audio object type (63),
        the number of channels, the sampling rate, and the SBR and PS flags.
        Returns a function that unregisters it.
        """
        return _register(self._audio_callbacks, callback)

    def flush_buffered_data(self) -> None:
        """Drop the frames waiting to be processed."""
        self._pending.clear()

    def component_data_input(self, frame_data) -> None:
        """Consume subchannel data; ignored until the bitrate is known."""
        if self._frame_size > 0:
            self._synchronize(bytes(frame_data))

    def _synchronize(self, chunk: bytes) -> None:
        data = bytes(self._unsync) + chunk
        self._unsync.clear()
        size = self._frame_size
        position = 0
        while position + size < len(data):
            if self._unsync_sync:
                while position + size < len(data):
                    self._pending.append(data[position:position + size])
                    position += size
                    self._unsync_frame_count += 1
                    if self._unsync_frame_count == FRAMES_PER_SUPERFRAME:
                        self._unsync_sync = False
                        self._unsync_frame_count = 0
                        break
                continue

            candidate = data[position:position + size]
            if candidate[0] == 0x00 and candidate[1] == 0x00:
                _log.debug("skipping zero fire code at offset %d", position)
            elif len(candidate) >= _FIRECODE_SPAN and check_firecode(candidate):
                self._pending.append(candidate)
                self._unsync_frame_count += 1
                self._unsync_sync = True
                position += size
                continue
            position += 1
        self._unsync.extend(data[position:])

    def process_pending(self) -> int:
        """Process every queued frame; returns how many were processed.

        Nothing is processed while the superframe size is unknown.
        """
        if self._superframe_size == 0:
            return 0
        count = 0
        while self._pending:
            self.process_frame(self._pending.popleft())
            count += 1
        return count

    def _start_superframe(self, raw: bytes) -> bool:
        current = _SuperFrame()
        header = raw[2]
        dac_rate = bool(header & 0x40)
        sbr = bool(header & 0x20)
        stereo = bool(header & 0x10)
        ps = bool(header & 0x08)

        current.sbr_used = sbr
        current.ps_used = ps
        current.channels = 2 if stereo else 1
        current.sampling_rate = 48000 if dac_rate else 32000
        current.num_aus = {(False, True): 2, (True, True): 3, (False, False): 4, (True, False): 6}[
            (dac_rate, sbr)
        ]
        current.au_starts.append(_FIRST_AU_START[current.num_aus])

        position = 3
        for index in range(1, current.num_aus):
            if index % 2:
                au_start = (raw[position] << 4) | (raw[position + 1] >> 4)
                position += 1
            else:
                au_start = ((raw[position] & 0x0F) << 8) | raw[position + 1]
                position += 2
            if au_start > self._superframe_size or au_start <= current.au_starts[-1]:
                _log.info(
                    "bad AU start %d (AU %d of %d, superframe size %d)",
                    au_start,
                    index,
                    current.num_aus,
                    self._superframe_size,
                )
                return False
            current.au_starts.append(au_start)

        current.au_starts.append(self._superframe_size)
        current.au_lengths = [
            end - start for start, end in zip(current.au_starts, current.au_starts[1:])
        ]
        current.data.extend(raw)
        self._current = current
        return True

    def process_frame(self, frame) -> bool:
        """Feed one logical frame to superframe assembly.

        Returns True when it completed a superframe whose access units were
        handed to the audio callbacks. Raises ValueError for a frame that
        should start a superframe but is shorter than the Fire code span.
        """
        if self._superframe_size == 0:
            return False
        raw = bytes(frame)

        if self._frame_count == 0 and check_firecode(raw):
            if self._start_superframe(raw):
                self._frame_count += 1
                self._is_sync = True
            return False

        if self._frame_count > FRAMES_PER_SUPERFRAME:
            _log.info("superframe damaged")
            self._is_sync = False
            self._frame_count = 0

        if not self._is_sync:
            return False

        self._current.data.extend(raw)
        self._frame_count += 1
        if self._frame_count < FRAMES_PER_SUPERFRAME:
            return False

        self._frame_count = 0
        self._is_sync = False
        return self._emit_superframe()

    def _emit_superframe(self) -> bool:
        current = self._current
        corrected, _, _ = self._rs_decoder.decode(current.data)
        if len(corrected) < self._superframe_size:
            return False

        access_units = bytearray()
        for index, (start, length) in enumerate(zip(current.au_starts, current.au_lengths)):
            if not crc_ccitt_check(corrected[start:start + length]):
                _log.info(
                    "superframe AU[%d] CRC failed, bitrate %d", index, self._subchannel_bitrate
                )
                continue
            if (corrected[start] >> 5) & 0x07 == _DATA_STREAM_ELEMENT:
                pad_start = 2
                pad_length = corrected[start + 1]
                if pad_length == 0xFF:
                    pad_length += corrected[start + 2]
                    pad_start += 1
                pad = corrected[start + pad_start:start + pad_start + pad_length]
                for callback in list(self._pad_callbacks):
                    callback(pad)
                start += pad_start + pad_length
                length -= pad_start + pad_length
            access_units.extend(corrected[start:start + length - _AU_CRC_LENGTH])

        payload = bytes(access_units)
        for callback in list(self._audio_callbacks):
            callback(
                payload,
                AAC_AUDIO_OBJECT_TYPE,
                current.channels,
                current.sampling_rate,
                current.sbr_used,
                current.ps_used,
            )
        return True