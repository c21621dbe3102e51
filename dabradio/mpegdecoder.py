"""Decoder for DAB (MPEG-1/2 Audio Layer II) stream audio components."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable

from .componentdecoder import ServiceComponentDecoder

_log = logging.getLogger(__name__)

XPAD_SIZE = (4, 6, 8, 12, 16, 24, 32, 48)

M1L2_BITRATES = (0, 32, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320, 384)
M1_SAMPLING_FREQUENCIES = (44100, 48000, 32000)
CHANNELS_BY_MODE = (2, 2, 2, 1)

_HEADER_LENGTH = 4
_F_PAD_LENGTH = 2
_SHORT_XPAD_LENGTH = 4
_MAX_CONTENT_INDICATORS = 4

PadDataCallback = Callable[[bytes], None]
AudioDataCallback = Callable[[bytes, int, int, int, bool, bool], None]


def _register(callbacks: list, callback) -> Callable[[], None]:
    callbacks.append(callback)

    def unregister() -> None:
        if callback in callbacks:
            callbacks.remove(callback)

    return unregister


class MpegServiceComponentDecoder(ServiceComponentDecoder):
    """Splits subchannel data into Layer II frames and extracts their PAD.

    Incoming data is synchronised on the MPEG sync word and whole frames
    are queued; ``process_pending`` decodes the queued frames, handing each
    frame to the audio callbacks and any X-PAD found in it to the PAD
    callbacks.
    """

    def __init__(self):
        super().__init__()
        self._pending: deque[bytes] = deque()
        self._unsync = bytearray()
        self._frame_size_adjusted = False
        self._no_ci_last_length = 0
        self._pad_callbacks: list[PadDataCallback] = []
        self._audio_callbacks: list[AudioDataCallback] = []

    @property
    def pending(self) -> int:
        """Number of synchronised frames waiting to be processed."""
        return len(self._pending)

    def register_pad_data_callback(self, callback: PadDataCallback) -> Callable[[], None]:
        """Register a callback for PAD bytes; returns a function that unregisters it."""
        return _register(self._pad_callbacks, callback)

    def register_audio_data_callback(self, callback: AudioDataCallback) -> Callable[[], None]:
        """Register a callback for audio frames; returns a function that unregisters it.

        The callback receives the frame, the audio object type (0), the
        number of channels, the sampling rate, and the SBR and PS flags.
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
        position = 0
        while position + self._frame_size < len(data):
            if data[position] == 0xFF and data[position + 1] & 0xF0 == 0xF0:
                # ID bit cleared: 24 kHz sampling, frames twice as long.
                if not self._frame_size_adjusted and data[position + 1] & 0x08 != 0x08:
                    self._frame_size *= 2
                    self._frame_size_adjusted = True
                if position + self._frame_size < len(data):
                    self._pending.append(data[position:position + self._frame_size])
                    position += self._frame_size
                    continue
                break
            position += 1
        self._unsync.extend(data[position:])

    def process_pending(self) -> int:
        """Process every queued frame; returns how many were processed."""
        count = 0
        while self._pending:
            self.process_frame(self._pending.popleft())
            count += 1
        return count

    def process_frame(self, frame) -> bool:
        """Decode one Layer II frame.

        Returns True when the frame was handed to the audio callbacks.
        Raises ValueError for frames shorter than the four header bytes.
        """
        raw = bytes(frame)
        if len(raw) < _HEADER_LENGTH:
            raise ValueError(f"an MPEG frame holds at least {_HEADER_LENGTH} header bytes")
        if raw[0] != 0xFF or raw[1] & 0xF0 != 0xF0:
            _log.info("wrong MPEG sync word")
            return False

        version_id = (raw[1] & 0x08) >> 3
        bitrate_index = (raw[2] & 0xF0) >> 4
        if bitrate_index >= len(M1L2_BITRATES):
            return False
        sampling_index = (raw[2] & 0x0C) >> 2
        if sampling_index >= len(M1_SAMPLING_FREQUENCIES):
            return False
        sampling_rate = M1_SAMPLING_FREQUENCIES[sampling_index]
        if version_id == 0:
            sampling_rate //= 2
        channel_mode = (raw[3] & 0xC0) >> 6
        channels = CHANNELS_BY_MODE[channel_mode]

        if channel_mode == 0x03:
            scale_crc_len = 4 if bitrate_index > 0x02 else 2
        else:
            scale_crc_len = 4 if bitrate_index > 0x06 else 2

        ci_present = bool(raw[-1] & 0x02)
        f_pad_type = (raw[-2] & 0xC0) >> 6
        xpad_indicator = (raw[-2] & 0x30) >> 4
        if f_pad_type != 0:
            _log.info("wrong F-PAD type %d", f_pad_type)
            return False

        length = len(raw)
        xpad_end = length - _F_PAD_LENGTH - scale_crc_len
        f_pad = raw[-_F_PAD_LENGTH:]

        if xpad_indicator == 1:
            start = max(0, xpad_end - _SHORT_XPAD_LENGTH)
            self._dispatch_pad(raw[start:xpad_end] + f_pad)
        elif xpad_indicator == 2:
            if ci_present:
                self._no_ci_last_length = 0
                for index in range(_MAX_CONTENT_INDICATORS):
                    ci_position = xpad_end - 1 - index
                    if ci_position < 0:
                        break
                    indicator = raw[ci_position]
                    self._no_ci_last_length += 1
                    if indicator & 0x1F == 0:
                        break
                    self._no_ci_last_length += XPAD_SIZE[(indicator & 0xE0) >> 5]
                start = max(0, xpad_end - 1 - self._no_ci_last_length)
                self._dispatch_pad(raw[start:xpad_end] + f_pad)
            elif self._no_ci_last_length > 0:
                start = max(0, xpad_end - self._no_ci_last_length)
                self._dispatch_pad(raw[start:xpad_end] + f_pad)

        for callback in list(self._audio_callbacks):
            callback(raw, 0, channels, sampling_rate, False, False)
        return True

    def _dispatch_pad(self, pad: bytes) -> None:
        for callback in list(self._pad_callbacks):
            callback(pad)