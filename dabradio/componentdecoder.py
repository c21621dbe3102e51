"""Base class of the decoders that turn subchannel data into component data."""

from __future__ import annotations

import abc
from collections.abc import Callable

_MAX_BITRATE = 0xFFFF
_FRAME_BYTES_PER_KBIT = 3


class ServiceComponentDecoder(abc.ABC):
    """Decoder of one subchannel's data; frame size follows from the bitrate.

    A logical frame of 24 ms carries three bytes per kbit/s of bitrate.
    """

    def __init__(self):
        self._subchannel_bitrate = 0
        self._frame_size = 0
        self._component_data_callbacks: list[Callable[[bytes], None]] = []

    @property
    def subchannel_bitrate(self) -> int:
        """Subchannel bitrate in kbit/s."""
        return self._subchannel_bitrate

    @subchannel_bitrate.setter
    def subchannel_bitrate(self, bitrate: int) -> None:
        if not 0 <= bitrate <= _MAX_BITRATE:
            raise ValueError(f"bitrate must lie between 0 and {_MAX_BITRATE} kbit/s")
        self._subchannel_bitrate = bitrate
        self._frame_size = bitrate * _FRAME_BYTES_PER_KBIT
        self._bitrate_changed()

    @property
    def frame_size(self) -> int:
        """Bytes per logical frame of the subchannel."""
        return self._frame_size

    def _bitrate_changed(self) -> None:
        """Hook for subclasses that derive more sizes from the bitrate."""

    @abc.abstractmethod
    def component_data_input(self, frame_data) -> None:
        """Consume one chunk of subchannel data."""

    def flush_buffered_data(self) -> None:
        """Drop data buffered for decoding; the base decoder buffers none."""

    def register_component_data_callback(
        self, callback: Callable[[bytes], None]
    ) -> Callable[[], None]:
        """Register a callback for decoded component data.

        Returns a function that unregisters the callback again.
        """
        self._component_data_callbacks.append(callback)

        def unregister() -> None:
            if callback in self._component_data_callbacks:
                self._component_data_callbacks.remove(callback)

        return unregister

    def _dispatch_component_data(self, data: bytes) -> None:
        for callback in list(self._component_data_callbacks):
            callback(data)