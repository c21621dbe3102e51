"""Service components of a DAB ensemble and the data they share."""

from __future__ import annotations

import abc
import enum
import logging

_log = logging.getLogger(__name__)


class ServiceComponentType(enum.IntEnum):
    """Transport of a service component in the MSC."""

    MSC_STREAM_AUDIO = 0
    MSC_STREAM_DATA = 1
    RESERVED = 2
    MSC_PACKET_MODE_DATA = 3


class ServiceComponent(abc.ABC):
    """Common state of a service component; subclasses consume MSC data.

    Numeric fields start at their "unknown" value (0xFF or 0xFFFF) until the
    FIC announces them.
    """

    def __init__(self):
        self.component_type = ServiceComponentType.RESERVED
        self.is_primary = False
        self.is_ca_applied = False
        self.subchannel_id = 0xFF
        self._sc_ids = 0xFF
        self.msc_start_address = 0xFFFF
        self.subchannel_size = 0xFFFF
        self.convolutional_coding_rate = ""
        self.protection_level_string = ""
        self.protection_level = 0xFF
        self.protection_type = 0xFF
        self.uep_table_index = 0xFF
        self.subchannel_bitrate = 0
        self.is_fec_scheme_applied = False
        self.label_charset = 0x00
        self._label = ""
        self._short_label = ""
        self._user_applications: list = []

    @property
    def sc_ids(self) -> int:
        """Service component identifier within the service (SCIdS)."""
        return self._sc_ids

    @sc_ids.setter
    def sc_ids(self, value: int) -> None:
        self._sc_ids = value
        self.is_primary = value == 0

    @property
    def label(self) -> str:
        return self._label

    @property
    def short_label(self) -> str:
        return self._short_label

    @property
    def user_applications(self) -> tuple:
        return tuple(self._user_applications)

    def set_label(self, label: str) -> None:
        """Set the component label; only the first label received is kept."""
        if not self._label:
            self._label = label
            _log.info("setting service component label %r to SCIdS %x", label, self._sc_ids)

    def set_short_label(self, short_label: str) -> None:
        """Set the component short label; only the first one received is kept."""
        if not self._short_label:
            self._short_label = short_label
            _log.info("setting service component short label %r to SCIdS %x", short_label, self._sc_ids)

    def add_user_application(self, application) -> None:
        """Add a user application unless an equal one is already present."""
        if application in self._user_applications:
            return
        _log.info("adding user application for subchannel %x", self.subchannel_id)
        self._user_applications.append(application)

    @abc.abstractmethod
    def component_msc_data_input(self, data) -> None:
        """Consume one chunk of MSC data of this component's subchannel."""

    def flush_buffered_data(self) -> None:
        """Drop any data buffered for decoding; the base component buffers none."""