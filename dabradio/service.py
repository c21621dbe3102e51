"""A DAB service and the components it is made of."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType

from .servicecomponent import ServiceComponent

_log = logging.getLogger(__name__)

_PROGRAMME_TYPE_CODES = 32


class Service:
    """Service information collected from the FIC.

    Programme type names are looked up in ``programme_type_names``, which
    maps an international PTY code to its full, 16-character and
    8-character names; codes missing from it leave the names unchanged.
    """

    programme_type_names: Mapping[int, tuple[str, str, str]] = MappingProxyType({})

    def __init__(self):
        self.service_id = 0xFFFFFFFF
        self.is_programme_service = False
        self._ca_id = 0x00
        self.is_ca_applied = False
        self.number_of_service_components = 0
        self.label_charset = 0x00
        self._label = ""
        self._short_label = ""
        self._components: list[ServiceComponent] = []
        self._pty_code = 0x00
        self.is_programme_type_dynamic = False
        self.programme_type_full_name = "No program type"
        self.programme_type_16char_name = "None"
        self.programme_type_8char_name = "None"
        self.ensemble_frequency = 0

    @property
    def ca_id(self) -> int:
        """Conditional access identifier; non-zero means CA is applied."""
        return self._ca_id

    @ca_id.setter
    def ca_id(self, value: int) -> None:
        self._ca_id = value
        self.is_ca_applied = bool(value)

    @property
    def programme_type_code(self) -> int:
        """International programme type code."""
        return self._pty_code

    @programme_type_code.setter
    def programme_type_code(self, code: int) -> None:
        if code == self._pty_code or not 0 <= code < _PROGRAMME_TYPE_CODES:
            return
        self._pty_code = code
        names = self.programme_type_names.get(code)
        if names is not None:
            (
                self.programme_type_full_name,
                self.programme_type_16char_name,
                self.programme_type_8char_name,
            ) = names
        _log.info(
            "setting %s PTY for SId %x to %d: %s",
            "dynamic" if self.is_programme_type_dynamic else "static",
            self.service_id,
            code,
            self.programme_type_full_name,
        )

    @property
    def label(self) -> str:
        return self._label

    @property
    def short_label(self) -> str:
        return self._short_label

    @property
    def components(self) -> tuple[ServiceComponent, ...]:
        return tuple(self._components)

    def set_label(self, label: str) -> None:
        """Set the service label; only the first label received is kept."""
        if not self._label:
            self._label = label
            _log.info("setting service label %r to SId %x", label, self.service_id)

    def set_short_label(self, short_label: str) -> None:
        """Set the service short label; only the first one received is kept."""
        if not self._short_label:
            self._short_label = short_label
            _log.info("setting service short label %r to SId %x", short_label, self.service_id)

    def add_service_component(self, component: ServiceComponent) -> None:
        self._components.append(component)
        _log.info(
            "adding service component with subchannel %x for SId %x as component #%d",
            component.subchannel_id,
            self.service_id,
            len(self._components),
        )