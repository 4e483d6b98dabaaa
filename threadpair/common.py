"""Device types, limits, pairing rules and errors shared by the pairing code."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable

UDP_PORT = 12345
COAP_PORT = 5683
CCA_THRESHOLD = -70

PAIRED_DEVICES_MAX = 10
PAIRED_URI_MAX = 3
URI_MAX_NAME_LENGTH = 24

DNS_SRV_NAME_SIZE = 64
DNS_SRV_LABEL_SIZE = 32
DNS_SRV_TXT_SIZE = 512
DEVICE_NAME_FULL_SIZE = DNS_SRV_LABEL_SIZE

TOKEN_LENGTH = 4

# Wire size of one URI resource record: name field, device type (stored as a
# four-byte enum) and the observer flag byte.
DEVICE_TYPE_FIELD_SIZE = 4
URI_RESOURCE_SIZE = URI_MAX_NAME_LENGTH + DEVICE_TYPE_FIELD_SIZE + 1
URI_RESOURCE_MAX_SIZE = URI_RESOURCE_SIZE * PAIRED_URI_MAX

PAIR_QUEUE_LENGTH = 10
PAIR_OBSERVERS_MAX = 10
PAIR_RULES_ALLOWED_SIZE = 10


class DeviceType(IntEnum):
    """Kinds of device known on the network."""

    NO_DEVICE_TYPE = 0
    CONTROL_PANEL = 1
    SWITCH = 2
    LIGHTING = 3
    LIGHTING_ON_OFF = 4
    LIGHTING_DIMM = 5
    LIGHTING_RGB = 6
    THERMOSTAT = 7
    THERMOSTAT_SET_TEMP = 8
    THERMOSTAT_READ_SET_TEMP = 9
    THERMOSTAT_READ_CURRENT_TEMP = 10
    SENSOR = 11
    DOOR_LOCK = 12
    MOTION_DETECTOR = 13
    REMOTE_CONTROL = 14
    ENERGY_METER = 15
    SMART_PLUG = 16
    ENVIRONMENT_SENSOR = 17
    DOOR_SENSOR = 18
    ALARM = 19
    END_OF_DEVICE_TYPE = 20

    @property
    def is_real(self) -> bool:
        """True for every member that names an actual device."""
        return DeviceType.NO_DEVICE_TYPE < self < DeviceType.END_OF_DEVICE_TYPE


# Special entries of a pairing rule.
NO_RULES = int(DeviceType.END_OF_DEVICE_TYPE) + 1
NO_ALLOWED = int(DeviceType.NO_DEVICE_TYPE)
END_OF_RULES = int(DeviceType.END_OF_DEVICE_TYPE)


class PairError(Exception):
    """A pairing operation failed."""


class NameTooLongError(PairError):
    """A device name does not fit its field."""


class NoSpaceError(PairError):
    """The paired device list has no free slot."""


class NotFoundError(PairError, LookupError):
    """The requested device or slot is not present."""


@dataclass(frozen=True)
class PairRule:
    """Device types this device accepts as pairing partners.

    Entries are read in order up to END_OF_RULES. An entry of NO_RULES
    accepts any device; NO_ALLOWED matches nothing real.
    """

    allowed: tuple[int, ...] = (NO_RULES, END_OF_RULES)

    def __init__(self, allowed: Iterable[int] = (NO_RULES, END_OF_RULES)) -> None:
        entries = tuple(int(entry) for entry in allowed)
        if len(entries) > PAIR_RULES_ALLOWED_SIZE:
            raise ValueError(
                f"at most {PAIR_RULES_ALLOWED_SIZE} rule entries are allowed, got {len(entries)}"
            )
        object.__setattr__(self, "allowed", entries)

    @classmethod
    def allow_all(cls) -> PairRule:
        """A rule that accepts every device type."""
        return cls((NO_RULES, END_OF_RULES))

    @classmethod
    def deny_all(cls) -> PairRule:
        """A rule that accepts no device."""
        return cls((NO_ALLOWED, END_OF_RULES))

    def allows(self, device_type: int) -> bool:
        """Return whether a device of ``device_type`` may be paired."""
        for entry in self.allowed:
            if entry == END_OF_RULES:
                break
            if entry == NO_RULES or entry == device_type:
                return True
        return False