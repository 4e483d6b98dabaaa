"""Paired device list, URI bookkeeping and pairing observers."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterator, NamedTuple, Optional, Union

from threadpair.common import (
    DNS_SRV_LABEL_SIZE,
    PAIR_OBSERVERS_MAX,
    PAIRED_DEVICES_MAX,
    PAIRED_URI_MAX,
    TOKEN_LENGTH,
    URI_MAX_NAME_LENGTH,
    NameTooLongError,
    NoSpaceError,
    NotFoundError,
    PairError,
)
from threadpair.uri_resources import UriResource

IpLike = Union[str, bytes, int, ipaddress.IPv6Address]

EMPTY_TOKEN = bytes(TOKEN_LENGTH)
UNSPECIFIED_ADDRESS = ipaddress.IPv6Address(0)
URI_STATE_MAX = 0xFFFFFFFF


def _to_address(value: IpLike) -> ipaddress.IPv6Address:
    try:
        return ipaddress.IPv6Address(value)
    except (ipaddress.AddressValueError, ValueError, TypeError) as exc:
        raise PairError(f"not an IPv6 address: {value!r}") from exc


def _to_token(token: Union[bytes, bytearray, list, tuple]) -> bytes:
    raw = bytes(token)
    if len(raw) != TOKEN_LENGTH:
        raise PairError(f"a token is {TOKEN_LENGTH} bytes, got {len(raw)}")
    return raw


def token_is_valid(token) -> bool:
    """Return whether ``token`` has at least one non-zero byte."""
    return any(_to_token(token))


@dataclass
class DeviceUri:
    """A URI of a paired device, its last known state and observer token."""

    uri: str = ""
    state: int = 0
    device_type: int = 0
    token: bytes = EMPTY_TOKEN

    @property
    def is_subscribed(self) -> bool:
        """True when an observer token has been stored for this URI."""
        return token_is_valid(self.token)


@dataclass
class PairedDevice:
    """A device that has been paired with this one."""

    name: str
    ip_address: ipaddress.IPv6Address = UNSPECIFIED_ADDRESS
    uris: list[DeviceUri] = field(
        default_factory=lambda: [DeviceUri() for _ in range(PAIRED_URI_MAX)]
    )

    def __post_init__(self) -> None:
        self.ip_address = _to_address(self.ip_address)

    def add_uri(self, index: int, resource: UriResource, token=None) -> DeviceUri:
        """Store ``resource`` in URI slot ``index``.

        A token is only given when the URI was subscribed first; it must not
        be all zeros. Without a token the slot keeps the token it had.
        """
        if not 0 <= index < PAIRED_URI_MAX:
            raise IndexError(f"URI slot {index} is out of range")
        uri_length = len(resource.uri.encode("utf-8"))
        if uri_length == 0 or uri_length > URI_MAX_NAME_LENGTH:
            raise PairError(f"invalid URI name length: {uri_length}")
        if int(resource.device_type) == 0:
            raise PairError("URI has no device type")

        slot = self.uris[index]
        if token is not None:
            if not token_is_valid(token):
                raise PairError("observer token is empty")
            slot.token = _to_token(token)
        slot.device_type = resource.device_type
        slot.uri = resource.uri
        return slot

    def uri_index_for_type(self, device_type: int) -> int:
        """Return the first URI slot serving ``device_type``."""
        for index, entry in enumerate(self.uris):
            if entry.device_type == device_type:
                return index
        raise NotFoundError(f"no URI for device type {device_type}")


class AddStatus(Enum):
    """What adding a device to the list did."""

    ADDED = "added"
    UPDATED = "updated"
    NO_NEED_UPDATE = "no_need_update"


class AddResult(NamedTuple):
    """Slot of the device and what was done to it."""

    index: int
    status: AddStatus


class SubscribedUri(NamedTuple):
    """A subscription that must be renewed: where, which URI and its token."""

    ip_address: ipaddress.IPv6Address
    uri: str
    token: bytes


class PairedDeviceList:
    """Fixed number of slots holding paired devices."""

    def __init__(self) -> None:
        self._slots: list[Optional[PairedDevice]] = [None] * PAIRED_DEVICES_MAX

    def __len__(self) -> int:
        return sum(slot is not None for slot in self._slots)

    def __iter__(self) -> Iterator[PairedDevice]:
        return (slot for slot in self._slots if slot is not None)

    @staticmethod
    def _check_index(index: int) -> None:
        if not 0 <= index < PAIRED_DEVICES_MAX:
            raise IndexError(f"device slot {index} is out of range")

    def _taken(self, index: int) -> PairedDevice:
        self._check_index(index)
        device = self._slots[index]
        if device is None:
            raise NotFoundError(f"device slot {index} is free")
        return device

    def _find(self, name: str) -> Optional[int]:
        for index, device in enumerate(self._slots):
            if device is not None and device.name == name:
                return index
        return None

    def add(self, name: str, ip_address: IpLike) -> AddResult:
        """Add a device, or refresh the address of one already listed."""
        address = _to_address(ip_address)
        existing = self._find(name)
        if existing is not None:
            if self.update_ip_address(existing, address):
                return AddResult(existing, AddStatus.UPDATED)
            return AddResult(existing, AddStatus.NO_NEED_UPDATE)

        free = next(
            (index for index, slot in enumerate(self._slots) if slot is None), None
        )
        if free is None:
            raise NoSpaceError("no free slot in the paired device list")
        if len(name.encode("utf-8")) >= DNS_SRV_LABEL_SIZE:
            raise NameTooLongError(
                f"device name {name!r} must be shorter than {DNS_SRV_LABEL_SIZE} bytes"
            )
        self._slots[free] = PairedDevice(name=name, ip_address=address)
        return AddResult(free, AddStatus.ADDED)

    def index_of(self, name: str) -> int:
        """Return the slot holding the device called ``name``."""
        index = self._find(name)
        if index is None:
            raise NotFoundError(f"device {name!r} is not paired")
        return index

    def get(self, name: str) -> PairedDevice:
        """Return the paired device called ``name``."""
        return self._slots[self.index_of(name)]

    def name_at(self, index: int) -> Optional[str]:
        """Return the name in slot ``index``, or None when the slot is free."""
        self._check_index(index)
        device = self._slots[index]
        return None if device is None else device.name

    def delete(self, name: str) -> int:
        """Remove the device called ``name`` and return the slot it held."""
        index = self.index_of(name)
        self._slots[index] = None
        return index

    def clear(self) -> None:
        """Remove every device."""
        self._slots = [None] * PAIRED_DEVICES_MAX

    def ip_address_at(self, index: int) -> ipaddress.IPv6Address:
        """Return the address stored in slot ``index`` (unspecified when free)."""
        self._check_index(index)
        device = self._slots[index]
        return UNSPECIFIED_ADDRESS if device is None else device.ip_address

    def ip_address_is_same(self, index: int, ip_address: IpLike) -> bool:
        """Return whether slot ``index`` holds ``ip_address``."""
        return self._taken(index).ip_address == _to_address(ip_address)

    def update_ip_address(self, index: int, ip_address: IpLike) -> bool:
        """Store a new address in slot ``index``; return whether it changed."""
        device = self._taken(index)
        address = _to_address(ip_address)
        if device.ip_address == address:
            return False
        device.ip_address = address
        return True

    def uri_for_token(self, token) -> Optional[DeviceUri]:
        """Return the URI subscribed with ``token``, or None."""
        raw = _to_token(token)
        if not any(raw):
            return None
        for device in self:
            for entry in device.uris:
                if entry.token == raw:
                    return entry
        return None

    def set_uri_state(self, token, state: int) -> DeviceUri:
        """Record ``state`` for the URI subscribed with ``token``."""
        if not 0 <= state <= URI_STATE_MAX:
            raise PairError(f"URI state {state} does not fit in 32 bits")
        entry = self.uri_for_token(token)
        if entry is None:
            raise PairError("no URI is subscribed with this token")
        entry.state = state
        return entry

    def subscribed_uris(self) -> list[SubscribedUri]:
        """List every subscription whose request must be sent again."""
        return [
            SubscribedUri(device.ip_address, entry.uri, entry.token)
            for device in self
            for entry in device.uris
            if entry.is_subscribed
        ]


PairedDeviceCallback = Callable[[PairedDevice], None]


class PairObservers:
    """Callbacks told about newly paired devices."""

    def __init__(self) -> None:
        self._callbacks: list[PairedDeviceCallback] = []

    def __len__(self) -> int:
        return len(self._callbacks)

    def register(self, callback: PairedDeviceCallback) -> None:
        """Add ``callback``; there is room for PAIR_OBSERVERS_MAX of them."""
        if callback is None:
            raise PairError("callback is missing")
        if len(self._callbacks) >= PAIR_OBSERVERS_MAX:
            raise PairError("no room for another pairing observer")
        self._callbacks.append(callback)

    def notify(self, device: PairedDevice) -> None:
        """Hand ``device`` to the first registered callback."""
        if device is None:
            raise PairError("device is missing")
        if self._callbacks:
            self._callbacks[0](device)