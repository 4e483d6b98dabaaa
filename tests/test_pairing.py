import ipaddress

import pytest

from threadpair.common import (
    PAIR_OBSERVERS_MAX,
    PAIRED_DEVICES_MAX,
    PAIRED_URI_MAX,
    URI_MAX_NAME_LENGTH,
    DeviceType,
    NameTooLongError,
    NoSpaceError,
    NotFoundError,
    PairError,
)
from threadpair.pairing import (
    AddStatus,
    DeviceUri,
    PairedDevice,
    PairedDeviceList,
    PairObservers,
    token_is_valid,
)
from threadpair.uri_resources import UriResource

NAME_1 = "device1_1_0011223344556677"
NAME_2 = "device2_4_0011223344556677"
IP_A = "fd00::1"
IP_B = "fd00::2"
TOKEN_A = b"\x01\x02\x03\x04"
TOKEN_B = b"\x05\x06\x07\x08"


@pytest.fixture
def devices():
    return PairedDeviceList()


def test_token_validity():
    assert token_is_valid(TOKEN_A) is True
    assert token_is_valid(bytes(4)) is False


def test_token_wrong_length_rejected():
    with pytest.raises(PairError):
        token_is_valid(b"\x01\x02")


def test_add_new_device_takes_first_slot(devices):
    result = devices.add(NAME_1, IP_A)
    assert result.index == 0
    assert result.status is AddStatus.ADDED
    assert devices.name_at(0) == NAME_1
    assert devices.ip_address_at(0) == ipaddress.IPv6Address(IP_A)


def test_add_same_device_same_ip_needs_no_update(devices):
    devices.add(NAME_1, IP_A)
    result = devices.add(NAME_1, IP_A)
    assert result.status is AddStatus.NO_NEED_UPDATE
    assert len(devices) == 1


def test_add_same_device_new_ip_updates(devices):
    devices.add(NAME_1, IP_A)
    result = devices.add(NAME_1, IP_B)
    assert result.status is AddStatus.UPDATED
    assert devices.ip_address_is_same(result.index, IP_B)


def test_add_name_too_long(devices):
    with pytest.raises(NameTooLongError):
        devices.add("x" * 32, IP_A)


def test_add_when_full(devices):
    for number in range(PAIRED_DEVICES_MAX):
        devices.add(f"dev{number}_1_0011223344556677", IP_A)
    with pytest.raises(NoSpaceError):
        devices.add(NAME_1, IP_A)


def test_add_bad_address(devices):
    with pytest.raises(PairError):
        devices.add(NAME_1, "not-an-address")


def test_index_of_and_get(devices):
    devices.add(NAME_1, IP_A)
    index = devices.add(NAME_2, IP_B).index
    assert devices.index_of(NAME_2) == index
    assert devices.get(NAME_2).name == NAME_2
    with pytest.raises(NotFoundError):
        devices.index_of("missing")
    with pytest.raises(NotFoundError):
        devices.get("missing")


def test_delete_frees_slot_for_reuse(devices):
    first = devices.add(NAME_1, IP_A).index
    devices.add(NAME_2, IP_B)
    assert devices.delete(NAME_1) == first
    assert devices.name_at(first) is None
    assert devices.ip_address_at(first) == ipaddress.IPv6Address("::")
    assert devices.add("device3_1_0011223344556677", IP_A).index == first


def test_delete_missing(devices):
    with pytest.raises(NotFoundError):
        devices.delete(NAME_1)


def test_clear(devices):
    devices.add(NAME_1, IP_A)
    devices.add(NAME_2, IP_B)
    devices.clear()
    assert len(devices) == 0
    assert list(devices) == []


def test_index_out_of_range(devices):
    with pytest.raises(IndexError):
        devices.name_at(PAIRED_DEVICES_MAX)
    with pytest.raises(IndexError):
        devices.ip_address_at(-1)


def test_ip_checks_on_free_slot(devices):
    with pytest.raises(NotFoundError):
        devices.ip_address_is_same(0, IP_A)
    with pytest.raises(NotFoundError):
        devices.update_ip_address(0, IP_A)


def test_update_ip_address(devices):
    index = devices.add(NAME_1, IP_A).index
    assert devices.update_ip_address(index, IP_A) is False
    assert devices.update_ip_address(index, IP_B) is True
    assert devices.ip_address_is_same(index, IP_A) is False


def test_add_uri_with_token(devices):
    device = devices.get_or_none = None  # noqa: F841 - unused attribute on purpose
    index = devices.add(NAME_1, IP_A).index
    device = devices.get(NAME_1)
    entry = device.add_uri(0, UriResource("led", DeviceType.LIGHTING_ON_OFF), TOKEN_A)
    assert entry.uri == "led"
    assert entry.token == TOKEN_A
    assert devices.uri_for_token(TOKEN_A) is device.uris[0]
    assert index == devices.index_of(NAME_1)


def test_add_uri_without_token_keeps_empty_token():
    device = PairedDevice(NAME_1, IP_A)
    entry = device.add_uri(1, UriResource("temp", DeviceType.SENSOR, False))
    assert entry.token == bytes(4)
    assert entry.is_subscribed is False


def test_add_uri_rejects_bad_input():
    device = PairedDevice(NAME_1, IP_A)
    with pytest.raises(PairError):
        device.add_uri(0, UriResource("", DeviceType.SWITCH))
    with pytest.raises(PairError):
        device.add_uri(0, UriResource("x" * (URI_MAX_NAME_LENGTH + 1), DeviceType.SWITCH))
    with pytest.raises(PairError):
        device.add_uri(0, UriResource("led", DeviceType.NO_DEVICE_TYPE))
    with pytest.raises(PairError):
        device.add_uri(0, UriResource("led", DeviceType.SWITCH), bytes(4))
    with pytest.raises(IndexError):
        device.add_uri(PAIRED_URI_MAX, UriResource("led", DeviceType.SWITCH))
    assert device.uris[0] == DeviceUri()


def test_uri_index_for_type():
    device = PairedDevice(NAME_1, IP_A)
    device.add_uri(2, UriResource("dimm", DeviceType.LIGHTING_DIMM))
    assert device.uri_index_for_type(DeviceType.LIGHTING_DIMM) == 2
    with pytest.raises(NotFoundError):
        device.uri_index_for_type(DeviceType.ALARM)


def test_uri_for_token_ignores_empty_token(devices):
    devices.add(NAME_1, IP_A)
    assert devices.uri_for_token(bytes(4)) is None
    assert devices.uri_for_token(TOKEN_B) is None


def test_set_uri_state(devices):
    devices.add(NAME_1, IP_A)
    device = devices.get(NAME_1)
    device.add_uri(0, UriResource("led", DeviceType.LIGHTING_ON_OFF), TOKEN_A)
    devices.set_uri_state(TOKEN_A, 1)
    assert device.uris[0].state == 1
    with pytest.raises(PairError):
        devices.set_uri_state(TOKEN_B, 1)
    with pytest.raises(PairError):
        devices.set_uri_state(TOKEN_A, -1)


def test_deleted_device_token_no_longer_found(devices):
    devices.add(NAME_1, IP_A)
    devices.get(NAME_1).add_uri(0, UriResource("led", DeviceType.SWITCH), TOKEN_A)
    devices.delete(NAME_1)
    assert devices.uri_for_token(TOKEN_A) is None


def test_subscribed_uris(devices):
    devices.add(NAME_1, IP_A)
    devices.add(NAME_2, IP_B)
    devices.get(NAME_1).add_uri(0, UriResource("led", DeviceType.SWITCH), TOKEN_A)
    devices.get(NAME_1).add_uri(1, UriResource("temp", DeviceType.SENSOR))
    devices.get(NAME_2).add_uri(0, UriResource("dimm", DeviceType.LIGHTING_DIMM), TOKEN_B)
    subs = devices.subscribed_uris()
    assert [(s.ip_address, s.uri, s.token) for s in subs] == [
        (ipaddress.IPv6Address(IP_A), "led", TOKEN_A),
        (ipaddress.IPv6Address(IP_B), "dimm", TOKEN_B),
    ]


def test_observers_notify_first_callback_only():
    observers = PairObservers()
    seen_first, seen_second = [], []
    observers.register(seen_first.append)
    observers.register(seen_second.append)
    device = PairedDevice(NAME_1, IP_A)
    observers.notify(device)
    assert seen_first == [device]
    assert seen_second == []


def test_observers_limits():
    observers = PairObservers()
    with pytest.raises(PairError):
        observers.register(None)
    for _ in range(PAIR_OBSERVERS_MAX):
        observers.register(lambda device: None)
    assert len(observers) == PAIR_OBSERVERS_MAX
    with pytest.raises(PairError):
        observers.register(lambda device: None)
    with pytest.raises(PairError):
        observers.notify(None)