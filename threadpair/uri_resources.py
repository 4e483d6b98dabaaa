"""Wire format for the list of URI resources a device exposes.

Each record is URI_RESOURCE_SIZE bytes long: a null-padded URI name field of
URI_MAX_NAME_LENGTH bytes, a device-type field of DEVICE_TYPE_FIELD_SIZE bytes
whose first byte carries the type, and one byte telling whether the URI
supports observers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from threadpair.common import (
    DEVICE_TYPE_FIELD_SIZE,
    PAIRED_URI_MAX,
    URI_MAX_NAME_LENGTH,
    URI_RESOURCE_MAX_SIZE,
    URI_RESOURCE_SIZE,
    DeviceType,
    PairError,
)

_TYPE_OFFSET = URI_MAX_NAME_LENGTH
_OBS_OFFSET = URI_MAX_NAME_LENGTH + DEVICE_TYPE_FIELD_SIZE


@dataclass(frozen=True)
class UriResource:
    """One URI offered by a device, with the function it serves."""

    uri: str
    device_type: int
    observable: bool = True


def _device_type(value: int) -> int:
    try:
        return DeviceType(value)
    except ValueError:
        return value


def _encode_name(uri: str) -> bytes:
    raw = uri.encode("utf-8")
    # The field must keep room for the terminating null byte.
    if len(raw) >= URI_MAX_NAME_LENGTH:
        raise PairError(
            f"URI {uri!r} is {len(raw)} bytes, the limit is {URI_MAX_NAME_LENGTH - 1}"
        )
    if b"\x00" in raw:
        raise PairError(f"URI {uri!r} contains a null byte")
    return raw.ljust(URI_MAX_NAME_LENGTH, b"\x00")


def encode_uri_resources(resources: Iterable[UriResource]) -> bytes:
    """Serialize between one and PAIRED_URI_MAX resources into wire bytes."""
    items = list(resources)
    if not items or len(items) > PAIRED_URI_MAX:
        raise PairError(
            f"between 1 and {PAIRED_URI_MAX} URI resources are required, got {len(items)}"
        )

    out = bytearray()
    for resource in items:
        device_type = int(resource.device_type)
        if not 0 <= device_type <= 0xFF:
            raise PairError(f"device type {device_type} does not fit its field")
        type_field = bytes([device_type]).ljust(DEVICE_TYPE_FIELD_SIZE, b"\x00")
        out += _encode_name(resource.uri)
        out += type_field
        out.append(1 if resource.observable else 0)
    return bytes(out)


def decode_uri_resources(data: bytes) -> list[UriResource]:
    """Parse wire bytes into URI resources.

    Only whole records are read; a trailing partial record is ignored.
    """
    size = len(data)
    if size == 0 or size > URI_RESOURCE_MAX_SIZE:
        raise PairError(
            f"URI resource data must be 1 to {URI_RESOURCE_MAX_SIZE} bytes, got {size}"
        )

    count = size // URI_RESOURCE_SIZE
    if count > PAIRED_URI_MAX:
        raise PairError(f"too many URI resources: {count}")

    resources = []
    for start in range(0, count * URI_RESOURCE_SIZE, URI_RESOURCE_SIZE):
        record = data[start:start + URI_RESOURCE_SIZE]
        name_field = record[:URI_MAX_NAME_LENGTH]
        end = name_field.find(b"\x00")
        if end < 0:
            raise PairError("URI name is not terminated within its field")
        try:
            uri = name_field[:end].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PairError("URI name is not valid text") from exc
        resources.append(
            UriResource(
                uri=uri,
                device_type=_device_type(record[_TYPE_OFFSET]),
                observable=bool(record[_OBS_OFFSET]),
            )
        )
    return resources