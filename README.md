# threadpair

Building blocks for devices on a Thread network that pair with one another
and exchange lists of CoAP resources. The package keeps the bookkeeping:
which devices are paired, which URIs they offer, which of those are
subscribed, and when a service registration lease needs refreshing.

## Modules

### `threadpair.common`

- `DeviceType` – an `IntEnum` of device kinds, from `NO_DEVICE_TYPE` (0) to
  `END_OF_DEVICE_TYPE` (20); `is_real` is true for the members in between.
- `PairRule` – an ordered tuple of allowed device types (at most 10 entries,
  otherwise `ValueError`). `allows(device_type)` reads entries up to
  `END_OF_RULES`; an entry `NO_RULES` accepts any type. `PairRule.allow_all()`
  and `PairRule.deny_all()` build the two common rules.
- Errors: `PairError`, and its subclasses `NameTooLongError`,
  `NoSpaceError` and `NotFoundError` (also a `LookupError`).
- Limits such as `PAIRED_DEVICES_MAX` (10), `PAIRED_URI_MAX` (3),
  `URI_MAX_NAME_LENGTH` (24), `TOKEN_LENGTH` (4) and `URI_RESOURCE_SIZE` (29).

### `threadpair.uri_resources`

- `UriResource(uri, device_type, observable=True)`.
- `encode_uri_resources(resources)` – turns 1 to 3 resources into bytes,
  29 bytes per record: a null-padded 24-byte name (at most 23 bytes of
  UTF-8), a 4-byte type field whose first byte holds the type, and an
  observer flag byte.
- `decode_uri_resources(data)` – parses those bytes back into a list of
  `UriResource`; a trailing partial record is ignored. Both raise
  `PairError` on bad input.

### `threadpair.pairing`

- `PairedDeviceList` – ten slots of `PairedDevice`.
  - `add(name, ip_address)` returns an `AddResult(index, status)` where
    `status` is `AddStatus.ADDED`, `UPDATED` (a known device with a new
    address) or `NO_NEED_UPDATE`. Raises `NoSpaceError` when full and
    `NameTooLongError` for names of 32 bytes or more.
  - `index_of`, `get`, `delete` raise `NotFoundError` for unknown names;
    `name_at` returns `None` for a free slot; `clear` empties the list.
  - `ip_address_at`, `ip_address_is_same`, `update_ip_address` work on slot
    indices; addresses may be given as text, 16 bytes, an integer or an
    `ipaddress.IPv6Address`.
  - `uri_for_token(token)`, `set_uri_state(token, state)` (32-bit state) and
    `subscribed_uris()`, which lists `SubscribedUri(ip_address, uri, token)`
    for every URI holding a non-zero token.
- `PairedDevice` – `name`, `ip_address` and three `DeviceUri` slots;
  `add_uri(index, resource, token)` fills a slot, `uri_index_for_type`
  finds the slot serving a device type.
- `DeviceUri` – `uri`, `state`, `device_type`, `token`, and `is_subscribed`.
- `token_is_valid(token)` – true when a 4-byte token is not all zeros.
- `PairObservers` – `register(callback)` (room for ten) and
  `notify(device)`, which hands the device to the first registered callback.

### `threadpair.driver`

- `DeviceDriver` – a dataclass holding the device's callbacks and
  properties (`pair_rules`, `uri_list`, `uri_list_size`, `device_name`,
  `device_type`, `task`, `on_paired_device`, `on_subscribed_uri`) together
  with its `paired_devices` list and `observers`.
  `run_task()` calls `task` once and returns whether one was registered;
  `is_pair_allowed(device_type)` asks the `pair_rules` provider and raises
  `PairError` when there is no provider or no rule.
- `get_driver()` – the one driver instance shared by the application.

### `threadpair.srp_lease`

- `LeaseCounter` – `reset(lease_interval)` starts from the interval plus one
  check period (300 s), `decrease()` subtracts one period (wrapping as an
  unsigned 32-bit value), `expiring()` tells whether a refresh is due.
- `lease_is_expiring(lease)` – true when 1200 seconds or fewer are left.

## Installing

    pip install .

To run the tests:

    pip install ".[test]"
    pytest

## Example

```python
from threadpair.common import DeviceType
from threadpair.pairing import PairedDeviceList
from threadpair.uri_resources import UriResource, decode_uri_resources, encode_uri_resources

payload = encode_uri_resources([UriResource("light/on_off", DeviceType.LIGHTING_ON_OFF, True)])
resources = decode_uri_resources(payload)

devices = PairedDeviceList()
result = devices.add("device1_1_0011223344556677", "fd00::1")
device = devices.get("device1_1_0011223344556677")
device.add_uri(0, resources[0], b"\x01\x02\x03\x04")
devices.set_uri_state(b"\x01\x02\x03\x04", 1)
print(result.status, devices.subscribed_uris())
```

## What it does not do

The package holds state and formats only. It does not talk to a network:
there is no CoAP client or server, no DNS-SD browsing, no SRP client, and
no background task or queue that receives discovered devices. It does not
build or parse full device names, and it stores nothing on disk. An
application supplies those parts and feeds their results into
`PairedDeviceList`, `DeviceDriver` and `LeaseCounter`.