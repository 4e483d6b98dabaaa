"""Application device driver: callbacks and properties of this device."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from threadpair.common import DeviceType, PairError, PairRule
from threadpair.pairing import PairedDevice, PairedDeviceList, PairObservers

PairRuleProvider = Callable[[], Optional[PairRule]]
UriListProvider = Callable[[], Any]
SubscribedUriCallback = Callable[[Any], None]
PairedDeviceCallback = Callable[[PairedDevice], None]
TaskCallback = Callable[[], None]


@dataclass
class DeviceDriver:
    """Everything the application registers to describe and drive a device.

    ``pair_rules`` returns the rule deciding which device types may pair.
    ``uri_list`` returns the URIs the device exposes and ``uri_list_size``
    tells how many there are. ``task`` is the periodic work of the device.
    ``paired_devices`` and ``observers`` give access to the pairing state.
    """

    on_subscribed_uri: Optional[SubscribedUriCallback] = None
    on_paired_device: Optional[PairedDeviceCallback] = None
    pair_rules: Optional[PairRuleProvider] = None
    uri_list: Optional[UriListProvider] = None
    device_name: Optional[str] = None
    device_type: Optional[DeviceType] = None
    uri_list_size: int = 0
    task: Optional[TaskCallback] = None
    paired_devices: PairedDeviceList = field(default_factory=PairedDeviceList)
    observers: PairObservers = field(default_factory=PairObservers)

    def run_task(self) -> bool:
        """Run the registered task once; return whether there was one."""
        if self.task is None:
            return False
        self.task()
        return True

    def is_pair_allowed(self, device_type: int) -> bool:
        """Return whether a device of ``device_type`` may pair with this one."""
        if self.pair_rules is None:
            raise PairError("no pairing rule provider is registered")
        rule = self.pair_rules()
        if rule is None:
            raise PairError("the pairing rule provider returned no rule")
        return rule.allows(int(device_type))


_driver = DeviceDriver()


def get_driver() -> DeviceDriver:
    """Return the driver instance shared by the whole application."""
    return _driver