"""Bookkeeping for the lease of the service registered with the SRP server.

A periodic check runs every LEASE_TASK_DELAY seconds and lowers the counter
by that amount. When the remaining lease falls to LEASE_GUARD or below, the
service should be refreshed and the counter reset from the lease interval.
"""

from __future__ import annotations

from dataclasses import dataclass

from threadpair.common import COAP_PORT

LEASE_TASK_DELAY = 300
LEASE_TIME = 7200
LEASE_GUARD = 4 * LEASE_TASK_DELAY
KEY_LEASE_TIME = 86400

SERVICE_NAME = "_coap._udp"
BROWSE_SERVICE_NAME = "_coap._udp.default.service.arpa."
SERVICE_PORT = COAP_PORT

_UINT32_MASK = 0xFFFFFFFF


def lease_is_expiring(lease: int) -> bool:
    """Return whether ``lease`` seconds left are within the refresh guard."""
    return lease <= LEASE_GUARD


@dataclass
class LeaseCounter:
    """Seconds of service lease left, counted down by the periodic check."""

    value: int = 0

    def reset(self, lease_interval: int) -> int:
        """Start counting from ``lease_interval`` and return the new count.

        One check period is added because the first check runs at once,
        without waiting a full period.
        """
        if not 0 <= lease_interval <= _UINT32_MASK:
            raise ValueError(f"lease interval {lease_interval} does not fit in 32 bits")
        self.value = (lease_interval + LEASE_TASK_DELAY) & _UINT32_MASK
        return self.value

    def decrease(self) -> int:
        """Subtract one check period and return the count left.

        The count is an unsigned 32-bit value and wraps below zero.
        """
        self.value = (self.value - LEASE_TASK_DELAY) & _UINT32_MASK
        return self.value

    def expiring(self) -> bool:
        """Return whether the service lease must be refreshed now."""
        return lease_is_expiring(self.value)