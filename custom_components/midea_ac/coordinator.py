"""State reconciliation and polling for Midea AC integration."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from homeassistant.helpers.event import async_track_time_interval

from . import codec
from .api import MideaCommunicationError
from .const import DOMAIN

if TYPE_CHECKING:
    from homeassistant.core import CALLBACK_TYPE, HomeAssistant

    from .api import MideaDeviceLink
    from .models import ControlChange, DeviceStateSnapshot
    from .publisher import MideaStatePublisher

_LOGGER = logging.getLogger(__name__)


class MideaReconciler:
    """Keep published control values in sync with the appliance state.

    Polls and user changes never interleave. While a change is being applied
    the appliance is considered busy and poll cycles are skipped instead of
    queued, so a change is never delayed by a poll and a poll never publishes
    a state read in the middle of a change.
    """

    def __init__(
        self,
        link: MideaDeviceLink,
        publisher: MideaStatePublisher,
        name: str,
    ) -> None:
        """Initialize the reconciler.

        Args:
            link: Device link used to read and write appliance state.
            publisher: Publisher receiving decoded control values.
            name: Device name used in log messages.

        """
        self._link = link
        self._publisher = publisher
        self._name = name
        self._write_lock = asyncio.Lock()
        self._write_generation = 0

    @property
    def busy(self) -> bool:
        """Return True while a control change is in flight."""
        return self._write_lock.locked()

    async def async_fetch_and_publish(self) -> None:
        """Run one reconciliation cycle.

        Communication errors are logged and swallowed; the next cycle retries.
        """
        if self.busy:
            _LOGGER.debug("%s: Change in progress, skipping poll", self._name)
            return

        generation = self._write_generation
        try:
            snapshot = await self._link.async_fetch_state()
        except MideaCommunicationError as err:
            _LOGGER.warning("%s: Error polling device state: %s", self._name, err)
            return

        # A change started while the fetch was suspended
        if self.busy or generation != self._write_generation:
            _LOGGER.debug("%s: Discarding state superseded by change", self._name)
            return

        self._publish(snapshot)

    async def async_apply_change(self, change: ControlChange) -> None:
        """Apply one control change to the appliance.

        The current state is fetched, the change merged into it, the merged
        state pushed and the state confirmed by the appliance published.

        Raises:
            MideaCommunicationError: If the appliance cannot be read or written.
            MideaValidationError: If the change is not valid for the control.

        """
        async with self._write_lock:
            self._write_generation += 1
            _LOGGER.debug(
                "%s: Applying %s=%r", self._name, change.control, change.value
            )
            snapshot = await self._link.async_fetch_state()
            snapshot = codec.encode(change.control, change.value, snapshot)
            confirmed = await self._link.async_push_state(snapshot)
            self._publish(confirmed)

    def _publish(self, snapshot: DeviceStateSnapshot) -> None:
        _LOGGER.debug("%s: State %s", self._name, snapshot)
        self._publisher.publish(codec.decode(snapshot))


class MideaPollScheduler:
    """Owns the periodic timer driving reconciliation cycles."""

    def __init__(self, hass: HomeAssistant, reconciler: MideaReconciler) -> None:
        self._hass = hass
        self._reconciler = reconciler
        self._unsub: CALLBACK_TYPE | None = None
        self._interval: int | None = None

    @property
    def running(self) -> bool:
        """Return True while the timer is armed."""
        return self._unsub is not None

    @property
    def interval(self) -> int | None:
        """Return the armed interval in seconds."""
        return self._interval

    def start(self, interval_seconds: int) -> None:
        """Start running reconciliation every ``interval_seconds``."""
        if self._unsub is not None:
            _LOGGER.debug("Poll timer already armed, replacing it")
            self._cancel()

        self._interval = interval_seconds
        self._unsub = async_track_time_interval(
            self._hass,
            self._async_tick,
            timedelta(seconds=interval_seconds),
            name=f"{DOMAIN} poll",
        )
        _LOGGER.debug("Polling every %d seconds", interval_seconds)

    def reconfigure(self, interval_seconds: int) -> None:
        """Replace the running timer with one using a new interval."""
        _LOGGER.info("Changing polling interval to %d seconds", interval_seconds)
        self._cancel()
        self.start(interval_seconds)

    def stop(self) -> None:
        """Cancel the timer. A change already in flight is not interrupted."""
        if self._unsub is not None:
            _LOGGER.debug("Stopping poll timer")
        self._cancel()
        self._interval = None

    def _cancel(self) -> None:
        if self._unsub is not None:
            self._unsub()
            self._unsub = None

    async def _async_tick(self, _now: datetime) -> None:
        await self._reconciler.async_fetch_and_publish()
