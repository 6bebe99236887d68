"""Fan-out of decoded appliance state to per-control listeners."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from homeassistant.core import CALLBACK_TYPE

_LOGGER = logging.getLogger(__name__)

ControlListener = Callable[[Any], None]


class MideaStatePublisher:
    """Deliver each published control value to the listeners of that control."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[ControlListener]] = {}

    def async_add_listener(
        self, control: str, update_callback: ControlListener
    ) -> CALLBACK_TYPE:
        """Listen for updates of one control.

        Returns:
            Callback that removes the listener again.

        """
        listeners = self._listeners.setdefault(control, [])
        listeners.append(update_callback)

        def remove_listener() -> None:
            if update_callback in listeners:
                listeners.remove(update_callback)

        return remove_listener

    def publish(self, values: dict[str, Any]) -> None:
        """Publish decoded control values, one update call per control."""
        for control, value in values.items():
            for update_callback in list(self._listeners.get(control, ())):
                update_callback(value)
        _LOGGER.debug("Published %d control values", len(values))
