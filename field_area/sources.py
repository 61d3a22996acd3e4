"""Interfaces for the push-based location source and the recording ticker.

Device integrations implement :class:`LocationSource` and :class:`Ticker`.
The manual implementations here are driven explicitly by the caller and are
used for CSV replay and tests.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Protocol

from .errors import ProviderError
from .models import GeoFix

_LOG = logging.getLogger(__name__)

FixCallback = Callable[[GeoFix], None]
ErrorCallback = Callable[[ProviderError], None]
TickCallback = Callable[[], object]


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class LocationSource(Protocol):
    def subscribe(self, on_fix: FixCallback, on_error: ErrorCallback) -> Cancellable: ...


class Ticker(Protocol):
    def start(self, interval_s: float, callback: TickCallback) -> Cancellable: ...


class Subscription:
    def __init__(
        self, owner: "ManualLocationSource", on_fix: FixCallback, on_error: ErrorCallback
    ) -> None:
        self._owner = owner
        self.on_fix = on_fix
        self.on_error = on_error
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self.active = False
            self._owner._remove(self)


class ManualLocationSource:
    """Location source whose fixes and errors are pushed by the caller."""

    def __init__(self) -> None:
        self._subscriptions: List[Subscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, on_fix: FixCallback, on_error: ErrorCallback) -> Subscription:
        subscription = Subscription(self, on_fix, on_error)
        self._subscriptions.append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def push(self, fix: GeoFix) -> None:
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.on_fix(fix)

    def fail(self, error: ProviderError) -> None:
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.on_error(error)


class TickHandle:
    def __init__(self, interval_s: float, callback: TickCallback) -> None:
        self.interval_s = interval_s
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        self.active = False


class ManualTicker:
    """Ticker advanced explicitly with :meth:`tick`; keeps a simulated clock."""

    def __init__(self, start_time: float = 0.0) -> None:
        self.now = start_time
        self._handle: Optional[TickHandle] = None

    @property
    def running(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self, interval_s: float, callback: TickCallback) -> TickHandle:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        if self.running:
            raise RuntimeError("ManualTicker already running")
        self._handle = TickHandle(interval_s, callback)
        return self._handle

    def tick(self) -> object:
        """Advance the clock by one interval and fire the callback if active."""

        handle = self._handle
        if handle is None or not handle.active:
            _LOG.debug("Tick ignored: ticker not running")
            return None
        self.now += handle.interval_s
        return handle.callback()


__all__ = [
    "Cancellable",
    "LocationSource",
    "Ticker",
    "Subscription",
    "ManualLocationSource",
    "TickHandle",
    "ManualTicker",
]
