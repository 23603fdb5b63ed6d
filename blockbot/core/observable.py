from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")

Subscriber = Callable[[T], None]

logger = logging.getLogger(__name__)


class ObservableValue(Generic[T]):
    """A value holder that notifies subscribers on every replacement.

    Contract:
      - `subscribe(cb)` calls `cb` immediately with the current value and
        returns a zero-arg function that removes the subscription.
      - `set(value)` replaces the value and notifies subscribers in order.
      - `update(**changes)` is shorthand for `set(value.model_copy(update=...))`
        on pydantic values.

    Subscribers run synchronously between suspension points, so a subscriber
    that needs to do async work should schedule it rather than await it.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._subscribers: list[Subscriber[T]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for cb in list(self._subscribers):
            try:
                cb(value)
            except Exception:
                # Observer failures never propagate into the mutation.
                logger.exception("Subscriber %r failed", cb)

    def update(self, **changes: Any) -> T:
        current = self._value
        if not isinstance(current, BaseModel):
            raise TypeError("update() requires a pydantic model value")
        new_value = current.model_copy(update=changes)
        self.set(new_value)  # type: ignore[arg-type]
        return new_value  # type: ignore[return-value]

    def subscribe(self, cb: Subscriber[T]) -> Callable[[], None]:
        self._subscribers.append(cb)
        cb(self._value)

        def _unsubscribe() -> None:
            try:
                self._subscribers.remove(cb)
            except ValueError:
                pass

        return _unsubscribe
