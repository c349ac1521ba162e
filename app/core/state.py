"""Observable single-value state cell."""
import logging
from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class StateCell(Generic[T]):
    """
    Holds the latest value and notifies subscribers on every update.

    Subscribers are called synchronously, in registration order, from the
    task that sets the value.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._subscribers: List[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception:
                logger.exception("State subscriber %r failed", callback)

    def subscribe(self, callback: Callable[[T], None], emit_current: bool = False) -> Callable[[], None]:
        """Register a callback; returns a function that removes it."""
        self._subscribers.append(callback)
        if emit_current:
            callback(self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
