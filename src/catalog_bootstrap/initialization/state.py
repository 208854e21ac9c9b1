"""Run tracking primitives and the initialization settings record."""

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class InitializationSettings:
    """Where the catalog comes from and how additions are applied.

    Frozen: the legacy load-mode adapter produces a modified copy with
    :func:`dataclasses.replace` instead of mutating in place.

    :param initial_uri: Explicit initial catalog URI (highest precedence)
    :param reset: Whether a reset of persisted catalog state was requested
    :param additions_uri: Structured content to add on top of the initial catalog
    :param force: Whether additions replace existing items with the same id
    :param disallow_local: Skip every local source (initial load and additions)
    """

    initial_uri: str | None = None
    reset: bool = False
    additions_uri: str | None = None
    force: bool = False
    disallow_local: bool = False


class RunCounter:
    """Monotonic counter of population passes, safe to increment from any thread."""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        return self._value


class OneShotFlag:
    """Boolean that flips exactly once, decided by compare-and-set."""

    def __init__(self):
        self._set = False
        self._lock = threading.Lock()

    def compare_and_set(self, expected: bool, new: bool) -> bool:
        """Set the flag to ``new`` if it currently equals ``expected``.

        Returns:
            True if this call changed the flag
        """
        with self._lock:
            if self._set != expected:
                return False
            self._set = new
            return True

    def is_set(self) -> bool:
        return self._set
