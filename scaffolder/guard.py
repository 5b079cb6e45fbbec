"""Per-repository mutual exclusion for provisioning runs."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager

from scaffolder.exceptions import ClassifiedError, ErrorKind
from scaffolder.logging import get_logger

logger = get_logger("guard")


class ProvisioningGuard:
    """
    Process-local table of repository names with a saga in flight.

    - At most one holder per name; a second caller is rejected, not queued.
    - Names are compared case-insensitively.
    - Safe for concurrent use from multiple threads.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._held: set[str] = set()

    def try_acquire(self, name: str) -> bool:
        key = name.lower()
        with self._lock:
            if key in self._held:
                return False
            self._held.add(key)
            return True

    def release(self, name: str) -> None:
        with self._lock:
            self._held.discard(name.lower())

    def is_held(self, name: str) -> bool:
        with self._lock:
            return name.lower() in self._held

    @contextmanager
    def hold(self, name: str) -> Iterator[None]:
        """
        Hold the lock for ``name`` for the duration of the block.

        Raises:
            ClassifiedError: PROVISIONING_IN_PROGRESS if another run holds it
        """
        if not self.try_acquire(name):
            logger.warning(f"Provisioning of {name} is already in progress")
            raise ClassifiedError(
                ErrorKind.PROVISIONING_IN_PROGRESS,
                f"Provisioning of {name} is already in progress",
            )
        try:
            yield
        finally:
            self.release(name)
