"""
Evaluation registry for permission-check listeners.

ONLY handles listener registration, ordering, and execution.
"""

import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

# (allcaps, requested caps, call args, user) -> updated allcaps
CapabilityListener = Callable[[Dict[str, bool], Sequence[str], Sequence[Any], Any], Dict[str, bool]]

logger = logging.getLogger(__name__)


class EvaluationRegistry:
    """
    Ordered registry of permission-check listeners keyed by priority.

    Listeners run in ascending priority; within a priority they run in
    registration order, so a later registration sees, and can overwrite,
    the output of an earlier one.
    """

    def __init__(self):
        self._listeners: Dict[int, List[CapabilityListener]] = defaultdict(list)
        self._lock = threading.RLock()

    def register(self, listener: CapabilityListener, priority: int) -> None:
        """
        Register a listener at a priority.

        Args:
            listener: Callable receiving (allcaps, caps, args, user)
            priority: Execution priority, lower runs first
        """
        with self._lock:
            self._listeners[priority].append(listener)

        logger.debug(f"Registered listener {_describe(listener)} at priority {priority}")

    def unregister(self, listener: CapabilityListener, priority: int) -> bool:
        """
        Remove a listener registered at a priority.

        Returns:
            True if the listener was found and removed
        """
        with self._lock:
            bucket = self._listeners.get(priority)
            if not bucket:
                return False

            for i, registered in enumerate(bucket):
                if registered == listener:
                    bucket.pop(i)
                    if not bucket:
                        del self._listeners[priority]
                    logger.debug(f"Unregistered listener {_describe(listener)} from priority {priority}")
                    return True

        return False

    def has_listener(self, listener: CapabilityListener, priority: Optional[int] = None) -> bool:
        """Check if a listener is registered, optionally at a specific priority."""
        with self._lock:
            if priority is not None:
                return listener in self._listeners.get(priority, [])
            return any(listener in bucket for bucket in self._listeners.values())

    def listeners(self) -> List[Tuple[int, CapabilityListener]]:
        """Snapshot of (priority, listener) pairs in execution order."""
        with self._lock:
            return [
                (priority, listener)
                for priority in sorted(self._listeners)
                for listener in self._listeners[priority]
            ]

    def apply(
        self,
        allcaps: Dict[str, bool],
        caps: Sequence[str],
        args: Sequence[Any],
        user: Any
    ) -> Dict[str, bool]:
        """
        Run every listener over a user's capabilities.

        Args:
            allcaps: Capabilities the user holds so far
            caps: Primitive capabilities being checked
            args: Extra arguments of the check, typically an object ID
            user: The user being checked

        Returns:
            The capability map after every listener has run
        """
        result = dict(allcaps)
        for _, listener in self.listeners():
            result = listener(result, caps, args, user)
        return result

    def clear(self) -> None:
        """Remove every listener."""
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        with self._lock:
            return sum(len(bucket) for bucket in self._listeners.values())


def _describe(listener: CapabilityListener) -> str:
    owner = getattr(listener, "__self__", None)
    if owner is not None:
        return repr(owner)
    return getattr(listener, "__qualname__", repr(listener))


_evaluation_registry_instance: Optional[EvaluationRegistry] = None


def get_evaluation_registry() -> EvaluationRegistry:
    """Get the process-wide evaluation registry, creating it on first use."""
    global _evaluation_registry_instance
    if _evaluation_registry_instance is None:
        _evaluation_registry_instance = EvaluationRegistry()
    return _evaluation_registry_instance


def set_evaluation_registry(registry: Optional[EvaluationRegistry]) -> None:
    """Replace the process-wide registry. None resets to a fresh default."""
    global _evaluation_registry_instance
    _evaluation_registry_instance = registry


def reset_evaluation_registry() -> None:
    """Drop every policy registered in the process-wide registry."""
    set_evaluation_registry(None)
