from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Dict, List, Literal, Optional, Tuple

if TYPE_CHECKING:
    from secconf_guard.snapshot import SecuritySnapshot

logger = logging.getLogger("secconf_guard.hooks")
logger.addHandler(logging.NullHandler())

Hook = Callable[["SecuritySnapshot"], None]
FailureMode = Literal["ignore", "log", "raise"]

_FAILURE_MODES: Tuple[str, ...] = ("ignore", "log", "raise")


class HookBus:
    """Listeners notified with the new snapshot once a change has been committed.

    Hooks run in registration order. A failing hook never undoes the change; the
    failure mode only decides whether the error is dropped, logged or re-raised.
    """

    def __init__(self, failure_mode: FailureMode = "log") -> None:
        if failure_mode not in _FAILURE_MODES:
            raise ValueError(
                f"Unknown hook failure mode {failure_mode!r}; use one of {_FAILURE_MODES}"
            )
        self._mode = failure_mode
        self._listeners: Dict[str, Hook] = {}

    def register(self, func: Hook, *, name: Optional[str] = None) -> str:
        """Add ``func`` and return the name it can later be removed by."""
        if not callable(func):
            raise TypeError(f"Post-update hook must be callable, got {type(func).__name__}")
        key = name or f"{getattr(func, '__qualname__', type(func).__name__)}#{id(func)}"
        self._listeners[key] = func
        return key

    def unregister(self, name: str) -> bool:
        return self._listeners.pop(name, None) is not None

    def run(self, snapshot: "SecuritySnapshot") -> List[str]:
        """Notify every listener and return the names of those that failed."""
        failed: List[str] = []
        for key, listener in list(self._listeners.items()):
            try:
                listener(snapshot)
            except Exception as exc:
                if self._mode == "raise":
                    raise
                failed.append(key)
                if self._mode == "log":
                    logger.error("Post-update hook %s failed: %s", key, exc)
                else:
                    logger.debug("Post-update hook %s failed, ignored: %s", key, exc)
        return failed

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)
