from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Protocol, Union

from typing_extensions import runtime_checkable

logger = logging.getLogger("secconf_guard.store")
logger.addHandler(logging.NullHandler())


@runtime_checkable
class PersistanceAdapterProtocol(Protocol):
    def save(self, config: Dict[str, Any]) -> None: ...

    def load(self) -> Dict[str, Any]: ...


class JsonFileAdapter:
    """Keeps the store mapping in a single JSON document, replaced atomically on save."""

    def __init__(self, path: Union[str, Path]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Dict[str, Any]:
        if not self._path.exists():
            logger.debug("No security config document at %s; starting empty", self._path)
            return {}
        with self._path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    def save(self, config: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".secconf-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(config, fh, indent=2, sort_keys=True)
            os.replace(tmp, self._path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise
        logger.debug("Saved security config document to %s", self._path)
