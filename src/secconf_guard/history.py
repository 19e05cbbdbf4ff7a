from __future__ import annotations

import threading
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class HistoryEntry:
    """One accepted change. ``before`` is None for adds, ``after`` for removals."""

    timestamp: datetime
    modified_by: str
    reason: str
    operation: str
    kind: str
    name: str
    before: Optional[Dict[str, Any]]
    after: Optional[Dict[str, Any]]

    @property
    def target(self) -> str:
        return f"{self.operation} {self.kind}:{self.name}"


def _copy(mapping: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    return None if mapping is None else dict(mapping)


class History:
    """Audit trail of security config changes the store has committed.

    Rejected changes never reach it. With ``max_entries`` set the oldest entries
    are discarded first.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        self._guard = threading.RLock()
        self._log: Deque[HistoryEntry] = deque(maxlen=max_entries)

    def add_entry(
        self,
        *,
        modified_by: str,
        reason: Optional[str],
        operation: str,
        kind: str,
        name: str,
        before: Optional[Mapping[str, Any]],
        after: Optional[Mapping[str, Any]],
    ) -> HistoryEntry:
        entry = HistoryEntry(
            timestamp=datetime.now(tz=timezone.utc),
            modified_by=modified_by,
            reason=reason or "",
            operation=operation,
            kind=kind,
            name=name,
            before=_copy(before),
            after=_copy(after),
        )
        with self._guard:
            self._log.append(entry)
        return entry

    def all_entries(self) -> List[HistoryEntry]:
        with self._guard:
            return list(self._log)

    def entries_for(self, kind: str, name: str) -> List[HistoryEntry]:
        with self._guard:
            return [e for e in self._log if (e.kind, e.name) == (kind, name)]

    def clear(self) -> None:
        with self._guard:
            self._log.clear()

    def __len__(self) -> int:
        with self._guard:
            return len(self._log)

    @property
    def last_change(self) -> Dict[str, str]:
        with self._guard:
            last = self._log[-1] if self._log else None
        if last is None:
            return dict.fromkeys(("modified_by", "modified_at", "change_reason", "target"), "")
        return {
            "modified_by": last.modified_by,
            "modified_at": last.timestamp.isoformat(),
            "change_reason": last.reason,
            "target": last.target,
        }

    def formatted_entries(self) -> List[Dict[str, Any]]:
        """Entries as JSON-friendly dicts, timestamps in ISO format."""
        out = []
        for entry in self.all_entries():
            row = asdict(entry)
            row["timestamp"] = entry.timestamp.isoformat()
            out.append(row)
        return out
