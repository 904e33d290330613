"""
Estimate Cache

Explicit, injectable memoization for day estimates. Entries are keyed on
a SHA-256 digest of every input that can change the result, so any change
to the project, its milestones, its events, the work-hour settings, the
holidays or the requested range yields a new key.
"""

import hashlib
import json
import threading
from collections import OrderedDict
from typing import Iterable, List, Optional, Tuple

from planline.platform.config import settings as app_settings

from .schemas import CalendarEvent, DateRange, DayEstimate, Holiday, Milestone, Project, WorkHourSettings


def estimate_cache_key(
    project: Project,
    milestones: Iterable[Milestone],
    events: Iterable[CalendarEvent],
    work_settings: WorkHourSettings,
    holidays: Iterable[Holiday],
    date_range: DateRange,
) -> str:
    """Digest of the inputs, restricted to this project's milestones and events."""
    payload = {
        "project": project.model_dump(mode="json"),
        "milestones": [
            m.model_dump(mode="json") for m in milestones if m.project_id == project.id
        ],
        "events": [
            e.model_dump(mode="json") for e in events if e.project_id == project.id
        ],
        "settings": work_settings.model_dump(mode="json"),
        "holidays": [h.model_dump(mode="json") for h in holidays],
        "range": date_range.model_dump(mode="json"),
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class EstimateCache:
    """Bounded LRU cache of day-estimate lists."""

    def __init__(self, max_entries: Optional[int] = None):
        self.max_entries = max_entries if max_entries is not None else app_settings.ESTIMATE_CACHE_MAX_ENTRIES
        self._entries: "OrderedDict[str, Tuple[DayEstimate, ...]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[List[DayEstimate]]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return list(entry)

    def put(self, key: str, estimates: Iterable[DayEstimate]) -> None:
        with self._lock:
            self._entries[key] = tuple(estimates)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def invalidate(self, key: str) -> bool:
        """Drop one entry. Returns True if it existed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
