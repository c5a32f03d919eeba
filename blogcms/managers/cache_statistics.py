"""Cache hit/miss counters."""

from dataclasses import asdict, dataclass, field
from threading import Lock
from typing import Any

from blogcms.utils.timezone import to_pkt_iso


@dataclass
class CacheStatistics:
    hits: int = 0
    misses: int = 0
    sets: int = 0
    deletes: int = 0
    errors: int = 0
    created_at: str = field(default_factory=to_pkt_iso)
    last_updated_at: str = field(default_factory=to_pkt_iso)
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)

    def _bump(self, counter: str) -> None:
        with self._lock:
            setattr(self, counter, getattr(self, counter) + 1)
            self.last_updated_at = to_pkt_iso()

    def record_hit(self) -> None:
        self._bump("hits")

    def record_miss(self) -> None:
        self._bump("misses")

    def record_set(self) -> None:
        self._bump("sets")

    def record_delete(self) -> None:
        self._bump("deletes")

    def record_error(self) -> None:
        self._bump("errors")

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return round(self.hits / total, 4) if total else 0.0

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            data = {k: v for k, v in asdict(self).items() if not k.startswith("_")}
        data["hit_rate"] = self.hit_rate
        return data
