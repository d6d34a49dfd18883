from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import settings
from .data_loader import load_records, save_records
from .index import IndexSnapshot, build_index
from .types import Record, ScoredRecord

logger = logging.getLogger(__name__)


class MovieCatalog:
    """
    Owns the movie records and the index snapshot built from them.

    Writers (add, rebuild) serialize on a lock and swap in a freshly built
    snapshot; readers take ``self.index`` once and never lock.
    """

    def __init__(self, path: Optional[Path] = None, genre_weight: Optional[float] = None):
        self.path = Path(path or settings.movies_file)
        self.genre_weight = settings.genre_weight if genre_weight is None else genre_weight
        self._records: List[Record] = []
        self._index: IndexSnapshot = build_index([], self.genre_weight)
        self._lock = threading.Lock()

    @classmethod
    def from_records(cls, records: Sequence[Record], path: Optional[Path] = None, **kwargs) -> "MovieCatalog":
        cat = cls(path, **kwargs)
        with cat._lock:
            cat._records = list(records)
            cat._index = build_index(cat._records, cat.genre_weight)
        return cat

    @property
    def index(self) -> IndexSnapshot:
        return self._index

    def load(self) -> "MovieCatalog":
        records = load_records(self.path)
        with self._lock:
            self._records = records
            self._index = build_index(records, self.genre_weight)
        return self

    def rebuild(self) -> IndexSnapshot:
        with self._lock:
            self._index = build_index(self._records, self.genre_weight)
            return self._index

    def records(self) -> List[Record]:
        return list(self._records)

    def get(self, record_id: int) -> Record:
        return self._index.record(record_id)

    def genres(self) -> List[str]:
        return sorted({g for r in self._records for g in r.genres})

    def next_id(self) -> int:
        return max((r.id for r in self._records), default=0) + 1

    def add(self, payload: Dict[str, Any]) -> Record:
        return self.add_many([payload])[0]

    def add_many(self, payloads: Iterable[Dict[str, Any]]) -> List[Record]:
        """Append new records, persist the corpus and rebuild once."""
        with self._lock:
            previous = self._records
            next_id = self.next_id()
            added = []
            for p in payloads:
                added.append(Record.from_dict(p, id=next_id))
                next_id += 1
            records = previous + added
            try:
                save_records(self.path, records)
            except OSError:
                logger.exception("Failed to save %d new record(s) to %s", len(added), self.path)
                raise
            self._records = records
            self._index = build_index(records, self.genre_weight)
        return added


def scored_movies(index: IndexSnapshot, results: Sequence[ScoredRecord]) -> List[Dict[str, Any]]:
    """Movie dicts for ranked results with the score rounded to 4 places."""
    return [{**index.record(r.record_id).to_dict(), "score": round(r.score, 4)} for r in results]
