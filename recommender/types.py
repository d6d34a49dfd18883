from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from .errors import InvalidRecord


def str_tuple(values: Optional[Iterable[Any]], name: str = "values") -> Tuple[str, ...]:
    if values is None or values == "":
        return ()
    if isinstance(values, str):
        values = [values]
    elif not isinstance(values, (list, tuple)):
        raise InvalidRecord(f"{name} must be a list of strings")
    return tuple(str(v).strip() for v in values if v is not None and str(v).strip())


def parse_year(value: Any) -> Optional[int]:
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Record:
    id: int
    title: str
    description: str = ""
    genres: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()
    year: Optional[int] = None
    poster: str = ""

    def text(self) -> str:
        """Lexical text used for indexing: title, keywords and description."""
        return " ".join(p for p in (self.title, " ".join(self.keywords), self.description) if p)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "genres": list(self.genres),
            "keywords": list(self.keywords),
            "poster": self.poster,
            "desc": self.description,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any], id: Optional[int] = None) -> "Record":
        if not isinstance(d, dict):
            raise InvalidRecord(f"record must be an object, got {type(d).__name__}")
        # Stored files use "desc"; older front-end data used "description"
        rid = id if id is not None else d.get("id")
        if rid is None:
            raise InvalidRecord("record is missing an id")
        try:
            rid = int(rid)
        except (TypeError, ValueError):
            raise InvalidRecord(f"record id must be an integer, got {rid!r}")
        title = str(d.get("title") or "").strip()
        if not title:
            raise InvalidRecord("Missing title")
        return cls(
            id=rid,
            title=title,
            description=str(d.get("desc") or d.get("description") or ""),
            genres=str_tuple(d.get("genres"), "genres"),
            keywords=str_tuple(d.get("keywords"), "keywords"),
            year=parse_year(d.get("year")),
            poster=str(d.get("poster") or ""),
        )


@dataclass(frozen=True)
class ScoredRecord:
    record_id: int
    score: float
