from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import List, Mapping, Optional, Sequence, Tuple

from .errors import InvalidRecord, RecordNotFound
from .tokenizer import tokenize_filtered
from .types import Record
from .vectorizer import DEFAULT_GENRE_WEIGHT, FeatureVector, vectorize
from .vocabulary import Vocabulary, build_vocabulary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexSnapshot:
    """One immutable generation of the index, built from one corpus snapshot."""

    vocabulary: Vocabulary
    ids: Tuple[int, ...]
    vectors: Mapping[int, Mapping[int, float]]
    records: Mapping[int, Record]
    tokens: Mapping[int, Tuple[str, ...]]
    genre_weight: float = DEFAULT_GENRE_WEIGHT
    built_at: Optional[datetime] = field(default=None, compare=False)

    def __len__(self) -> int:
        return len(self.ids)

    def __contains__(self, record_id) -> bool:
        return record_id in self.vectors

    def is_empty(self) -> bool:
        return not self.ids

    def vector_of(self, record_id: int) -> Mapping[int, float]:
        try:
            return self.vectors[record_id]
        except KeyError:
            raise RecordNotFound(record_id) from None

    def record(self, record_id: int) -> Record:
        try:
            return self.records[record_id]
        except KeyError:
            raise RecordNotFound(record_id) from None

    def vectorize_query(self, text: str, genres: Sequence[str] = ()) -> FeatureVector:
        return vectorize(tokenize_filtered(text), genres, self.vocabulary, self.genre_weight)


def build_index(records: Sequence[Record], genre_weight: float = DEFAULT_GENRE_WEIGHT) -> IndexSnapshot:
    """Build (or rebuild) a snapshot from scratch. Returns the new snapshot."""
    ids: List[int] = []
    seen = set()
    for r in records:
        if r.id in seen:
            raise InvalidRecord(f"duplicate record id {r.id!r}")
        seen.add(r.id)
        ids.append(r.id)

    docs = [tuple(tokenize_filtered(r.text())) for r in records]
    vocab = build_vocabulary(docs, [r.genres for r in records])
    if vocab.is_empty():
        logger.info("Index built from an empty corpus; queries will return no results")

    vectors = {
        r.id: MappingProxyType(vectorize(toks, r.genres, vocab, genre_weight))
        for r, toks in zip(records, docs)
    }

    snapshot = IndexSnapshot(
        vocabulary=vocab,
        ids=tuple(ids),
        vectors=MappingProxyType(vectors),
        records=MappingProxyType({r.id: r for r in records}),
        tokens=MappingProxyType({r.id: toks for r, toks in zip(records, docs)}),
        genre_weight=genre_weight,
        built_at=datetime.now(timezone.utc),
    )
    logger.info(
        "Index built: %d docs, vocab=%d, genres=%d",
        len(ids), len(vocab.terms), len(vocab.genres),
    )
    return snapshot
