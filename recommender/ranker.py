from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .index import IndexSnapshot
from .types import ScoredRecord
from .vectorizer import FeatureVector, cosine


def _top_n(scores: Iterable[Tuple[int, float]], top_n: int) -> List[ScoredRecord]:
    # Score descending, then record id ascending
    ordered = sorted(scores, key=lambda x: (-x[1], x[0]))
    return [ScoredRecord(record_id=rid, score=sc) for rid, sc in ordered[:top_n]]


def _score_all(index: IndexSnapshot, query: FeatureVector, exclude=None) -> List[Tuple[int, float]]:
    return [
        (rid, cosine(query, index.vectors[rid]))
        for rid in index.ids
        if rid != exclude
    ]


def rank_by_record(index: IndexSnapshot, record_id: int, top_n: int) -> List[ScoredRecord]:
    """
    Records most similar to ``record_id``, excluding the record itself.

    Raises RecordNotFound when the id is not part of ``index``.
    """
    base = index.vector_of(record_id)
    top_n = max(0, top_n)
    if top_n == 0:
        return []
    return _top_n(_score_all(index, base, exclude=record_id), top_n)


def rank_by_query(
    index: IndexSnapshot,
    text: str,
    top_n: int,
    genres: Sequence[str] = (),
) -> List[ScoredRecord]:
    """Records matching free text (and optional genres); zero scores are omitted."""
    top_n = max(0, top_n)
    if top_n == 0 or index.is_empty():
        return []
    query = index.vectorize_query(text, genres)
    if not query:
        return []
    scored = [(rid, sc) for rid, sc in _score_all(index, query) if sc > 0.0]
    return _top_n(scored, top_n)
