from __future__ import annotations

from typing import Any, Dict, List, Sequence

from rank_bm25 import BM25Okapi

from .index import IndexSnapshot
from .ranker import rank_by_query
from .tokenizer import tokenize_filtered
from .vocabulary import genre_key


def bm25_scores(index: IndexSnapshot, text: str) -> Dict[int, float]:
    """BM25 keyword scores of ``text`` against every document in the snapshot."""
    if index.is_empty():
        return {}
    corpus = [list(index.tokens[rid]) for rid in index.ids]
    # BM25Okapi divides by the average document length
    if not any(corpus):
        return {rid: 0.0 for rid in index.ids}
    bm25 = BM25Okapi(corpus)
    scores = bm25.get_scores(tokenize_filtered(text))
    return {rid: float(sc) for rid, sc in zip(index.ids, scores)}


def trace_query(index: IndexSnapshot, text: str, top_n: int, genres: Sequence[str] = ()) -> Dict[str, Any]:
    """Side-by-side view of the cosine ranking and a BM25 keyword ranking."""
    query_terms = tokenize_filtered(text)
    known = [t for t in query_terms if t in index.vocabulary.term_index]
    wanted = {genre_key(g) for g in genres}

    kw = bm25_scores(index, text)
    top_kw = sorted(kw.items(), key=lambda x: (-x[1], x[0]))[: max(0, top_n)]

    combined: List[Dict[str, Any]] = []
    for r in rank_by_query(index, text, top_n, genres):
        rec = index.record(r.record_id)
        combined.append({
            "id": r.record_id,
            "title": rec.title,
            "cosine": r.score,
            "bm25": kw.get(r.record_id, 0.0),
            "matched_terms": sorted(set(known) & set(index.tokens[r.record_id])),
            "matched_genres": [g for g in rec.genres if genre_key(g) in wanted],
        })

    return {
        "query": text,
        "terms": query_terms,
        "dropped_terms": [t for t in query_terms if t not in index.vocabulary.term_index],
        "cosine": combined,
        "bm25": [{"id": rid, "bm25": sc} for rid, sc in top_kw],
        "built_at": index.built_at.isoformat() if index.built_at else None,
    }
