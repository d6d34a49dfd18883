from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Sequence, Tuple


def genre_key(genre: str) -> str:
    """Normalized key for a genre/tag dimension (case-insensitive)."""
    return genre.strip().casefold()


def smoothed_idf(n_docs: int, df: int) -> float:
    return math.log(n_docs / (1 + df)) + 1.0


@dataclass(frozen=True)
class Vocabulary:
    """
    Term and genre dimensions for one index generation.

    Lexical terms occupy indices ``0 .. len(terms) - 1`` in lexicographic
    order; genre dimensions follow in the range starting at ``len(terms)``.
    """

    terms: Tuple[str, ...] = ()
    genres: Tuple[str, ...] = ()
    df: Tuple[int, ...] = ()
    idf: Tuple[float, ...] = ()
    n_docs: int = 0
    term_index: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}), compare=False)
    genre_index: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}), compare=False)

    @property
    def size(self) -> int:
        return len(self.terms) + len(self.genres)

    def is_empty(self) -> bool:
        return self.n_docs == 0


def build_vocabulary(
    documents: Sequence[Sequence[str]],
    genre_sets: Iterable[Iterable[str]] = (),
) -> Vocabulary:
    df: Counter[str] = Counter()
    for tokens in documents:
        df.update(set(tokens))

    n_docs = len(documents)
    if n_docs == 0:
        return Vocabulary()

    terms = tuple(sorted(df))
    term_index = {t: i for i, t in enumerate(terms)}

    seen_genres = {genre_key(g) for gs in genre_sets for g in gs if genre_key(g)}
    genres = tuple(sorted(seen_genres))
    offset = len(terms)
    genre_index = {g: offset + i for i, g in enumerate(genres)}

    return Vocabulary(
        terms=terms,
        genres=genres,
        df=tuple(df[t] for t in terms),
        idf=tuple(smoothed_idf(n_docs, df[t]) for t in terms),
        n_docs=n_docs,
        term_index=MappingProxyType(term_index),
        genre_index=MappingProxyType(genre_index),
    )


def idf_table(vocab: Vocabulary) -> Dict[str, float]:
    return {t: vocab.idf[i] for i, t in enumerate(vocab.terms)}
