from __future__ import annotations

import math
from collections import Counter
from typing import Dict, Iterable, Mapping, Sequence

from .vocabulary import Vocabulary, genre_key

# Sparse feature vector: dimension index -> weight
FeatureVector = Dict[int, float]

DEFAULT_GENRE_WEIGHT = 1.2


def vectorize(
    tokens: Sequence[str],
    genres: Iterable[str],
    vocab: Vocabulary,
    genre_weight: float = DEFAULT_GENRE_WEIGHT,
) -> FeatureVector:
    """
    Log-scaled TF-IDF over ``tokens`` plus one fixed-weight dimension per
    genre, L2-normalized. Terms and genres unknown to ``vocab`` are dropped.
    """
    vec: FeatureVector = {}
    for term, count in Counter(tokens).items():
        j = vocab.term_index.get(term)
        if j is None:
            continue
        vec[j] = (1.0 + math.log(count)) * vocab.idf[j]
    for g in genres:
        j = vocab.genre_index.get(genre_key(g))
        if j is None:
            continue
        # A tag listed twice still counts once
        vec[j] = genre_weight
    return l2_normalize(vec)


def l2_normalize(vec: FeatureVector) -> FeatureVector:
    norm = math.sqrt(sum(w * w for w in vec.values()))
    if norm == 0.0:
        return {}
    return {j: w / norm for j, w in vec.items() if w}


def norm(vec: FeatureVector) -> float:
    return math.sqrt(sum(w * w for w in vec.values()))


def cosine(u: Mapping[int, float], v: Mapping[int, float]) -> float:
    # Both sides are l2-normalized, so the dot product is the cosine
    if len(v) < len(u):
        u, v = v, u
    return sum(w * v.get(j, 0.0) for j, w in u.items())
