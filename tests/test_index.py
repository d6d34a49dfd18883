import math

import pytest

from recommender.errors import InvalidRecord, RecordNotFound
from recommender.index import build_index
from recommender.types import Record
from recommender.vectorizer import norm


def test_rebuild_is_deterministic(scenario_records):
    a = build_index(scenario_records)
    b = build_index(list(scenario_records))
    assert a.vocabulary == b.vocabulary
    assert a.vocabulary.term_index == b.vocabulary.term_index
    assert a.vectors == b.vectors
    assert a.ids == b.ids


def test_vectors_are_unit_length(scenario_records):
    index = build_index(scenario_records)
    for rid in index.ids:
        vec = index.vector_of(rid)
        assert vec
        assert math.isclose(norm(vec), 1.0, abs_tol=1e-9)


def test_vector_of_unknown_id():
    index = build_index([Record(id=1, title="Space War")])
    with pytest.raises(RecordNotFound):
        index.vector_of(999)
    assert 1 in index
    assert 999 not in index


def test_empty_corpus_builds_empty_snapshot():
    index = build_index([])
    assert index.is_empty()
    assert len(index) == 0
    assert index.vocabulary.is_empty()


def test_duplicate_ids_rejected():
    with pytest.raises(InvalidRecord):
        build_index([Record(id=1, title="A"), Record(id=1, title="B")])


def test_record_made_only_of_stopwords_gets_zero_vector():
    index = build_index([Record(id=1, title="The"), Record(id=2, title="Space")])
    assert index.vector_of(1) == {}


def test_keywords_are_part_of_lexical_text():
    index = build_index([Record(id=1, title="Heist", keywords=("bank",))])
    assert "bank" in index.vocabulary.term_index
    assert index.tokens[1] == ("heist", "bank")


def test_new_build_leaves_old_snapshot_untouched(scenario_records):
    old = build_index(scenario_records[:2])
    new = build_index(scenario_records)
    assert len(old) == 2
    assert 3 not in old
    assert 3 in new


def test_snapshot_mappings_are_read_only(scenario_records):
    index = build_index(scenario_records)
    with pytest.raises(TypeError):
        index.vectors[99] = {}
    with pytest.raises(TypeError):
        index.vectors[1][0] = 5.0
    with pytest.raises(TypeError):
        index.records[99] = scenario_records[0]
    with pytest.raises(TypeError):
        index.tokens[1] = ()
    with pytest.raises(TypeError):
        index.vocabulary.term_index["new"] = 0
    with pytest.raises(TypeError):
        index.vocabulary.genre_index["new"] = 0
