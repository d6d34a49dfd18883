import math

from recommender.vocabulary import build_vocabulary, genre_key, idf_table


def test_terms_sorted_and_dense():
    vocab = build_vocabulary([["war", "space", "war"], ["love", "space"]])
    assert vocab.terms == ("love", "space", "war")
    assert vocab.term_index == {"love": 0, "space": 1, "war": 2}


def test_document_frequency_counts_distinct_terms_per_doc():
    vocab = build_vocabulary([["war", "war", "space"], ["space"]])
    assert dict(zip(vocab.terms, vocab.df)) == {"space": 2, "war": 1}


def test_smoothed_idf():
    vocab = build_vocabulary([["space", "war"], ["space", "love"], ["story"]])
    idf = idf_table(vocab)
    assert math.isclose(idf["space"], math.log(3 / 3) + 1)
    assert math.isclose(idf["war"], math.log(3 / 2) + 1)
    assert all(w >= 0 for w in vocab.idf)


def test_idf_positive_when_term_in_every_document():
    vocab = build_vocabulary([["space"], ["space"]])
    assert vocab.idf[0] > 0


def test_genre_dimensions_follow_lexical_range():
    vocab = build_vocabulary([["action"], ["quiet"]], [["Action"], ["Drama", "action"]])
    assert vocab.genres == ("action", "drama")
    assert vocab.genre_index == {"action": 2, "drama": 3}
    assert vocab.term_index["action"] == 0
    assert vocab.size == 4


def test_empty_corpus():
    vocab = build_vocabulary([])
    assert vocab.is_empty()
    assert vocab.terms == ()
    assert vocab.size == 0


def test_genre_key_is_case_insensitive():
    assert genre_key(" SciFi ") == genre_key("scifi")
