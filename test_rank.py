import math
from functools import cmp_to_key

import pytest

from TermSearch.rank.rank import Rank, RankConfig, compute_idf, compute_tf
from TermSearch.structures import TermSource


def make_rank(query_terms, frequencies, number_of_sources=0, **kwargs):
    rank = Rank(**kwargs)
    rank.set_query_terms(query_terms)
    rank.set_number_of_sources(number_of_sources)
    rank.set_term_frequencies({TermSource(t, s): f for (t, s), f in frequencies.items()})
    return rank


def test_compute_tf():
    assert compute_tf(0) == 0.0
    assert compute_tf(1) == 1.0
    assert compute_tf(10) == pytest.approx(2.0)
    assert compute_tf(10, sublinear=False) == 10.0


def test_compute_idf():
    assert compute_idf(0, 3) == 1.0
    assert compute_idf(5, 0) == 1.0
    assert compute_idf(9, 1) == pytest.approx(1.0)
    assert compute_idf(4, 2) == pytest.approx(math.log10(3))


def test_percentage_is_the_primary_key():
    rank = make_rank(["cat"], {("cat", "a"): 50, ("cat", "b"): 1})

    ordered = rank.sort([("a", 50), ("b", 100)])

    assert ordered == [("b", 100), ("a", 50)]


def test_score_is_the_secondary_key():
    rank = make_rank(["cat"], {("cat", "a"): 1, ("cat", "b"): 4})

    assert rank.sort([("a", 100), ("b", 100)]) == [("b", 100), ("a", 100)]


def test_identifier_is_the_tertiary_key():
    rank = make_rank(["cat"], {("cat", "a"): 2, ("cat", "b"): 2, ("cat", "c"): 2})

    assert rank.sort([("c", 100), ("a", 100), ("b", 100)]) == [("a", 100), ("b", 100), ("c", 100)]


def test_comparator_is_a_strict_order():
    rank = make_rank(["cat"], {("cat", "a"): 1, ("cat", "b"): 1})
    compare = rank.get_comparator()

    assert compare(("a", 100), ("a", 100)) == 0
    assert compare(("a", 100), ("b", 100)) < 0
    assert compare(("b", 100), ("a", 100)) > 0


def test_query_term_repetition_weighs_score():
    rank = make_rank(["cat", "cat", "dog"], {("dog", "a"): 1, ("cat", "b"): 1})

    assert rank.score("a") == pytest.approx(1.0)
    assert rank.score("b") == pytest.approx(2.0)
    assert rank.sort([("a", 50), ("b", 50)]) == [("b", 50), ("a", 50)]


def test_query_terms_are_sanitized():
    rank = make_rank(["Cat!", "", "  "], {("cat", "a"): 1})

    assert rank.score("a") == pytest.approx(1.0)
    assert rank.score("missing") == 0.0


def test_idf_uses_corpus_size_and_document_frequency():
    frequencies = {("cat", "a"): 1, ("cat", "b"): 1, ("zebra", "b"): 1}
    rank = make_rank(["cat", "zebra"], frequencies, number_of_sources=4)

    assert rank.score("a") == pytest.approx(math.log10(1 + 4 / 2))
    assert rank.score("b") == pytest.approx(math.log10(3) + math.log10(5))


def test_idf_can_be_disabled():
    frequencies = {("cat", "a"): 1, ("zebra", "b"): 1, ("cat", "c"): 1}
    rank = make_rank(["cat", "zebra"], frequencies, number_of_sources=3, use_idf=False)

    assert rank.score("a") == rank.score("b") == 1.0


def test_raw_tf():
    rank = make_rank(["cat"], {("cat", "a"): 3}, sublinear_tf=False)

    assert rank.score("a") == pytest.approx(3.0)


def test_set_term_frequencies_copies():
    frequencies = {TermSource("cat", "a"): 1}
    rank = Rank()
    rank.set_term_frequencies(frequencies)

    frequencies[TermSource("cat", "a")] = 100

    assert rank.config.term_frequencies[TermSource("cat", "a")] == 1


def test_configure_replaces_config():
    rank = Rank()
    config = RankConfig(query_terms=("cat",), number_of_sources=1,
                        term_frequencies={TermSource("cat", "a"): 2})
    rank.configure(config)

    assert rank.config is config
    assert sorted([("b", 100), ("a", 100)], key=cmp_to_key(rank.get_comparator())) == [("a", 100), ("b", 100)]


def test_from_config_reads_ranking_section():
    rank = Rank.from_config({"ranking": {"use_idf": False, "sublinear_tf": False}})

    assert rank.use_idf is False
    assert rank.sublinear_tf is False


def test_empty_config_ranks_by_identifier():
    rank = Rank()

    assert rank.sort([("b", 0), ("a", 0)]) == [("a", 0), ("b", 0)]


def test_scorer_matches_score():
    frequencies = {("cat", "a"): 10, ("cat", "b"): 1}
    rank = make_rank(["cat"], frequencies, number_of_sources=2)

    score = rank.scorer()

    assert score("a") == rank.score("a") == pytest.approx(2 * math.log10(2))
    assert score("b") == rank.score("b")
    assert score("missing") == 0.0
