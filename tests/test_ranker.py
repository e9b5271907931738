# tests/test_ranker.py

import numpy as np
import pytest

from core.errors import ModelError
from core.models.domain import GalleryEntry, GalleryIndex
from core.search.ranker import CosineRanker, cosine_similarity


def make_index(vectors):
    entries = [
        GalleryEntry(identifier=f"dog_{i}.jpg", display_name=f"dog_{i}", embedding=np.asarray(v, dtype=np.float32))
        for i, v in enumerate(vectors)
    ]
    return GalleryIndex(entries, model_name="test")


@pytest.fixture
def random_index():
    rng = np.random.default_rng(7)
    return make_index(rng.normal(size=(12, 16)))


@pytest.fixture
def ranker():
    return CosineRanker()


def test_scores_are_non_increasing(ranker, random_index):
    query = np.random.default_rng(3).normal(size=16)
    results = ranker.rank(query, random_index, top_k=12)

    scores = [score for _, score in results]
    assert len(results) == 12
    assert all(a >= b for a, b in zip(scores, scores[1:]))


@pytest.mark.parametrize("top_k", [0, -1, -10])
def test_non_positive_top_k_returns_nothing(ranker, random_index, top_k):
    assert ranker.rank(np.ones(16), random_index, top_k=top_k) == []


def test_top_k_larger_than_index_returns_everything(ranker, random_index):
    results = ranker.rank(np.ones(16), random_index, top_k=100)
    assert {entry.identifier for entry, _ in results} == set(random_index.identifiers)


def test_top_k_truncates(ranker, random_index):
    assert len(ranker.rank(np.ones(16), random_index, top_k=5)) == 5


def test_cosine_is_symmetric():
    rng = np.random.default_rng(11)
    a, b = rng.normal(size=32), rng.normal(size=32)
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a), abs=1e-12)


def test_self_similarity_is_one(ranker):
    v = np.random.default_rng(5).normal(size=32)
    assert cosine_similarity(v, v) == pytest.approx(1.0, abs=1e-6)

    index = make_index([v * 3.0])
    [(_, score)] = ranker.rank(v, index, top_k=1)
    assert score == pytest.approx(1.0, abs=1e-6)


def test_ranking_is_deterministic(ranker, random_index):
    query = np.random.default_rng(9).normal(size=16)
    first = [(e.identifier, s) for e, s in ranker.rank(query, random_index, top_k=8)]
    second = [(e.identifier, s) for e, s in ranker.rank(query, random_index, top_k=8)]
    assert first == second


def test_ties_keep_insertion_order(ranker):
    index = make_index([[1, 0], [0, 1], [2, 0], [5, 0]])
    results = ranker.rank(np.array([1.0, 0.0]), index, top_k=4)
    assert [e.identifier for e, _ in results] == ["dog_0.jpg", "dog_2.jpg", "dog_3.jpg", "dog_1.jpg"]


def test_zero_magnitude_entries_are_skipped(ranker):
    index = make_index([[0, 0, 0], [1, 1, 0], [0, 0, 0]])
    results = ranker.rank(np.array([1.0, 0.0, 0.0]), index, top_k=5)
    assert [e.identifier for e, _ in results] == ["dog_1.jpg"]
    assert all(np.isfinite(score) for _, score in results)


def test_zero_magnitude_query_matches_nothing(ranker, random_index):
    assert ranker.rank(np.zeros(16), random_index, top_k=5) == []
    assert np.isnan(cosine_similarity(np.zeros(4), np.ones(4)))


def test_empty_index_returns_empty_list(ranker):
    assert ranker.rank(np.ones(8), GalleryIndex([]), top_k=5) == []


def test_dimension_mismatch_is_a_model_error(ranker, random_index):
    with pytest.raises(ModelError):
        ranker.rank(np.ones(4), random_index, top_k=3)


def test_identical_vector_ranks_first(ranker, random_index):
    target = random_index.entries[6]
    results = ranker.rank(np.array(target.embedding), random_index, top_k=5)
    assert results[0][0].identifier == target.identifier
    assert results[0][1] == max(score for _, score in results)


def test_non_finite_entries_are_skipped(ranker):
    index = make_index([[1, 0], [np.inf, 0], [0, 1], [np.nan, 1]])
    results = ranker.rank(np.array([1.0, 0.0]), index, top_k=4)

    assert [e.identifier for e, _ in results] == ["dog_0.jpg", "dog_2.jpg"]
    assert all(np.isfinite(score) for _, score in results)
