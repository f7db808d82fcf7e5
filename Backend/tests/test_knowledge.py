"""Tests for knowledge-base retrieval used by the medical assistant."""
import pytest

from triage.knowledge import (
    KNOWLEDGE_BASE,
    cosine_similarity,
    embed_query,
    format_context,
    retrieve,
)


class TestEmbedding:

    def test_no_topic(self):
        assert embed_query("What should I do?") is None

    def test_average_of_topics(self):
        cut, burn = embed_query("cut"), embed_query("burn")
        both = embed_query("a cut next to a burn")
        assert both == pytest.approx(tuple((a + b) / 2 for a, b in zip(cut, burn)))

    def test_cosine(self):
        assert cosine_similarity((1, 0), (1, 0)) == pytest.approx(1.0)
        assert cosine_similarity((0, 0), (1, 0)) == 0.0
        with pytest.raises(ValueError):
            cosine_similarity((1, 0), (1, 0, 0))


class TestRetrieve:

    def test_burn_question(self):
        results = retrieve("How do I treat a burn blister?")
        assert results[0].entry.id == "burns"
        assert results[0].similarity == pytest.approx(1.05)
        assert len(results) == 3

    def test_visual_keyword_breaks_near_ties(self):
        assert retrieve("sprained ankle")[0].entry.id == "ankle_injuries"

    def test_visual_keywords_only(self):
        results = retrieve("my skin looks pale")
        assert results[0].entry.id == "bleeding"
        assert results[0].similarity == pytest.approx(0.1)

    def test_unrelated_query(self):
        assert retrieve("What should I do?") == []

    def test_top_k(self):
        assert len(retrieve("knee injury from sport", top_k=5)) == 5

    def test_embeddings_share_one_space(self):
        assert {len(entry.embedding) for entry in KNOWLEDGE_BASE} == {10}


class TestFormatContext:

    def test_empty(self):
        assert format_context([]) == ""

    def test_entries_are_numbered_with_match(self):
        text = format_context(retrieve("How do I treat a burn blister?", top_k=1))
        assert "1. Burns (105% match):" in text
        assert "EMERGENCY SIGNS: burns larger than 3 inches in diameter" in text
        assert "VISUAL INDICATORS:" in text

    def test_to_dict(self):
        source = retrieve("How do I treat a burn blister?")[0].to_dict()
        assert source == {"id": "burns", "title": "Burns", "similarity": 1.05}
