"""Tests for the task classifier."""

import pytest

from echosync.core.classifier import TaskClassifier, match_confidence
from echosync.core.config import Settings
from echosync.core.types import TaskCategory


@pytest.fixture
def classifier(settings: Settings) -> TaskClassifier:
    return TaskClassifier(settings)


class TestAnalyze:
    def test_greeting_is_conversational(self, classifier):
        analysis = classifier.analyze("hello")
        assert analysis.primary_type == TaskCategory.CONVERSATIONAL
        assert analysis.confidence == pytest.approx(0.5)
        assert analysis.suggested_nodes == ["gpt", "gemini"]

    def test_case_insensitive(self, classifier):
        assert classifier.analyze("HELLO THERE").primary_type == TaskCategory.CONVERSATIONAL

    def test_creative(self, classifier):
        analysis = classifier.analyze("Write me a short poem")
        assert analysis.primary_type == TaskCategory.CREATIVE
        assert analysis.confidence == pytest.approx(0.7)
        assert analysis.suggested_nodes == ["gpt", "claude", "gemini"]

    def test_analytical(self, classifier):
        analysis = classifier.analyze("Please analyze these results")
        assert analysis.primary_type == TaskCategory.ANALYTICAL
        assert analysis.suggested_nodes == ["claude", "perplexity"]

    def test_technical(self, classifier):
        analysis = classifier.analyze("There is a bug in my function")
        assert analysis.primary_type == TaskCategory.TECHNICAL
        assert analysis.confidence == pytest.approx(0.7)
        assert analysis.suggested_nodes == ["gpt", "claude"]

    def test_no_match_is_general(self, classifier):
        analysis = classifier.analyze("What is the weather tomorrow?")
        assert analysis.primary_type == TaskCategory.GENERAL
        assert analysis.confidence == pytest.approx(0.5)
        assert analysis.suggested_nodes == ["gpt", "gemini"]

    def test_first_matching_category_wins(self, classifier):
        # Technical has more hits but creative is scanned first
        analysis = classifier.analyze("write code to debug this api function")
        assert analysis.primary_type == TaskCategory.CREATIVE
        assert analysis.confidence == pytest.approx(0.5)

    def test_confidence_capped(self, classifier):
        analysis = classifier.analyze("write a creative story or poem, imagine an idea")
        assert analysis.confidence == pytest.approx(0.9)

    def test_informational_defaults(self, classifier):
        analysis = classifier.analyze("hello")
        assert analysis.task_complexity == 1
        assert analysis.urgency == "normal"
        assert analysis.estimated_duration == "medium"
        assert analysis.adaptive_score == pytest.approx(0.5)

    def test_deterministic(self, classifier):
        assert classifier.analyze("compare the research") == classifier.analyze("compare the research")


@pytest.mark.parametrize(
    "matches, expected",
    [(1, 0.5), (2, 0.7), (3, 0.9), (6, 0.9)],
)
def test_match_confidence(matches, expected):
    assert match_confidence(matches) == pytest.approx(expected)


class TestRatings:
    def test_record_rating(self, classifier):
        classifier.record_rating("claude", 4.5, "good summary")
        history = classifier.influence_history("claude")
        assert len(history) == 1
        assert history[0]["rating"] == 4.5
        assert history[0]["context"] == "good summary"

    def test_ratings_do_not_change_routing(self, classifier):
        before = classifier.analyze("hello")
        for _ in range(5):
            classifier.record_rating("claude", 5.0)
        assert classifier.analyze("hello") == before

    def test_history_bounded(self, tmp_path):
        classifier = TaskClassifier(Settings(_env_file=None, data_dir=tmp_path, history_limit=3))
        for rating in range(5):
            classifier.record_rating("gpt", float(rating))
        assert [h["rating"] for h in classifier.influence_history("gpt")] == [2.0, 3.0, 4.0]

    def test_unknown_node_has_empty_history(self, classifier):
        assert classifier.influence_history("nobody") == []
