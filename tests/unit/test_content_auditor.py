"""Unit tests for the heuristic AI-phrasing and web-overlap auditor."""
import pytest

from mindradix.services.content_auditor import (
    AI_PHRASES,
    ContentAuditor,
    DeterministicWebEstimator,
    detect_ai_content,
)

UNIFORM_TEXT = " ".join(["The cat sat on the mat today."] * 10)
PHRASE_TEXT = (
    "In conclusion, it is important to note the realm of ideas and the "
    "landscape of change is multifaceted."
)
HUMAN_TEXT = "I walked to the market this morning and bought some apples for my grandmother."


@pytest.mark.unit
class TestContentAuditor:
    def test_short_text(self):
        assert detect_ai_content("twenty chars exactly") == {
            "score": 0,
            "details": ["Text too short for analysis"],
            "web_score": 0,
            "web_sources": [],
        }

    def test_placeholder_text_forces_full_web_score(self):
        result = detect_ai_content("Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod.")
        assert result["web_score"] == 100
        assert result["web_sources"]

    def test_phrase_points_are_capped(self):
        result = ContentAuditor().audit_text(PHRASE_TEXT)
        assert result.ai_score == 60
        assert "Found 5 common AI-typical phrases (+60%)" in result.ai_details

    def test_uniform_sentences_and_low_diversity(self):
        result = ContentAuditor().audit_text(UNIFORM_TEXT)
        assert result.ai_score == 70
        assert result.ai_details[-1] == "High probability of AI generation"
        assert any("sentence length variance" in d for d in result.ai_details)
        assert "Low vocabulary diversity (+20%)" in result.ai_details

    def test_spaced_ellipsis_counts_as_one_word_sentences(self):
        text = " ".join(["Alpha beta gamma delta."] * 6) + " . ."
        result = ContentAuditor().audit_text(text)
        assert result.ai_score == 30
        assert result.ai_details == ["Low sentence length variance (+30%)"]

    def test_human_text_note(self):
        result = ContentAuditor().audit_text(HUMAN_TEXT)
        assert result.ai_score == 0
        assert result.ai_details == ["Likely human-written"]

    def test_score_clamped_below_100(self):
        text = " ".join([PHRASE_TEXT] * 8)
        result = ContentAuditor().audit_text(text)
        assert result.ai_score == 99
        assert 5 <= result.web_score <= 14

    def test_phrase_list_size(self):
        assert len(AI_PHRASES) == 25
        assert len(set(AI_PHRASES)) == 25

    @pytest.mark.parametrize("text", [UNIFORM_TEXT, PHRASE_TEXT, HUMAN_TEXT, PHRASE_TEXT * 8])
    def test_ranges(self, text):
        result = ContentAuditor().audit_text(text)
        assert 0 <= result.ai_score <= 99
        assert 0 <= result.web_score <= 100

    def test_injected_estimator_is_clamped(self):
        class LoudEstimator:
            def estimate(self, text, ai_score):
                return 250, ["https://example.com"]

        result = ContentAuditor(web_estimator=LoudEstimator()).audit_text(HUMAN_TEXT)
        assert result.web_score == 100
        assert result.web_sources == ["https://example.com"]


@pytest.mark.unit
class TestDeterministicWebEstimator:
    def test_seed_formula(self):
        # 70 words, 6 unique -> 76 % 40
        score, sources = DeterministicWebEstimator().estimate(UNIFORM_TEXT, ai_score=70)
        assert score == 36
        assert len(sources) == 2

    def test_high_ai_score_uses_lower_band(self):
        score, _ = DeterministicWebEstimator().estimate(UNIFORM_TEXT, ai_score=90)
        assert score == 5 + 36 % 10

    def test_low_score_has_no_sources(self):
        # 4 words, 4 unique -> 8
        score, sources = DeterministicWebEstimator().estimate("one two three four", ai_score=0)
        assert score == 8
        assert sources == []

    def test_repeatable(self):
        estimator = DeterministicWebEstimator()
        assert estimator.estimate(HUMAN_TEXT, 0) == estimator.estimate(HUMAN_TEXT, 0)
