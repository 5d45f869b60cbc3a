"""Tests for the local text and URL fallback scorers."""

import pytest

from truthchain.verification.rules import CREDIBILITY_RULES, MISINFORMATION_RULES
from truthchain.verification.services.pattern_service import (
    PatternAnalysisService,
    score_text,
    score_url,
)

HARVARD_TEXT = "According to a study published by Harvard University, 50% of participants..."
SHOCKING_TEXT = "SHOCKING secret cure that doctors won't tell you, 100% guaranteed!"
FULL_CREDIBILITY_TEXT = (
    "According to a study published in Nature Journal, a study of 1,200 participants "
    "at Stanford University on 12/05/2023 found a 40 percent improvement."
)


class TestRuleTables:
    """Tests for the static rule configuration."""

    def test_credibility_weights_are_non_negative(self):
        assert all(rule.weight >= 0 for rule in CREDIBILITY_RULES)

    def test_misinformation_weights_are_negative(self):
        assert all(rule.weight < 0 for rule in MISINFORMATION_RULES)

    def test_rule_names_are_unique(self):
        names = [rule.name for rule in CREDIBILITY_RULES + MISINFORMATION_RULES]
        assert len(names) == len(set(names))


class TestScoreText:
    """Tests for weighted pattern scoring of text."""

    def test_text_without_patterns_scores_baseline(self):
        """Plain text keeps the neutral-positive baseline."""
        result = score_text("The weather was pleasant on the walk home.")

        assert result.confidence_score == 65
        assert result.is_verified is False
        assert result.ai_model_used == "Pattern Analysis (fallback)"
        assert "somewhat credible" in result.explanation

    def test_empty_text_scores_baseline(self):
        result = score_text("")

        assert result.confidence_score == 65
        assert result.is_verified is False

    def test_explanation_keeps_trailing_space_without_indicators(self):
        result = score_text("The weather was pleasant on the walk home.")

        assert result.explanation == (
            "API unavailable. Using pattern analysis: "
            "This content appears somewhat credible but could benefit from additional verification. "
        )

    def test_cited_study_is_verified(self):
        """Citation and institution markers raise the score."""
        result = score_text(HARVARD_TEXT)

        assert result.confidence_score == 85
        assert result.is_verified is True
        assert "appears credible" in result.explanation
        assert "Specific citation" in result.explanation
        assert "Academic institution" in result.explanation

    def test_sensational_claim_is_rejected(self):
        """65 - 5 - 10 - 8 - 5 = 37."""
        result = score_text(SHOCKING_TEXT)

        assert result.confidence_score == 37
        assert result.is_verified is False
        assert "misleading information" in result.explanation
        assert "Sensationalist terms, Authority undermining, and others." in result.explanation

    def test_each_rule_counts_once(self):
        """Repeated trigger words do not stack."""
        once = score_text("A miracle.")
        many = score_text("A miracle cure, a secret miracle, another miracle.")

        assert once.confidence_score == many.confidence_score == 57

    def test_score_is_clamped_to_100(self):
        """All six credibility rules would reach 115."""
        result = score_text(FULL_CREDIBILITY_TEXT)

        assert result.confidence_score == 100
        assert result.explanation.endswith(", and others.")

    def test_matching_is_case_insensitive(self):
        assert score_text("BREAKING news").confidence_score == 60
        assert score_text("breaking news").confidence_score == 60

    def test_somewhat_credible_lists_two_indicators(self):
        """A date and an institution give 75: two names, no 'and others'."""
        result = score_text("The institute announced it on 01/02/2024.")

        assert result.confidence_score == 75
        assert result.is_verified is True
        assert "Positive indicators include: Contains dates, Academic institution." in result.explanation

    @pytest.mark.parametrize("text", [
        "",
        HARVARD_TEXT,
        SHOCKING_TEXT,
        FULL_CREDIBILITY_TEXT,
        "exclusive breaking shocking miracle banned censored guaranteed proven",
        "The university laboratory says 10 percent",
    ])
    def test_score_bounds_and_threshold(self, text):
        result = score_text(text)

        assert 0 <= result.confidence_score <= 100
        assert result.is_verified == (result.confidence_score >= 70)


class TestScoreUrl:
    """Tests for domain-reputation scoring of URLs."""

    def test_trusted_domain(self):
        result = score_url("https://en.wikipedia.org/wiki/Test")

        assert result.confidence_score == 95
        assert result.is_verified is True
        assert result.source_url == "https://en.wikipedia.org/wiki/Test"
        assert "en.wikipedia.org" in result.explanation
        assert result.ai_model_used == "Domain Analysis (fallback)"

    def test_unparsable_url(self):
        result = score_url("not a url")

        assert result.is_verified is False
        assert result.confidence_score == 0
        assert result.ai_model_used == "URL Analysis"
        assert result.explanation == "Invalid URL format."

    def test_unknown_tld_scores_50(self):
        result = score_url("https://randomblog.xyz")

        assert result.confidence_score == 50
        assert result.is_verified is False
        assert "not from a recognized reliable source" in result.explanation

    @pytest.mark.parametrize("url,domain", [
        ("https://notwikipedia.org/page", "notwikipedia.org"),
        ("https://mygithub.com", "mygithub.com"),
    ])
    def test_trusted_match_is_plain_suffix(self, url, domain):
        """Any hostname ending in an allowlisted domain is trusted."""
        result = score_url(url)

        assert result.confidence_score == 95
        assert result.is_verified is True
        assert f"generally reliable domain ({domain})" in result.explanation

    def test_unrecognized_explanation_wording(self):
        result = score_url("https://randomblog.xyz")

        assert result.explanation == (
            "API unavailable. Using domain analysis: "
            "This URL is not from a recognized reliable source. Verify its content carefully."
        )

    @pytest.mark.parametrize("url,expected", [
        ("https://www.example.org", 75),
        ("https://shop.example.com", 65),
        ("http://files.example.net", 60),
    ])
    def test_tld_fallback(self, url, expected):
        result = score_url(url)

        assert result.confidence_score == expected
        assert result.is_verified == (expected >= 70)

    @pytest.mark.parametrize("url,category,expected", [
        ("https://cs.someuniversity.ac.uk", "academic", 95),
        ("https://portal.federal-agency.example", "government", 95),
        ("https://learnpython.example.io", "educational", 90),
        ("https://dailynews.example.net", "news", 80),
    ])
    def test_domain_categories(self, url, category, expected):
        result = score_url(url)

        assert result.confidence_score == expected
        assert result.is_verified is True
        assert f"a {category} website" in result.explanation

    def test_highest_category_wins(self):
        """'learn' (90) and 'news' (80) both match; the higher score is kept."""
        result = score_url("https://learnnews.example.com")

        assert result.confidence_score == 90
        assert "educational" in result.explanation

    def test_tied_categories_keep_first(self):
        result = score_url("https://state.university.example")

        assert result.confidence_score == 95
        assert "academic" in result.explanation


class TestPatternAnalysisService:
    """Tests for the service wrapper."""

    def test_service_is_always_available(self):
        service = PatternAnalysisService()

        assert service.name == "pattern_analysis"
        assert service.is_available()

    def test_service_delegates_to_scorers(self):
        service = PatternAnalysisService()

        assert service.verify_text(SHOCKING_TEXT).confidence_score == 37
        assert service.verify_url("https://www.bbc.com/news").confidence_score == 95
