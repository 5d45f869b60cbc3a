"""
Local pattern and domain analysis used when the AI service is unavailable
"""

from typing import List
from urllib.parse import urlparse

from .base_service import VerificationService
from ..rules import (
    BASELINE_SCORE,
    CREDIBILITY_RULES,
    DEFAULT_TLD_SCORE,
    DOMAIN_CATEGORIES,
    MISINFORMATION_RULES,
    TLD_SCORES,
    TRUSTED_DOMAIN_SCORE,
    TRUSTED_DOMAINS,
    VERIFIED_THRESHOLD,
)
from ...models import VerificationResult

TEXT_MODEL_NAME = "Pattern Analysis (fallback)"
URL_MODEL_NAME = "Domain Analysis (fallback)"
URL_ERROR_MODEL_NAME = "URL Analysis"


def _clamp(score: int) -> int:
    return max(0, min(100, score))


def _join_names(names: List[str], limit: int, mark_rest: bool) -> str:
    joined = ", ".join(names[:limit])
    if mark_rest and len(names) > limit:
        joined += ", and others"
    return joined


def score_text(text: str) -> VerificationResult:
    """
    Score text against the credibility and misinformation rule tables

    Every matching rule adds its weight once to a baseline of 65; the sum is
    clamped to 0-100 and the content counts as verified from 70 upward.
    """
    score = BASELINE_SCORE
    found_credibility = []
    found_misinfo = []

    for rule in CREDIBILITY_RULES:
        if rule.matches(text):
            score += rule.weight
            found_credibility.append(rule.name)

    for rule in MISINFORMATION_RULES:
        if rule.matches(text):
            score += rule.weight
            found_misinfo.append(rule.name)

    score = _clamp(score)

    explanation = "API unavailable. Using pattern analysis: "
    if score >= 80:
        explanation += "This content appears credible based on language patterns. "
        if found_credibility:
            explanation += (
                "It contains credibility indicators including: "
                f"{_join_names(found_credibility, 3, mark_rest=True)}."
            )
    elif score >= BASELINE_SCORE:
        explanation += (
            "This content appears somewhat credible but could benefit from additional verification. "
        )
        if found_credibility:
            explanation += f"Positive indicators include: {_join_names(found_credibility, 2, mark_rest=False)}."
    else:
        explanation += "This content contains patterns often associated with misleading information. "
        if found_misinfo:
            explanation += f"Concerning indicators include: {_join_names(found_misinfo, 2, mark_rest=True)}."

    return VerificationResult(
        is_verified=score >= VERIFIED_THRESHOLD,
        confidence_score=score,
        ai_model_used=TEXT_MODEL_NAME,
        explanation=explanation,
    )


def extract_domain(url: str) -> str:
    """
    Return the lowercase hostname of an absolute URL

    Raises:
        ValueError: if the URL has no scheme or host
    """
    parsed = urlparse(url.strip())
    if not parsed.scheme or not parsed.hostname:
        raise ValueError(f"Not an absolute URL: {url!r}")
    return parsed.hostname


def invalid_url_result() -> VerificationResult:
    return VerificationResult(
        is_verified=False,
        confidence_score=0,
        ai_model_used=URL_ERROR_MODEL_NAME,
        explanation="Invalid URL format.",
    )


def _is_trusted(domain: str) -> bool:
    return any(domain.endswith(trusted) for trusted in TRUSTED_DOMAINS)


def score_url(url: str) -> VerificationResult:
    """Score a URL by domain reputation: allowlist, then category keywords, then TLD."""
    try:
        domain = extract_domain(url)
    except ValueError:
        return invalid_url_result()

    trusted = _is_trusted(domain)

    category = ""
    category_score = 0
    for candidate in DOMAIN_CATEGORIES:
        if any(pattern in domain for pattern in candidate.patterns):
            if candidate.score > category_score:
                category_score = candidate.score
                category = candidate.name

    if trusted:
        score = TRUSTED_DOMAIN_SCORE
    elif category:
        score = category_score
    else:
        score = DEFAULT_TLD_SCORE
        for tld, tld_score in TLD_SCORES.items():
            if domain.endswith(tld):
                score = tld_score
                break

    is_verified = score >= VERIFIED_THRESHOLD

    explanation = "API unavailable. Using domain analysis: "
    if trusted:
        explanation += f"This URL is from a well-known, generally reliable domain ({domain})."
    elif category:
        explanation += f"This appears to be a {category} website. "
        explanation += (
            "Generally considered a reliable category."
            if is_verified
            else "Consider verifying with additional sources."
        )
    elif is_verified:
        explanation += f"This domain ({domain}) appears to have good reputation indicators."
    else:
        explanation += (
            "This URL is not from a recognized reliable source. "
            "Verify its content carefully."
        )

    return VerificationResult(
        is_verified=is_verified,
        confidence_score=score,
        ai_model_used=URL_MODEL_NAME,
        explanation=explanation,
        source_url=url,
    )


class PatternAnalysisService(VerificationService):
    """Offline text and URL verification using the static rule tables"""

    def __init__(self, **kwargs):
        super().__init__("pattern_analysis", **kwargs)

    def is_available(self) -> bool:
        """Pattern analysis has no external requirements"""
        return True

    def verify_text(self, text: str) -> VerificationResult:
        result = score_text(text)
        self.logger.debug(f"Pattern score {result.confidence_score} for {len(text)} chars")
        return result

    def verify_url(self, url: str) -> VerificationResult:
        result = score_url(url)
        self.logger.debug(f"Domain score {result.confidence_score} for {url}")
        return result
