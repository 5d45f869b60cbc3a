"""
Content verification: remote AI verdicts with local fallbacks
"""

from .pipeline import ContentVerificationPipeline, build_pipeline
from .rules import Rule, CREDIBILITY_RULES, MISINFORMATION_RULES
from .services import (
    GeminiVerificationService,
    ImageHeuristicAnalyzer,
    PatternAnalysisService,
    score_image,
    score_text,
    score_url,
)

__all__ = [
    "ContentVerificationPipeline",
    "build_pipeline",
    "Rule",
    "CREDIBILITY_RULES",
    "MISINFORMATION_RULES",
    "GeminiVerificationService",
    "ImageHeuristicAnalyzer",
    "PatternAnalysisService",
    "score_image",
    "score_text",
    "score_url",
]
