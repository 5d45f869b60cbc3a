"""
Verification services for the remote AI API and the local fallbacks
"""

from .base_service import VerificationService, HTTPVerificationService, RateLimitedService
from .gemini_service import GeminiVerificationService
from .pattern_service import PatternAnalysisService, score_text, score_url
from .image_service import ImageHeuristicAnalyzer, score_image

__all__ = [
    "VerificationService",
    "HTTPVerificationService",
    "RateLimitedService",
    "GeminiVerificationService",
    "PatternAnalysisService",
    "ImageHeuristicAnalyzer",
    "score_text",
    "score_url",
    "score_image",
]
