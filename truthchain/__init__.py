"""TruthChain content verification package."""

__version__ = "0.1.0"
__author__ = "truthchain"

from .models import ContentType, VerificationResult, VerificationOutcome
from .verification import ContentVerificationPipeline, build_pipeline, score_image, score_text, score_url

__all__ = [
    "ContentType",
    "VerificationResult",
    "VerificationOutcome",
    "ContentVerificationPipeline",
    "build_pipeline",
    "score_image",
    "score_text",
    "score_url",
]
