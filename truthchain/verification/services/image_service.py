"""
Dual-model image heuristic used when the AI service cannot judge an image
"""

import base64
import io
from typing import Any, List, Optional, Sequence

from PIL import Image

from .base_service import VerificationService
from ..rules import VERIFIED_THRESHOLD
from ...models import ImagePrediction, ImageModelConfig, VerificationResult
from ...utils.helpers import split_data_uri

IMAGE_MODEL_NAME = "Hugging Face ViT and Swin Transformer"

CLASSIFICATION_WEIGHT = 0.4
AGREEMENT_WEIGHT = 0.3
QUALITY_WEIGHT = 0.3


def _top_score(predictions: Sequence[ImagePrediction]) -> float:
    return predictions[0].score if predictions else 0.0


def calculate_model_agreement(classification: Sequence[ImagePrediction],
                              manipulation: Sequence[ImagePrediction]) -> float:
    """
    Agreement between two classifiers on a 0-100 scale

    Label overlap among the top three labels of each model counts 70%, the
    product of both top confidences 30%. The blend is clamped to 0-100 since
    substring overlaps between three-by-three label pairs can exceed three.
    """
    top_classes = [p.label.lower() for p in classification[:3]]
    top_manipulation = [p.label.lower() for p in manipulation[:3]]

    overlap_count = 0
    for cls in top_classes:
        for manip_cls in top_manipulation:
            if cls in manip_cls or manip_cls in cls:
                overlap_count += 1

    agreement_score = (overlap_count / 3) * 100
    confidence_agreement = _top_score(classification) * _top_score(manipulation) * 100

    return max(0.0, min(100.0, agreement_score * 0.7 + confidence_agreement * 0.3))


def estimate_image_quality(width: int, height: int) -> float:
    """Crude quality estimate from resolution and aspect ratio (0-100)"""
    resolution_score = min(100.0, max(0.0, (width * height) / 10000))

    aspect_score = 70
    if height > 0:
        aspect_ratio = width / height
        if 0.5 < aspect_ratio < 2.0:
            aspect_score = 100

    return resolution_score * 0.7 + aspect_score * 0.3


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def score_image(classification: Sequence[ImagePrediction],
                manipulation: Sequence[ImagePrediction],
                width: int,
                height: int) -> VerificationResult:
    """
    Combine classifier confidence, model agreement and image quality into a verdict

    Args:
        classification: Ranked predictions of the primary classifier
        manipulation: Ranked predictions of the second classifier
        width: Image width in pixels
        height: Image height in pixels
    """
    classification_confidence = _top_score(classification) * 100
    agreement = calculate_model_agreement(classification, manipulation)
    quality = estimate_image_quality(width, height)

    authenticity = (
        classification_confidence * CLASSIFICATION_WEIGHT
        + agreement * AGREEMENT_WEIGHT
        + quality * QUALITY_WEIGHT
    )
    final_score = max(0, min(100, _round_half_up(authenticity)))
    is_verified = final_score >= VERIFIED_THRESHOLD

    top_label = classification[0].label if classification else "unknown content"
    shown_confidence = _round_half_up(classification_confidence)

    if is_verified:
        explanation = f"This appears to be an authentic image of {top_label} ({shown_confidence}% confidence). "
        if final_score > 85:
            explanation += "The image has high quality indicators and clear content recognition patterns."
        else:
            explanation += (
                "The image shows reasonable quality indicators, "
                "though additional verification wouldn't hurt."
            )
    else:
        explanation = (
            f"This image was classified as {top_label}, "
            f"but with lower confidence ({shown_confidence}%). "
        )
        if final_score < 50:
            explanation += "Multiple indicators suggest this image may be manipulated or synthetically generated."
        else:
            explanation += "Some quality indicators suggest caution when sharing or relying on this image."

    return VerificationResult(
        is_verified=is_verified,
        confidence_score=final_score,
        ai_model_used=IMAGE_MODEL_NAME,
        explanation=explanation,
    )


def _to_predictions(raw: List[dict]) -> List[ImagePrediction]:
    predictions = [
        ImagePrediction(label=str(item["label"]), score=max(0.0, min(1.0, float(item["score"]))))
        for item in raw
    ]
    predictions.sort(key=lambda p: p.score, reverse=True)
    return predictions


class ImageHeuristicAnalyzer(VerificationService):
    """Runs two Hugging Face image classifiers and scores their agreement"""

    def __init__(self, config: Optional[ImageModelConfig] = None, **kwargs):
        super().__init__("image_heuristic", **kwargs)
        self.config = config or ImageModelConfig()
        self._classifier: Any = None
        self._manipulation_detector: Any = None

    def is_available(self) -> bool:
        return self.config.enabled

    def _load_models(self):
        """Load both classification pipelines on first use"""
        if self._classifier is not None and self._manipulation_detector is not None:
            return
        try:
            from transformers import pipeline  # type: ignore
        except ImportError as exc:
            raise RuntimeError(
                "Install the 'image' extra (transformers, torch) to enable image analysis."
            ) from exc

        self.logger.info(f"Loading image classification model {self.config.classifier_model}")
        self._classifier = pipeline("image-classification", model=self.config.classifier_model)
        self.logger.info(f"Loading image manipulation model {self.config.manipulation_model}")
        self._manipulation_detector = pipeline("image-classification", model=self.config.manipulation_model)

    def analyze(self, image_data: str) -> VerificationResult:
        """
        Score a data-URI encoded image

        Raises:
            ValueError: if the image cannot be decoded
            RuntimeError: if the classifier models cannot be loaded
        """
        _, encoded = split_data_uri(image_data)
        try:
            image = Image.open(io.BytesIO(base64.b64decode(encoded)))
            image.load()
        except (OSError, ValueError) as exc:
            raise ValueError(f"Could not decode image: {exc}") from exc
        image = image.convert("RGB")

        self._load_models()
        classification = _to_predictions(self._classifier(image))
        manipulation = _to_predictions(self._manipulation_detector(image))
        width, height = image.size

        self.logger.debug(
            f"Top labels: {classification[0].label if classification else '-'} / "
            f"{manipulation[0].label if manipulation else '-'} ({width}x{height})"
        )
        return score_image(classification, manipulation, width, height)
