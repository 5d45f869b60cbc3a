"""
Google Gemini generateContent API integration
"""

import json
import os
import re
from typing import Optional, Dict, Any, List

from .base_service import RateLimitedService
from ...models import GeminiConfig, VerificationResult
from ...utils.helpers import split_data_uri

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

TEXT_PROMPT = """You are a fact-checking AI operating as part of a blockchain-based content verification system.

Your task is to evaluate the following statement for accuracy and credibility.

In your response, provide a JSON object with these fields:
1. "isVerified" (boolean): true if content appears generally credible, false if likely misleading
2. "confidenceScore" (number): a score between 0-100 representing your confidence in the assessment
3. "explanation" (string): a DETAILED analysis explaining your reasoning, evidence considered, and specific credibility markers or red flags you identified - this should be at least 3-4 sentences long and will be displayed in a separate "Detailed Analysis" section

Make your assessment based on factual accuracy, source credibility patterns, and information integrity. Be thorough in your explanation while keeping the summary judgment clear.

Statement to verify: "{content}\""""

URL_PROMPT = """You are an expert URL and domain verification system evaluating a web resource.

Your task is to analyze this URL for credibility and trustworthiness.

In your response, provide a JSON object with these fields:
1. "isVerified" (boolean): true if the domain appears credible/trustworthy, false if likely suspicious
2. "confidenceScore" (number): a score between 0-100 representing your confidence in the assessment
3. "explanation" (string): a DETAILED analysis of why you reached this conclusion, including domain reputation factors, TLD assessment, known practices of the website/organization, and any specific red flags - this should be at least 3-4 sentences and will be shown in a "Detailed Analysis" section

Base your assessment on domain reputation, URL structure, known trusted sources, and other relevant factors.

URL to verify: "{content}\""""

IMAGE_PROMPT = """As an image verification specialist, analyze this image for authenticity and potential manipulation.

Provide your analysis as a JSON object with these fields:
1. "isVerified" (boolean): true if the image appears authentic/unaltered, false if it shows signs of manipulation
2. "confidenceScore" (number): a score between 0-100 representing your confidence
3. "explanation" (string): a DETAILED analysis explaining your assessment, what the image appears to show, any signs of alteration you noticed, and quality indicators - this should be at least 3-4 sentences and will be shown in a separate "Detailed Analysis" section

Be comprehensive in your detailed explanation but keep the top-level authenticity judgment concise."""


def parse_verdict(response_text: str, model_label: str) -> VerificationResult:
    """
    Parse the JSON verdict embedded in a model response

    Raises:
        ValueError: if no usable JSON object is found
    """
    match = _JSON_OBJECT_RE.search(response_text or "")
    if not match:
        raise ValueError("Could not find JSON in Gemini response")

    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ValueError("Gemini response is not valid JSON") from exc

    if not isinstance(payload, dict):
        raise ValueError("Gemini response must be a JSON object")

    missing = [key for key in ("isVerified", "confidenceScore", "explanation") if key not in payload]
    if missing:
        raise ValueError(f"Gemini response missing fields: {', '.join(missing)}")

    is_verified = payload["isVerified"]
    if isinstance(is_verified, str):
        is_verified = is_verified.strip().lower() == "true"

    try:
        confidence = int(round(float(payload["confidenceScore"])))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid confidenceScore: {payload['confidenceScore']!r}") from exc

    return VerificationResult(
        is_verified=bool(is_verified),
        confidence_score=max(0, min(100, confidence)),
        ai_model_used=model_label,
        explanation=str(payload["explanation"]).strip(),
    )


def _model_label(model: str) -> str:
    """'gemini-2.0-flash' -> 'Google Gemini 2.0 Flash'"""
    words = model.replace("-", " ").split()
    return "Google " + " ".join(word if word[:1].isdigit() else word.capitalize() for word in words)


class GeminiVerificationService(RateLimitedService):
    """Asks a Gemini model for a credibility verdict on text, URLs and images"""

    def __init__(self, config: Optional[GeminiConfig] = None, **kwargs):
        self.config = config or GeminiConfig()
        super().__init__(
            name="gemini",
            base_url=self.config.base_url,
            requests_per_minute=self.config.requests_per_minute,
            timeout_seconds=self.config.timeout_seconds,
            max_retries=self.config.max_retries,
            **kwargs
        )

        self.api_key = self.config.api_key or os.getenv("GEMINI_API_KEY")
        self.model_label = _model_label(self.config.model)

    def is_available(self) -> bool:
        """Check if the Gemini API is configured"""
        return self.config.enabled and bool(self.api_key)

    async def verify_text(self, text: str) -> VerificationResult:
        return await self._generate([{"text": TEXT_PROMPT.replace("{content}", text)}])

    async def verify_url(self, url: str) -> VerificationResult:
        result = await self._generate([{"text": URL_PROMPT.replace("{content}", url)}])
        return result.model_copy(update={"source_url": url})

    async def verify_image(self, image_data: str) -> VerificationResult:
        mime_type, encoded = split_data_uri(image_data)
        return await self._generate([
            {"text": IMAGE_PROMPT},
            {"inline_data": {"mime_type": mime_type, "data": encoded}},
        ])

    def _build_payload(self, parts: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topK": self.config.top_k,
                "topP": self.config.top_p,
                "maxOutputTokens": self.config.max_output_tokens,
            },
        }

    async def _generate(self, parts: List[Dict[str, Any]]) -> VerificationResult:
        """
        Send one generateContent request and parse the verdict

        Raises:
            RuntimeError: if the service is not configured or the request fails
            ValueError: if the response carries no usable verdict
        """
        if not self.is_available():
            raise RuntimeError("Gemini API key not configured")

        data = await self._make_request(
            "POST",
            f"models/{self.config.model}:generateContent",
            params={"key": self.api_key},
            json=self._build_payload(parts),
        )
        if not data:
            raise RuntimeError("Gemini API request failed")

        return parse_verdict(self._extract_text(data), self.model_label)

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ValueError("Unexpected Gemini response structure") from exc
