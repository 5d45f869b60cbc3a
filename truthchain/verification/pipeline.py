"""
Content verification pipeline: AI verdict with local fallback, on-chain record and history
"""

import logging
import time
from typing import Any, Dict, Optional

from .services import (
    GeminiVerificationService,
    ImageHeuristicAnalyzer,
    PatternAnalysisService,
)
from .services.pattern_service import extract_domain, invalid_url_result
from ..blockchain.registry import BlockchainRegistry
from ..models import (
    BlockchainStatus,
    ContentType,
    TruthChainConfig,
    VerificationMetadata,
    VerificationOutcome,
    VerificationRecord,
    VerificationResult,
)
from ..storage.history import HistoryStore
from ..utils.helpers import generate_content_hash, validate_content

logger = logging.getLogger(__name__)


def error_result(explanation: str = "An error occurred during verification.",
                 ai_model_used: str = "Error in processing") -> VerificationResult:
    return VerificationResult(
        is_verified=False,
        confidence_score=0,
        ai_model_used=ai_model_used,
        explanation=explanation,
    )


class ContentVerificationPipeline:
    """
    Orchestrates verification of text, URLs and images

    The remote AI service is tried first; when it is missing or fails the
    pipeline falls back to local analysis. Every collaborator is passed in,
    so any of them can be left out or replaced in tests.
    """

    def __init__(self,
                 ai_service: Optional[GeminiVerificationService] = None,
                 pattern_service: Optional[PatternAnalysisService] = None,
                 image_analyzer: Optional[ImageHeuristicAnalyzer] = None,
                 blockchain: Optional[BlockchainRegistry] = None,
                 history: Optional[HistoryStore] = None):
        self.ai_service = ai_service
        self.pattern_service = pattern_service or PatternAnalysisService()
        self.image_analyzer = image_analyzer
        self.blockchain = blockchain
        self.history = history
        self.logger = logger.getChild("pipeline")

    def _ai_available(self) -> bool:
        return self.ai_service is not None and self.ai_service.is_available()

    async def verify_text(self, text: str) -> VerificationResult:
        """Verify text with the AI service, falling back to pattern analysis"""
        if self._ai_available():
            try:
                return await self.ai_service.verify_text(text)
            except Exception as e:
                self.logger.error(f"Text verification error, using pattern analysis: {e}")
        else:
            self.logger.info("AI service not configured, using pattern analysis")
        return self.pattern_service.verify_text(text)

    async def verify_url(self, url: str) -> VerificationResult:
        """Verify a URL with the AI service, falling back to domain analysis"""
        try:
            extract_domain(url)
        except ValueError:
            return invalid_url_result()

        if self._ai_available():
            try:
                return await self.ai_service.verify_url(url)
            except Exception as e:
                self.logger.error(f"Gemini URL verification error, using domain analysis: {e}")
        return self.pattern_service.verify_url(url)

    async def verify_image(self, image_data: str) -> VerificationResult:
        """Verify a data-URI image with the AI service, falling back to the classifier heuristic"""
        if self._ai_available():
            try:
                return await self.ai_service.verify_image(image_data)
            except Exception as e:
                self.logger.error(f"Gemini image verification error, using classifiers: {e}")

        if self.image_analyzer is None or not self.image_analyzer.is_available():
            return error_result("Image analysis is not available.")

        try:
            return self.image_analyzer.analyze(image_data)
        except Exception as e:
            self.logger.error(f"Image verification error: {e}")
            return error_result("An error occurred during image verification.")

    async def verify_content(self, content: str, content_type: ContentType) -> VerificationResult:
        """
        Dispatch content to the verifier for its type

        Never raises: unsupported types and unexpected failures come back as
        zero-confidence results.
        """
        try:
            content_type = ContentType(content_type)
        except ValueError:
            return error_result("Unsupported content type.", ai_model_used="none")

        try:
            if content_type == ContentType.TEXT:
                return await self.verify_text(content)
            if content_type == ContentType.IMAGE:
                return await self.verify_image(content)
            return await self.verify_url(content)
        except Exception as e:
            self.logger.error(f"Error in content verification: {e}", exc_info=True)
            return error_result()

    async def submit(self,
                     content: str,
                     content_type: ContentType,
                     record_on_chain: bool = False) -> VerificationOutcome:
        """
        Verify content, optionally record the verdict on chain, and cache it

        Raises:
            ValueError: if the content is not valid for its type
        """
        try:
            content_type = ContentType(content_type)
        except ValueError:
            raise ValueError(f"Unsupported content type: {content_type}")
        if not validate_content(content, content_type):
            raise ValueError(f"Invalid {content_type.value} content")

        start_time = time.time()
        result = await self.verify_content(content, content_type)
        metadata = VerificationMetadata(content_hash=generate_content_hash(content))

        if record_on_chain:
            metadata.blockchain_status = self._record_on_chain(content, result, content_type, metadata)

        if self.history is not None:
            try:
                self.history.save_verification(content, content_type, result)
            except OSError as e:
                self.logger.error(f"Error saving verification to history: {e}")

        metadata.duration_ms = int((time.time() - start_time) * 1000)
        self.logger.info(
            f"{content_type.value} verified by {result.ai_model_used}: "
            f"{'verified' if result.is_verified else 'not verified'} ({result.confidence_score})"
        )
        return VerificationOutcome(result=result, metadata=metadata)

    def _record_on_chain(self,
                         content: str,
                         result: VerificationResult,
                         content_type: ContentType,
                         metadata: VerificationMetadata) -> BlockchainStatus:
        if self.blockchain is None:
            self.logger.warning("On-chain recording requested but no blockchain registry is configured")
            return BlockchainStatus.FAILED

        tx_hash = self.blockchain.record_verification(content, result, content_type)
        if tx_hash is None:
            return BlockchainStatus.FAILED
        metadata.transaction_hash = tx_hash
        return BlockchainStatus.SUCCESS

    def lookup(self, content: str) -> Optional[VerificationRecord]:
        """Return the on-chain record for content, if any"""
        if self.blockchain is None:
            return None
        return self.blockchain.get_verification(content)

    async def close(self):
        """Close network sessions"""
        if self.ai_service is not None:
            try:
                await self.ai_service.close()
            except Exception as e:
                self.logger.error(f"Error closing {self.ai_service.name}: {e}")

    def get_service_status(self) -> Dict[str, Any]:
        """Get status information about the configured services"""
        services = []
        for service in (self.ai_service, self.pattern_service, self.image_analyzer):
            if service is None:
                continue
            services.append({
                'name': service.name,
                'available': service.is_available(),
                'type': service.__class__.__name__,
            })

        return {
            'total_services': len(services),
            'services': services,
            'blockchain': {
                'configured': self.blockchain is not None,
                'writable': bool(self.blockchain and self.blockchain.can_write),
                'connected': bool(self.blockchain and self.blockchain.is_connected()),
            },
            'history': {
                'configured': self.history is not None,
                'path': str(self.history.path) if self.history else None,
            },
        }


def build_pipeline(config: Optional[TruthChainConfig] = None,
                   offline: bool = False) -> ContentVerificationPipeline:
    """
    Construct a pipeline and its services from configuration

    Args:
        config: Application configuration (defaults if omitted)
        offline: Skip the remote AI service and use local analysis only
    """
    config = config or TruthChainConfig()

    ai_service = None
    if config.gemini.enabled and not offline:
        ai_service = GeminiVerificationService(config.gemini)
        if not ai_service.is_available():
            logger.warning("Gemini API key not found. Set GEMINI_API_KEY to enable AI verification")

    image_analyzer = ImageHeuristicAnalyzer(config.image_models) if config.image_models.enabled else None

    blockchain = None
    if config.blockchain.enabled:
        try:
            blockchain = BlockchainRegistry.from_config(config.blockchain)
        except ValueError as e:
            logger.error(f"Failed to initialize blockchain registry: {e}")

    history = HistoryStore.from_config(config.history) if config.history.enabled else None

    return ContentVerificationPipeline(
        ai_service=ai_service,
        image_analyzer=image_analyzer,
        blockchain=blockchain,
        history=history,
    )
