"""
Verification models for content verdicts, history entries and on-chain records
"""

from datetime import datetime
from typing import Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum


class ContentType(str, Enum):
    """Kind of content submitted for verification"""
    TEXT = "text"
    IMAGE = "image"
    URL = "url"


class BlockchainStatus(str, Enum):
    """State of the on-chain write for one verification"""
    NONE = "none"
    SUCCESS = "success"
    FAILED = "failed"


class VerificationResult(BaseModel):
    """Verdict produced for one piece of submitted content"""
    model_config = ConfigDict(frozen=True)

    is_verified: bool = Field(description="True if the content appears credible/authentic")
    confidence_score: int = Field(
        ge=0, le=100,
        description="Confidence in the verdict (0-100)"
    )
    ai_model_used: str = Field(description="Model or heuristic that produced the verdict")
    explanation: str = Field(description="Human-readable reasoning for the verdict")
    source_url: Optional[str] = Field(None, description="URL the verdict refers to, if any")


class ImagePrediction(BaseModel):
    """One ranked label from an image classifier"""
    label: str
    score: float = Field(ge=0.0, le=1.0)


class VerificationRecord(BaseModel):
    """Verification record as stored by the smart contract"""
    verifier: str = Field(description="Address that submitted the record")
    timestamp: int = Field(description="Block timestamp in seconds")
    is_verified: bool
    confidence_score: int = Field(ge=0, le=100)
    content_type: str
    ai_model_used: str


class StoredVerification(BaseModel):
    """Entry in the local verification history"""
    id: str = Field(description="Content hash used as the cache key")
    content: str = Field(description="Truncated content, or a placeholder for images")
    content_type: ContentType
    timestamp: int = Field(description="Milliseconds since the epoch")
    is_verified: bool
    confidence_score: int = Field(ge=0, le=100)
    ai_model_used: str
    explanation: str


class VerificationMetadata(BaseModel):
    """Bookkeeping for one submission"""
    timestamp: datetime = Field(default_factory=datetime.now)
    duration_ms: int = 0
    content_hash: str
    blockchain_status: BlockchainStatus = BlockchainStatus.NONE
    transaction_hash: Optional[str] = None

    def model_dump(self, **kwargs) -> Dict[str, Any]:
        """Custom serialization to handle datetime"""
        data = super().model_dump(**kwargs)
        data['timestamp'] = self.timestamp.isoformat()
        return data


class VerificationOutcome(BaseModel):
    """Verdict plus submission metadata, as returned by the pipeline"""
    result: VerificationResult
    metadata: VerificationMetadata

    def model_dump(self, **kwargs) -> Dict[str, Any]:
        return {
            'result': self.result.model_dump(**kwargs),
            'metadata': self.metadata.model_dump(**kwargs),
        }


class VerificationStats(BaseModel):
    """Aggregate numbers over a set of verifications"""
    total_verifications: int = 0
    verified_content: int = 0
    rejected_content: int = 0
    avg_confidence_score: float = 0.0


class GeminiConfig(BaseModel):
    """Settings for the Gemini generateContent API"""
    enabled: bool = True
    api_key: Optional[str] = None
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    model: str = "gemini-2.0-flash"
    timeout_seconds: int = 30
    max_retries: int = 3
    requests_per_minute: int = 15
    temperature: float = 0.2
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 1024


class ImageModelConfig(BaseModel):
    """Hugging Face models used by the image fallback"""
    enabled: bool = True
    classifier_model: str = "google/vit-base-patch16-224"
    manipulation_model: str = "microsoft/swin-tiny-patch4-window7-224"


class BlockchainConfig(BaseModel):
    """Settings for the verification registry contract"""
    enabled: bool = True
    rpc_url: str = "https://rpc.sepolia.org"
    contract_address: str = "0x0000000000000000000000000000000000000000"
    private_key: Optional[str] = None
    chain_id: Optional[int] = None
    receipt_timeout_seconds: int = 120
    gas_buffer: int = 20000


class HistoryConfig(BaseModel):
    """Settings for the local history cache"""
    enabled: bool = True
    path: str = "data/verification_history.json"
    max_items: int = 10
    max_content_length: int = 150


class TruthChainConfig(BaseModel):
    """Top-level application configuration"""
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    image_models: ImageModelConfig = Field(default_factory=ImageModelConfig)
    blockchain: BlockchainConfig = Field(default_factory=BlockchainConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
