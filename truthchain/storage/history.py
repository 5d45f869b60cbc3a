"""
Local verification history backed by a JSON file
"""

import json
import logging
import time
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from ..models import ContentType, HistoryConfig, StoredVerification, VerificationResult
from ..utils.helpers import generate_content_hash, truncate_content

logger = logging.getLogger(__name__)


class HistoryStore:
    """Keeps the most recent verifications, newest first, one entry per content hash"""

    def __init__(self,
                 path: Union[str, Path] = "data/verification_history.json",
                 max_items: int = 10,
                 max_content_length: int = 150):
        self.path = Path(path)
        self.max_items = max_items
        self.max_content_length = max_content_length

    @classmethod
    def from_config(cls, config: HistoryConfig) -> "HistoryStore":
        return cls(config.path, config.max_items, config.max_content_length)

    def save_verification(self,
                          content: str,
                          content_type: ContentType,
                          result: VerificationResult,
                          timestamp_ms: Optional[int] = None) -> StoredVerification:
        """
        Add or replace the history entry for content

        An entry for content already in the history is updated in place;
        otherwise the new entry goes to the front and the oldest entries
        beyond ``max_items`` are dropped.
        """
        content_type = ContentType(content_type)
        entry = StoredVerification(
            id=generate_content_hash(content),
            content=truncate_content(content, content_type, self.max_content_length),
            content_type=content_type,
            timestamp=timestamp_ms if timestamp_ms is not None else int(time.time() * 1000),
            is_verified=result.is_verified,
            confidence_score=result.confidence_score,
            ai_model_used=result.ai_model_used,
            explanation=result.explanation,
        )

        history = self.get_history()
        for index, existing in enumerate(history):
            if existing.id == entry.id:
                history[index] = entry
                break
        else:
            history.insert(0, entry)
            del history[self.max_items:]

        self._write(history)
        return entry

    def get_history(self) -> List[StoredVerification]:
        """Return stored entries, newest first; unreadable files count as empty"""
        if not self.path.exists():
            return []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                raw = json.load(f)
            return [StoredVerification(**item) for item in raw]
        except (OSError, json.JSONDecodeError, TypeError, ValidationError) as e:
            logger.error(f"Error reading verification history from {self.path}: {e}")
            return []

    def clear_history(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info(f"Cleared verification history at {self.path}")

    def _write(self, history: List[StoredVerification]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump([item.model_dump(mode='json') for item in history], f, indent=2, ensure_ascii=False)
        logger.debug(f"Saved {len(history)} history entries to {self.path}")
