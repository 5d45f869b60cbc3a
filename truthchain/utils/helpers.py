"""
Helper functions shared by the CLI, the web app and the services
"""

import base64
import mimetypes
from datetime import datetime
from pathlib import Path
from typing import Iterable, Tuple, Union
from urllib.parse import urlparse

from web3 import Web3

from ..models import ContentType, VerificationStats

IMAGE_PLACEHOLDER = "[IMAGE DATA]"


def generate_content_hash(content: str) -> str:
    """Keccak-256 of the UTF-8 content as 0x-prefixed hex (same as ethers' ``id``)"""
    return Web3.to_hex(Web3.keccak(text=content))


def format_date(timestamp_ms: int) -> str:
    """Format a millisecond timestamp as a readable local time"""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M:%S")


def format_address(address: str) -> str:
    """Shorten an Ethereum address for display"""
    if not address or len(address) < 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def format_content_hash(content_hash: str) -> str:
    """Shorten a content hash for display"""
    if not content_hash or len(content_hash) < 10:
        return content_hash
    return f"{content_hash[:10]}...{content_hash[-8:]}"


def validate_content(content: str, content_type: Union[ContentType, str]) -> bool:
    """Check that content is acceptable input for its type"""
    try:
        content_type = ContentType(content_type)
    except ValueError:
        return False

    if content_type == ContentType.TEXT:
        return len(content.strip()) > 0

    if content_type == ContentType.URL:
        try:
            parsed = urlparse(content.strip())
        except ValueError:
            return False
        return bool(parsed.scheme and parsed.hostname)

    return content.startswith("data:image/")


def truncate_text(text: str, max_length: int) -> str:
    """Truncate text, marking the cut with an ellipsis"""
    if not text:
        return ""
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def truncate_content(content: str, content_type: ContentType, max_length: int = 150) -> str:
    """Shorten content for storage; images are replaced by a placeholder"""
    if content_type == ContentType.IMAGE:
        return IMAGE_PLACEHOLDER
    return truncate_text(content, max_length)


def calculate_stats(verifications: Iterable) -> VerificationStats:
    """
    Summarize a collection of verifications

    Accepts any objects with ``is_verified`` and ``confidence_score``
    attributes, or dicts with those keys.
    """
    items = list(verifications or [])
    if not items:
        return VerificationStats()

    def _get(item, key):
        return item[key] if isinstance(item, dict) else getattr(item, key)

    total = len(items)
    verified = sum(1 for item in items if _get(item, "is_verified"))
    total_confidence = sum(_get(item, "confidence_score") for item in items)

    return VerificationStats(
        total_verifications=total,
        verified_content=verified,
        rejected_content=total - verified,
        avg_confidence_score=round(total_confidence / total, 1),
    )


def get_confidence_color(score: int, is_verified: bool) -> str:
    """Display color for a verdict"""
    if is_verified:
        if score > 85:
            return "green-600"
        if score > 70:
            return "green-500"
        return "green-400"
    if score < 30:
        return "red-600"
    if score < 50:
        return "red-500"
    return "red-400"


def split_data_uri(data_uri: str) -> Tuple[str, str]:
    """
    Split a base64 data URI into its MIME type and payload

    Raises:
        ValueError: if the string is not a base64 data URI
    """
    if not data_uri.startswith("data:") or "," not in data_uri:
        raise ValueError("Not a data URI")
    header, payload = data_uri.split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Only base64 data URIs are supported")
    mime_type = header[len("data:"):-len(";base64")] or "application/octet-stream"
    return mime_type, payload


def file_to_data_uri(path: Union[str, Path]) -> str:
    """Read an image file into a base64 data URI"""
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    if not mime_type or not mime_type.startswith("image/"):
        raise ValueError(f"Not an image file: {path}")
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"
