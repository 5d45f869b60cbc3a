"""Flask front-end for content verification."""

from .app import create_app

__all__ = ["create_app"]
