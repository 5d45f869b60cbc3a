"""
Logging setup shared by the CLI and the web interface
"""

import logging
import os
import sys
from typing import Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# HTTP, RPC and model-loading chatter stays at WARNING even in verbose mode
NOISY_LOGGERS = ("urllib3", "aiohttp", "web3", "transformers", "werkzeug")


def setup_logging(
    level: Optional[str] = None,
    verbose: bool = False,
    format_string: Optional[str] = None
) -> None:
    """
    Configure the root logger for TruthChain.

    Args:
        level: Log level name; falls back to TRUTHCHAIN_LOG_LEVEL, then INFO
        verbose: If True, log at DEBUG regardless of level
        format_string: Custom format string for log messages
    """
    if verbose:
        level = "DEBUG"
    elif level is None:
        level = os.getenv("TRUTHCHAIN_LOG_LEVEL", "INFO")

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=format_string or DEFAULT_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr)  # stdout carries JSON verdicts
        ],
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
