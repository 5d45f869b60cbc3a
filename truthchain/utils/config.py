"""
Configuration management for the verification services
"""

import copy
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

from ..models import TruthChainConfig

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = TruthChainConfig().model_dump()

# Environment variable -> dotted config key
ENV_OVERRIDES = {
    "GEMINI_API_KEY": "gemini.api_key",
    "GEMINI_MODEL": "gemini.model",
    "RPC_URL": "blockchain.rpc_url",
    "CONTRACT_ADDRESS": "blockchain.contract_address",
    "PRIVATE_KEY": "blockchain.private_key",
    "CHAIN_ID": "blockchain.chain_id",
    "TRUTHCHAIN_HISTORY_PATH": "history.path",
}


class ConfigManager:
    """Manages configuration for the verification services"""

    def __init__(self, config_path: Optional[Path] = None, use_env: bool = True):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to YAML config file, if None uses defaults
            use_env: Apply overrides from the environment and a .env file
        """
        self.config = copy.deepcopy(DEFAULT_CONFIG)

        if config_path and Path(config_path).exists():
            self.load_config(Path(config_path))
        elif config_path:
            logger.warning(f"Config file not found: {config_path}, using defaults")

        if use_env:
            self.apply_env_overrides()

    def load_config(self, config_path: Path) -> None:
        """Load configuration from YAML file."""
        try:
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config from {config_path}: {e}")
            return

        self.config = self._merge_configs(self.config, file_config)
        logger.info(f"Loaded configuration from {config_path}")

    def apply_env_overrides(self) -> None:
        """Override settings from environment variables (a .env file is read first)."""
        load_dotenv(find_dotenv(usecwd=True))
        for env_name, key_path in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                self.set(key_path, value)
                logger.debug(f"Applied {env_name} to {key_path}")

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path like 'gemini.model'
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        try:
            for key in keys:
                value = value[key]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key_path: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path like 'history.max_items'
            value: Value to set
        """
        keys = key_path.split('.')
        config = self.config

        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge two configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result

    def save_config(self, config_path: Path) -> None:
        """Save current configuration to YAML file, leaving secrets out."""
        data = copy.deepcopy(self.config)
        data.get('gemini', {}).pop('api_key', None)
        data.get('blockchain', {}).pop('private_key', None)

        with open(config_path, 'w') as f:
            yaml.safe_dump(data, f, default_flow_style=False, indent=2)
        logger.info(f"Saved configuration to {config_path}")

    def build_config(self) -> TruthChainConfig:
        """Validate the merged settings into a TruthChainConfig."""
        return TruthChainConfig(**self.config)

    def to_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary."""
        return copy.deepcopy(self.config)
