"""
Runtime Configuration

Central configuration for hash strategy selection, the default append mode
and logging.
"""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from merkletree.crypto.hashing import HashStrategy, get_hash_strategy
from merkletree.schemas.errors import ConfigurationException
from merkletree.schemas.tree import AppendMode

load_dotenv()

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@dataclass
class HashConfig:
    """Configuration for the tree hash strategy."""
    algorithm: str = "sha256"

    def strategy(self) -> HashStrategy:
        return get_hash_strategy(self.algorithm)


@dataclass
class TreeConfig:
    """Configuration for tree construction."""
    append_mode: Optional[str] = None

    def resolved_append_mode(self) -> Optional[AppendMode]:
        if self.append_mode is None:
            return None
        return AppendMode.parse(self.append_mode, field_path="tree.append_mode")


@dataclass
class LoggingConfig:
    """Configuration for the package logger."""
    level: str = "INFO"
    debug: bool = False


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables
    - YAML file
    - Programmatic construction
    """
    hash: HashConfig = field(default_factory=HashConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    extra: dict[str, Any] = field(default_factory=dict)

    def hash_strategy(self) -> HashStrategy:
        """Resolve the configured hash algorithm to a strategy."""
        return self.hash.strategy()

    def validate(self) -> None:
        """
        Check every named value resolves.

        Raises:
            ConfigurationException: On an unknown algorithm, append mode or log level
        """
        self.hash.strategy()
        self.tree.resolved_append_mode()
        if not isinstance(logging.getLevelName(self.logging.level.upper()), int):
            raise ConfigurationException(
                message=f"Unknown log level: {self.logging.level!r}",
                field_path="logging.level",
            )

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        This is the SINGLE source of truth for all env var reading.

        Supported variables:
        - MERKLETREE_HASH_ALGORITHM: Hash algorithm name (e.g. sha256)
        - MERKLETREE_APPEND_MODE: implicit or explicit
        - MERKLETREE_LOG_LEVEL: Log level name
        - MERKLETREE_DEBUG: Enable debug logging (true/false)
        """
        overrides: dict[str, Any] = {}

        if os.getenv("MERKLETREE_HASH_ALGORITHM"):
            overrides.setdefault("hash", {})["algorithm"] = os.getenv("MERKLETREE_HASH_ALGORITHM")

        if os.getenv("MERKLETREE_APPEND_MODE"):
            overrides.setdefault("tree", {})["append_mode"] = os.getenv("MERKLETREE_APPEND_MODE")

        if os.getenv("MERKLETREE_LOG_LEVEL"):
            overrides.setdefault("logging", {})["level"] = os.getenv("MERKLETREE_LOG_LEVEL")
        if os.getenv("MERKLETREE_DEBUG"):
            overrides.setdefault("logging", {})["debug"] = (
                os.getenv("MERKLETREE_DEBUG", "false").lower() == "true"
            )

        return overrides

    @classmethod
    def from_env(cls) -> RuntimeConfig:
        """
        Load configuration purely from environment variables.

        Uses defaults for any values not specified in env vars.
        """
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> RuntimeConfig:
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RuntimeConfig:
        """Load configuration from a dictionary (supports partial data)."""
        hash_data = data.get("hash", {})
        tree_data = data.get("tree", {})
        logging_data = data.get("logging", {})

        try:
            return cls(
                hash=HashConfig(**hash_data) if hash_data else HashConfig(),
                tree=TreeConfig(**tree_data) if tree_data else TreeConfig(),
                logging=LoggingConfig(**logging_data) if logging_data else LoggingConfig(),
                extra=data.get("extra", {}),
            )
        except TypeError as e:
            raise ConfigurationException(
                message=f"Invalid configuration: {e}",
                details={"error": str(e)},
            ) from e

    def with_env_overrides(self) -> RuntimeConfig:
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)
        for section in ("hash", "tree", "logging"):
            for key, value in overrides.get(section, {}).items():
                setattr(getattr(new_config, section), key, value)

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "hash": {
                "algorithm": self.hash.algorithm,
            },
            "tree": {
                "append_mode": self.tree.append_mode,
            },
            "logging": {
                "level": self.logging.level,
                "debug": self.logging.debug,
            },
            "extra": self.extra,
        }


def configure_logging(config: RuntimeConfig) -> logging.Logger:
    """
    Set up the package logger from configuration.

    Installs a basicConfig handler (a no-op if the root logger already has
    one) and sets the ``merkletree`` logger level, DEBUG when debug is on.
    """
    level = logging.DEBUG if config.logging.debug else getattr(
        logging, config.logging.level.upper(), logging.INFO
    )
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger = logging.getLogger("merkletree")
    logger.setLevel(level)
    return logger


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the default runtime configuration."""
    global _default_config
    if _default_config is None:
        _default_config = RuntimeConfig.from_env()
    return _default_config
