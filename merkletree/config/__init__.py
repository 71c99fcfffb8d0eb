"""
Runtime Configuration Module

Provides configuration loading and logging setup for trees created from
configuration files or the environment.
"""

from .runtime import (
    HashConfig,
    LoggingConfig,
    RuntimeConfig,
    TreeConfig,
    configure_logging,
    get_default_config,
)

__all__ = [
    "HashConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "TreeConfig",
    "configure_logging",
    "get_default_config",
]
