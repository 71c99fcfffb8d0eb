"""
Hash strategies and hashing primitives shared by every tree node.
"""
from .hashing import (
    DEFAULT_HASH_STRATEGY,
    HASH_STRATEGIES,
    HashObject,
    HashStrategy,
    from_hex,
    get_hash_strategy,
    hash_concat,
    hash_with,
    sha256,
    strategy_name,
    to_hex,
)

__all__ = [
    "DEFAULT_HASH_STRATEGY",
    "HASH_STRATEGIES",
    "HashObject",
    "HashStrategy",
    "from_hex",
    "get_hash_strategy",
    "hash_concat",
    "hash_with",
    "sha256",
    "strategy_name",
    "to_hex",
]
