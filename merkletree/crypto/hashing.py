"""
Hashing Utilities
Pluggable hash strategies and the hashing primitives used by every tree node.

This module provides:
- HashStrategy: a zero-argument factory returning a fresh hashlib-style object
- DEFAULT_HASH_STRATEGY: SHA-256, used when a tree is given no strategy
- Named strategy lookup for configuration files and environment variables
- Guarded hashing that surfaces strategy failures as HashWriteError
- Hex encoding/decoding with 0x prefix

Determinism Notes:
- A tree hashes every node with one strategy for its whole lifetime
- Parent digests are hash(left || right): left first, no separator
"""
from __future__ import annotations

import hashlib
from typing import Callable, Protocol

from merkletree.schemas.errors import ConfigurationException, HashWriteError


class HashObject(Protocol):
    """The subset of the hashlib object interface the tree relies on."""

    def update(self, data: bytes, /) -> None: ...

    def digest(self) -> bytes: ...


HashStrategy = Callable[[], HashObject]

DEFAULT_HASH_STRATEGY: HashStrategy = hashlib.sha256

# Names accepted by get_hash_strategy(); values are hashlib constructors.
HASH_STRATEGIES: dict[str, HashStrategy] = {
    "sha256": hashlib.sha256,
    "sha384": hashlib.sha384,
    "sha512": hashlib.sha512,
    "sha3_256": hashlib.sha3_256,
    "sha3_512": hashlib.sha3_512,
    "blake2b": hashlib.blake2b,
    "blake2s": hashlib.blake2s,
}


def get_hash_strategy(name: str) -> HashStrategy:
    """
    Resolve a hash strategy by name.

    Args:
        name: Algorithm name, case-insensitive (e.g. "sha256", "SHA3-256")

    Returns:
        Zero-argument factory producing fresh hash objects

    Raises:
        ConfigurationException: If the name is not a known algorithm
    """
    key = name.strip().lower().replace("-", "_")
    try:
        return HASH_STRATEGIES[key]
    except KeyError:
        raise ConfigurationException(
            message=f"Unknown hash algorithm: {name!r}",
            field_path="hash.algorithm",
            details={"supported": sorted(HASH_STRATEGIES)},
        ) from None


def strategy_name(strategy: HashStrategy) -> str:
    """Best-effort algorithm name for a strategy, used in summaries and logs."""
    for name, known in HASH_STRATEGIES.items():
        if known is strategy:
            return name
    return getattr(strategy, "__name__", type(strategy).__name__)


def hash_with(strategy: HashStrategy, data: bytes) -> bytes:
    """
    Hash raw bytes with the given strategy.

    Args:
        strategy: Hash strategy of the tree
        data: Raw bytes to hash

    Returns:
        The strategy's digest of data

    Raises:
        HashWriteError: If the strategy fails to create, accept or finalise
    """
    try:
        h = strategy()
        h.update(data)
        return h.digest()
    except Exception as e:
        raise HashWriteError(
            message=f"Hash strategy failed to accept input: {e}",
            details={"strategy": strategy_name(strategy), "error": str(e)},
        ) from e


def hash_concat(left: bytes, right: bytes, strategy: HashStrategy = DEFAULT_HASH_STRATEGY) -> bytes:
    """
    Hash the concatenation of two digests.

    This is used for computing every internal node:
    parent = hash(left + right)

    Args:
        left: Left child digest
        right: Right child digest
        strategy: Hash strategy of the tree

    Returns:
        Digest of the concatenation
    """
    return hash_with(strategy, left + right)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "HashObject",
    "HashStrategy",
    "DEFAULT_HASH_STRATEGY",
    "HASH_STRATEGIES",
    "get_hash_strategy",
    "strategy_name",
    "hash_with",
    "hash_concat",
    "sha256",
    "to_hex",
    "from_hex",
]
