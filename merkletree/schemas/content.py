"""
File: content.py

Purpose: The contract every item stored in a tree must satisfy, the guarded
calls the engine makes through it, and ready-made content types.

The tree never inspects content fields. It only calls:
- calculate_hash() -> bytes   (deterministic, side-effect free)
- equals(other) -> bool

The digest produced by a content item should come from the same algorithm
as the tree's hash strategy; the tree does not enforce this.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .canonical import canonical_bytes, dumps_canonical
from .errors import ContentEqualityError, ContentHashError


@runtime_checkable
class Content(Protocol):
    """Capability set of a tree item."""

    def calculate_hash(self) -> bytes: ...

    def equals(self, other: Any) -> bool: ...


def content_digest(content: Content) -> bytes:
    """
    Compute a content item's digest through the contract.

    Raises:
        ContentHashError: If calculate_hash raises or returns a non-bytes value
    """
    try:
        digest = content.calculate_hash()
    except ContentHashError:
        raise
    except Exception as e:
        raise ContentHashError(
            message=f"Content digest failed: {e}",
            content_type=type(content).__name__,
            details={"error": str(e)},
        ) from e
    if not isinstance(digest, (bytes, bytearray)):
        raise ContentHashError(
            message=f"calculate_hash must return bytes, got {type(digest).__name__}",
            content_type=type(content).__name__,
        )
    return bytes(digest)


def content_equals(stored: Content, query: Any, leaf_index: int | None = None) -> bool:
    """
    Compare a stored content item against a query through the contract.

    Raises:
        ContentEqualityError: If equals raises
    """
    try:
        return bool(stored.equals(query))
    except ContentEqualityError:
        raise
    except Exception as e:
        raise ContentEqualityError(
            message=f"Content equality check failed: {e}",
            leaf_index=leaf_index,
            details={"error": str(e), "content_type": type(stored).__name__},
        ) from e


# =============================================================================
# Ready-made content types
# =============================================================================

@dataclass(eq=False)
class BytesContent:
    """
    Opaque byte payload, e.g. one piece of a distributed file.

    Example:
        >>> BytesContent(b"piece-0").equals(BytesContent(b"piece-0"))
        True
    """
    data: bytes
    hash_strategy: Callable[[], Any] = field(default=hashlib.sha256, repr=False)

    def calculate_hash(self) -> bytes:
        h = self.hash_strategy()
        h.update(self.data)
        return h.digest()

    def equals(self, other: Any) -> bool:
        return isinstance(other, BytesContent) and self.data == other.data


class CanonicalContent(BaseModel):
    """
    Structured record committed through its canonical JSON form.

    Subclasses declare fields as usual; the digest is
    hashlib.new(hash_algorithm, canonical_bytes(self)).
    Two records are equal when they share a type and canonical form.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    hash_algorithm: ClassVar[str] = "sha256"

    def calculate_hash(self) -> bytes:
        return hashlib.new(self.hash_algorithm, canonical_bytes(self)).digest()

    def equals(self, other: Any) -> bool:
        if type(other) is not type(self):
            return False
        return dumps_canonical(self) == dumps_canonical(other)


class FileMeta(CanonicalContent):
    """Metadata of one file published to the distribution network."""

    info_hash: str = Field(
        ...,
        description="BitTorrent v1 info-hash of the file, 40 hex chars",
        serialization_alias="infoHash",
    )
    raw_size: int = Field(
        ...,
        ge=0,
        description="Size of the file in bytes",
        serialization_alias="rawSize",
    )

    @field_validator("info_hash")
    @classmethod
    def _validate_info_hash(cls, v: str) -> str:
        value = v[2:] if v.startswith("0x") else v
        if len(value) != 40:
            raise ValueError(f"info_hash must be 40 hex chars, got {len(value)}")
        try:
            bytes.fromhex(value)
        except ValueError as e:
            raise ValueError(f"info_hash is not valid hex: {e}") from e
        return value.lower()


__all__ = [
    "Content",
    "content_digest",
    "content_equals",
    "BytesContent",
    "CanonicalContent",
    "FileMeta",
]
