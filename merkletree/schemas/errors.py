"""
File: errors.py

Purpose: Error taxonomy for the Merkle tree engine.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the package."""

    # Construction Errors
    EMPTY_INPUT = "EMPTY_INPUT"
    EMPTY_TREE = "EMPTY_TREE"

    # Content Contract Errors
    CONTENT_HASH_FAILED = "CONTENT_HASH_FAILED"
    CONTENT_EQUALITY_FAILED = "CONTENT_EQUALITY_FAILED"

    # Hash Strategy Errors
    HASH_WRITE_FAILED = "HASH_WRITE_FAILED"

    # Mutation Errors
    APPEND_MODE_CONFLICT = "APPEND_MODE_CONFLICT"

    # Configuration Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class MerkleTreeError(BaseModel):
    """
    Base error model for structured error communication.

    Callers that report failures across a process boundary (e.g. a seeding
    service rejecting a file) can serialize this model instead of the
    exception.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "MerkleTreeException":
        """Convert this error model to a raised exception."""
        return MerkleTreeException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

def _with_details(details: dict[str, Any] | None, **fields: Any) -> dict[str, Any]:
    """Merge keyword fields that are set into a copy of ``details``."""
    merged = dict(details or {})
    merged.update({k: v for k, v in fields.items() if v is not None})
    return merged


class MerkleTreeException(Exception):
    """
    Base exception for all Merkle tree errors.

    Subclasses fix ``code`` and usually a default message; the instance
    converts to a MerkleTreeError model for reporting.
    """

    code: str = "MERKLE_TREE_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> MerkleTreeError:
        """Convert this exception to a MerkleTreeError model."""
        return MerkleTreeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(MerkleTreeException):
    """Raised when building or rebuilding a tree from zero content items."""

    code = ErrorCodes.EMPTY_INPUT

    def __init__(self, message: str = "cannot construct tree with no content", details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=details)


class EmptyTreeError(MerkleTreeException):
    """Raised when an operation needs at least one leaf and the tree has none."""

    code = ErrorCodes.EMPTY_TREE

    def __init__(
        self,
        message: str = "tree has no leaves",
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_details(details, operation=operation))


class ContentHashError(MerkleTreeException):
    """Raised when a content item's digest function fails or returns a non-digest."""

    code = ErrorCodes.CONTENT_HASH_FAILED

    def __init__(self, message: str, content_type: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=_with_details(details, content_type=content_type))


class ContentEqualityError(MerkleTreeException):
    """Raised when comparing a stored item against a query fails mid-search."""

    code = ErrorCodes.CONTENT_EQUALITY_FAILED

    def __init__(self, message: str, leaf_index: int | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=_with_details(details, leaf_index=leaf_index))


class HashWriteError(MerkleTreeException):
    """Raised when the tree's hash strategy rejects its input."""

    code = ErrorCodes.HASH_WRITE_FAILED


class AppendModeError(MerkleTreeException):
    """Raised when a tree committed to one append strategy is asked to use the other."""

    code = ErrorCodes.APPEND_MODE_CONFLICT

    def __init__(
        self,
        message: str,
        committed: str | None = None,
        requested: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_details(details, committed=committed, requested=requested))


class ConfigurationException(MerkleTreeException):
    """Raised when runtime configuration names an unknown algorithm, mode or level."""

    code = ErrorCodes.CONFIGURATION_ERROR

    def __init__(self, message: str, field_path: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details=_with_details(details, field_path=field_path))


class CanonicalizationException(MerkleTreeException):
    """Raised when a record cannot be reduced to canonical JSON."""

    code = ErrorCodes.CANONICALIZATION_ERROR
