"""
File: __init__.py

Purpose: Export the public API for the schemas package: the content
contract, error taxonomy, canonical serialization and tree schemas.
"""

# Canonical serialization API
from .canonical import (
    CANONICAL_JSON_SEPARATORS,
    canonical_bytes,
    canonical_equals,
    canonicalize_value,
    dumps_canonical,
    format_datetime_canonical,
)

# Content contract
from .content import (
    BytesContent,
    CanonicalContent,
    Content,
    FileMeta,
    content_digest,
    content_equals,
)

# Error models and exceptions
from .errors import (
    AppendModeError,
    CanonicalizationException,
    ConfigurationException,
    ContentEqualityError,
    ContentHashError,
    EmptyInputError,
    EmptyTreeError,
    ErrorCodes,
    HashWriteError,
    MerkleTreeError,
    MerkleTreeException,
)

# Tree schemas
from .tree import AppendMode, TreeSummary

__all__ = [
    # Canonical
    "CANONICAL_JSON_SEPARATORS",
    "canonical_bytes",
    "canonical_equals",
    "canonicalize_value",
    "dumps_canonical",
    "format_datetime_canonical",
    # Content
    "BytesContent",
    "CanonicalContent",
    "Content",
    "FileMeta",
    "content_digest",
    "content_equals",
    # Errors
    "AppendModeError",
    "CanonicalizationException",
    "ConfigurationException",
    "ContentEqualityError",
    "ContentHashError",
    "EmptyInputError",
    "EmptyTreeError",
    "ErrorCodes",
    "HashWriteError",
    "MerkleTreeError",
    "MerkleTreeException",
    # Tree
    "AppendMode",
    "TreeSummary",
]
