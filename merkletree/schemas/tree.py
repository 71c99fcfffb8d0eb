"""
File: tree.py

Purpose: Tree-level schemas: the append strategy a tree commits to and the
serializable summary handed to callers that publish a tree's root.
"""

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationException


class AppendMode(str, Enum):
    """Incremental append strategy a tree instance commits to."""

    # Odd levels are balanced by hashing the lone node with itself;
    # no duplicate leaf is ever materialized.
    IMPLICIT = "implicit"
    # Every odd level carries a materialized duplicate, so the shape always
    # equals a fresh build of the same content sequence.
    EXPLICIT = "explicit"

    @classmethod
    def parse(cls, value: Union["AppendMode", str], field_path: str = "append_mode") -> "AppendMode":
        """
        Resolve a mode name, ignoring case and surrounding whitespace.

        Raises:
            ConfigurationException: If the name is not a known mode
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ConfigurationException(
                message=f"Unknown append mode: {value!r}",
                field_path=field_path,
                details={"supported": [m.value for m in cls]},
            ) from None


class TreeSummary(BaseModel):
    """Snapshot of a tree's public state."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    merkle_root: str | None = Field(
        default=None,
        description="Stored root digest, 0x-prefixed hex; None for an empty tree",
    )
    leaf_count: int = Field(..., ge=0, description="Leaves including duplicates")
    content_count: int = Field(..., ge=0, description="Real (non-duplicate) leaves")
    depth: int = Field(..., ge=0, description="Edges from a leaf to the root")
    hash_algorithm: str = Field(..., min_length=1)
    append_mode: AppendMode | None = Field(default=None)
