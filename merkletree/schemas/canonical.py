"""
File: canonical.py

Purpose: Stable JSON form of structured content items. CanonicalContent
digests canonical_bytes(), so two equal records commit to the same leaf
digest whatever their field or key order.

Form:
- keys sorted, no whitespace, UTF-8 kept as-is
- None values dropped from mappings
- datetimes as UTC ISO-8601 with a Z suffix
- enums by value, bytes as lowercase hex
- NaN and infinities rejected
"""

import json
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def format_datetime_canonical(dt: datetime) -> str:
    """UTC ISO-8601 with Z suffix; naive datetimes are taken to be UTC."""
    as_utc = dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)
    fmt = "%Y-%m-%dT%H:%M:%S.%fZ" if as_utc.microsecond else "%Y-%m-%dT%H:%M:%SZ"
    return as_utc.strftime(fmt)


def _child_path(path: str, key: Any) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else str(key)


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Reduce a value to plain JSON types in canonical form.

    Raises:
        CanonicalizationException: On non-finite floats or unsupported types;
            ``details["path"]`` names the offending field.
    """
    if isinstance(value, float) and not math.isfinite(value):
        raise CanonicalizationException(
            message=f"Non-finite float value encountered: {value}",
            details={"path": path, "value": str(value)},
        )
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return format_datetime_canonical(value)
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, BaseModel):
        return canonicalize_value(value.model_dump(mode="json", by_alias=True, exclude_none=True), path)
    if isinstance(value, dict):
        return {
            key: canonicalize_value(item, _child_path(path, key))
            for key, item in value.items()
            if item is not None
        }
    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, _child_path(path, i)) for i, item in enumerate(value)]

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Canonical JSON text of ``obj``.

    Example:
        >>> dumps_canonical({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    plain = canonicalize_value(obj)
    try:
        return json.dumps(plain, sort_keys=True, separators=CANONICAL_JSON_SEPARATORS, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__},
        ) from e


def canonical_bytes(obj: Any) -> bytes:
    """UTF-8 encoding of dumps_canonical(obj); the input to record digests."""
    return dumps_canonical(obj).encode("utf-8")


def canonical_equals(left: Any, right: Any) -> bool:
    """True when both values share a canonical form; unserializable values are never equal."""
    try:
        return dumps_canonical(left) == dumps_canonical(right)
    except CanonicalizationException:
        return False
