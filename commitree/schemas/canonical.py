"""
Schemas & Canonicalization
File: canonical.py

Purpose: Turn structured records into leaf bytes.

A tree commits to byte strings. Records (dicts, pydantic models, lists of
primitives) become leaves through canonical JSON: sorted keys, no
whitespace, None fields dropped, datetimes in UTC with a Z suffix, enums
as their values and bytes as 0x hex. Two records that differ only in key
order or timezone representation therefore land on the same leaf.

CRITICAL: All outputs from this module MUST be deterministic across runs.
"""

import json
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")

_SCALARS = (bool, int, str)


def format_datetime_canonical(dt: datetime) -> str:
    """
    ISO-8601 in UTC with a Z suffix. Naive datetimes are taken as UTC.

    Example:
        >>> format_datetime_canonical(datetime(2026, 1, 27, 21, 35, 0))
        '2026-01-27T21:35:00Z'
    """
    dt = dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)
    fmt = "%Y-%m-%dT%H:%M:%S.%fZ" if dt.microsecond else "%Y-%m-%dT%H:%M:%SZ"
    return dt.strftime(fmt)


def _child_path(path: str, key: Any) -> str:
    return f"{path}.{key}" if path else str(key)


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Reduce ``value`` to plain JSON types.

    ``path`` locates the value inside the record and is only used in
    error details.

    Raises:
        CanonicalizationException: For NaN/Infinity floats and for types
            with no canonical form (sets, arbitrary objects, ...)
    """
    if value is None or isinstance(value, _SCALARS):
        return value

    if isinstance(value, float):
        if math.isfinite(value):
            return value
        raise CanonicalizationException(
            f"Non-finite float value encountered: {value}",
            details={"path": path, "value": str(value)},
        )

    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()

    if isinstance(value, datetime):
        return format_datetime_canonical(value)

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, BaseModel):
        return canonicalize_value(
            value.model_dump(mode="json", by_alias=True, exclude_none=True), path
        )

    if isinstance(value, dict):
        out = {}
        for key, item in value.items():
            if item is not None:
                out[str(key)] = canonicalize_value(item, _child_path(path, key))
        return out

    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, f"{path}[{i}]") for i, item in enumerate(value)]

    type_name = type(value).__name__
    raise CanonicalizationException(
        f"Cannot canonicalize value of type {type_name}",
        details={"path": path, "type": type_name},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Canonical JSON text of ``obj``.

    Raises:
        CanonicalizationException: If the object has no canonical form

    Example:
        >>> dumps_canonical({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    plain = canonicalize_value(obj)
    try:
        return json.dumps(
            plain,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__},
        ) from e


def canonical_leaf_bytes(obj: Any) -> bytes:
    """UTF-8 canonical JSON of ``obj``, ready to be used as a leaf."""
    return dumps_canonical(obj).encode("utf-8")
