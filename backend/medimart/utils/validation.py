"""Reusable validation helpers for request payloads.

Keeps enum checks, required-field checks and integer/flag coercion consistent
so every endpoint reports the same 400 semantics.
"""
from __future__ import annotations
from typing import Any, Iterable, Mapping
from flask import abort


def validate_status(new_status: str, allowed: Iterable[str], field_name: str = 'status') -> str:
    """Validate that new_status is inside allowed.

    Returns the status (to enable inline usage) or aborts with 400.
    """
    if new_status not in allowed:
        abort(400, description=f"{field_name} invalid")
    return new_status


def require_fields(data: Mapping[str, Any], fields: Iterable[str]):
    """Abort 400 listing every required key that is absent, None or an empty string."""
    missing = [f for f in fields if data.get(f) in (None, '')]
    if missing:
        abort(400, description=f"Missing required fields: {', '.join(missing)}")


def parse_int(value: Any, field_name: str, minimum: int = 0) -> int:
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        abort(400, description=f'{field_name} must be int')
    try:
        parsed = int(value)
    except (TypeError, ValueError, OverflowError):
        abort(400, description=f'{field_name} must be int')
    if parsed < minimum:
        abort(400, description=f'{field_name} must be >= {minimum}')
    return parsed


def parse_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    abort(400, description=f'{field_name} must be boolean')

__all__ = ['validate_status', 'require_fields', 'parse_int', 'parse_bool']
