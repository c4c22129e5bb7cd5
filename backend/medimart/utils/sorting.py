from __future__ import annotations
from typing import Mapping, Optional, Sequence
from flask import abort

def apply_multi_sort(query, sort_expr: Optional[str], allowed: Mapping, tie_breaker, default: Sequence = ()):
    """Apply multi-field sort to a SQLAlchemy query.
    sort_expr: comma-separated tokens, each optionally prefixed with '-'.
    allowed: mapping of field key -> column object.
    tie_breaker: ordering clause appended for deterministic ordering.
    default: clauses used when sort_expr is empty (tie_breaker still appended).
    """
    if not sort_expr:
        return query.order_by(*default, tie_breaker)
    clauses = []
    for raw in sort_expr.split(','):
        token = raw.strip()
        if not token:
            continue
        desc = token.startswith('-')
        key = token[1:] if desc else token
        col = allowed.get(key)
        if col is None:
            abort(400, description=f'Invalid sort field {key}')
        clauses.append(col.desc() if desc else col.asc())
    clauses.append(tie_breaker)
    return query.order_by(*clauses)
