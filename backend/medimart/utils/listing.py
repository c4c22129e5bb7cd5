"""Paginated list responses with validators for conditional GET.

Every admin and public listing returns the same envelope:

    {"data": [...], "pagination": {"total", "limit", "offset", "returned"}}

The response carries an ETag hashed from the serialized page plus total and
window, and, when a timestamp column is given, a Last-Modified header. Any
change to a returned field changes the ETag. werkzeug's make_conditional
turns a matching
If-None-Match / If-Modified-Since into a bodiless 304.
"""
from __future__ import annotations
import hashlib
import json
from datetime import datetime, timezone
from typing import Callable, Optional
from flask import request, abort, make_response
from sqlalchemy.orm import Query
from medimart.config.pagination import normalize_pagination


def iso_utc(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        # SQLite hands back naive values; they are stored as UTC
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat().replace('+00:00', 'Z')


def _page_window():
    try:
        return normalize_pagination(request.args.get('limit'), request.args.get('offset'))
    except ValueError as e:
        abort(400, description=str(e))


def _newest(rows, ts_column: Optional[str]) -> Optional[datetime]:
    if not ts_column:
        return None
    stamps = [getattr(r, ts_column) for r in rows if getattr(r, ts_column, None) is not None]
    if not stamps:
        return None
    newest = max(stamps)
    if newest.tzinfo is None:
        newest = newest.replace(tzinfo=timezone.utc)
    return newest.replace(microsecond=0)


def page_etag(data: list, total: int, limit: int, offset: int) -> str:
    body = json.dumps(data, sort_keys=True, default=str)
    seed = f"{total}|{limit}|{offset}|{body}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]


def list_response(q: Query, serialize: Callable, ts_column: Optional[str] = None):
    """Paginate `q`, serialize the page and answer conditional requests.

    ts_column names the attribute used for Last-Modified (max over the page).
    """
    limit, offset = _page_window()
    total = q.order_by(None).count()
    rows = q.offset(offset).limit(limit).all()
    data = [serialize(r) for r in rows]
    newest = _newest(rows, ts_column)
    resp = make_response({
        'data': data,
        'pagination': {'total': total, 'limit': limit, 'offset': offset, 'returned': len(data)},
    })
    resp.set_etag(page_etag(data, total, limit, offset))
    if newest is not None:
        resp.last_modified = newest
    return resp.make_conditional(request)

__all__ = ['iso_utc', 'page_etag', 'list_response']
