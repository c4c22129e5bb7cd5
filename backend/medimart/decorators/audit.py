"""Audit logging decorator to reduce repetitive add_audit() calls in route handlers.

Usage examples:

@audit_log('PRODUCT.CREATE', entity='CatalogItem', entity_id_key='id', meta_keys=['name', 'sku'])
def create_product():
    ... return _item_json(item), 201

@audit_log('AD.UPDATE', entity='Advertisement', entity_id_key='id',
           diff_keys=['title', 'is_visible'], pre_fetch=lambda a, kw: _prefetch_ad(kw.get('ad_id')))
def update_ad(ad_id): ...

Parameters:
  action: required audit action code (e.g. PRODUCT.CREATE)
  entity: optional entity label (CatalogItem, Advertisement, PromotionModal)
  entity_id_key: key in the returned JSON object whose value becomes entity_id.
  entity_id_arg: name of the path parameter to use for entity_id (fallback if entity_id_key absent).
  meta_keys: list of keys to project from returned JSON into meta dict (shallow copy).
  diff_keys / pre_fetch: pre_fetch(args, kwargs) returns a dict snapshot taken before the
    view runs; keys listed in diff_keys that changed are stored under meta['changes'].

Only successful responses (status < 400) are audited. Views abort() on failure, so an
exception propagates untouched and nothing is recorded.
"""
from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Iterable, Optional, Dict

from flask import current_app
from medimart.services.audit import add_audit
from medimart import get_db


def _extract_payload(rv: Any):
    """Return (data, status) where data is the JSON-able dict for inspection."""
    if isinstance(rv, tuple) and rv:
        status = rv[1] if len(rv) > 1 and isinstance(rv[1], int) else 200
        return rv[0], status
    return rv, 200


def audit_log(
    action: str,
    *,
    entity: Optional[str] = None,
    entity_id_key: Optional[str] = None,
    entity_id_arg: Optional[str] = None,
    meta_keys: Optional[Iterable[str]] = None,
    diff_keys: Optional[Iterable[str]] = None,
    pre_fetch: Optional[Callable[[tuple, dict], Dict[str, Any]]] = None,
):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            before_snapshot = pre_fetch(args, kwargs) if diff_keys and pre_fetch else None
            rv = fn(*args, **kwargs)
            data, status = _extract_payload(rv)
            if status >= 400:
                return rv
            try:
                if not isinstance(data, dict):
                    data = {}
                entity_id = None
                if entity_id_key and entity_id_key in data:
                    entity_id = data.get(entity_id_key)
                elif entity_id_arg and entity_id_arg in kwargs:
                    entity_id = kwargs.get(entity_id_arg)
                meta = {k: data.get(k) for k in (meta_keys or ()) if k in data}
                if diff_keys and isinstance(before_snapshot, dict):
                    changes = {}
                    for k in diff_keys:
                        if k in before_snapshot and k in data and before_snapshot[k] != data[k]:
                            changes[k] = {'before': before_snapshot[k], 'after': data[k]}
                    if changes:
                        meta['changes'] = changes
                add_audit(action, entity, entity_id, meta)
                get_db().commit()
            except Exception:
                # The mutation is already committed; a failed audit write must not turn it into a 500
                current_app.logger.exception('Audit write failed for %s', action)
                get_db().rollback()
            return rv
        return wrapper
    return outer
