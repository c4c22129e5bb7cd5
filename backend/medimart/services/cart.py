from __future__ import annotations
from collections import OrderedDict
from typing import Any, Dict, List
from flask import abort
from sqlalchemy import select
from sqlalchemy.orm import Session
from medimart.models.catalog_item import CatalogItem
from medimart.utils.validation import parse_int


def merge_lines(raw_items: Any) -> "OrderedDict[int, int]":
    """Collapse request lines into product_id -> quantity, first-seen order kept."""
    if not isinstance(raw_items, list) or not raw_items:
        abort(400, description='items must be a non-empty list')
    merged: "OrderedDict[int, int]" = OrderedDict()
    for line in raw_items:
        if not isinstance(line, dict):
            abort(400, description='each item must be an object')
        product_id = parse_int(line.get('product_id'), 'product_id', minimum=1)
        quantity = parse_int(line.get('quantity'), 'quantity', minimum=1)
        merged[product_id] = merged.get(product_id, 0) + quantity
    return merged


def quote_cart(session: Session, raw_items: Any) -> Dict[str, Any]:
    """Price a client-held cart against current published catalog sell prices."""
    merged = merge_lines(raw_items)
    rows = session.execute(
        select(CatalogItem).where(CatalogItem.id.in_(list(merged)), CatalogItem.status.is_(True))
    ).scalars().all()
    by_id = {r.id: r for r in rows}
    missing = [pid for pid in merged if pid not in by_id]
    if missing:
        abort(404, description=f'Unknown products: {missing}')
    lines: List[Dict[str, Any]] = []
    unavailable: List[int] = []
    for pid, qty in merged.items():
        item = by_id[pid]
        if not item.availability:
            unavailable.append(pid)
        lines.append({
            'product_id': pid,
            'name': item.name,
            'sku': item.sku,
            'image_url': item.image_url,
            'quantity': qty,
            'unit_price_cents': item.sell_price_cents,
            'line_total_cents': item.sell_price_cents * qty,
            'available': item.availability,
        })
    return {
        'items': lines,
        'unavailable': unavailable,
        'total_items': sum(l['quantity'] for l in lines),
        'total_price_cents': sum(l['line_total_cents'] for l in lines),
    }
