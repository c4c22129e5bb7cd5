from __future__ import annotations
import re
from typing import Callable, Iterable, Optional, TypeVar
from flask import abort, current_app
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from medimart.constants.catalog import SKU_PREFIX, SKU_PAD_WIDTH
from medimart.models.catalog_item import CatalogItem

SKU_PATTERN = re.compile(r'^SKU-(\d+)$')

T = TypeVar('T')


def next_sku(existing: Iterable[Optional[str]]) -> str:
    """Return the SKU after the highest well-formed one in `existing`.

    Values that do not match SKU-<digits> are ignored. Padding is a minimum
    width, so SKU-9999 is followed by SKU-10000.
    """
    highest = 0
    for sku in existing:
        if not sku:
            continue
        match = SKU_PATTERN.match(sku)
        if match:
            highest = max(highest, int(match.group(1)))
    return f'{SKU_PREFIX}{highest + 1:0{SKU_PAD_WIDTH}d}'


def generate_next_sku(session: Session) -> str:
    rows = session.execute(select(CatalogItem.sku).where(CatalogItem.sku.like(f'{SKU_PREFIX}%'))).scalars()
    return next_sku(rows)


def create_with_sku(session: Session, build: Callable[[str], T], max_attempts: Optional[int] = None) -> T:
    """Insert the object returned by build(sku) and commit, retrying on unique violations.

    build() runs once per attempt so any find-or-create lookups it performs are
    redone after a rollback. Each retry recomputes the SKU from the store.
    """
    attempts = max_attempts or current_app.config.get('SKU_MAX_ATTEMPTS', 5)
    for attempt in range(1, attempts + 1):
        sku = generate_next_sku(session)
        try:
            obj = build(sku)
            session.add(obj)
            session.commit()
        except IntegrityError:
            session.rollback()
            current_app.logger.warning('SKU %s collided (attempt %d/%d), retrying', sku, attempt, attempts)
            continue
        return obj
    abort(409, description='Could not allocate a unique SKU, try again')

__all__ = ['SKU_PATTERN', 'next_sku', 'generate_next_sku', 'create_with_sku']
