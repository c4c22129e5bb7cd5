"""Single-visible-item enforcement for banner tables.

At most one row per banner table may have is_visible set. Hiding is always
allowed. Showing is one conditional UPDATE: the row is only flipped when no
other row of the same table is visible, so the check and the write cannot be
interleaved by another request. The partial unique index on is_visible backs
this up at the storage layer; if it fires, the caller sees the same 409.
"""
from __future__ import annotations
from typing import Type
from flask import abort, current_app
from sqlalchemy import select, update, exists, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased


def conflict_message(model) -> str:
    return f'Another {model.KIND} is already visible. Only one {model.KIND} can be visible at a time.'


def set_visibility(session: Session, model: Type, record_id: int, visible: bool) -> int:
    """Flip is_visible on one record inside the caller's transaction (no commit).

    Returns the affected row count; aborts 404 for an unknown record and 409 when
    another record of the same model is already visible.
    """
    if not visible:
        result = session.execute(
            update(model).where(model.id==record_id).values(is_visible=False)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            abort(404)
        return result.rowcount
    other = aliased(model)
    already_visible = exists().where(and_(other.is_visible.is_(True), other.id != record_id))
    try:
        result = session.execute(
            update(model)
            .where(model.id==record_id, ~already_visible)
            .values(is_visible=True)
            .execution_options(synchronize_session=False)
        )
    except IntegrityError:
        session.rollback()
        current_app.logger.warning('Visibility race lost on %s %s', model.__tablename__, record_id)
        abort(409, description=conflict_message(model))
    if result.rowcount == 0:
        found = session.execute(select(model.id).where(model.id==record_id)).scalar_one_or_none()
        session.rollback()
        if found is None:
            abort(404)
        current_app.logger.info('Refused to show %s %s: another record is visible', model.__tablename__, record_id)
        abort(409, description=conflict_message(model))
    return result.rowcount


def find_visible(session: Session, model: Type):
    return session.execute(
        select(model).where(model.is_visible.is_(True)).order_by(model.created_at.desc(), model.id.desc())
    ).scalars().all()

__all__ = ['set_visibility', 'find_visible', 'conflict_message']
