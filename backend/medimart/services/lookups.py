from __future__ import annotations
from typing import List, Optional, Type
from sqlalchemy import select
from sqlalchemy.orm import Session


def _get_or_create(session: Session, model: Type, name: str):
    obj = session.execute(select(model).where(model.name==name)).scalar_one_or_none()
    if obj is None:
        obj = model(name=name)
        session.add(obj)
        # flush for the id; a duplicate from a concurrent request surfaces as IntegrityError to the caller
        session.flush()
    return obj


def resolve_link(session: Session, model: Type, raw) -> Optional[int]:
    """Map a brand/generic name from a request body to an id.

    None or blank -> no link; otherwise find-or-create by name.
    """
    if raw is None or not str(raw).strip():
        return None
    return _get_or_create(session, model, str(raw).strip()).id


def list_names(session: Session, model: Type) -> List[str]:
    return list(session.execute(select(model.name).order_by(model.name.asc())).scalars())

__all__ = ['resolve_link', 'list_names']
