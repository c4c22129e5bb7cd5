from __future__ import annotations
from typing import Any, Dict, Optional
from medimart import get_db
from medimart.models.audit import AuditLog
from medimart.services.policy import current_account_id


def add_audit(action: str, entity: Optional[str] = None, entity_id: Optional[str] = None, meta: Optional[Dict[str, Any]] = None):
    """Persist an audit log entry within the current DB session.

    Parameters:
      action: short action code e.g. ACCOUNT.STATUS.CHANGE, PRODUCT.CREATE, AD.DELETE
      entity: optional entity name (Account, CatalogItem, Advertisement, PromotionModal)
      entity_id: optional primary key string
      meta: additional JSON-safe dictionary (will be shallow copied)
    """
    session = get_db()
    log = AuditLog(
        actor_account_id=current_account_id() or 0,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        meta=dict(meta or {}),
    )
    session.add(log)
    # No commit here; caller's transaction boundary controls durability.
    return log
