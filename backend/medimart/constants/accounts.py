"""Account roles, statuses and the status lifecycle.

STATUS_TRANSITIONS is the only place the lifecycle is defined; route handlers,
seeding scripts and clients listing available actions all read it from here.
Never add PENDING as a target: it is the creation state only.
"""
from __future__ import annotations
from typing import Dict, FrozenSet, List

ROLE_ADMIN = 'ADMIN'
ROLE_SHOP_OWNER = 'SHOP_OWNER'
ROLE_SUPPLIER = 'SUPPLIER'
ROLE_DELIVERY_BOY = 'DELIVERY_BOY'
ALL_ROLES = (ROLE_ADMIN, ROLE_SHOP_OWNER, ROLE_SUPPLIER, ROLE_DELIVERY_BOY)
# Roles a visitor may pick on the public registration form
SELF_REGISTER_ROLES = (ROLE_SHOP_OWNER, ROLE_SUPPLIER, ROLE_DELIVERY_BOY)

STATUS_PENDING = 'PENDING'
STATUS_APPROVED = 'APPROVED'
STATUS_REJECTED = 'REJECTED'
STATUS_SUSPENDED = 'SUSPENDED'
ALL_STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_SUSPENDED)

STATUS_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    STATUS_PENDING: frozenset({STATUS_APPROVED, STATUS_REJECTED, STATUS_SUSPENDED}),
    STATUS_APPROVED: frozenset({STATUS_REJECTED, STATUS_SUSPENDED}),
    STATUS_REJECTED: frozenset({STATUS_APPROVED}),
    STATUS_SUSPENDED: frozenset({STATUS_APPROVED}),
}


def allowed_status_targets(current: str) -> List[str]:
    """Statuses reachable from `current`, in declaration order (empty for unknown)."""
    targets = STATUS_TRANSITIONS.get(current, frozenset())
    return [s for s in ALL_STATUSES if s in targets]


def is_status_transition_allowed(current: str, target: str) -> bool:
    return target in STATUS_TRANSITIONS.get(current, frozenset())

__all__ = [
    'ROLE_ADMIN', 'ROLE_SHOP_OWNER', 'ROLE_SUPPLIER', 'ROLE_DELIVERY_BOY', 'ALL_ROLES', 'SELF_REGISTER_ROLES',
    'STATUS_PENDING', 'STATUS_APPROVED', 'STATUS_REJECTED', 'STATUS_SUSPENDED', 'ALL_STATUSES',
    'STATUS_TRANSITIONS', 'allowed_status_targets', 'is_status_transition_allowed',
]
