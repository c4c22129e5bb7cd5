from __future__ import annotations
from typing import Iterable, Optional
from flask import abort, g
from flask_jwt_extended import get_jwt_identity
from sqlalchemy import select
from medimart.models.account import Account
from medimart import get_db

UNAUTHORIZED = 'Unauthorized'


def load_account(account_id) -> Optional[Account]:
    try:
        pk = int(account_id)
    except (TypeError, ValueError):
        return None
    return get_db().execute(select(Account).where(Account.id==pk)).scalar_one_or_none()


def resolve_caller(roles: Iterable[str] = ()) -> Account:
    """Reload the token's account from the store and check it on every request.

    The token only carries identity; status and role are always read fresh so a
    suspended or demoted account loses access immediately. Any failure is a 401.
    """
    account = load_account(get_jwt_identity())
    if account is None or not account.is_approved:
        abort(401, description=UNAUTHORIZED)
    roles = tuple(roles)
    if roles and account.role not in roles:
        abort(401, description=UNAUTHORIZED)
    g.current_account = account
    return account


def current_account() -> Account:
    account = g.get('current_account')
    if account is None:
        abort(401, description=UNAUTHORIZED)
    return account


def current_account_id() -> Optional[int]:
    account = g.get('current_account')
    return account.id if account is not None else None
