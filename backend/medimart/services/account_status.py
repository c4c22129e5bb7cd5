from __future__ import annotations
from flask import abort, current_app
from sqlalchemy import select, update, func
from sqlalchemy.orm import Session
from medimart.constants.accounts import STATUS_TRANSITIONS, ALL_STATUSES
from medimart.models.account import Account
from medimart.services.audit import add_audit
from medimart.utils.fsm import TransitionValidator
from medimart.utils.validation import validate_status

ACCOUNT_STATUS_FSM = TransitionValidator(STATUS_TRANSITIONS)


def change_account_status(session: Session, account_id: int, new_status: str) -> Account:
    """Move an account to `new_status` if the lifecycle allows it.

    The write is a compare-and-swap on the status read here, so two admins acting
    on the same account cannot both succeed from the same starting state; the
    loser gets a 409 and nothing is written. The audit entry is part of the same
    transaction as the status change.
    """
    validate_status(new_status, ALL_STATUSES, field_name='new_status')
    account = session.execute(select(Account).where(Account.id==account_id)).scalar_one_or_none()
    if not account:
        abort(404, description='User not found')
    current = account.status
    if not ACCOUNT_STATUS_FSM.can_transition(current, new_status):
        current_app.logger.info('Denied status change for account %s: %s -> %s', account_id, current, new_status)
        abort(400, description=f'Cannot change status from {current} to {new_status}')
    result = session.execute(
        update(Account)
        .where(Account.id==account_id, Account.status==current)
        .values(status=new_status, updated_at=func.now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        session.rollback()
        current_app.logger.warning('Concurrent status change on account %s (expected %s)', account_id, current)
        abort(409, description=f'User status changed concurrently; expected {current}')
    add_audit('ACCOUNT.STATUS.CHANGE', 'Account', account_id, {
        'changes': {'status': {'before': current, 'after': new_status}},
    })
    session.commit()
    session.refresh(account)
    current_app.logger.info('Account %s status %s -> %s', account_id, current, new_status)
    return account

__all__ = ['ACCOUNT_STATUS_FSM', 'change_account_status']
