from __future__ import annotations
from flask import Blueprint, request, abort
from sqlalchemy import func, or_, select
from medimart.constants.accounts import ALL_STATUSES, ALL_ROLES, STATUS_APPROVED, STATUS_PENDING
from medimart.decorators.auth import require_admin
from medimart.models.account import Account
from medimart.routes.auth import account_json
from medimart.services.account_status import ACCOUNT_STATUS_FSM, change_account_status
from medimart.utils.filters import apply_filters
from medimart.utils.listing import list_response
from medimart.utils.sorting import apply_multi_sort
from medimart.utils.validation import parse_int
from medimart import get_db

admin_users_bp = Blueprint('admin_users', __name__)

USER_FILTERS = {
    'status': {
        'validate': lambda v: v in ALL_STATUSES,
        'op': lambda q, v: q.filter(Account.status==v),
    },
    'role': {
        'validate': lambda v: v in ALL_ROLES,
        'op': lambda q, v: q.filter(Account.role==v),
    },
    'q': {
        'op': lambda q, v: q.filter(or_(
            Account.name.ilike(f'%{v}%'),
            Account.email.ilike(f'%{v}%'),
            Account.shop_name.ilike(f'%{v}%'),
        )),
    },
}


def _admin_account_json(a: Account):
    body = account_json(a)
    body['allowed_transitions'] = ACCOUNT_STATUS_FSM.allowed_targets(a.status)
    return body


@admin_users_bp.get('/users')
@require_admin
def list_users():
    session = get_db()
    q = apply_filters(session.query(Account), USER_FILTERS, request.args)
    allowed = {'name': Account.name, 'email': Account.email, 'created_at': Account.created_at, 'status': Account.status}
    q = apply_multi_sort(q, request.args.get('sort'), allowed, Account.id.desc(), default=[Account.created_at.desc()])
    return list_response(q, _admin_account_json, ts_column='updated_at')


@admin_users_bp.get('/stats')
@require_admin
def stats():
    session = get_db()
    counts = dict(session.execute(select(Account.status, func.count(Account.id)).group_by(Account.status)).all())
    by_status = {s: int(counts.get(s, 0)) for s in ALL_STATUSES}
    return {
        'total_users': sum(by_status.values()),
        'pending_users': by_status[STATUS_PENDING],
        'by_status': by_status,
    }


def _target_user_id(data) -> int:
    if data.get('user_id') in (None, ''):
        abort(400, description='user_id is required')
    return parse_int(data['user_id'], 'user_id', minimum=1)


@admin_users_bp.post('/users/approve')
@require_admin
def approve_user():
    data = request.json or {}
    account = change_account_status(get_db(), _target_user_id(data), STATUS_APPROVED)
    return {'message': 'User Approved', 'user': _admin_account_json(account)}


@admin_users_bp.post('/users/update-status')
@require_admin
def update_status():
    data = request.json or {}
    if data.get('user_id') in (None, '') or not data.get('new_status'):
        abort(400, description='user_id and new_status are required')
    new_status = data['new_status']
    account = change_account_status(get_db(), _target_user_id(data), new_status)
    return {'message': f'User status updated to {new_status}', 'user': _admin_account_json(account)}
