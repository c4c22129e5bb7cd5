from flask import Blueprint, request, abort, current_app
from flask_jwt_extended import create_access_token
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from medimart.models.account import Account
from medimart.constants.accounts import STATUS_PENDING, SELF_REGISTER_ROLES, ALL_ROLES
from medimart.decorators.auth import require_roles
from medimart.services.policy import current_account
from medimart.utils.validation import require_fields, validate_status
from medimart.utils.listing import iso_utc
from medimart import get_db

auth_bp = Blueprint('auth', __name__)

REGISTER_FIELDS = ['name', 'email', 'phone', 'password', 'address', 'role']


def account_json(a: Account):
    return {
        'id': a.id,
        'name': a.name,
        'email': a.email,
        'phone': a.phone,
        'address': a.address,
        'shop_name': a.shop_name,
        'role': a.role,
        'status': a.status,
        'created_at': iso_utc(a.created_at),
    }


@auth_bp.post('/register')
def register():
    data = request.json or {}
    require_fields(data, REGISTER_FIELDS)
    role = validate_status(data['role'], ALL_ROLES, field_name='role')
    if role not in SELF_REGISTER_ROLES:
        abort(400, description=f'role {role} cannot self-register')
    session = get_db()
    email = str(data['email']).strip().lower()
    if session.execute(select(Account.id).where(Account.email==email)).scalar_one_or_none():
        abort(400, description='User already exists')
    account = Account(
        name=data['name'],
        email=email,
        phone=data['phone'],
        address=data['address'],
        shop_name=data.get('shop_name') or None,
        role=role,
        # status is never taken from the request
        status=STATUS_PENDING,
        password_hash='',
    )
    account.set_password(data['password'])
    session.add(account)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        abort(400, description='User already exists')
    current_app.logger.info('Registered account %s (%s) pending approval', account.id, role)
    return {'message': 'User registered', 'id': account.id, 'status': account.status}, 201


@auth_bp.post('/login')
def login():
    data = request.json or {}
    email = data.get('email'); password = data.get('password')
    if not email or not password:
        abort(400, description='email & password required')
    session = get_db()
    account = session.execute(select(Account).where(Account.email==str(email).strip().lower())).scalar_one_or_none()
    if not account:
        abort(401, description='User not found')
    if not account.is_approved:
        abort(403, description='Your account is not approved by admin')
    if not account.verify_password(password):
        abort(401, description='Invalid password')
    # JWT identity must be a string (flask-jwt-extended v4 requirement)
    token = create_access_token(identity=str(account.id), additional_claims={'role': account.role})
    return {'access_token': token}


@auth_bp.get('/me')
@require_roles()
def me():
    return account_json(current_account())
