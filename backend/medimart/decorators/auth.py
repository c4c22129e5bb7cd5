from functools import wraps
from flask import abort, current_app, request
from flask_jwt_extended import verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from medimart.constants.accounts import ROLE_ADMIN
from medimart.services.policy import resolve_caller, UNAUTHORIZED


def require_roles(*roles: str):
    """Require a valid token for an APPROVED account; restrict to `roles` when given.

    Every rejection is a 401 raised before the wrapped view runs.
    """
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                verify_jwt_in_request()
            except (JWTExtendedException, PyJWTError) as e:
                current_app.logger.info('Rejected token on %s %s: %s', request.method, request.path, e)
                abort(401, description=UNAUTHORIZED)
            resolve_caller(roles)
            return fn(*args, **kwargs)
        return wrapper
    return outer


def require_admin(fn):
    return require_roles(ROLE_ADMIN)(fn)
