from flask import Blueprint, request
from medimart.decorators.auth import require_roles
from medimart.services.cart import quote_cart
from medimart import get_db

cart_bp = Blueprint('cart', __name__)


@cart_bp.post('/quote')
@require_roles()
def quote():
    data = request.json or {}
    return quote_cart(get_db(), data.get('items'))
