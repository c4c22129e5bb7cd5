import pytest
from sqlalchemy import func, select
from medimart import get_db
from medimart.models.banner import Advertisement
from tests.test_lifecycle_helpers import jwt_headers, login_headers, PRODUCT_DEFAULTS
from tests.test_utils_seed import ensure_account, set_account_status

ADMIN_CALLS = [
    ('get', '/admin/users', None),
    ('get', '/admin/stats', None),
    ('post', '/admin/users/approve', {'user_id': 1}),
    ('post', '/admin/products', PRODUCT_DEFAULTS),
    ('put', '/admin/products/1', {'name': 'hijack'}),
    ('delete', '/admin/products/1', None),
    ('post', '/admin/advertisements', {'title': 't', 'image_url': 'u', 'category': 'PRODUCT', 'is_visible': True}),
    ('put', '/admin/advertisements/1', {'is_visible': True}),
    ('delete', '/admin/advertisements/1', None),
    ('post', '/admin/promotion-modals', {'title': 't', 'image_url': 'u'}),
    ('put', '/admin/promotion-modals/1', {'is_visible': True}),
]


def _count_ads():
    return get_db().execute(select(func.count(Advertisement.id))).scalar_one()


@pytest.mark.parametrize('role', ['SHOP_OWNER', 'SUPPLIER', 'DELIVERY_BOY'])
def test_admin_endpoints_reject_other_roles(client, app_instance, role):
    with app_instance.app_context():
        account = ensure_account(f'denied_{role.lower()}@example.com', role=role)
        headers = jwt_headers(account.id, role)
        ads_before = _count_ads()
    for method, url, payload in ADMIN_CALLS:
        resp = getattr(client, method)(url, json=payload, headers=headers)
        assert resp.status_code == 401, (method, url, resp.get_json())
        assert resp.get_json()['error']['detail'] == 'Unauthorized'
    with app_instance.app_context():
        assert _count_ads() == ads_before


def test_admin_endpoints_require_token(client):
    for method, url, payload in ADMIN_CALLS:
        assert getattr(client, method)(url, json=payload).status_code == 401, (method, url)


def test_suspended_admin_loses_access(client, app_instance):
    with app_instance.app_context():
        second_admin_id = ensure_account('second_admin@example.com', role='ADMIN').id
    headers = login_headers(client, 'second_admin@example.com')
    assert client.get('/admin/stats', headers=headers).status_code == 200
    with app_instance.app_context():
        set_account_status(second_admin_id, 'SUSPENDED')
    assert client.get('/admin/stats', headers=headers).status_code == 401


def test_public_endpoints_need_no_token(client):
    for url in ('/products', '/brands', '/generics', '/advertisements/visible', '/promotion-modal'):
        assert client.get(url).status_code == 200, url
