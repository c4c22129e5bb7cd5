from tests.test_utils_seed import ensure_account


def test_list_users_filters(client, admin_headers, app_instance):
    with app_instance.app_context():
        ensure_account('filter_supplier_pending@example.com', role='SUPPLIER', status='PENDING', name='Zeta Supplies')
        ensure_account('filter_rider_suspended@example.com', role='DELIVERY_BOY', status='SUSPENDED', name='Zeta Rider')
    pending = client.get('/admin/users?status=PENDING&role=SUPPLIER&limit=200', headers=admin_headers)
    assert pending.status_code == 200
    rows = pending.get_json()['data']
    assert rows and all(r['status'] == 'PENDING' and r['role'] == 'SUPPLIER' for r in rows)
    assert 'filter_supplier_pending@example.com' in [r['email'] for r in rows]
    assert all('password_hash' not in r for r in rows)

    search = client.get('/admin/users?q=zeta&sort=name', headers=admin_headers).get_json()['data']
    assert [r['name'] for r in search] == ['Zeta Rider', 'Zeta Supplies']
    assert search[0]['allowed_transitions'] == ['APPROVED']

    bad = client.get('/admin/users?status=BANNED', headers=admin_headers)
    assert bad.status_code == 400
    assert bad.get_json()['error']['detail'] == 'status invalid'
    assert client.get('/admin/users?sort=password_hash', headers=admin_headers).status_code == 400


def test_stats_counts_by_status(client, admin_headers, app_instance):
    before = client.get('/admin/stats', headers=admin_headers).get_json()
    with app_instance.app_context():
        ensure_account('stats_new_pending@example.com', status='PENDING')
    after = client.get('/admin/stats', headers=admin_headers)
    assert after.status_code == 200
    body = after.get_json()
    assert set(body['by_status']) == {'PENDING', 'APPROVED', 'REJECTED', 'SUSPENDED'}
    assert body['total_users'] == sum(body['by_status'].values())
    assert body['pending_users'] == body['by_status']['PENDING'] == before['pending_users'] + 1


def test_users_pagination_meta(client, admin_headers, app_instance):
    with app_instance.app_context():
        for i in range(3):
            ensure_account(f'pag_user_{i}@example.com')
    body = client.get('/admin/users?limit=2&offset=1', headers=admin_headers).get_json()
    assert body['pagination']['limit'] == 2
    assert body['pagination']['offset'] == 1
    assert body['pagination']['returned'] == 2
    assert body['pagination']['total'] >= 4
    assert client.get('/admin/users?limit=abc', headers=admin_headers).status_code == 400
