def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert 'error' in body
    assert body['error']['status'] == 404
    assert 'detail' in body['error']


def test_method_not_allowed_shape(client):
    resp = client.delete('/products')
    assert resp.status_code == 405
    assert resp.get_json()['error']['title'] == 'Method Not Allowed'


def test_healthz(client):
    assert client.get('/healthz').get_json() == {'status': 'ok'}


def test_internal_error_shape(client, admin_headers, monkeypatch):
    # Break only the stats query; auth still loads the caller through the real session
    import medimart.routes.admin_users as admin_users_mod
    class BoomSession:
        def execute(self, *a, **k):
            raise RuntimeError('explode')
    monkeypatch.setattr(admin_users_mod, 'get_db', lambda: BoomSession())
    resp = client.get('/admin/stats', headers=admin_headers)
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error']['status'] == 500
    assert body['error']['title'] == 'Internal Server Error'
    assert body['error']['detail'] == 'Unexpected error'
