from tests.test_lifecycle_helpers import create_product, PRODUCT_DEFAULTS
from tests.test_utils_seed import audit_entries


def test_create_product_assigns_sku_and_links(client, admin_headers, app_instance):
    body = create_product(client, admin_headers, name='Seclo 20', generic_name='Omeprazole', brand_name='Square')
    assert body['sku'].startswith('SKU-')
    assert body['generic'] == 'Omeprazole'
    assert body['brand'] == 'Square'
    assert body['status'] is True
    assert body['availability'] is True
    assert body['sell_price_cents'] == PRODUCT_DEFAULTS['sell_price_cents']
    with app_instance.app_context():
        entries = audit_entries('PRODUCT.CREATE', body['id'])
        assert len(entries) == 1
        assert entries[0].meta['sku'] == body['sku']


def test_brand_and_generic_are_find_or_create(client, admin_headers):
    create_product(client, admin_headers, name='Ace Plus', brand_name='LookupBrandOne', generic_name='LookupGenericOne')
    create_product(client, admin_headers, name='Ace Syrup', brand_name='LookupBrandOne', generic_name='LookupGenericOne')
    brands = client.get('/brands').get_json()
    generics = client.get('/generics').get_json()
    assert brands.count('LookupBrandOne') == 1
    assert generics.count('LookupGenericOne') == 1
    assert brands == sorted(brands)


def test_create_product_validation(client, admin_headers):
    payload = dict(PRODUCT_DEFAULTS)
    payload.pop('image_url')
    resp = client.post('/admin/products', json=payload, headers=admin_headers)
    assert resp.status_code == 400
    assert resp.get_json()['error']['detail'] == 'Missing required fields: image_url'

    bad_cat = client.post('/admin/products', json={**PRODUCT_DEFAULTS, 'category': 'TOYS'}, headers=admin_headers)
    assert bad_cat.status_code == 400
    assert bad_cat.get_json()['error']['detail'] == 'category invalid'

    negative = client.post('/admin/products', json={**PRODUCT_DEFAULTS, 'stock': -3}, headers=admin_headers)
    assert negative.status_code == 400
    assert negative.get_json()['error']['detail'] == 'stock must be >= 0'


def test_create_product_rejects_fractional_and_infinite_prices(client, admin_headers):
    fractional = client.post('/admin/products', json={**PRODUCT_DEFAULTS, 'sell_price_cents': 999.9}, headers=admin_headers)
    assert fractional.status_code == 400
    assert fractional.get_json()['error']['detail'] == 'sell_price_cents must be int'
    infinite = client.post('/admin/products', json={**PRODUCT_DEFAULTS, 'mrp_cents': float('inf')}, headers=admin_headers)
    assert infinite.status_code == 400
    assert infinite.get_json()['error']['detail'] == 'mrp_cents must be int'


def test_update_product_partial(client, admin_headers, app_instance):
    created = create_product(client, admin_headers, name='Fexo 120', brand_name='UpdBrand', generic_name='Fexofenadine')
    pid = created['id']
    resp = client.put(f'/admin/products/{pid}', json={
        'sell_price_cents': 950,
        'sku': 'SKU-HIJACK',
        'brand_name': '',
        'availability': False,
    }, headers=admin_headers)
    assert resp.status_code == 200, resp.get_json()
    body = resp.get_json()
    assert body['sell_price_cents'] == 950
    assert body['sku'] == created['sku']
    assert body['brand'] is None
    # absent key keeps the existing link
    assert body['generic'] == 'Fexofenadine'
    assert body['availability'] is False
    assert body['status'] is True
    with app_instance.app_context():
        entries = audit_entries('PRODUCT.UPDATE', pid)
        assert entries
        changes = entries[-1].meta['changes']
        assert changes['sell_price_cents'] == {'before': 1000, 'after': 950}
        assert changes['brand'] == {'before': 'UpdBrand', 'after': None}


def test_update_product_rejects_bad_values(client, admin_headers):
    pid = create_product(client, admin_headers, name='Bad Update')['id']
    empty_name = client.put(f'/admin/products/{pid}', json={'name': ''}, headers=admin_headers)
    assert empty_name.status_code == 400
    assert empty_name.get_json()['error']['detail'] == 'name cannot be empty'
    bad_flag = client.put(f'/admin/products/{pid}', json={'status': 'yes'}, headers=admin_headers)
    assert bad_flag.status_code == 400
    missing = client.put('/admin/products/999999', json={'name': 'x'}, headers=admin_headers)
    assert missing.status_code == 404
    still = client.get(f'/admin/products/{pid}', headers=admin_headers).get_json()
    assert still['name'] == 'Bad Update'


def test_delete_product(client, admin_headers):
    created = create_product(client, admin_headers, name='To Delete')
    resp = client.delete(f"/admin/products/{created['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json() == {'message': 'Deleted', 'sku': created['sku']}
    assert client.get(f"/admin/products/{created['id']}", headers=admin_headers).status_code == 404
    assert client.delete(f"/admin/products/{created['id']}", headers=admin_headers).status_code == 404


def test_public_listing_hides_unpublished_and_cost(client, admin_headers):
    shown = create_product(client, admin_headers, name='Public Shown', brand_name='PubBrandVis')
    hidden = create_product(client, admin_headers, name='Public Hidden', brand_name='PubBrandVis')
    client.put(f"/admin/products/{hidden['id']}", json={'status': False}, headers=admin_headers)
    resp = client.get('/products?brand=PubBrandVis')
    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert [p['id'] for p in data] == [shown['id']]
    assert 'cost_price_cents' not in data[0]
    assert client.get(f"/products/{hidden['id']}").status_code == 404
    detail = client.get(f"/products/{shown['id']}")
    assert detail.status_code == 200
    assert 'cost_price_cents' not in detail.get_json()
    # admins still see it
    assert client.get(f"/admin/products/{hidden['id']}", headers=admin_headers).get_json()['status'] is False


def test_public_filters_and_sort(client, admin_headers):
    a = create_product(client, admin_headers, name='Filter Alpha', brand_name='FiltBrand', category='HERBAL', sell_price_cents=300)
    b = create_product(client, admin_headers, name='Filter Beta', brand_name='FiltBrand', category='HERBAL', sell_price_cents=100)
    c = create_product(client, admin_headers, name='Filter Gamma', brand_name='FiltBrand', category='CARDIAC', sell_price_cents=200)
    client.put(f"/admin/products/{c['id']}", json={'availability': False}, headers=admin_headers)

    by_price = client.get('/products?brand=FiltBrand&sort=sell_price_cents').get_json()['data']
    assert [p['id'] for p in by_price] == [b['id'], c['id'], a['id']]

    herbal = client.get('/products?brand=FiltBrand&category=HERBAL&sort=-name').get_json()['data']
    assert [p['name'] for p in herbal] == ['Filter Beta', 'Filter Alpha']

    out_of_stock = client.get('/products?brand=FiltBrand&available=false').get_json()['data']
    assert [p['id'] for p in out_of_stock] == [c['id']]

    search = client.get('/products', query_string={'q': 'filter gam'}).get_json()['data']
    assert c['id'] in [p['id'] for p in search]

    assert client.get('/products?available=maybe').status_code == 400
    assert client.get('/products?category=TOYS').status_code == 400
    bad_sort = client.get('/products?sort=cost_price_cents')
    assert bad_sort.status_code == 400
    assert bad_sort.get_json()['error']['detail'] == 'Invalid sort field cost_price_cents'


def test_admin_listing_category_filter(client, admin_headers):
    create_product(client, admin_headers, name='Device One', category='MEDI_DEVICE')
    resp = client.get('/admin/products?category=MEDI_DEVICE&limit=200', headers=admin_headers)
    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert data and all(p['category'] == 'MEDI_DEVICE' for p in data)
    assert 'cost_price_cents' in data[0]
