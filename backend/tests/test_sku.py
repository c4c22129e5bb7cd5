import re
import pytest
from werkzeug.exceptions import HTTPException
from medimart import get_db
from medimart.models.catalog_item import CatalogItem
from medimart.services import sku as sku_service
from medimart.services.sku import next_sku, create_with_sku
from tests.test_utils_seed import ensure_admin, insert_catalog_item


def test_next_sku_empty_store():
    assert next_sku([]) == 'SKU-0001'


def test_next_sku_uses_highest_not_latest():
    assert next_sku(['SKU-0001', 'SKU-0007', 'SKU-0003']) == 'SKU-0008'


def test_next_sku_grows_past_pad_width():
    assert next_sku(['SKU-9999']) == 'SKU-10000'
    assert next_sku(['SKU-9999', 'SKU-10000']) == 'SKU-10001'


def test_next_sku_ignores_unrecognized_values():
    assert next_sku(['BADSKU', None, '', 'SKU-12a', 'sku-0050', 'SKU-0002']) == 'SKU-0003'
    assert next_sku(['BADSKU']) == 'SKU-0001'


def test_next_sku_mixed_store_with_gap_and_foreign_code():
    assert next_sku(['SKU-0001', 'SKU-0004', 'SKU-0099', 'BADSKU']) == 'SKU-0100'


def test_generated_skus_are_sequential(client, admin_headers):
    from tests.test_lifecycle_helpers import create_product
    first = create_product(client, admin_headers, name='Seq One')
    second = create_product(client, admin_headers, name='Seq Two')
    assert re.match(r'^SKU-\d{4,}$', first['sku'])
    n1 = int(first['sku'].split('-')[1])
    n2 = int(second['sku'].split('-')[1])
    assert n2 == n1 + 1


def test_malformed_stored_sku_does_not_break_generation(client, admin_headers, app_instance):
    from tests.test_lifecycle_helpers import create_product
    with app_instance.app_context():
        insert_catalog_item('LEGACY-CODE-77', name='Legacy item')
    body = create_product(client, admin_headers, name='After legacy')
    assert re.match(r'^SKU-\d{4,}$', body['sku'])


def _builder(created_by):
    def build(sku):
        return CatalogItem(
            name=f'Retry {sku}', category='OTC', sku=sku, image_url='https://cdn.example.com/r.png',
            description='retry', created_by=created_by,
        )
    return build


def test_create_with_sku_retries_after_collision(app_instance, monkeypatch):
    with app_instance.app_context():
        taken = insert_catalog_item('SKU-TAKEN-RETRY').sku
        admin_id = ensure_admin().id
        offered = iter([taken, 'SKU-FRESH-RETRY'])
        monkeypatch.setattr(sku_service, 'generate_next_sku', lambda session: next(offered))
        item = create_with_sku(get_db(), _builder(admin_id), max_attempts=3)
        assert item.sku == 'SKU-FRESH-RETRY'
        assert item.id is not None


def test_create_with_sku_gives_up_with_conflict(app_instance, monkeypatch):
    with app_instance.app_context():
        taken = insert_catalog_item('SKU-TAKEN-ALWAYS').sku
        admin_id = ensure_admin().id
        calls = []

        def always_taken(session):
            calls.append(1)
            return taken
        monkeypatch.setattr(sku_service, 'generate_next_sku', always_taken)
        with app_instance.test_request_context():
            with pytest.raises(HTTPException) as exc:
                create_with_sku(get_db(), _builder(admin_id), max_attempts=3)
        assert exc.value.code == 409
        assert len(calls) == 3
