from __future__ import annotations
from flask import Blueprint, request, abort
from sqlalchemy import select, or_
from medimart.constants.catalog import PRODUCT_CATEGORIES
from medimart.decorators.auth import require_admin
from medimart.decorators.audit import audit_log
from medimart.models.catalog_item import CatalogItem, Brand, Generic
from medimart.services.lookups import resolve_link, list_names
from medimart.services.policy import current_account
from medimart.services.sku import create_with_sku
from medimart.utils.filters import apply_filters, query_bool
from medimart.utils.listing import list_response, iso_utc
from medimart.utils.sorting import apply_multi_sort
from medimart.utils.validation import require_fields, validate_status, parse_int, parse_bool
from medimart import get_db

cat_bp = Blueprint('catalog', __name__)
admin_cat_bp = Blueprint('admin_catalog', __name__)

CREATE_FIELDS = ['name', 'category', 'mrp_cents', 'image_url', 'description', 'sell_price_cents', 'cost_price_cents', 'stock']
TEXT_FIELDS = ('name', 'image_url', 'description')
INT_FIELDS = ('mrp_cents', 'sell_price_cents', 'cost_price_cents', 'stock')
FLAG_FIELDS = ('status', 'availability')

SORTABLE = {
    'name': CatalogItem.name,
    'sell_price_cents': CatalogItem.sell_price_cents,
    'created_at': CatalogItem.created_at,
    'id': CatalogItem.id,
}

PUBLIC_FILTERS = {
    'category': {
        'validate': lambda v: v in PRODUCT_CATEGORIES,
        'op': lambda q, v: q.filter(CatalogItem.category==v),
    },
    'brand': {
        'op': lambda q, v: q.filter(CatalogItem.brand.has(Brand.name==v)),
    },
    'generic': {
        'op': lambda q, v: q.filter(CatalogItem.generic.has(Generic.name==v)),
    },
    'available': {
        'coerce': query_bool,
        'op': lambda q, v: q.filter(CatalogItem.availability.is_(v)),
    },
    'q': {
        'op': lambda q, v: q.filter(or_(
            CatalogItem.name.ilike(f'%{v}%'),
            CatalogItem.sku.ilike(f'%{v}%'),
            CatalogItem.brand.has(Brand.name.ilike(f'%{v}%')),
            CatalogItem.generic.has(Generic.name.ilike(f'%{v}%')),
        )),
    },
}


def _item_json(i: CatalogItem):
    return {
        'id': i.id,
        'name': i.name,
        'category': i.category,
        'sku': i.sku,
        'mrp_cents': i.mrp_cents,
        'sell_price_cents': i.sell_price_cents,
        'cost_price_cents': i.cost_price_cents,
        'stock': i.stock,
        'image_url': i.image_url,
        'description': i.description,
        'generic': i.generic.name if i.generic else None,
        'brand': i.brand.name if i.brand else None,
        'status': i.status,
        'availability': i.availability,
        'created_at': iso_utc(i.created_at),
    }


def _public_item_json(i: CatalogItem):
    body = _item_json(i)
    # cost price is internal
    body.pop('cost_price_cents')
    return body


def _get_item_or_404(item_id: int) -> CatalogItem:
    item = get_db().execute(select(CatalogItem).where(CatalogItem.id==item_id)).scalar_one_or_none()
    if not item:
        abort(404)
    return item


def _prefetch_item(item_id: int):
    item = get_db().execute(select(CatalogItem).where(CatalogItem.id==item_id)).scalar_one_or_none()
    return _item_json(item) if item else {}


# --- Public ---

@cat_bp.get('/products')
def list_products():
    session = get_db()
    q = session.query(CatalogItem).filter(CatalogItem.status.is_(True))
    q = apply_filters(q, PUBLIC_FILTERS, request.args)
    q = apply_multi_sort(q, request.args.get('sort'), SORTABLE, CatalogItem.id.desc(), default=[CatalogItem.created_at.desc()])
    return list_response(q, _public_item_json, ts_column='updated_at')


@cat_bp.get('/products/<int:item_id>')
def get_product(item_id: int):
    item = _get_item_or_404(item_id)
    if not item.status:
        abort(404)
    return _public_item_json(item)


@cat_bp.get('/brands')
def list_brands():
    return list_names(get_db(), Brand)


@cat_bp.get('/generics')
def list_generics():
    return list_names(get_db(), Generic)


# --- Admin ---

@admin_cat_bp.get('/products')
@require_admin
def admin_list_products():
    session = get_db()
    q = session.query(CatalogItem)
    if category := request.args.get('category'):
        q = q.filter(CatalogItem.category==validate_status(category, PRODUCT_CATEGORIES, field_name='category'))
    q = apply_multi_sort(q, request.args.get('sort'), SORTABLE, CatalogItem.id.desc(), default=[CatalogItem.created_at.desc()])
    return list_response(q, _item_json, ts_column='updated_at')


@admin_cat_bp.get('/products/<int:item_id>')
@require_admin
def admin_get_product(item_id: int):
    return _item_json(_get_item_or_404(item_id))


@admin_cat_bp.post('/products')
@require_admin
@audit_log('PRODUCT.CREATE', entity='CatalogItem', entity_id_key='id', meta_keys=['name', 'sku', 'category'])
def create_product():
    session = get_db()
    data = request.json or {}
    require_fields(data, CREATE_FIELDS)
    category = validate_status(data['category'], PRODUCT_CATEGORIES, field_name='category')
    numbers = {f: parse_int(data[f], f) for f in INT_FIELDS}
    creator_id = current_account().id

    def build(sku: str) -> CatalogItem:
        return CatalogItem(
            name=data['name'],
            category=category,
            sku=sku,
            image_url=data['image_url'],
            description=data['description'],
            generic_id=resolve_link(session, Generic, data.get('generic_name')),
            brand_id=resolve_link(session, Brand, data.get('brand_name')),
            created_by=creator_id,
            **numbers,
        )

    item = create_with_sku(session, build)
    return _item_json(item), 201


@admin_cat_bp.put('/products/<int:item_id>')
@require_admin
@audit_log('PRODUCT.UPDATE', entity='CatalogItem', entity_id_key='id',
           diff_keys=['name', 'category', 'mrp_cents', 'sell_price_cents', 'cost_price_cents', 'stock', 'generic', 'brand', 'status', 'availability'],
           pre_fetch=lambda a, kw: _prefetch_item(kw.get('item_id')), meta_keys=['name', 'sku'])
def update_product(item_id: int):
    session = get_db()
    item = _get_item_or_404(item_id)
    data = request.json or {}
    # sku is assigned at creation and never rewritten
    for field in TEXT_FIELDS:
        if field in data:
            if data[field] in (None, ''):
                abort(400, description=f'{field} cannot be empty')
            setattr(item, field, data[field])
    if 'category' in data:
        item.category = validate_status(data['category'], PRODUCT_CATEGORIES, field_name='category')
    for field in INT_FIELDS:
        if field in data:
            setattr(item, field, parse_int(data[field], field))
    for field in FLAG_FIELDS:
        if field in data:
            setattr(item, field, parse_bool(data[field], field))
    # absent key leaves the link alone, blank unlinks, a name links (creating it if new)
    if 'generic_name' in data:
        item.generic_id = resolve_link(session, Generic, data['generic_name'])
    if 'brand_name' in data:
        item.brand_id = resolve_link(session, Brand, data['brand_name'])
    session.commit()
    session.refresh(item)
    return _item_json(item)


@admin_cat_bp.delete('/products/<int:item_id>')
@require_admin
@audit_log('PRODUCT.DELETE', entity='CatalogItem', entity_id_arg='item_id', meta_keys=['sku'])
def delete_product(item_id: int):
    session = get_db()
    item = _get_item_or_404(item_id)
    sku = item.sku
    session.delete(item)
    session.commit()
    return {'message': 'Deleted', 'sku': sku}
