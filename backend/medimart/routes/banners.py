from __future__ import annotations
from flask import Blueprint, request, abort, jsonify
from sqlalchemy import select
from medimart.constants.catalog import AD_CATEGORIES
from medimart.decorators.auth import require_admin
from medimart.decorators.audit import audit_log
from medimart.models.banner import Advertisement, PromotionModal
from medimart.services.visibility import set_visibility, find_visible
from medimart.utils.listing import list_response, iso_utc
from medimart.utils.validation import require_fields, validate_status, parse_bool
from medimart import get_db

banners_bp = Blueprint('banners', __name__)
admin_banners_bp = Blueprint('admin_banners', __name__)

AD_TEXT_FIELDS = ('title', 'image_url')
BANNER_DIFF_KEYS = ['title', 'image_url', 'hyperlink', 'category', 'is_visible']


def _ad_json(a: Advertisement):
    return {
        'id': a.id,
        'title': a.title,
        'image_url': a.image_url,
        'category': a.category,
        'hyperlink': a.hyperlink,
        'is_visible': a.is_visible,
        'created_at': iso_utc(a.created_at),
    }


def _modal_json(m: PromotionModal):
    return {
        'id': m.id,
        'title': m.title,
        'image_url': m.image_url,
        'hyperlink': m.hyperlink,
        'is_visible': m.is_visible,
        'created_at': iso_utc(m.created_at),
    }


def _get_or_404(model, record_id: int):
    obj = get_db().execute(select(model).where(model.id==record_id)).scalar_one_or_none()
    if not obj:
        abort(404)
    return obj


def _prefetch(model, serialize, record_id):
    obj = get_db().execute(select(model).where(model.id==record_id)).scalar_one_or_none()
    return serialize(obj) if obj else {}


def _apply_banner_update(model, obj, data: dict):
    """Apply a partial banner update and commit; visibility goes through the enforcer last.

    Nothing is committed if the visibility change is refused.
    """
    session = get_db()
    for field in AD_TEXT_FIELDS:
        if field in data:
            if data[field] in (None, ''):
                abort(400, description=f'{field} cannot be empty')
            setattr(obj, field, data[field])
    if 'hyperlink' in data:
        obj.hyperlink = data['hyperlink'] or None
    if 'category' in data and model is Advertisement:
        obj.category = validate_status(data['category'], AD_CATEGORIES, field_name='category')
    visible = parse_bool(data['is_visible'], 'is_visible') if 'is_visible' in data else None
    session.flush()
    if visible is not None:
        set_visibility(session, model, obj.id, visible)
    session.commit()
    session.refresh(obj)
    return obj


def _delete(model, record_id: int):
    session = get_db()
    obj = _get_or_404(model, record_id)
    session.delete(obj)
    session.commit()
    return {'message': 'Deleted', 'id': record_id}


# --- Public ---

@banners_bp.get('/advertisements/visible')
def visible_advertisements():
    return [_ad_json(a) for a in find_visible(get_db(), Advertisement)]


@banners_bp.get('/promotion-modal')
def visible_promotion_modal():
    rows = find_visible(get_db(), PromotionModal)
    return jsonify(_modal_json(rows[0]) if rows else None)


# --- Admin: advertisements ---

@admin_banners_bp.get('/advertisements')
@require_admin
def list_advertisements():
    q = get_db().query(Advertisement).order_by(Advertisement.created_at.desc(), Advertisement.id.desc())
    return list_response(q, _ad_json, ts_column='updated_at')


@admin_banners_bp.post('/advertisements')
@require_admin
@audit_log('AD.CREATE', entity='Advertisement', entity_id_key='id', meta_keys=['title', 'category', 'is_visible'])
def create_advertisement():
    session = get_db()
    data = request.json or {}
    require_fields(data, ['title', 'image_url', 'category'])
    category = validate_status(data['category'], AD_CATEGORIES, field_name='category')
    visible = parse_bool(data['is_visible'], 'is_visible') if data.get('is_visible') is not None else False
    ad = Advertisement(
        title=data['title'],
        image_url=data['image_url'],
        category=category,
        hyperlink=data.get('hyperlink') or None,
        is_visible=False,
    )
    session.add(ad)
    session.flush()
    if visible:
        # same transaction: a refused show discards the new row as well
        set_visibility(session, Advertisement, ad.id, True)
    session.commit()
    session.refresh(ad)
    return _ad_json(ad), 201


@admin_banners_bp.put('/advertisements/<int:ad_id>')
@require_admin
@audit_log('AD.UPDATE', entity='Advertisement', entity_id_key='id', diff_keys=BANNER_DIFF_KEYS,
           pre_fetch=lambda a, kw: _prefetch(Advertisement, _ad_json, kw.get('ad_id')), meta_keys=['title'])
def update_advertisement(ad_id: int):
    ad = _get_or_404(Advertisement, ad_id)
    return _ad_json(_apply_banner_update(Advertisement, ad, request.json or {}))


@admin_banners_bp.delete('/advertisements/<int:ad_id>')
@require_admin
@audit_log('AD.DELETE', entity='Advertisement', entity_id_key='id')
def delete_advertisement(ad_id: int):
    return _delete(Advertisement, ad_id)


# --- Admin: promotion modals ---

@admin_banners_bp.get('/promotion-modals')
@require_admin
def list_promotion_modals():
    q = get_db().query(PromotionModal).order_by(PromotionModal.created_at.desc(), PromotionModal.id.desc())
    return list_response(q, _modal_json, ts_column='updated_at')


@admin_banners_bp.post('/promotion-modals')
@require_admin
@audit_log('MODAL.CREATE', entity='PromotionModal', entity_id_key='id', meta_keys=['title'])
def create_promotion_modal():
    session = get_db()
    data = request.json or {}
    require_fields(data, ['title', 'image_url'])
    # always created hidden; showing one is a separate, checked update
    modal = PromotionModal(
        title=data['title'],
        image_url=data['image_url'],
        hyperlink=data.get('hyperlink') or None,
        is_visible=False,
    )
    session.add(modal)
    session.commit()
    return _modal_json(modal), 201


@admin_banners_bp.put('/promotion-modals/<int:modal_id>')
@require_admin
@audit_log('MODAL.UPDATE', entity='PromotionModal', entity_id_key='id', diff_keys=BANNER_DIFF_KEYS,
           pre_fetch=lambda a, kw: _prefetch(PromotionModal, _modal_json, kw.get('modal_id')), meta_keys=['title'])
def update_promotion_modal(modal_id: int):
    modal = _get_or_404(PromotionModal, modal_id)
    return _modal_json(_apply_banner_update(PromotionModal, modal, request.json or {}))


@admin_banners_bp.delete('/promotion-modals/<int:modal_id>')
@require_admin
@audit_log('MODAL.DELETE', entity='PromotionModal', entity_id_key='id')
def delete_promotion_modal(modal_id: int):
    return _delete(PromotionModal, modal_id)
