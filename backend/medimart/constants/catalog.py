"""Fixed enumerations for catalog and banner records.
Extend cautiously; stored rows keep the raw string, so never rename a value silently.
"""
from __future__ import annotations

PRODUCT_CATEGORIES = (
    'MEDICINE',
    'SURGICAL',
    'OTC',
    'HERBAL',
    'DIABETES_CARE',
    'CARDIAC',
    'INJECTABLE',
    'MEDI_DEVICE',
    'OTHER',
)

AD_CATEGORY_ANNOUNCEMENT = 'ANNOUNCEMENT'
AD_CATEGORY_PRODUCT = 'PRODUCT'
AD_CATEGORIES = (AD_CATEGORY_ANNOUNCEMENT, AD_CATEGORY_PRODUCT)

SKU_PREFIX = 'SKU-'
SKU_PAD_WIDTH = 4
