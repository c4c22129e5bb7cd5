from __future__ import annotations
from typing import Any, Dict, Mapping
from flask import abort

TRUE_VALUES = ('1', 'true', 'yes')
FALSE_VALUES = ('0', 'false', 'no')


def query_bool(raw: str) -> bool:
    """Coerce a query-string flag; raises ValueError for anything unrecognized."""
    val = raw.strip().lower()
    if val in TRUE_VALUES:
        return True
    if val in FALSE_VALUES:
        return False
    raise ValueError(raw)


def apply_filters(query, specs: Dict[str, Dict[str, Any]], params: Mapping[str, Any]):
    """Generic filter builder.

    specs: { param_name: { 'op': callable(query, value)->query, 'coerce': type/func, 'validate': callable(optional) } }
    Params that are absent or empty are skipped.
    """
    for name, meta in specs.items():
        if params.get(name) in (None, ''):
            continue
        val = params[name]
        if 'coerce' in meta:
            try:
                val = meta['coerce'](val)
            except (TypeError, ValueError):
                abort(400, description=f'{name} invalid')
        if 'validate' in meta and not meta['validate'](val):
            abort(400, description=f'{name} invalid')
        query = meta['op'](query, val)
    return query
