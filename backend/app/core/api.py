# backend/app/core/api.py
from __future__ import annotations
from typing import Any, Dict, Optional, Sequence
from fastapi.responses import JSONResponse

# Todas las respuestas JSON con charset UTF-8
class UTF8JSONResponse(JSONResponse):
    media_type = "application/json; charset=utf-8"

def list_meta(items: Optional[Sequence[Any]] = None, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    meta: Dict[str, Any] = {}
    if items is not None:
        meta["count"] = len(items)
    if extra:
        meta.update(extra)
    return meta

def ok(data: Any = True, meta: Optional[Dict[str, Any]] = None, status_code: int = 200):
    payload: Dict[str, Any] = {"ok": True, "data": data}
    if meta:
        payload["meta"] = meta
    return UTF8JSONResponse(content=payload, status_code=status_code)

def fail(error: str, status_code: int = 400, meta: Optional[Dict[str, Any]] = None):
    payload: Dict[str, Any] = {"ok": False, "error": error}
    if meta:
        payload["meta"] = meta
    return UTF8JSONResponse(content=payload, status_code=status_code)

def dump(schema, obj) -> Dict[str, Any]:
    """ORM -> dict JSON-serializable usando el schema de salida."""
    return schema.model_validate(obj).model_dump(mode="json")

def dump_many(schema, rows) -> list:
    return [dump(schema, r) for r in rows]
