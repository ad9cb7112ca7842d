# backend/app/services/common.py
from __future__ import annotations
import logging
from contextlib import contextmanager
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Iterable, Optional, Type

from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound, ValidationError
from app.domain.constants import MONEY_PLACES

logger = logging.getLogger(__name__)


@contextmanager
def transaction(db: Session, action: str):
    """
    Unidad de trabajo: commit al salir, rollback ante cualquier error.
    IntegrityError -> Conflict (UNIQUE) o ValidationError (CHECK).
    """
    try:
        yield
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        msg = str(getattr(e, "orig", e))
        logger.warning("%s: integrity error: %s", action, msg)
        if "CHECK CONSTRAINT" in msg.upper():
            raise ValidationError(f"{action}: restricción de datos violada", errors={"db": msg})
        raise Conflict(f"{action}: registro duplicado o referencia inválida", errors={"db": msg})
    except Exception as e:
        db.rollback()
        logger.exception("%s failed", action)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{action}_error: {type(e).__name__}: {e}",
        )


def get_or_404(db: Session, model: Type[Any], pk: int, label: str):
    obj = db.get(model, pk)
    if obj is None:
        raise NotFound(f"{label} no encontrado(a) (id={pk})")
    return obj


def require_ref(db: Session, model: Type[Any], pk: Optional[int], field: str, label: str):
    """FK recibida en un payload: si no existe es un error de validación del campo."""
    obj = db.get(model, pk) if pk is not None else None
    if obj is None:
        raise ValidationError.field(field, f"{label} seleccionado(a) no existe (id={pk})")
    return obj


def exists(db: Session, model: Type[Any], pk: Optional[int]) -> bool:
    return pk is not None and db.get(model, pk) is not None


def ensure_unique(db: Session, column, value, field: str, *, exclude=None) -> None:
    """Pre-chequeo amable; la garantía real es el índice único de la tabla."""
    q = db.query(column.class_).filter(column == value)
    if exclude is not None:
        pk_col, pk_val = exclude
        q = q.filter(pk_col != pk_val)
    if q.first() is not None:
        raise Conflict(f"{field} '{value}' ya existe", errors={field: "ya existe"})


def to_money(val, field: str) -> Decimal:
    try:
        d = val if isinstance(val, Decimal) else Decimal(str(val))
        d = d.quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError.field(field, f"{field} debe ser un decimal válido")
    if d < 0:
        raise ValidationError.field(field, f"{field} debe ser mayor o igual a 0")
    return d


def changed_fields(patch: BaseModel, skip: Iterable[str] = ()) -> dict:
    """Campos enviados explícitamente en un PUT parcial (incluye null explícito)."""
    skip = set(skip)
    return {k: getattr(patch, k) for k in patch.model_fields_set if k not in skip}


def require_not_null(fields: dict, *names: str) -> None:
    for name in names:
        if name in fields and fields[name] is None:
            raise ValidationError.field(name, f"{name} no puede ser null")
