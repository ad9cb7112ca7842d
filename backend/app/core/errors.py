# backend/app/core/errors.py
"""
Errores de dominio.

Son HTTPException para que los servicios puedan lanzarlos directamente y
FastAPI los lleve al cliente sin traducción intermedia. `errors` es un mapa
campo -> mensaje que el manejador global copia en `meta.errors`.
"""
from __future__ import annotations
from typing import Dict, Optional

from fastapi import HTTPException, status


class DomainError(HTTPException):
    kind = "domain_error"
    default_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str, *, errors: Optional[Dict[str, str]] = None):
        super().__init__(status_code=self.default_status, detail=detail)
        self.errors = errors or {}


class ValidationError(DomainError):
    kind = "validation_error"
    default_status = status.HTTP_422_UNPROCESSABLE_ENTITY

    @classmethod
    def field(cls, name: str, message: str) -> "ValidationError":
        return cls(message, errors={name: message})


class NotFound(DomainError):
    kind = "not_found"
    default_status = status.HTTP_404_NOT_FOUND


class Conflict(DomainError):
    kind = "conflict"
    default_status = status.HTTP_409_CONFLICT


class ReferentialConflict(DomainError):
    kind = "referential_conflict"
    default_status = status.HTTP_409_CONFLICT
