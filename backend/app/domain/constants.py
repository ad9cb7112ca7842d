# backend/app/domain/constants.py

"""
Fuente única de los valores enumerados del dominio.

Los mismos literales alimentan los CHECK de las tablas, los Literal de los
schemas y los filtros de los reportes.
"""

import os
from decimal import Decimal
from typing import Final, Tuple

# Solicitud (ServiceRequest.Status_s) - sin guarda de transiciones
REQUEST_STATUSES: Final[Tuple[str, ...]] = ("pendiente", "aprobada", "rechazada", "completada")
REQUEST_STATUS_INITIAL: Final[str] = "pendiente"

# Pago
PAYMENT_STATUSES: Final[Tuple[str, ...]] = ("pendiente", "completado", "rechazado")
PAYMENT_STATUS_INITIAL: Final[str] = "pendiente"
PAYMENT_METHODS: Final[Tuple[str, ...]] = ("efectivo", "tarjeta", "transferencia")

# Máquina
MACHINE_STATUSES: Final[Tuple[str, ...]] = ("disponible", "mantenimiento", "reparacion")
MACHINE_STATUS_INITIAL: Final[str] = "disponible"

# Categoría de maquinaria
CATEGORY_KINDS: Final[Tuple[str, ...]] = ("ligera", "pesada")
HEAVY_CATEGORY: Final[str] = "pesada"

# Usuarios del colaborador de autenticación
USER_ROLES: Final[Tuple[str, ...]] = ("admin", "empleado")

# Mantenimiento
MIN_ESTIMATED_HOURS: Final[int] = 1
MAX_ESTIMATED_HOURS: Final[int] = 720  # 30 días

MONEY_PLACES: Final[Decimal] = Decimal("0.01")

# Reportes
HIGH_COST_THRESHOLD: Final[Decimal] = Decimal(os.getenv("HIGH_COST_THRESHOLD", "1000000"))
DEFAULT_MACHINE_TYPE_TERM: Final[str] = "retroexcavadora"
DEFAULT_POSITION_TERM: Final[str] = "empleado"


def sql_in(values: Tuple[str, ...]) -> str:
    """('a','b') -> "'a','b'" para CHECK constraints."""
    return ",".join(f"'{v}'" for v in values)
