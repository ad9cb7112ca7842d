# backend/app/services/directory_service.py
from __future__ import annotations
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import ReferentialConflict
from app.domain.constants import DEFAULT_POSITION_TERM
from app.models import Employee, Position
from app.schemas.directory import EmployeeUpdate, PositionUpdate
from app.services.common import (
    transaction, get_or_404, require_ref, exists, ensure_unique, changed_fields, require_not_null,
)

logger = logging.getLogger(__name__)


def employee_exists(db: Session, employee_id: Optional[int]) -> bool:
    return exists(db, Employee, employee_id)


# -------- Position (cargo) --------
def create_position(db: Session, *, name: str, description: str) -> Position:
    ensure_unique(db, Position.Name, name.strip(), "Name")
    pos = Position(Name=name.strip(), Description=description.strip())
    with transaction(db, "create_position"):
        db.add(pos)
    db.refresh(pos)
    return pos

def get_position(db: Session, position_id: int) -> Position:
    return get_or_404(db, Position, position_id, "Cargo")

def list_positions(db: Session) -> List[Position]:
    return db.query(Position).order_by(Position.Name).all()

def update_position(db: Session, position_id: int, patch: PositionUpdate) -> Position:
    pos = get_position(db, position_id)
    data = changed_fields(patch)
    require_not_null(data, "Name", "Description")
    if "Name" in data:
        ensure_unique(db, Position.Name, data["Name"], "Name", exclude=(Position.PositionID, position_id))
    with transaction(db, "update_position"):
        for k, v in data.items():
            setattr(pos, k, v.strip())
    db.refresh(pos)
    return pos

def delete_position(db: Session, position_id: int, *, force: bool = False) -> None:
    pos = get_position(db, position_id)
    if pos.employees and not force:
        raise ReferentialConflict(
            "El cargo tiene empleados; use force=true para borrar en cascada",
            errors={"employees": f"{len(pos.employees)} registro(s) dependiente(s)"},
        )
    with transaction(db, "delete_position"):
        db.delete(pos)


# -------- Employee --------
def create_employee(
    db: Session, *,
    document_no: str,
    first_name: str,
    last_name: str,
    phone: str,
    email: Optional[str],
    position_id: int,
) -> Employee:
    require_ref(db, Position, position_id, "PositionID", "Cargo")
    ensure_unique(db, Employee.DocumentNo, document_no.strip(), "DocumentNo")
    emp = Employee(
        DocumentNo=document_no.strip(),
        FirstName=first_name.strip(),
        LastName=last_name.strip(),
        Phone=phone.strip(),
        Email=(email or "").strip().lower() or None,
        PositionID=position_id,
    )
    with transaction(db, "create_employee"):
        db.add(emp)
    db.refresh(emp)
    logger.info("employee created id=%s", emp.EmployeeID)
    return emp

def get_employee(db: Session, employee_id: int) -> Employee:
    return get_or_404(db, Employee, employee_id, "Empleado")

def list_employees(db: Session, *, position_id: Optional[int] = None) -> List[Employee]:
    q = db.query(Employee)
    if position_id:
        q = q.filter(Employee.PositionID == position_id)
    return q.order_by(Employee.EmployeeID).all()

def list_employees_ordered(db: Session, *, position_term: str = DEFAULT_POSITION_TERM) -> List[Employee]:
    """Empleados cuyo cargo contiene `position_term`, por apellido y nombre."""
    return (
        db.query(Employee)
        .join(Position, Position.PositionID == Employee.PositionID)
        .filter(Position.Name.ilike(f"%{position_term}%"))
        .order_by(Employee.LastName, Employee.FirstName)
        .all()
    )

def update_employee(db: Session, employee_id: int, patch: EmployeeUpdate) -> Employee:
    emp = get_employee(db, employee_id)
    data = changed_fields(patch)
    require_not_null(data, "DocumentNo", "FirstName", "LastName", "Phone", "PositionID")
    if "PositionID" in data:
        require_ref(db, Position, data["PositionID"], "PositionID", "Cargo")
    if "DocumentNo" in data:
        ensure_unique(db, Employee.DocumentNo, data["DocumentNo"], "DocumentNo",
                      exclude=(Employee.EmployeeID, employee_id))
    if "Email" in data:
        data["Email"] = (data["Email"] or "").strip().lower() or None
    with transaction(db, "update_employee"):
        for k, v in data.items():
            setattr(emp, k, v)
    db.refresh(emp)
    return emp

def delete_employee(db: Session, employee_id: int) -> None:
    """Las asignaciones a solicitudes se eliminan con el empleado."""
    emp = get_employee(db, employee_id)
    with transaction(db, "delete_employee"):
        db.delete(emp)
