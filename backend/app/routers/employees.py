# app/routers/employees.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.api import ok, list_meta, dump, dump_many
from app.core.db import get_db
from app.core.security import get_current_user
from app.domain.constants import DEFAULT_POSITION_TERM
from app.schemas.directory import (
    PositionCreate, PositionUpdate, PositionOut,
    EmployeeCreate, EmployeeUpdate, EmployeeOut,
)
from app.services import directory_service as svc

router = APIRouter(prefix="/employees", tags=["employees"])
position_router = APIRouter(prefix="/positions", tags=["positions"])

Auth = Depends(get_current_user)


# ---------- Position ----------
@position_router.get("")
def list_positions_ep(db: Session = Depends(get_db)):
    rows = dump_many(PositionOut, svc.list_positions(db))
    return ok(rows, meta=list_meta(rows))

@position_router.get("/{position_id}")
def get_position_ep(position_id: int, db: Session = Depends(get_db)):
    return ok(dump(PositionOut, svc.get_position(db, position_id)))

@position_router.post("", status_code=201, dependencies=[Auth])
def create_position_ep(body: PositionCreate, db: Session = Depends(get_db)):
    pos = svc.create_position(db, name=body.Name, description=body.Description)
    return ok(dump(PositionOut, pos), status_code=201)

@position_router.put("/{position_id}", dependencies=[Auth])
def update_position_ep(position_id: int, body: PositionUpdate, db: Session = Depends(get_db)):
    return ok(dump(PositionOut, svc.update_position(db, position_id, body)))

@position_router.delete("/{position_id}", dependencies=[Auth])
def delete_position_ep(position_id: int, force: bool = Query(False), db: Session = Depends(get_db)):
    svc.delete_position(db, position_id, force=force)
    return ok({"PositionID": position_id, "deleted": True})


# ---------- Employee ----------
@router.get("")
def list_employees_ep(position_id: Optional[int] = Query(None, ge=1), db: Session = Depends(get_db)):
    rows = dump_many(EmployeeOut, svc.list_employees(db, position_id=position_id))
    return ok(rows, meta=list_meta(rows))

# antes de /{employee_id} para que "ordered" no se lea como id
@router.get("/ordered")
def list_employees_ordered_ep(
    position: str = Query(DEFAULT_POSITION_TERM, min_length=1, description="Texto contenido en el cargo"),
    db: Session = Depends(get_db),
):
    rows = dump_many(EmployeeOut, svc.list_employees_ordered(db, position_term=position))
    return ok(rows, meta=list_meta(rows, {"position": position}))

@router.get("/{employee_id}")
def get_employee_ep(employee_id: int, db: Session = Depends(get_db)):
    return ok(dump(EmployeeOut, svc.get_employee(db, employee_id)))

@router.post("", status_code=201, dependencies=[Auth])
def create_employee_ep(body: EmployeeCreate, db: Session = Depends(get_db)):
    emp = svc.create_employee(
        db,
        document_no=body.DocumentNo,
        first_name=body.FirstName,
        last_name=body.LastName,
        phone=body.Phone,
        email=body.Email,
        position_id=body.PositionID,
    )
    return ok(dump(EmployeeOut, emp), status_code=201)

@router.put("/{employee_id}", dependencies=[Auth])
def update_employee_ep(employee_id: int, body: EmployeeUpdate, db: Session = Depends(get_db)):
    return ok(dump(EmployeeOut, svc.update_employee(db, employee_id, body)))

@router.delete("/{employee_id}", dependencies=[Auth])
def delete_employee_ep(employee_id: int, db: Session = Depends(get_db)):
    svc.delete_employee(db, employee_id)
    return ok({"EmployeeID": employee_id, "deleted": True})
