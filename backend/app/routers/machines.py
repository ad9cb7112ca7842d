# app/routers/machines.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.api import ok, list_meta, dump, dump_many
from app.core.db import get_db
from app.core.security import get_current_user
from app.schemas.catalog import (
    CategoryCreate, CategoryUpdate, CategoryOut,
    MachineCreate, MachineUpdate, MachineOut, MachineStatusLiteral,
)
from app.services import catalog_service as svc

router = APIRouter(prefix="/machines", tags=["machines"])
category_router = APIRouter(prefix="/machine-categories", tags=["machine-categories"])

Auth = Depends(get_current_user)


# ---------- MachineCategory ----------
@category_router.get("")
def list_categories_ep(db: Session = Depends(get_db)):
    rows = dump_many(CategoryOut, svc.list_categories(db))
    return ok(rows, meta=list_meta(rows))

@category_router.get("/{category_id}")
def get_category_ep(category_id: int, db: Session = Depends(get_db)):
    return ok(dump(CategoryOut, svc.get_category(db, category_id)))

@category_router.post("", status_code=201, dependencies=[Auth])
def create_category_ep(body: CategoryCreate, db: Session = Depends(get_db)):
    cat = svc.create_category(db, kind=body.Kind, description=body.Description)
    return ok(dump(CategoryOut, cat), status_code=201)

@category_router.put("/{category_id}", dependencies=[Auth])
def update_category_ep(category_id: int, body: CategoryUpdate, db: Session = Depends(get_db)):
    return ok(dump(CategoryOut, svc.update_category(db, category_id, body)))

@category_router.delete("/{category_id}", dependencies=[Auth])
def delete_category_ep(category_id: int, force: bool = Query(False), db: Session = Depends(get_db)):
    svc.delete_category(db, category_id, force=force)
    return ok({"CategoryID": category_id, "deleted": True})


# ---------- Machine ----------
@router.get("")
def list_machines_ep(
    category_id: Optional[int] = Query(None, ge=1),
    company_id: Optional[int] = Query(None, ge=1),
    status_s: Optional[MachineStatusLiteral] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows = dump_many(MachineOut, svc.list_machines(
        db, category_id=category_id, company_id=company_id, status_s=status_s, skip=skip, limit=limit,
    ))
    return ok(rows, meta=list_meta(rows))

@router.get("/{machine_id}")
def get_machine_ep(machine_id: int, db: Session = Depends(get_db)):
    return ok(dump(MachineOut, svc.get_machine(db, machine_id)))

@router.post("", status_code=201, dependencies=[Auth])
def create_machine_ep(body: MachineCreate, db: Session = Depends(get_db)):
    machine = svc.create_machine(
        db,
        machine_type=body.MachineType,
        name=body.Name,
        category_id=body.CategoryID,
        company_id=body.CompanyID,
        status_s=body.Status_s,
    )
    return ok(dump(MachineOut, machine), status_code=201)

@router.put("/{machine_id}", dependencies=[Auth])
def update_machine_ep(machine_id: int, body: MachineUpdate, db: Session = Depends(get_db)):
    return ok(dump(MachineOut, svc.update_machine(db, machine_id, body)))

@router.delete("/{machine_id}", dependencies=[Auth])
def delete_machine_ep(
    machine_id: int,
    force: bool = Query(False, description="Borra líneas de reserva, mantenimientos y pagos"),
    db: Session = Depends(get_db),
):
    svc.delete_machine(db, machine_id, force=force)
    return ok({"MachineID": machine_id, "deleted": True})
