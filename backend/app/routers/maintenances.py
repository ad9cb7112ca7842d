# app/routers/maintenances.py
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.api import ok, list_meta, dump, dump_many
from app.core.db import get_db
from app.core.security import get_current_user
from app.schemas.maintenance import MaintenanceCreate, MaintenanceUpdate, MaintenanceOut, MaintenanceStats
from app.services import maintenance_service as svc

router = APIRouter(prefix="/maintenances", tags=["maintenances"])

Auth = Depends(get_current_user)


@router.get("")
def list_maintenances_ep(
    machine_id: Optional[int] = Query(None, ge=1),
    request_id: Optional[int] = Query(None, ge=1),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows = dump_many(MaintenanceOut, svc.list_maintenances(
        db, machine_id=machine_id, request_id=request_id, skip=skip, limit=limit,
    ))
    return ok(rows, meta=list_meta(rows))

# ---- rutas fijas antes de /{maintenance_id} ----
@router.get("/between")
def maintenances_between_ep(
    start: date = Query(..., description="YYYY-MM-DD, incluida"),
    end: date = Query(..., description="YYYY-MM-DD, incluida"),
    db: Session = Depends(get_db),
):
    rows = dump_many(MaintenanceOut, svc.maintenances_between(db, start, end))
    return ok(rows, meta=list_meta(rows, {"start": start.isoformat(), "end": end.isoformat()}))

@router.get("/search")
def search_maintenances_ep(term: str = Query(..., description="Código, nombre o descripción"), db: Session = Depends(get_db)):
    rows = dump_many(MaintenanceOut, svc.search_maintenances(db, term))
    return ok(rows, meta=list_meta(rows, {"term": term}))

@router.get("/statistics")
def maintenance_statistics_ep(db: Session = Depends(get_db)):
    stats = MaintenanceStats(**svc.maintenance_statistics(db))
    return ok(stats.model_dump())

@router.get("/{maintenance_id}")
def get_maintenance_ep(maintenance_id: int, db: Session = Depends(get_db)):
    return ok(dump(MaintenanceOut, svc.get_maintenance(db, maintenance_id)))

@router.post("", status_code=201, dependencies=[Auth])
def create_maintenance_ep(body: MaintenanceCreate, db: Session = Depends(get_db)):
    m = svc.create_maintenance(
        db,
        code=body.Code,
        name=body.Name,
        description=body.Description,
        cost=body.Cost,
        estimated_hours=body.EstimatedHours,
        procedure_manual=body.ProcedureManual,
        delivery_date=body.DeliveryDate,
        machine_id=body.MachineID,
        request_id=body.RequestID,
    )
    return ok(dump(MaintenanceOut, m), status_code=201)

@router.put("/{maintenance_id}", dependencies=[Auth])
def update_maintenance_ep(maintenance_id: int, body: MaintenanceUpdate, db: Session = Depends(get_db)):
    return ok(dump(MaintenanceOut, svc.update_maintenance(db, maintenance_id, body)))

@router.delete("/{maintenance_id}", dependencies=[Auth])
def delete_maintenance_ep(maintenance_id: int, db: Session = Depends(get_db)):
    svc.delete_maintenance(db, maintenance_id)
    return ok({"MaintenanceID": maintenance_id, "deleted": True})
