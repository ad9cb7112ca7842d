# backend/app/routers/reports.py
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.api import ok, list_meta, dump_many
from app.core.db import get_db
from app.domain.constants import DEFAULT_MACHINE_TYPE_TERM, HIGH_COST_THRESHOLD
from app.schemas.request import RequestOut
from app.services import report_service as rpt

# --- Reportes de solo lectura, siempre en el sobre estándar ---
router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/total-machines-by-company/{name}")
def total_machines_by_company(name: str, db: Session = Depends(get_db)):
    return ok(rpt.total_machines_by_company_name(db, name))

@router.get("/companies-without-requests")
def companies_without_requests(db: Session = Depends(get_db)):
    rows = rpt.companies_without_requests(db)
    return ok(rows, meta=list_meta(rows))

@router.get("/company-with-most-requests")
def company_with_most_requests(db: Session = Depends(get_db)):
    # sin solicitudes en el sistema -> data null
    return ok(rpt.company_with_most_requests(db))

@router.get("/representatives-without-requests")
def representatives_without_requests(db: Session = Depends(get_db)):
    rows = rpt.representatives_without_requests(db)
    return ok(rows, meta=list_meta(rows))

@router.get("/requests-by-employee/{document_no}")
def requests_by_employee(document_no: str, db: Session = Depends(get_db)):
    rows = dump_many(RequestOut, rpt.requests_by_employee_document(db, document_no))
    return ok(rows, meta=list_meta(rows, {"document": document_no}))

@router.get("/requests-without-maintenance")
def requests_without_maintenance(db: Session = Depends(get_db)):
    rows = dump_many(RequestOut, rpt.requests_without_maintenance(db))
    return ok(rows, meta=list_meta(rows))

@router.get("/requests-detailed")
def requests_detailed(db: Session = Depends(get_db)):
    rows = rpt.requests_detailed(db)
    return ok(rows, meta=list_meta(rows))

@router.get("/maintenance-count-by-machine-type")
def maintenance_count_by_machine_type(
    machine_type: str = Query(DEFAULT_MACHINE_TYPE_TERM, min_length=1),
    category_id: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    return ok(rpt.maintenance_count_by_machine_type(db, machine_type=machine_type, category_id=category_id))

@router.get("/high-cost-heavy-maintenance")
def high_cost_heavy_maintenance(
    threshold: Decimal = Query(HIGH_COST_THRESHOLD, ge=0),
    db: Session = Depends(get_db),
):
    rows = rpt.high_cost_heavy_maintenance(db, threshold=threshold)
    total = round(sum(r["Cost"] for r in rows), 2)
    return ok(rows, meta=list_meta(rows, {"threshold": float(threshold), "total_cost": total}))
