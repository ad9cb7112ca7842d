# app/routers/payments.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.api import ok, list_meta, dump, dump_many
from app.core.db import get_db
from app.core.security import get_current_user
from app.schemas.payment import PaymentCreate, PaymentUpdate, PaymentOut, PaymentStatusLiteral
from app.services import payment_service as svc

router = APIRouter(prefix="/payments", tags=["payments"])

Auth = Depends(get_current_user)


@router.get("")
def list_payments_ep(
    status_s: Optional[PaymentStatusLiteral] = Query(None),
    company_id: Optional[int] = Query(None, ge=1),
    maintenance_id: Optional[int] = Query(None, ge=1),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows = dump_many(PaymentOut, svc.list_payments(
        db, status_s=status_s, company_id=company_id, maintenance_id=maintenance_id, skip=skip, limit=limit,
    ))
    return ok(rows, meta=list_meta(rows))

@router.get("/{payment_id}")
def get_payment_ep(payment_id: int, db: Session = Depends(get_db)):
    return ok(dump(PaymentOut, svc.get_payment(db, payment_id)))

@router.post("", status_code=201, dependencies=[Auth])
def create_payment_ep(body: PaymentCreate, db: Session = Depends(get_db)):
    p = svc.create_payment(
        db,
        code=body.Code,
        payment_date=body.PaymentDate,
        amount=body.Amount,
        method=body.Method,
        reference=body.Reference,
        status_s=body.Status_s,
        notes=body.Notes,
        maintenance_id=body.MaintenanceID,
        company_id=body.CompanyID,
    )
    return ok(dump(PaymentOut, p), status_code=201)

@router.put("/{payment_id}", dependencies=[Auth])
def update_payment_ep(payment_id: int, body: PaymentUpdate, db: Session = Depends(get_db)):
    return ok(dump(PaymentOut, svc.update_payment(db, payment_id, body)))

@router.delete("/{payment_id}", dependencies=[Auth])
def delete_payment_ep(payment_id: int, db: Session = Depends(get_db)):
    svc.delete_payment(db, payment_id)
    return ok({"PaymentID": payment_id, "deleted": True})
