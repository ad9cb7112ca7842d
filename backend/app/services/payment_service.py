from datetime import date
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from app.domain.constants import PAYMENT_STATUS_INITIAL
from app.models import Company, Maintenance, Payment
from app.schemas.payment import PaymentUpdate
from app.services.common import (
    transaction, get_or_404, require_ref, ensure_unique, to_money, changed_fields, require_not_null,
)

logger = logging.getLogger(__name__)


def create_payment(
    db: Session, *,
    code: str,
    payment_date: date,
    amount,
    method: str,
    maintenance_id: int,
    company_id: int,
    reference: Optional[str] = None,
    status_s: str = PAYMENT_STATUS_INITIAL,
    notes: Optional[str] = None,
) -> Payment:
    """
    La empresa del pago no se contrasta con la de la máquina o la solicitud
    del mantenimiento.
    """
    code = code.strip()
    ensure_unique(db, Payment.Code, code, "Code")
    amount = to_money(amount, "Amount")
    require_ref(db, Maintenance, maintenance_id, "MaintenanceID", "Mantenimiento")
    require_ref(db, Company, company_id, "CompanyID", "Empresa")

    p = Payment(
        Code=code,
        PaymentDate=payment_date,
        Amount=amount,
        Method=method,
        Reference=reference,
        Status_s=status_s,
        Notes=notes,
        MaintenanceID=maintenance_id,
        CompanyID=company_id,
    )
    with transaction(db, "create_payment"):
        db.add(p)
    db.refresh(p)
    logger.info("payment created id=%s code=%s amount=%s", p.PaymentID, p.Code, p.Amount)
    return p


def get_payment(db: Session, payment_id: int) -> Payment:
    return get_or_404(db, Payment, payment_id, "Pago")


def list_payments(
    db: Session, *,
    status_s: Optional[str] = None,
    company_id: Optional[int] = None,
    maintenance_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Payment]:
    q = db.query(Payment)
    if status_s:
        q = q.filter(Payment.Status_s == status_s)
    if company_id:
        q = q.filter(Payment.CompanyID == company_id)
    if maintenance_id:
        q = q.filter(Payment.MaintenanceID == maintenance_id)
    return (q.order_by(Payment.PaymentDate.desc(), Payment.PaymentID.desc())
             .offset(max(0, skip)).limit(min(max(1, limit), 500)).all())


def update_payment(db: Session, payment_id: int, patch: PaymentUpdate) -> Payment:
    p = get_payment(db, payment_id)
    data = changed_fields(patch)
    require_not_null(data, "Code", "PaymentDate", "Amount", "Method", "Status_s", "MaintenanceID", "CompanyID")
    if "Code" in data:
        data["Code"] = data["Code"].strip()
        ensure_unique(db, Payment.Code, data["Code"], "Code", exclude=(Payment.PaymentID, payment_id))
    if "Amount" in data:
        data["Amount"] = to_money(data["Amount"], "Amount")
    if "MaintenanceID" in data:
        require_ref(db, Maintenance, data["MaintenanceID"], "MaintenanceID", "Mantenimiento")
    if "CompanyID" in data:
        require_ref(db, Company, data["CompanyID"], "CompanyID", "Empresa")
    with transaction(db, "update_payment"):
        for k, v in data.items():
            setattr(p, k, v)
    db.refresh(p)
    logger.info("payment updated id=%s fields=%s", payment_id, sorted(data))
    return p


def delete_payment(db: Session, payment_id: int) -> None:
    p = get_payment(db, payment_id)
    with transaction(db, "delete_payment"):
        db.delete(p)
    logger.info("payment deleted id=%s", payment_id)
