# backend/app/services/report_service.py
"""
Consultas de solo lectura sobre los datos del club.

Devuelven dicts listos para el sobre `ok(...)`; los importes salen como float
con 2 decimales.
"""
from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy import func, desc
from sqlalchemy.orm import Session

from app.domain.constants import HEAVY_CATEGORY, HIGH_COST_THRESHOLD, MONEY_PLACES
from app.models import (
    Company, Machine, MachineCategory, Maintenance, Representative, ServiceRequest,
)
from app.services.common import to_money
from app.services.request_service import (
    total_machines_by_company_name, requests_without_maintenance, requests_by_employee_document,
)

logger = logging.getLogger(__name__)

__all__ = [
    "total_machines_by_company_name", "requests_without_maintenance", "requests_by_employee_document",
    "companies_without_requests", "company_with_most_requests", "representatives_without_requests",
    "requests_detailed", "maintenance_count_by_machine_type", "high_cost_heavy_maintenance",
]


def _money(v) -> float:
    return float(Decimal(str(v or 0)).quantize(MONEY_PLACES))


def _representative(rep: Optional[Representative]) -> Optional[dict]:
    if rep is None:
        return None
    return {
        "RepresentativeID": rep.RepresentativeID,
        "FullName": rep.FullName,
        "DocumentNo": rep.DocumentNo,
        "Email": rep.Email,
        "Phone": rep.Phone,
    }


def companies_without_requests(db: Session) -> List[dict]:
    rows = (
        db.query(Company)
        .filter(~Company.requests.any())
        .order_by(Company.Name)
        .all()
    )
    return [
        {
            "CompanyID": c.CompanyID,
            "TaxID": c.TaxID,
            "Name": c.Name,
            "City": c.City,
            "representative": _representative(c.representative),
        }
        for c in rows
    ]


def company_with_most_requests(db: Session) -> Optional[dict]:
    row = (
        db.query(
            Company.CompanyID.label("CompanyID"),
            Company.Name.label("Name"),
            func.count(ServiceRequest.RequestID).label("RequestCount"),
        )
        .join(ServiceRequest, ServiceRequest.CompanyID == Company.CompanyID)
        .group_by(Company.CompanyID, Company.Name)
        .order_by(desc("RequestCount"), Company.CompanyID)
        .first()
    )
    return dict(row._mapping) if row is not None else None


def representatives_without_requests(db: Session) -> List[dict]:
    rows = (
        db.query(Representative)
        .join(Company, Company.CompanyID == Representative.CompanyID)
        .filter(~Company.requests.any())
        .order_by(Representative.FullName)
        .all()
    )
    return [
        {**_representative(r), "CompanyID": r.CompanyID, "CompanyName": r.company.Name}
        for r in rows
    ]


def requests_detailed(db: Session) -> List[dict]:
    out = []
    for req in db.query(ServiceRequest).order_by(ServiceRequest.RequestID).all():
        out.append({
            "RequestID": req.RequestID,
            "Code": req.Code,
            "RequestDate": req.RequestDate.isoformat(),
            "ScheduledDate": req.ScheduledDate.isoformat(),
            "Status_s": req.Status_s,
            "Company": {"CompanyID": req.company.CompanyID, "Name": req.company.Name},
            "lines": [
                {
                    "MachineID": ln.MachineID,
                    "MachineName": ln.machine.Name,
                    "MachineType": ln.machine.MachineType,
                    "Quantity": ln.Quantity,
                    "MaintenanceCode": ln.maintenance.Code if ln.maintenance else None,
                }
                for ln in req.lines
            ],
            "employees": [
                {"EmployeeID": e.EmployeeID, "DocumentNo": e.DocumentNo,
                 "FullName": f"{e.FirstName} {e.LastName}"}
                for e in req.employees
            ],
            "TotalQuantity": sum(ln.Quantity for ln in req.lines),
        })
    return out


def maintenance_count_by_machine_type(
    db: Session, *, machine_type: str, category_id: Optional[int] = None,
) -> dict:
    q = (
        db.query(func.count(Maintenance.MaintenanceID))
        .join(Machine, Machine.MachineID == Maintenance.MachineID)
        .filter(Machine.MachineType.ilike(f"%{machine_type.strip()}%"))
    )
    if category_id is not None:
        q = q.filter(Machine.CategoryID == category_id)
    return {
        "machine_type": machine_type,
        "category_id": category_id,
        "count": q.scalar() or 0,
    }


def high_cost_heavy_maintenance(db: Session, *, threshold=None) -> List[dict]:
    """Costo > umbral sobre máquinas de categoría pesada, de mayor a menor."""
    limit = to_money(threshold if threshold is not None else HIGH_COST_THRESHOLD, "threshold")
    rows = (
        db.query(Maintenance, Machine, MachineCategory)
        .join(Machine, Machine.MachineID == Maintenance.MachineID)
        .join(MachineCategory, MachineCategory.CategoryID == Machine.CategoryID)
        .filter(MachineCategory.Kind == HEAVY_CATEGORY, Maintenance.Cost > limit)
        .order_by(Maintenance.Cost.desc(), Maintenance.MaintenanceID)
        .all()
    )
    return [
        {
            "MaintenanceID": m.MaintenanceID,
            "Code": m.Code,
            "Name": m.Name,
            "Cost": _money(m.Cost),
            "DeliveryDate": m.DeliveryDate.isoformat(),
            "MachineID": mc.MachineID,
            "MachineName": mc.Name,
            "MachineType": mc.MachineType,
            "CategoryKind": cat.Kind,
            "RequestID": m.RequestID,
        }
        for m, mc, cat in rows
    ]
