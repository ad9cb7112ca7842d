# backend/app/services/request_service.py
from __future__ import annotations
import logging
from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import NotFound, ValidationError
from app.domain.constants import REQUEST_STATUS_INITIAL
from app.models import Company, Employee, ReservationLine, ServiceRequest
from app.schemas.request import ReservationLineIn, RequestUpdate
from app.services.catalog_service import company_exists, machine_exists
from app.services.common import (
    transaction, get_or_404, require_ref, ensure_unique, changed_fields, require_not_null,
)
from app.services.directory_service import employee_exists

logger = logging.getLogger(__name__)


# ---------- validaciones del agregado ----------

def _validate_lines(db: Session, lines: Sequence[ReservationLineIn]) -> List[ReservationLine]:
    """Una línea por máquina, cantidad >= 1, máquina existente. Todo o nada."""
    errors: Dict[str, str] = {}
    seen = set()
    for i, line in enumerate(lines):
        if line.Quantity is None or line.Quantity < 1:
            errors[f"MachineLines.{i}.Quantity"] = "la cantidad debe ser al menos 1"
        if line.MachineID in seen:
            errors[f"MachineLines.{i}.MachineID"] = f"máquina {line.MachineID} repetida en otra línea"
        elif not machine_exists(db, line.MachineID):
            errors[f"MachineLines.{i}.MachineID"] = f"la máquina {line.MachineID} no existe"
        seen.add(line.MachineID)
    if errors:
        raise ValidationError("Líneas de reserva inválidas", errors=errors)
    return [ReservationLine(MachineID=line.MachineID, Quantity=line.Quantity) for line in lines]


def _validate_employees(db: Session, employee_ids: Sequence[int]) -> List[Employee]:
    unique_ids = list(dict.fromkeys(employee_ids))
    missing = [i for i in unique_ids if not employee_exists(db, i)]
    if missing:
        raise ValidationError.field("EmployeeIDs", f"empleado(s) inexistente(s): {missing}")
    return [db.get(Employee, i) for i in unique_ids]


def _validate_dates(request_date: date, scheduled_date: date) -> None:
    if scheduled_date < request_date:
        raise ValidationError.field(
            "ScheduledDate", "la fecha programada no puede ser anterior a la fecha de solicitud"
        )


def _derived_count(lines: Sequence[ReservationLine]) -> int:
    return sum(line.Quantity for line in lines) or 1


def _restore_maintenance_links(req: ServiceRequest) -> None:
    """Las líneas nuevas recuperan el mantenimiento de su máquina en esta solicitud."""
    by_machine = {m.MachineID: m.MaintenanceID for m in req.maintenances}
    for line in req.lines:
        line.MaintenanceID = by_machine.get(line.MachineID)


# -------- CRUD --------

def create_request(
    db: Session, *,
    company_id: int,
    code: str,
    request_date: date,
    scheduled_date: date,
    description: str,
    machine_lines: Sequence[ReservationLineIn] = (),
    employee_ids: Sequence[int] = (),
    machine_count: Optional[int] = None,
    photos: Optional[List[str]] = None,
) -> ServiceRequest:
    """
    Crea la solicitud con sus líneas de reserva y asignaciones en una sola
    transacción. MachineCount: el valor recibido, o la suma de cantidades.
    """
    if not company_exists(db, company_id):
        raise ValidationError.field("CompanyID", f"Empresa seleccionada no existe (id={company_id})")
    code = code.strip()
    ensure_unique(db, ServiceRequest.Code, code, "Code")
    _validate_dates(request_date, scheduled_date)
    lines = _validate_lines(db, machine_lines)
    employees = _validate_employees(db, employee_ids)
    if machine_count is not None and machine_count < 1:
        raise ValidationError.field("MachineCount", "MachineCount debe ser al menos 1")

    req = ServiceRequest(
        Code=code,
        RequestDate=request_date,
        ScheduledDate=scheduled_date,
        Description=description.strip(),
        MachineCount=machine_count if machine_count is not None else _derived_count(lines),
        Photos=list(photos or []),
        Status_s=REQUEST_STATUS_INITIAL,
        CompanyID=company_id,
    )
    with transaction(db, "create_request"):
        req.lines.extend(lines)
        req.employees.extend(employees)
        db.add(req)
    db.refresh(req)
    logger.info("request created id=%s code=%s lines=%s", req.RequestID, req.Code, len(lines))
    return req


def get_request(db: Session, request_id: int) -> ServiceRequest:
    return get_or_404(db, ServiceRequest, request_id, "Solicitud")


def get_request_by_code(db: Session, code: str) -> ServiceRequest:
    req = db.query(ServiceRequest).filter(ServiceRequest.Code == code).first()
    if req is None:
        raise NotFound(f"Solicitud no encontrada (code={code})")
    return req


def list_requests(
    db: Session, *,
    status_s: Optional[str] = None,
    company_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[ServiceRequest]:
    q = db.query(ServiceRequest)
    if status_s:
        q = q.filter(ServiceRequest.Status_s == status_s)
    if company_id:
        q = q.filter(ServiceRequest.CompanyID == company_id)
    return q.order_by(ServiceRequest.RequestID.desc()).offset(max(0, skip)).limit(min(max(1, limit), 500)).all()


def update_request(db: Session, request_id: int, patch: RequestUpdate) -> ServiceRequest:
    """
    PUT parcial. MachineLines / EmployeeIDs, si llegan, reemplazan el conjunto
    completo (borrar y volver a insertar). Status_s se acepta sin guarda.
    """
    req = get_request(db, request_id)
    data = changed_fields(patch, skip=("MachineLines", "EmployeeIDs"))
    require_not_null(data, "CompanyID", "Code", "RequestDate", "ScheduledDate", "Description", "Status_s")

    if "CompanyID" in data:
        require_ref(db, Company, data["CompanyID"], "CompanyID", "Empresa")
    if "Code" in data:
        data["Code"] = data["Code"].strip()
        ensure_unique(db, ServiceRequest.Code, data["Code"], "Code",
                      exclude=(ServiceRequest.RequestID, request_id))
    _validate_dates(
        data.get("RequestDate", req.RequestDate),
        data.get("ScheduledDate", req.ScheduledDate),
    )
    if "Photos" in data:
        data["Photos"] = list(data["Photos"] or [])

    new_lines = _validate_lines(db, patch.MachineLines) if patch.MachineLines is not None else None
    new_employees = _validate_employees(db, patch.EmployeeIDs) if patch.EmployeeIDs is not None else None

    with transaction(db, "update_request"):
        for k, v in data.items():
            if k != "MachineCount":
                setattr(req, k, v)

        if new_lines is not None:
            req.lines.clear()
            # los DELETE primero: UQ (RequestID, MachineID) no admite la misma máquina dos veces
            db.flush()
            req.lines.extend(new_lines)
            _restore_maintenance_links(req)

        if new_employees is not None:
            req.employees = new_employees

        if data.get("MachineCount") is not None:
            req.MachineCount = data["MachineCount"]
        elif "MachineCount" in data or new_lines is not None:
            req.MachineCount = _derived_count(req.lines)
    db.refresh(req)
    logger.info(
        "request updated id=%s fields=%s lines_replaced=%s",
        request_id, sorted(patch.model_fields_set), new_lines is not None,
    )
    return req


def delete_request(db: Session, request_id: int) -> None:
    """Borra líneas y asignaciones. Los mantenimientos quedan con RequestID NULL."""
    req = get_request(db, request_id)
    with transaction(db, "delete_request"):
        db.delete(req)
    logger.info("request deleted id=%s", request_id)


# -------- Consultas de apoyo --------

def total_machines_by_company_name(db: Session, name: str) -> dict:
    companies = db.query(Company).filter(func.lower(Company.Name) == name.strip().lower()).all()
    if not companies:
        raise NotFound(f"Empresa no encontrada (name={name})")
    ids = [c.CompanyID for c in companies]
    total = (
        db.query(func.coalesce(func.sum(ReservationLine.Quantity), 0))
        .join(ServiceRequest, ServiceRequest.RequestID == ReservationLine.RequestID)
        .filter(ServiceRequest.CompanyID.in_(ids))
        .scalar()
    )
    request_count = db.query(ServiceRequest).filter(ServiceRequest.CompanyID.in_(ids)).count()
    return {
        "CompanyName": companies[0].Name,
        "CompanyIDs": ids,
        "RequestCount": request_count,
        "TotalMachines": int(total or 0),
    }


def requests_without_maintenance(db: Session) -> List[ServiceRequest]:
    return (
        db.query(ServiceRequest)
        .filter(~ServiceRequest.maintenances.any())
        .filter(~ServiceRequest.lines.any(ReservationLine.MaintenanceID.isnot(None)))
        .order_by(ServiceRequest.RequestID)
        .all()
    )


def requests_by_employee_document(db: Session, document_no: str) -> List[ServiceRequest]:
    emp = db.query(Employee).filter(Employee.DocumentNo == document_no).first()
    if emp is None:
        raise NotFound(f"Empleado no encontrado (document={document_no})")
    return (
        db.query(ServiceRequest)
        .join(ServiceRequest.employees)
        .filter(Employee.EmployeeID == emp.EmployeeID)
        .order_by(ServiceRequest.RequestID)
        .all()
    )
