from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session
import logging

from app.core.errors import ValidationError
from app.domain.constants import MIN_ESTIMATED_HOURS, MAX_ESTIMATED_HOURS, MONEY_PLACES
from app.models import Maintenance, ReservationLine, ServiceRequest
from app.schemas.maintenance import MaintenanceUpdate
from app.services.catalog_service import machine_exists
from app.services.common import (
    transaction, get_or_404, require_ref, ensure_unique, to_money, changed_fields, require_not_null,
)

logger = logging.getLogger(__name__)

MIN_SEARCH_TERM = 2


def _check_hours(hours) -> int:
    if hours is None or not (MIN_ESTIMATED_HOURS <= int(hours) <= MAX_ESTIMATED_HOURS):
        raise ValidationError.field(
            "EstimatedHours",
            f"EstimatedHours debe estar entre {MIN_ESTIMATED_HOURS} y {MAX_ESTIMATED_HOURS}",
        )
    return int(hours)


def _relink_lines(db: Session, m: Maintenance) -> None:
    """
    La línea (RequestID, MachineID) del mantenimiento apunta a él; cualquier
    otra línea que lo apuntaba queda en NULL. Requiere m.MaintenanceID.
    """
    (db.query(ReservationLine)
       .filter(ReservationLine.MaintenanceID == m.MaintenanceID)
       .update({ReservationLine.MaintenanceID: None}, synchronize_session="fetch"))
    if m.RequestID is None:
        return
    line = (
        db.query(ReservationLine)
        .filter(ReservationLine.RequestID == m.RequestID, ReservationLine.MachineID == m.MachineID)
        .first()
    )
    if line is not None:
        line.MaintenanceID = m.MaintenanceID


# -------- CRUD --------

def create_maintenance(
    db: Session, *,
    code: str,
    name: str,
    description: str,
    cost,
    estimated_hours: int,
    delivery_date: date,
    machine_id: int,
    request_id: Optional[int] = None,
    procedure_manual: Optional[str] = None,
) -> Maintenance:
    code = code.strip()
    ensure_unique(db, Maintenance.Code, code, "Code")
    cost = to_money(cost, "Cost")
    hours = _check_hours(estimated_hours)
    if delivery_date < date.today():
        raise ValidationError.field("DeliveryDate", "la fecha de entrega no puede ser anterior a hoy")
    if not machine_exists(db, machine_id):
        raise ValidationError.field("MachineID", f"Máquina seleccionada no existe (id={machine_id})")
    if request_id is not None:
        require_ref(db, ServiceRequest, request_id, "RequestID", "Solicitud")

    m = Maintenance(
        Code=code,
        Name=name.strip(),
        Description=description.strip(),
        Cost=cost,
        EstimatedHours=hours,
        ProcedureManual=procedure_manual,
        DeliveryDate=delivery_date,
        MachineID=machine_id,
        RequestID=request_id,
    )
    with transaction(db, "create_maintenance"):
        db.add(m)
        db.flush()   # MaintenanceID
        _relink_lines(db, m)
    db.refresh(m)
    logger.info("maintenance created id=%s code=%s request=%s", m.MaintenanceID, m.Code, request_id)
    return m


def get_maintenance(db: Session, maintenance_id: int) -> Maintenance:
    return get_or_404(db, Maintenance, maintenance_id, "Mantenimiento")


def list_maintenances(
    db: Session, *,
    machine_id: Optional[int] = None,
    request_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Maintenance]:
    q = db.query(Maintenance)
    if machine_id:
        q = q.filter(Maintenance.MachineID == machine_id)
    if request_id:
        q = q.filter(Maintenance.RequestID == request_id)
    return (q.order_by(Maintenance.DeliveryDate.desc(), Maintenance.MaintenanceID.desc())
             .offset(max(0, skip)).limit(min(max(1, limit), 500)).all())


def update_maintenance(db: Session, maintenance_id: int, patch: MaintenanceUpdate) -> Maintenance:
    # DeliveryDate no se vuelve a comparar con hoy al editar
    m = get_maintenance(db, maintenance_id)
    data = changed_fields(patch)
    require_not_null(data, "Code", "Name", "Description", "Cost", "EstimatedHours", "DeliveryDate", "MachineID")

    if "Code" in data:
        data["Code"] = data["Code"].strip()
        ensure_unique(db, Maintenance.Code, data["Code"], "Code",
                      exclude=(Maintenance.MaintenanceID, maintenance_id))
    if "Cost" in data:
        data["Cost"] = to_money(data["Cost"], "Cost")
    if "EstimatedHours" in data:
        data["EstimatedHours"] = _check_hours(data["EstimatedHours"])
    if "MachineID" in data:
        if not machine_exists(db, data["MachineID"]):
            raise ValidationError.field("MachineID", f"Máquina seleccionada no existe (id={data['MachineID']})")
    if data.get("RequestID") is not None:
        require_ref(db, ServiceRequest, data["RequestID"], "RequestID", "Solicitud")

    rewire = (
        ("MachineID" in data and data["MachineID"] != m.MachineID)
        or ("RequestID" in data and data["RequestID"] != m.RequestID)
    )
    with transaction(db, "update_maintenance"):
        for k, v in data.items():
            setattr(m, k, v)
        if rewire:
            db.flush()
            _relink_lines(db, m)
    db.refresh(m)
    logger.info("maintenance updated id=%s fields=%s rewired=%s", maintenance_id, sorted(data), rewire)
    return m


def delete_maintenance(db: Session, maintenance_id: int) -> None:
    """Arrastra sus pagos; las líneas de reserva quedan con MaintenanceID NULL."""
    m = get_maintenance(db, maintenance_id)
    with transaction(db, "delete_maintenance"):
        for line in list(m.reservation_lines):
            line.MaintenanceID = None
        db.delete(m)
    logger.info("maintenance deleted id=%s", maintenance_id)


# -------- Consultas --------

def maintenances_between(db: Session, start: date, end: date) -> List[Maintenance]:
    if end < start:
        raise ValidationError.field("end", "la fecha final no puede ser anterior a la inicial")
    return (
        db.query(Maintenance)
        .filter(Maintenance.DeliveryDate.between(start, end))
        .order_by(Maintenance.DeliveryDate)
        .all()
    )


def search_maintenances(db: Session, term: str) -> List[Maintenance]:
    term = (term or "").strip()
    if len(term) < MIN_SEARCH_TERM:
        raise ValidationError.field("term", f"el término debe tener al menos {MIN_SEARCH_TERM} caracteres")
    like = f"%{term}%"
    return (
        db.query(Maintenance)
        .filter(or_(
            Maintenance.Code.ilike(like),
            Maintenance.Name.ilike(like),
            Maintenance.Description.ilike(like),
        ))
        .order_by(Maintenance.DeliveryDate.desc())
        .all()
    )


def maintenance_statistics(db: Session, *, today: Optional[date] = None) -> dict:
    """Entregado = fecha de entrega <= hoy."""
    today = today or date.today()
    total = db.query(func.count(Maintenance.MaintenanceID)).scalar() or 0
    delivered = (
        db.query(func.count(Maintenance.MaintenanceID))
        .filter(Maintenance.DeliveryDate <= today)
        .scalar()
    ) or 0
    total_cost = Decimal(str(db.query(func.coalesce(func.sum(Maintenance.Cost), 0)).scalar() or 0))
    average = (total_cost / total).quantize(MONEY_PLACES) if total else Decimal("0")
    return {
        "total": total,
        "delivered": delivered,
        "pending": total - delivered,
        "total_cost": float(total_cost.quantize(MONEY_PLACES)),
        "average_cost": float(average),
        "delivered_pct": round(delivered * 100.0 / total, 2) if total else 0.0,
    }
