# backend/app/services/catalog_service.py
from __future__ import annotations
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.errors import ReferentialConflict, ValidationError
from app.models import Company, Representative, MachineCategory, Machine
from app.schemas.catalog import (
    CompanyUpdate, RepresentativeUpdate, CategoryUpdate, MachineUpdate,
)
from app.services.common import (
    transaction, get_or_404, require_ref, exists, ensure_unique, changed_fields, require_not_null,
)

logger = logging.getLogger(__name__)


# ---- Sondas de existencia que usa el núcleo ----
def company_exists(db: Session, company_id: Optional[int]) -> bool:
    return exists(db, Company, company_id)

def machine_exists(db: Session, machine_id: Optional[int]) -> bool:
    return exists(db, Machine, machine_id)

def category_exists(db: Session, category_id: Optional[int]) -> bool:
    return exists(db, MachineCategory, category_id)


# =========================
# Company
# =========================
def create_company(db: Session, *, tax_id: str, name: str, address: str, city: str, phone: str) -> Company:
    ensure_unique(db, Company.TaxID, tax_id.strip(), "TaxID")
    company = Company(
        TaxID=tax_id.strip(),
        Name=name.strip(),
        Address=address.strip(),
        City=city.strip(),
        Phone=phone.strip(),
    )
    with transaction(db, "create_company"):
        db.add(company)
    db.refresh(company)
    logger.info("company created id=%s", company.CompanyID)
    return company

def get_company(db: Session, company_id: int) -> Company:
    return get_or_404(db, Company, company_id, "Empresa")

def list_companies(db: Session, *, q: Optional[str] = None, skip: int = 0, limit: int = 100) -> List[Company]:
    query = db.query(Company)
    if q:
        term = f"%{q.strip()}%"
        query = query.filter(Company.Name.ilike(term) | Company.TaxID.ilike(term))
    return query.order_by(Company.Name).offset(max(0, skip)).limit(min(max(1, limit), 500)).all()

def update_company(db: Session, company_id: int, patch: CompanyUpdate) -> Company:
    company = get_company(db, company_id)
    data = changed_fields(patch)
    require_not_null(data, "TaxID", "Name", "Address", "City", "Phone")
    if "TaxID" in data:
        ensure_unique(db, Company.TaxID, data["TaxID"], "TaxID", exclude=(Company.CompanyID, company_id))
    with transaction(db, "update_company"):
        for k, v in data.items():
            setattr(company, k, v.strip())
    db.refresh(company)
    return company

def delete_company(db: Session, company_id: int, *, force: bool = False) -> None:
    """
    Restrict por defecto. force=True borra solicitudes, pagos y representante,
    y deja las máquinas de la empresa sin dueño (CompanyID NULL).
    """
    company = get_company(db, company_id)
    dependents = {
        "machines": len(company.machines),
        "requests": len(company.requests),
        "payments": len(company.payments),
    }
    blocking = {k: f"{v} registro(s) dependiente(s)" for k, v in dependents.items() if v}
    if blocking and not force:
        raise ReferentialConflict(
            "La empresa tiene registros dependientes; use force=true para borrar en cascada",
            errors=blocking,
        )
    with transaction(db, "delete_company"):
        for m in list(company.machines):
            m.CompanyID = None
        db.delete(company)
    logger.info("company deleted id=%s force=%s dependents=%s", company_id, force, dependents)


# =========================
# Representative
# =========================
def create_representative(
    db: Session, *, full_name: str, document_no: str, phone: str, email: str, company_id: int,
) -> Representative:
    company = require_ref(db, Company, company_id, "CompanyID", "Empresa")
    if company.representative is not None:
        raise ReferentialConflict(
            "La empresa ya tiene representante",
            errors={"CompanyID": "ya tiene representante"},
        )
    email = email.strip().lower()
    ensure_unique(db, Representative.DocumentNo, document_no.strip(), "DocumentNo")
    ensure_unique(db, Representative.Email, email, "Email")
    rep = Representative(
        FullName=full_name.strip(),
        DocumentNo=document_no.strip(),
        Phone=phone.strip(),
        Email=email,
        CompanyID=company_id,
    )
    with transaction(db, "create_representative"):
        db.add(rep)
    db.refresh(rep)
    return rep

def get_representative(db: Session, representative_id: int) -> Representative:
    return get_or_404(db, Representative, representative_id, "Representante")

def list_representatives(db: Session) -> List[Representative]:
    return db.query(Representative).order_by(Representative.FullName).all()

def update_representative(db: Session, representative_id: int, patch: RepresentativeUpdate) -> Representative:
    rep = get_representative(db, representative_id)
    data = changed_fields(patch)
    require_not_null(data, "FullName", "DocumentNo", "Phone", "Email", "CompanyID")
    if "CompanyID" in data and data["CompanyID"] != rep.CompanyID:
        company = require_ref(db, Company, data["CompanyID"], "CompanyID", "Empresa")
        if company.representative is not None:
            raise ReferentialConflict(
                "La empresa ya tiene representante",
                errors={"CompanyID": "ya tiene representante"},
            )
    if "DocumentNo" in data:
        ensure_unique(db, Representative.DocumentNo, data["DocumentNo"], "DocumentNo",
                      exclude=(Representative.RepresentativeID, representative_id))
    if "Email" in data:
        data["Email"] = data["Email"].strip().lower()
        ensure_unique(db, Representative.Email, data["Email"], "Email",
                      exclude=(Representative.RepresentativeID, representative_id))
    with transaction(db, "update_representative"):
        for k, v in data.items():
            setattr(rep, k, v)
    db.refresh(rep)
    return rep

def delete_representative(db: Session, representative_id: int) -> None:
    rep = get_representative(db, representative_id)
    with transaction(db, "delete_representative"):
        db.delete(rep)


# =========================
# MachineCategory
# =========================
def create_category(db: Session, *, kind: str, description: str) -> MachineCategory:
    cat = MachineCategory(Kind=kind, Description=description.strip())
    with transaction(db, "create_category"):
        db.add(cat)
    db.refresh(cat)
    return cat

def get_category(db: Session, category_id: int) -> MachineCategory:
    return get_or_404(db, MachineCategory, category_id, "Categoría")

def list_categories(db: Session) -> List[MachineCategory]:
    return db.query(MachineCategory).order_by(MachineCategory.CategoryID).all()

def update_category(db: Session, category_id: int, patch: CategoryUpdate) -> MachineCategory:
    cat = get_category(db, category_id)
    data = changed_fields(patch)
    require_not_null(data, "Kind", "Description")
    with transaction(db, "update_category"):
        for k, v in data.items():
            setattr(cat, k, v)
    db.refresh(cat)
    return cat

def delete_category(db: Session, category_id: int, *, force: bool = False) -> None:
    cat = get_category(db, category_id)
    if cat.machines and not force:
        raise ReferentialConflict(
            "La categoría tiene máquinas; use force=true para borrar en cascada",
            errors={"machines": f"{len(cat.machines)} registro(s) dependiente(s)"},
        )
    with transaction(db, "delete_category"):
        db.delete(cat)
    logger.info("category deleted id=%s force=%s", category_id, force)


# =========================
# Machine
# =========================
def create_machine(
    db: Session, *,
    machine_type: str,
    name: str,
    category_id: int,
    company_id: Optional[int] = None,
    status_s: str = "disponible",
) -> Machine:
    if not category_exists(db, category_id):
        raise ValidationError.field("CategoryID", f"Categoría seleccionada no existe (id={category_id})")
    if company_id is not None and not company_exists(db, company_id):
        raise ValidationError.field("CompanyID", f"Empresa seleccionada no existe (id={company_id})")
    machine = Machine(
        MachineType=machine_type.strip(),
        Name=name.strip(),
        CategoryID=category_id,
        CompanyID=company_id,
        Status_s=status_s,
    )
    with transaction(db, "create_machine"):
        db.add(machine)
    db.refresh(machine)
    logger.info("machine created id=%s category=%s company=%s", machine.MachineID, category_id, company_id)
    return machine

def get_machine(db: Session, machine_id: int) -> Machine:
    return get_or_404(db, Machine, machine_id, "Máquina")

def list_machines(
    db: Session, *,
    category_id: Optional[int] = None,
    company_id: Optional[int] = None,
    status_s: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[Machine]:
    q = db.query(Machine)
    if category_id:
        q = q.filter(Machine.CategoryID == category_id)
    if company_id:
        q = q.filter(Machine.CompanyID == company_id)
    if status_s:
        q = q.filter(Machine.Status_s == status_s)
    return q.order_by(Machine.MachineID).offset(max(0, skip)).limit(min(max(1, limit), 500)).all()

def update_machine(db: Session, machine_id: int, patch: MachineUpdate) -> Machine:
    machine = get_machine(db, machine_id)
    data = changed_fields(patch)
    require_not_null(data, "MachineType", "Name", "CategoryID", "Status_s")
    if "CategoryID" in data:
        require_ref(db, MachineCategory, data["CategoryID"], "CategoryID", "Categoría")
    if data.get("CompanyID") is not None:
        require_ref(db, Company, data["CompanyID"], "CompanyID", "Empresa")
    with transaction(db, "update_machine"):
        for k, v in data.items():
            setattr(machine, k, v)
    db.refresh(machine)
    return machine

def delete_machine(db: Session, machine_id: int, *, force: bool = False) -> None:
    """force=True arrastra líneas de reserva, mantenimientos y sus pagos."""
    machine = get_machine(db, machine_id)
    dependents = {
        "reservation_lines": len(machine.reservation_lines),
        "maintenances": len(machine.maintenances),
    }
    blocking = {k: f"{v} registro(s) dependiente(s)" for k, v in dependents.items() if v}
    if blocking and not force:
        raise ReferentialConflict(
            "La máquina tiene registros dependientes; use force=true para borrar en cascada",
            errors=blocking,
        )
    with transaction(db, "delete_machine"):
        db.delete(machine)
    logger.info("machine deleted id=%s force=%s dependents=%s", machine_id, force, dependents)
