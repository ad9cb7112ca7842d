# app/routers/companies.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.api import ok, list_meta, dump, dump_many
from app.core.db import get_db
from app.core.security import get_current_user
from app.schemas.catalog import (
    CompanyCreate, CompanyUpdate, CompanyOut,
    RepresentativeCreate, RepresentativeUpdate, RepresentativeOut,
)
from app.services import catalog_service as svc

router = APIRouter(prefix="/companies", tags=["companies"])
rep_router = APIRouter(prefix="/representatives", tags=["representatives"])

# Solo las escrituras piden token
Auth = Depends(get_current_user)


# ---------- Company ----------
@router.get("")
def list_companies_ep(
    q: Optional[str] = Query(None, description="Busca en nombre o NIT"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows = dump_many(CompanyOut, svc.list_companies(db, q=q, skip=skip, limit=limit))
    return ok(rows, meta=list_meta(rows))

@router.get("/{company_id}")
def get_company_ep(company_id: int, db: Session = Depends(get_db)):
    return ok(dump(CompanyOut, svc.get_company(db, company_id)))

@router.post("", status_code=201, dependencies=[Auth])
def create_company_ep(body: CompanyCreate, db: Session = Depends(get_db)):
    company = svc.create_company(
        db,
        tax_id=body.TaxID,
        name=body.Name,
        address=body.Address,
        city=body.City,
        phone=body.Phone,
    )
    return ok(dump(CompanyOut, company), status_code=201)

@router.put("/{company_id}", dependencies=[Auth])
def update_company_ep(company_id: int, body: CompanyUpdate, db: Session = Depends(get_db)):
    return ok(dump(CompanyOut, svc.update_company(db, company_id, body)))

@router.delete("/{company_id}", dependencies=[Auth])
def delete_company_ep(
    company_id: int,
    force: bool = Query(False, description="Borra en cascada solicitudes, pagos y representante"),
    db: Session = Depends(get_db),
):
    svc.delete_company(db, company_id, force=force)
    return ok({"CompanyID": company_id, "deleted": True})


# ---------- Representative ----------
@rep_router.get("")
def list_representatives_ep(db: Session = Depends(get_db)):
    rows = dump_many(RepresentativeOut, svc.list_representatives(db))
    return ok(rows, meta=list_meta(rows))

@rep_router.get("/{representative_id}")
def get_representative_ep(representative_id: int, db: Session = Depends(get_db)):
    return ok(dump(RepresentativeOut, svc.get_representative(db, representative_id)))

@rep_router.post("", status_code=201, dependencies=[Auth])
def create_representative_ep(body: RepresentativeCreate, db: Session = Depends(get_db)):
    rep = svc.create_representative(
        db,
        full_name=body.FullName,
        document_no=body.DocumentNo,
        phone=body.Phone,
        email=body.Email,
        company_id=body.CompanyID,
    )
    return ok(dump(RepresentativeOut, rep), status_code=201)

@rep_router.put("/{representative_id}", dependencies=[Auth])
def update_representative_ep(representative_id: int, body: RepresentativeUpdate, db: Session = Depends(get_db)):
    return ok(dump(RepresentativeOut, svc.update_representative(db, representative_id, body)))

@rep_router.delete("/{representative_id}", dependencies=[Auth])
def delete_representative_ep(representative_id: int, db: Session = Depends(get_db)):
    svc.delete_representative(db, representative_id)
    return ok({"RepresentativeID": representative_id, "deleted": True})
