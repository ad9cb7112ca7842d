# app/routers/requests.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.api import ok, list_meta, dump, dump_many
from app.core.db import get_db
from app.core.security import get_current_user
from app.schemas.request import RequestCreate, RequestUpdate, RequestOut, RequestStatusLiteral
from app.services import request_service as svc

router = APIRouter(prefix="/requests", tags=["requests"])

Auth = Depends(get_current_user)


@router.get("")
def list_requests_ep(
    status_s: Optional[RequestStatusLiteral] = Query(None),
    company_id: Optional[int] = Query(None, ge=1),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    rows = dump_many(RequestOut, svc.list_requests(
        db, status_s=status_s, company_id=company_id, skip=skip, limit=limit,
    ))
    return ok(rows, meta=list_meta(rows))

@router.get("/by-code/{code}")
def get_request_by_code_ep(code: str, db: Session = Depends(get_db)):
    return ok(dump(RequestOut, svc.get_request_by_code(db, code)))

@router.get("/{request_id}")
def get_request_ep(request_id: int, db: Session = Depends(get_db)):
    return ok(dump(RequestOut, svc.get_request(db, request_id)))

@router.post("", status_code=201, dependencies=[Auth])
def create_request_ep(body: RequestCreate, db: Session = Depends(get_db)):
    req = svc.create_request(
        db,
        company_id=body.CompanyID,
        code=body.Code,
        request_date=body.RequestDate,
        scheduled_date=body.ScheduledDate,
        description=body.Description,
        machine_lines=body.MachineLines,
        employee_ids=body.EmployeeIDs,
        machine_count=body.MachineCount,
        photos=body.Photos,
    )
    return ok(dump(RequestOut, req), status_code=201)

@router.put("/{request_id}", dependencies=[Auth])
def update_request_ep(request_id: int, body: RequestUpdate, db: Session = Depends(get_db)):
    return ok(dump(RequestOut, svc.update_request(db, request_id, body)))

@router.delete("/{request_id}", dependencies=[Auth])
def delete_request_ep(request_id: int, db: Session = Depends(get_db)):
    svc.delete_request(db, request_id)
    return ok({"RequestID": request_id, "deleted": True})
