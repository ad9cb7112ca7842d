# backend/app/main.py
import os, json
import logging
from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from sqlalchemy.orm import Session
from sqlalchemy import text

# core.db carga el .env antes que nada
from app.core.db import get_db, engine, Base
from app.core.errors import DomainError
from app import models  # noqa: F401  registra todas las tablas en Base.metadata

# --- API envelopes ---
from app.core.api import ok, fail, UTF8JSONResponse

# --- Routers ---
from app.routers.auth import router as auth_router
from app.routers.companies import router as companies_router, rep_router as representatives_router
from app.routers.machines import router as machines_router, category_router
from app.routers.employees import router as employees_router, position_router
from app.routers.requests import router as requests_router
from app.routers.maintenances import router as maintenances_router
from app.routers.payments import router as payments_router
from app.routers.reports import router as reports_router

SERVICE_NAME = "Club de Maquinaria API"

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("app")

app = FastAPI(title=SERVICE_NAME, default_response_class=UTF8JSONResponse)


# JSON Content-Type siempre con charset
@app.middleware("http")
async def _force_json_charset(request, call_next):
    resp = await call_next(request)
    ct = resp.headers.get("content-type", "")
    if ct.lower().startswith("application/json") and "charset=" not in ct.lower():
        resp.headers["content-type"] = "application/json; charset=utf-8"
    return resp


# -----------------------------
# Sobre de error global
# -----------------------------
@app.exception_handler(DomainError)
async def domain_error_to_envelope(request: Request, exc: DomainError):
    return fail(str(exc.detail), status_code=exc.status_code, meta={"kind": exc.kind, "errors": exc.errors})

@app.exception_handler(StarletteHTTPException)
async def http_exception_to_envelope(request: Request, exc: StarletteHTTPException):
    resp = fail(str(exc.detail) if exc.detail else exc.__class__.__name__, status_code=exc.status_code)
    if exc.headers:
        resp.headers.update(exc.headers)
    return resp

def _field_errors(exc: RequestValidationError) -> dict:
    """[{'loc': ('body', 'Cost'), 'msg': ...}] -> {'Cost': msg}"""
    out = {}
    for err in exc.errors():
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        out[".".join(loc) or "request"] = err.get("msg", "valor inválido")
    return out

@app.exception_handler(RequestValidationError)
async def validation_exception_to_envelope(request: Request, exc: RequestValidationError):
    return fail("Error de validación", status_code=422, meta={"kind": "validation_error", "errors": _field_errors(exc)})


# -----------------------------
# CORS (.env)
# -----------------------------
def _parse_origins(env_val: str | None):
    if not env_val or env_val.strip() == "*":
        return ["*"]
    try:
        parsed = json.loads(env_val)
        if isinstance(parsed, list):
            return [str(x) for x in parsed]
    except ValueError:
        pass
    return [s.strip() for s in env_val.split(",") if s.strip()]

ALLOWED_ORIGINS = _parse_origins(os.getenv("CORS_ALLOW_ORIGINS", "*"))
logger.info("CORS allow_origins = %s", ALLOWED_ORIGINS)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---- startup: crear las tablas que falten ----
@app.on_event("startup")
def _ensure_tables():
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("tables ready: %s", ", ".join(sorted(Base.metadata.tables)))

# ---- Salud ----
@app.get("/health")
def health():
    return ok({"service": SERVICE_NAME})

@app.get("/db-ping")
def db_ping(db: Session = Depends(get_db)):
    val = db.execute(text("SELECT 1")).scalar()
    return ok({"db": "ok", "select1": val})


# =========================
# Registro de routers
# =========================
for r in (
    auth_router,
    companies_router,
    representatives_router,
    category_router,
    machines_router,
    position_router,
    employees_router,
    requests_router,
    maintenances_router,
    payments_router,
    reports_router,
):
    app.include_router(r)
    logger.info(">>> %s routes registered", r.prefix)
