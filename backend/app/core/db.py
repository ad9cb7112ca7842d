# backend/app/core/db.py
import os
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.engine import make_url
from sqlalchemy.pool import StaticPool
from dotenv import load_dotenv, find_dotenv

# Proyecto (backend/) y ruta del .env
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
DEFAULT_DOTENV = os.path.join(BASE_DIR, ".env")

# Cargar el .env sin pisar variables ya definidas (CI, tests)
dotenv_path = DEFAULT_DOTENV if os.path.exists(DEFAULT_DOTENV) else find_dotenv(filename=".env", usecwd=True)
if dotenv_path:
    load_dotenv(dotenv_path, encoding="utf-8-sig", override=False)

DSN = os.environ.get("DATABASE_URL") or os.environ.get("MSSQL_DSN")
if not DSN or not DSN.strip():
    raise RuntimeError(f"DATABASE_URL / MSSQL_DSN no definido. .env: {dotenv_path or '(no encontrado)'}")

url = make_url(DSN)
engine_kwargs = dict(pool_pre_ping=True)

backend = url.get_backend_name()  # ej: 'sqlite', 'mssql', 'postgresql'
if backend.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if not url.database or url.database == ":memory:":
        # una sola conexión compartida, si no cada sesión vería una base vacía
        engine_kwargs["poolclass"] = StaticPool
elif backend.startswith("mssql"):
    engine_kwargs.update(pool_size=5, max_overflow=10, fast_executemany=True)

engine = create_engine(DSN, **engine_kwargs)

if backend.startswith("sqlite"):
    @event.listens_for(engine, "connect")
    def _sqlite_fk_on(dbapi_conn, _record):
        # SQLite ignora ON DELETE y las FK si no se activa por conexión
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
