"""
Datos de demostración (idempotente): se puede correr varias veces.

    cd backend && python -m app.scripts.seed
"""
from contextlib import contextmanager
from datetime import date, timedelta
from decimal import Decimal
import logging

from sqlalchemy import select

from app.core.db import SessionLocal, engine, Base
from app.models import (
    Company, Representative, MachineCategory, Machine, Position, Employee,
    ServiceRequest, ReservationLine, Maintenance, Payment,
)

logger = logging.getLogger(__name__)

# ---------- helpers ----------

@contextmanager
def session_scope():
    """Sesión de un solo uso (rollback si algo falla)."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def get_one(db, model, **by):
    return db.execute(select(model).filter_by(**by)).scalars().first()

def get_or_create(db, model, unique_by: dict, defaults: dict | None = None):
    """Busca por unique_by; si no existe lo crea. El commit lo hace quien llama."""
    inst = get_one(db, model, **unique_by)
    if inst:
        return inst, False
    inst = model(**{**unique_by, **(defaults or {})})
    db.add(inst)
    db.flush()  # ids para los registros que dependen de este
    return inst, True

# ---------- datos semilla ----------

CATEGORIES = [
    {"Kind": "pesada", "Description": "Maquinaria pesada de movimiento de tierra"},
    {"Kind": "ligera", "Description": "Equipos livianos y herramientas"},
]

COMPANY = {"TaxID": "900123456-7", "Name": "Constructora Andina", "Address": "Calle 10 # 5-20",
           "City": "Bogotá", "Phone": "6015550101"}

REPRESENTATIVE = {"FullName": "Laura Gómez", "DocumentNo": "1020304050", "Phone": "3005550101",
                  "Email": "laura.gomez@andina.com.co"}

POSITION = {"Name": "Empleado de mantenimiento", "Description": "Atiende solicitudes en campo"}

EMPLOYEE = {"DocumentNo": "79111222", "FirstName": "Carlos", "LastName": "Ruiz",
            "Phone": "3105550101", "Email": "carlos.ruiz@clubmaquinaria.co"}

REQUEST_CODE = "SOL-0001"
MAINTENANCE_CODE = "MANT-0001"
PAYMENT_CODE = "PAG-0001"


def run() -> dict:
    """Devuelve cuántos registros se crearon por entidad en esta corrida."""
    Base.metadata.create_all(bind=engine, checkfirst=True)
    created = {}

    def track(name, pair):
        inst, was_created = pair
        created[name] = created.get(name, 0) + int(was_created)
        return inst

    with session_scope() as db:
        logger.info("seeding catalog / directory")
        cats = {c["Kind"]: track("MachineCategory", get_or_create(db, MachineCategory, {"Kind": c["Kind"]}, c))
                for c in CATEGORIES}
        company = track("Company", get_or_create(db, Company, {"TaxID": COMPANY["TaxID"]}, COMPANY))
        track("Representative", get_or_create(
            db, Representative, {"DocumentNo": REPRESENTATIVE["DocumentNo"]},
            {**REPRESENTATIVE, "CompanyID": company.CompanyID},
        ))
        track("Machine", get_or_create(
            db, Machine, {"Name": "Retroexcavadora CAT 416F"},
            {"MachineType": "Retroexcavadora", "CategoryID": cats["pesada"].CategoryID,
             "CompanyID": company.CompanyID},
        ))
        position = track("Position", get_or_create(db, Position, {"Name": POSITION["Name"]}, POSITION))
        track("Employee", get_or_create(
            db, Employee, {"DocumentNo": EMPLOYEE["DocumentNo"]},
            {**EMPLOYEE, "PositionID": position.PositionID},
        ))

    with session_scope() as db:
        logger.info("seeding request / maintenance / payment")
        company = get_one(db, Company, TaxID=COMPANY["TaxID"])
        machine = get_one(db, Machine, Name="Retroexcavadora CAT 416F")
        employee = get_one(db, Employee, DocumentNo=EMPLOYEE["DocumentNo"])

        req = get_one(db, ServiceRequest, Code=REQUEST_CODE)
        created["ServiceRequest"] = 0
        if req is None:
            today = date.today()
            req = ServiceRequest(
                Code=REQUEST_CODE,
                RequestDate=today,
                ScheduledDate=today + timedelta(days=3),
                Description="Revisión general antes de obra",
                MachineCount=1,
                Photos=[],
                CompanyID=company.CompanyID,
            )
            req.lines.append(ReservationLine(MachineID=machine.MachineID, Quantity=1))
            req.employees.append(employee)
            db.add(req)
            db.flush()
            created["ServiceRequest"] = 1

        m = track("Maintenance", get_or_create(
            db, Maintenance, {"Code": MAINTENANCE_CODE},
            {"Name": "Mantenimiento preventivo", "Description": "Cambio de aceite y filtros",
             "Cost": Decimal("1500000.00"), "EstimatedHours": 24,
             "DeliveryDate": date.today() + timedelta(days=7),
             "MachineID": machine.MachineID, "RequestID": req.RequestID},
        ))
        for line in req.lines:
            if line.MachineID == machine.MachineID and line.MaintenanceID is None:
                line.MaintenanceID = m.MaintenanceID

        track("Payment", get_or_create(
            db, Payment, {"Code": PAYMENT_CODE},
            {"PaymentDate": date.today(), "Amount": Decimal("1500000.00"), "Method": "transferencia",
             "Status_s": "pendiente", "MaintenanceID": m.MaintenanceID, "CompanyID": company.CompanyID},
        ))

    logger.info("seed done: %s", created)
    return created


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run()
