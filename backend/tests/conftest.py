import os
from datetime import date, timedelta

# SQLite en memoria para los tests -> ANTES de importar app.core.db
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient

from app.core.db import Base, engine, SessionLocal
from app.main import app

TODAY = date.today()


def days(n: int) -> str:
    return (TODAY + timedelta(days=n)).isoformat()


@pytest.fixture(autouse=True)
def _schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth(client):
    """Cabecera Bearer de un usuario recién registrado."""
    r = client.post("/auth/register", json={"username": "operador", "password": "secreto123"})
    assert r.status_code == 201, r.text
    r = client.post("/auth/login", data={"username": "operador", "password": "secreto123"})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


class Api:
    """TestClient con token y atajos para crear registros."""

    def __init__(self, client: TestClient, headers: dict):
        self.client = client
        self.headers = headers

    def get(self, path, **params):
        return self.client.get(path, params=params)

    def post(self, path, json):
        return self.client.post(path, json=json, headers=self.headers)

    def put(self, path, json):
        return self.client.put(path, json=json, headers=self.headers)

    def delete(self, path, **params):
        return self.client.delete(path, params=params, headers=self.headers)

    def create(self, path, json) -> dict:
        r = self.post(path, json)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    # ---- atajos ----
    def company(self, tax_id="900000001-1", name="Constructora Andina", **extra):
        return self.create("/companies", {
            "TaxID": tax_id, "Name": name, "Address": "Calle 1", "City": "Bogotá",
            "Phone": "6010000000", **extra,
        })

    def category(self, kind="pesada"):
        return self.create("/machine-categories", {"Kind": kind, "Description": f"Categoría {kind}"})

    def machine(self, category_id, name="Retro 1", machine_type="Retroexcavadora", company_id=None):
        return self.create("/machines", {
            "MachineType": machine_type, "Name": name, "CategoryID": category_id, "CompanyID": company_id,
        })

    def position(self, name="Empleado de campo"):
        return self.create("/positions", {"Name": name, "Description": "cargo"})

    def employee(self, position_id, document_no="1001", first="Ana", last="Pérez"):
        return self.create("/employees", {
            "DocumentNo": document_no, "FirstName": first, "LastName": last,
            "Phone": "3000000000", "PositionID": position_id,
        })

    def request(self, company_id, code="SOL-1", lines=(), employees=(), **extra):
        return self.create("/requests", {
            "CompanyID": company_id, "Code": code,
            "RequestDate": days(0), "ScheduledDate": days(2),
            "Description": "Solicitud de prueba",
            "MachineLines": [{"MachineID": m, "Quantity": q} for m, q in lines],
            "EmployeeIDs": list(employees),
            **extra,
        })

    def maintenance(self, machine_id, code="MANT-1", cost="1500000.00", hours=24, request_id=None, **extra):
        return self.create("/maintenances", {
            "Code": code, "Name": "Preventivo", "Description": "Cambio de aceite",
            "Cost": cost, "EstimatedHours": hours, "DeliveryDate": days(7),
            "MachineID": machine_id, "RequestID": request_id, **extra,
        })

    def payment(self, maintenance_id, company_id, code="PAG-1", amount="1500000.00", method="transferencia", **extra):
        return self.create("/payments", {
            "Code": code, "PaymentDate": days(0), "Amount": amount, "Method": method,
            "MaintenanceID": maintenance_id, "CompanyID": company_id, **extra,
        })


@pytest.fixture
def api(client, auth):
    return Api(client, auth)


@pytest.fixture
def base(api):
    """Empresa, categoría pesada, dos máquinas y un empleado."""
    company = api.company()
    heavy = api.category("pesada")
    m1 = api.machine(heavy["CategoryID"], name="Retro 1", company_id=company["CompanyID"])
    m2 = api.machine(heavy["CategoryID"], name="Excavadora 1", machine_type="Excavadora")
    pos = api.position()
    emp = api.employee(pos["PositionID"])
    return {
        "company": company["CompanyID"],
        "heavy": heavy["CategoryID"],
        "m1": m1["MachineID"],
        "m2": m2["MachineID"],
        "position": pos["PositionID"],
        "employee": emp["EmployeeID"],
    }
