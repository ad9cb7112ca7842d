from datetime import date, timedelta

import pytest

from app.models import Maintenance
from app.services.maintenance_service import maintenance_statistics


def _body(machine_id, **over):
    body = {
        "Code": "MANT-T", "Name": "Correctivo", "Description": "Cambio de bomba hidráulica",
        "Cost": "250000.00", "EstimatedHours": 8,
        "DeliveryDate": (date.today() + timedelta(days=3)).isoformat(),
        "MachineID": machine_id,
    }
    body.update(over)
    return body


@pytest.mark.parametrize("hours", [0, 721])
def test_estimated_hours_out_of_range(api, base, hours):
    r = api.post("/maintenances", _body(base["m1"], EstimatedHours=hours))
    assert r.status_code == 422
    assert "EstimatedHours" in r.json()["meta"]["errors"]


@pytest.mark.parametrize("hours", [1, 720])
def test_estimated_hours_bounds_accepted(api, base, hours):
    r = api.post("/maintenances", _body(base["m1"], Code=f"MANT-{hours}", EstimatedHours=hours))
    assert r.status_code == 201
    assert r.json()["data"]["EstimatedHours"] == hours


def test_cost_rules(api, base):
    r = api.post("/maintenances", _body(base["m1"], Cost="-1"))
    assert r.status_code == 422
    assert "Cost" in r.json()["meta"]["errors"]

    r = api.post("/maintenances", _body(base["m1"], Code="MANT-0", Cost="0"))
    assert r.status_code == 201
    assert r.json()["data"]["Cost"] == 0

    # 2 decimales, redondeo half-up
    r = api.post("/maintenances", _body(base["m1"], Code="MANT-R", Cost="10.005"))
    assert r.json()["data"]["Cost"] == 10.01


def test_delivery_date_not_in_past_on_create(api, base):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    r = api.post("/maintenances", _body(base["m1"], DeliveryDate=yesterday))
    assert r.status_code == 422
    assert "DeliveryDate" in r.json()["meta"]["errors"]

    mid = api.maintenance(base["m1"])["MaintenanceID"]
    # al editar no se compara con hoy
    r = api.put(f"/maintenances/{mid}", {"DeliveryDate": yesterday})
    assert r.status_code == 200


def test_unknown_machine_or_request(api, base):
    r = api.post("/maintenances", _body(999))
    assert r.status_code == 422
    assert "MachineID" in r.json()["meta"]["errors"]

    r = api.post("/maintenances", _body(base["m1"], RequestID=999))
    assert r.status_code == 422
    assert "RequestID" in r.json()["meta"]["errors"]


def test_duplicate_code(api, base):
    api.maintenance(base["m1"], code="MANT-D")
    r = api.post("/maintenances", _body(base["m1"], Code="MANT-D"))
    assert r.status_code == 409


def test_create_links_reservation_line(api, base):
    req = api.request(base["company"], lines=[(base["m1"], 1), (base["m2"], 1)])
    m = api.maintenance(base["m1"], request_id=req["RequestID"])

    lines = {ln["MachineID"]: ln["MaintenanceID"] for ln in api.get(f"/requests/{req['RequestID']}").json()["data"]["lines"]}
    assert lines == {base["m1"]: m["MaintenanceID"], base["m2"]: None}


def test_create_for_machine_outside_request_links_nothing(api, base):
    req = api.request(base["company"], lines=[(base["m2"], 1)])
    m = api.maintenance(base["m1"], request_id=req["RequestID"])
    assert m["RequestID"] == req["RequestID"]
    lines = api.get(f"/requests/{req['RequestID']}").json()["data"]["lines"]
    assert [ln["MaintenanceID"] for ln in lines] == [None]


def test_update_rewires_line_backreference(api, base):
    r1 = api.request(base["company"], code="SOL-1", lines=[(base["m1"], 1)])["RequestID"]
    r2 = api.request(base["company"], code="SOL-2", lines=[(base["m1"], 1)])["RequestID"]
    mid = api.maintenance(base["m1"], request_id=r1)["MaintenanceID"]

    r = api.put(f"/maintenances/{mid}", {"RequestID": r2})
    assert r.status_code == 200
    assert r.json()["data"]["RequestID"] == r2
    assert api.get(f"/requests/{r1}").json()["data"]["lines"][0]["MaintenanceID"] is None
    assert api.get(f"/requests/{r2}").json()["data"]["lines"][0]["MaintenanceID"] == mid

    # null explícito desvincula
    r = api.put(f"/maintenances/{mid}", {"RequestID": None})
    assert r.json()["data"]["RequestID"] is None
    assert api.get(f"/requests/{r2}").json()["data"]["lines"][0]["MaintenanceID"] is None


def test_update_field_rules(api, base):
    mid = api.maintenance(base["m1"])["MaintenanceID"]
    assert api.put(f"/maintenances/{mid}", {"EstimatedHours": 721}).status_code == 422
    assert api.put(f"/maintenances/{mid}", {"Cost": "-5"}).status_code == 422
    assert api.put(f"/maintenances/{mid}", {"MachineID": None}).status_code == 422
    r = api.put(f"/maintenances/{mid}", {"Cost": "99.999", "ProcedureManual": "Manual CAT 416F"})
    assert r.json()["data"]["Cost"] == 100.0
    assert r.json()["data"]["ProcedureManual"] == "Manual CAT 416F"


def test_delete_cascades_payments_and_clears_line(api, base):
    req = api.request(base["company"], lines=[(base["m1"], 1)])
    mid = api.maintenance(base["m1"], request_id=req["RequestID"])["MaintenanceID"]
    pid = api.payment(mid, base["company"])["PaymentID"]

    assert api.delete(f"/maintenances/{mid}").status_code == 200
    assert api.get(f"/maintenances/{mid}").status_code == 404
    assert api.get(f"/payments/{pid}").status_code == 404
    line = api.get(f"/requests/{req['RequestID']}").json()["data"]["lines"][0]
    assert line["MaintenanceID"] is None


def test_list_between_and_search(api, base):
    today = date.today()
    for i, (code, name) in enumerate([("MANT-A", "Preventivo motor"), ("MANT-B", "Cambio de llantas"), ("MANT-C", "Motor diésel")]):
        api.create("/maintenances", _body(
            base["m1"], Code=code, Name=name, DeliveryDate=(today + timedelta(days=i * 10)).isoformat(),
        ))

    codes = [m["Code"] for m in api.get("/maintenances").json()["data"]]
    assert codes == ["MANT-C", "MANT-B", "MANT-A"]

    r = api.get("/maintenances/between", start=today.isoformat(), end=(today + timedelta(days=10)).isoformat())
    assert [m["Code"] for m in r.json()["data"]] == ["MANT-A", "MANT-B"]

    r = api.get("/maintenances/between", start=(today + timedelta(days=5)).isoformat(), end=today.isoformat())
    assert r.status_code == 422

    r = api.get("/maintenances/search", term="motor")
    assert sorted(m["Code"] for m in r.json()["data"]) == ["MANT-A", "MANT-C"]

    r = api.get("/maintenances/search", term="m")
    assert r.status_code == 422


def test_statistics(api, base, db):
    assert api.get("/maintenances/statistics").json()["data"]["total"] == 0

    api.maintenance(base["m1"], code="M1", cost="100.00")
    api.maintenance(base["m1"], code="M2", cost="300.00")
    # ya entregado: se mueve la fecha en la base para no pasar por la regla de "hoy"
    m = db.query(Maintenance).filter_by(Code="M1").one()
    m.DeliveryDate = date.today() - timedelta(days=2)
    db.commit()

    stats = api.get("/maintenances/statistics").json()["data"]
    assert stats == {
        "total": 2,
        "delivered": 1,
        "pending": 1,
        "total_cost": 400.0,
        "average_cost": 200.0,
        "delivered_pct": 50.0,
    }
    assert maintenance_statistics(db, today=date.today() + timedelta(days=30))["delivered"] == 2
