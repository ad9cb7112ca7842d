from datetime import date, timedelta

from app.models import ReservationLine, ServiceRequest, request_employee


def _machines(data):
    return sorted((ln["MachineID"], ln["Quantity"]) for ln in data["lines"])


def test_create_request_with_lines_and_employees(api, base):
    req = api.request(
        base["company"],
        lines=[(base["m1"], 2), (base["m2"], 1)],
        employees=[base["employee"]],
        Photos=["evidencias/sol-1/frente.jpg"],
    )
    assert req["Status_s"] == "pendiente"
    assert _machines(req) == sorted([(base["m1"], 2), (base["m2"], 1)])
    assert [e["EmployeeID"] for e in req["employees"]] == [base["employee"]]
    # sin MachineCount explícito: suma de cantidades
    assert req["MachineCount"] == 3
    assert req["Photos"] == ["evidencias/sol-1/frente.jpg"]

    r = api.get(f"/requests/{req['RequestID']}")
    assert r.status_code == 200
    assert len(r.json()["data"]["lines"]) == 2


def test_machine_count_supplied_is_kept(api, base):
    req = api.request(base["company"], lines=[(base["m1"], 1)], MachineCount=5)
    assert req["MachineCount"] == 5


def test_request_without_lines_counts_one(api, base):
    req = api.request(base["company"])
    assert req["lines"] == []
    assert req["MachineCount"] == 1


def test_unknown_machine_rejects_whole_request(api, base, db):
    r = api.post("/requests", {
        "CompanyID": base["company"], "Code": "SOL-BAD",
        "RequestDate": date.today().isoformat(), "ScheduledDate": date.today().isoformat(),
        "Description": "x",
        "MachineLines": [{"MachineID": base["m1"], "Quantity": 1}, {"MachineID": 9999, "Quantity": 1}],
        "EmployeeIDs": [base["employee"]],
    })
    assert r.status_code == 422
    assert "MachineLines.1.MachineID" in r.json()["meta"]["errors"]

    assert db.query(ServiceRequest).count() == 0
    assert db.query(ReservationLine).count() == 0
    assert db.query(request_employee).count() == 0


def test_duplicate_machine_in_lines(api, base):
    r = api.post("/requests", {
        "CompanyID": base["company"], "Code": "SOL-DUP",
        "RequestDate": date.today().isoformat(), "ScheduledDate": date.today().isoformat(),
        "Description": "x",
        "MachineLines": [{"MachineID": base["m1"], "Quantity": 1}, {"MachineID": base["m1"], "Quantity": 3}],
    })
    assert r.status_code == 422
    assert "MachineLines.1.MachineID" in r.json()["meta"]["errors"]


def test_quantity_below_one_rejected(api, base):
    r = api.post("/requests", {
        "CompanyID": base["company"], "Code": "SOL-Q0",
        "RequestDate": date.today().isoformat(), "ScheduledDate": date.today().isoformat(),
        "Description": "x",
        "MachineLines": [{"MachineID": base["m1"], "Quantity": 0}],
    })
    assert r.status_code == 422
    assert "MachineLines.0.Quantity" in r.json()["meta"]["errors"]


def test_unknown_company_and_employee(api, base):
    r = api.post("/requests", {
        "CompanyID": 404, "Code": "SOL-C", "RequestDate": date.today().isoformat(),
        "ScheduledDate": date.today().isoformat(), "Description": "x",
    })
    assert r.status_code == 422
    assert "CompanyID" in r.json()["meta"]["errors"]

    r = api.post("/requests", {
        "CompanyID": base["company"], "Code": "SOL-E", "RequestDate": date.today().isoformat(),
        "ScheduledDate": date.today().isoformat(), "Description": "x", "EmployeeIDs": [base["employee"], 555],
    })
    assert r.status_code == 422
    assert "EmployeeIDs" in r.json()["meta"]["errors"]


def test_scheduled_before_request_date(api, base):
    r = api.post("/requests", {
        "CompanyID": base["company"], "Code": "SOL-D",
        "RequestDate": date.today().isoformat(),
        "ScheduledDate": (date.today() - timedelta(days=1)).isoformat(),
        "Description": "x",
    })
    assert r.status_code == 422
    assert "ScheduledDate" in r.json()["meta"]["errors"]


def test_duplicate_code_conflict(api, base):
    api.request(base["company"], code="SOL-7")
    r = api.post("/requests", {
        "CompanyID": base["company"], "Code": "SOL-7",
        "RequestDate": date.today().isoformat(), "ScheduledDate": date.today().isoformat(),
        "Description": "x",
    })
    assert r.status_code == 409
    assert r.json()["meta"]["errors"] == {"Code": "ya existe"}


def test_update_replaces_lines_not_merges(api, base):
    heavy = base["heavy"]
    m3 = api.machine(heavy, name="Retro 2")["MachineID"]
    req = api.request(base["company"], lines=[(base["m1"], 1), (base["m2"], 1)])
    rid = req["RequestID"]

    r = api.put(f"/requests/{rid}", {"MachineLines": [
        {"MachineID": base["m2"], "Quantity": 4},
        {"MachineID": m3, "Quantity": 1},
    ]})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert _machines(data) == sorted([(base["m2"], 4), (m3, 1)])
    assert data["MachineCount"] == 5

    r = api.get(f"/requests/{rid}")
    assert _machines(r.json()["data"]) == sorted([(base["m2"], 4), (m3, 1)])


def test_replaced_lines_keep_maintenance_link(api, base):
    rid = api.request(base["company"], lines=[(base["m1"], 1)])["RequestID"]
    mid = api.maintenance(base["m1"], code="MANT-R", request_id=rid)["MaintenanceID"]
    assert api.get(f"/requests/{rid}").json()["data"]["lines"][0]["MaintenanceID"] == mid

    r = api.put(f"/requests/{rid}", {"MachineLines": [
        {"MachineID": base["m1"], "Quantity": 3},
        {"MachineID": base["m2"], "Quantity": 1},
    ]})
    assert r.status_code == 200, r.text
    links = {ln["MachineID"]: ln["MaintenanceID"] for ln in r.json()["data"]["lines"]}
    assert links == {base["m1"]: mid, base["m2"]: None}

    rows = {x["Code"]: x for x in api.get("/reports/requests-detailed").json()["data"]}
    codes = {ln["MachineID"]: ln["MaintenanceCode"] for ln in rows["SOL-1"]["lines"]}
    assert codes[base["m1"]] == "MANT-R"


def test_update_replaces_employees(api, base):
    other = api.employee(base["position"], document_no="2002", first="Luis", last="Mora")["EmployeeID"]
    req = api.request(base["company"], employees=[base["employee"]])

    r = api.put(f"/requests/{req['RequestID']}", {"EmployeeIDs": [other]})
    assert [e["EmployeeID"] for e in r.json()["data"]["employees"]] == [other]

    r = api.put(f"/requests/{req['RequestID']}", {"EmployeeIDs": []})
    assert r.json()["data"]["employees"] == []


def test_update_with_bad_line_changes_nothing(api, base):
    req = api.request(base["company"], lines=[(base["m1"], 1)])
    r = api.put(f"/requests/{req['RequestID']}", {
        "Description": "cambiada",
        "MachineLines": [{"MachineID": 31337, "Quantity": 1}],
    })
    assert r.status_code == 422
    data = api.get(f"/requests/{req['RequestID']}").json()["data"]
    assert data["Description"] == "Solicitud de prueba"
    assert _machines(data) == [(base["m1"], 1)]


def test_status_is_unguarded(api, base):
    rid = api.request(base["company"])["RequestID"]
    for status in ("completada", "pendiente", "rechazada", "aprobada"):
        r = api.put(f"/requests/{rid}", {"Status_s": status})
        assert r.status_code == 200
        assert r.json()["data"]["Status_s"] == status

    assert api.put(f"/requests/{rid}", {"Status_s": "cerrada"}).status_code == 422


def test_update_code_conflict(api, base):
    api.request(base["company"], code="SOL-A")
    rid = api.request(base["company"], code="SOL-B")["RequestID"]
    assert api.put(f"/requests/{rid}", {"Code": "SOL-A"}).status_code == 409
    assert api.put(f"/requests/{rid}", {"Code": "SOL-B"}).status_code == 200


def test_get_by_code_and_not_found(api, base):
    req = api.request(base["company"], code="SOL-XYZ")
    r = api.get("/requests/by-code/SOL-XYZ")
    assert r.json()["data"]["RequestID"] == req["RequestID"]
    assert api.get("/requests/by-code/NOPE").status_code == 404
    assert api.get("/requests/12345").status_code == 404
    assert api.put("/requests/12345", {"Description": "x"}).status_code == 404


def test_list_filters(api, base):
    a = api.request(base["company"], code="SOL-1")["RequestID"]
    api.request(base["company"], code="SOL-2")
    api.put(f"/requests/{a}", {"Status_s": "aprobada"})

    r = api.get("/requests", status_s="aprobada")
    assert [x["RequestID"] for x in r.json()["data"]] == [a]
    assert r.json()["meta"]["count"] == 1
    assert len(api.get("/requests", company_id=base["company"]).json()["data"]) == 2


def test_delete_request_cascades_lines_keeps_maintenance(api, base, db):
    req = api.request(base["company"], lines=[(base["m1"], 1)], employees=[base["employee"]])
    rid = req["RequestID"]
    maint = api.maintenance(base["m1"], request_id=rid)

    assert api.delete(f"/requests/{rid}").status_code == 200
    assert api.get(f"/requests/{rid}").status_code == 404
    assert db.query(ReservationLine).count() == 0
    assert db.query(request_employee).count() == 0

    r = api.get(f"/maintenances/{maint['MaintenanceID']}")
    assert r.status_code == 200
    assert r.json()["data"]["RequestID"] is None
    # el empleado asignado sigue existiendo
    assert api.get(f"/employees/{base['employee']}").status_code == 200


def test_duplicate_code_caught_by_unique_index(api, base, monkeypatch):
    from app.services import request_service
    # sin el pre-chequeo, el índice único de la tabla es el que responde
    monkeypatch.setattr(request_service, "ensure_unique", lambda *a, **kw: None)
    api.request(base["company"], code="CHECKLIST-01")
    r = api.post("/requests", {
        "CompanyID": base["company"], "Code": "CHECKLIST-01",
        "RequestDate": date.today().isoformat(), "ScheduledDate": date.today().isoformat(),
        "Description": "x",
    })
    assert r.status_code == 409


def test_blank_code_rejected(api, base):
    r = api.post("/requests", {
        "CompanyID": base["company"], "Code": "   ",
        "RequestDate": date.today().isoformat(), "ScheduledDate": date.today().isoformat(),
        "Description": "x",
    })
    assert r.status_code == 422
    assert "Code" in r.json()["meta"]["errors"]

    rid = api.request(base["company"], code=" SOL-9 ")["RequestID"]
    assert api.get(f"/requests/{rid}").json()["data"]["Code"] == "SOL-9"
    r = api.put(f"/requests/{rid}", {"Description": "  "})
    assert r.status_code == 422
