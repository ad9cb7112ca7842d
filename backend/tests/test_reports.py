import pytest


@pytest.fixture
def scenario(api):
    """
    Empresa con representante, retroexcavadora pesada, solicitud R1 con la
    máquina reservada (cantidad 2), mantenimiento de 1.500.000 y su pago.
    """
    c1 = api.company(tax_id="900-1", name="Constructora Andina")["CompanyID"]
    c2 = api.company(tax_id="900-2", name="Vías del Sur")["CompanyID"]
    api.create("/representatives", {
        "FullName": "Laura Gómez", "DocumentNo": "52000111", "Phone": "300",
        "Email": "laura@andina.com.co", "CompanyID": c1,
    })
    rep2 = api.create("/representatives", {
        "FullName": "Pedro Díaz", "DocumentNo": "52000222", "Phone": "301",
        "Email": "pedro@vias.com.co", "CompanyID": c2,
    })["RepresentativeID"]

    heavy = api.category("pesada")["CategoryID"]
    light = api.category("ligera")["CategoryID"]
    retro = api.machine(heavy, name="Retro CAT 416F", machine_type="Retroexcavadora", company_id=c1)["MachineID"]
    plate = api.machine(light, name="Compactadora", machine_type="Compactadora")["MachineID"]

    pos = api.position("Empleado de campo")["PositionID"]
    emp = api.employee(pos, document_no="79111222", first="Carlos", last="Ruiz")["EmployeeID"]

    r1 = api.request(c1, code="R1", lines=[(retro, 2)], employees=[emp])["RequestID"]
    r2 = api.request(c1, code="R2", lines=[(plate, 1)])["RequestID"]

    m1 = api.maintenance(retro, code="M1", cost="1500000", request_id=r1)["MaintenanceID"]
    t1 = api.payment(m1, c1, code="T1", amount="1500000", method="transferencia")["PaymentID"]
    return {
        "c1": c1, "c2": c2, "rep2": rep2, "heavy": heavy, "light": light,
        "retro": retro, "plate": plate, "emp": emp,
        "r1": r1, "r2": r2, "m1": m1, "t1": t1,
    }


def test_payment_visible_in_company_listing(api, scenario):
    p = api.get(f"/payments/{scenario['t1']}").json()["data"]
    assert p["Amount"] == 1500000.0
    assert p["Status_s"] == "pendiente"
    assert p["Method"] == "transferencia"
    assert [x["PaymentID"] for x in api.get("/payments", company_id=scenario["c1"]).json()["data"]] == [scenario["t1"]]


def test_total_machines_by_company_name(api, scenario):
    r = api.get("/reports/total-machines-by-company/constructora andina")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["TotalMachines"] == 3
    assert data["RequestCount"] == 2

    r = api.get("/reports/total-machines-by-company/Vías del Sur")
    assert r.json()["data"]["TotalMachines"] == 0

    r = api.get("/reports/total-machines-by-company/No Existe")
    assert r.status_code == 404


def test_companies_and_representatives_without_requests(api, scenario):
    rows = api.get("/reports/companies-without-requests").json()["data"]
    assert [c["CompanyID"] for c in rows] == [scenario["c2"]]
    assert rows[0]["representative"]["FullName"] == "Pedro Díaz"

    rows = api.get("/reports/representatives-without-requests").json()["data"]
    assert [r["RepresentativeID"] for r in rows] == [scenario["rep2"]]
    assert rows[0]["CompanyName"] == "Vías del Sur"


def test_company_with_most_requests(api, scenario):
    data = api.get("/reports/company-with-most-requests").json()["data"]
    assert data == {"CompanyID": scenario["c1"], "Name": "Constructora Andina", "RequestCount": 2}


def test_company_with_most_requests_empty(client):
    r = client.get("/reports/company-with-most-requests")
    assert r.status_code == 200
    assert r.json()["data"] is None


def test_requests_by_employee(api, scenario):
    rows = api.get("/reports/requests-by-employee/79111222").json()["data"]
    assert [r["Code"] for r in rows] == ["R1"]
    assert api.get("/reports/requests-by-employee/000").status_code == 404


def test_requests_without_maintenance(api, scenario):
    rows = api.get("/reports/requests-without-maintenance").json()["data"]
    assert [r["Code"] for r in rows] == ["R2"]


def test_requests_detailed(api, scenario):
    rows = {r["Code"]: r for r in api.get("/reports/requests-detailed").json()["data"]}
    r1 = rows["R1"]
    assert r1["Company"]["Name"] == "Constructora Andina"
    assert r1["TotalQuantity"] == 2
    assert r1["lines"] == [{
        "MachineID": scenario["retro"], "MachineName": "Retro CAT 416F", "MachineType": "Retroexcavadora",
        "Quantity": 2, "MaintenanceCode": "M1",
    }]
    assert r1["employees"][0]["FullName"] == "Carlos Ruiz"
    assert rows["R2"]["lines"][0]["MaintenanceCode"] is None


def test_maintenance_count_by_machine_type(api, scenario):
    data = api.get("/reports/maintenance-count-by-machine-type").json()["data"]
    assert data["count"] == 1
    assert data["machine_type"] == "retroexcavadora"

    data = api.get("/reports/maintenance-count-by-machine-type", category_id=scenario["light"]).json()["data"]
    assert data["count"] == 0


def test_high_cost_heavy_maintenance(api, scenario):
    # ligera y cara: fuera; pesada con costo igual al umbral: fuera
    api.maintenance(scenario["plate"], code="M-LIGHT", cost="2000000")
    api.maintenance(scenario["retro"], code="M-EDGE", cost="1000000")
    api.maintenance(scenario["retro"], code="M-TOP", cost="3000000.50")

    r = api.get("/reports/high-cost-heavy-maintenance", threshold=1000000)
    assert r.status_code == 200
    body = r.json()
    assert [m["Code"] for m in body["data"]] == ["M-TOP", "M1"]
    assert body["meta"]["total_cost"] == 4500000.5
    assert body["meta"]["count"] == 2

    r = api.get("/reports/high-cost-heavy-maintenance", threshold=2000000)
    assert [m["Code"] for m in r.json()["data"]] == ["M-TOP"]


def test_delete_request_keeps_maintenance_and_payment(api, scenario):
    assert api.delete(f"/requests/{scenario['r1']}").status_code == 200

    m = api.get(f"/maintenances/{scenario['m1']}")
    assert m.status_code == 200
    assert m.json()["data"]["RequestID"] is None
    assert api.get(f"/payments/{scenario['t1']}").status_code == 200

    r = api.get("/reports/total-machines-by-company/Constructora Andina")
    assert r.json()["data"]["TotalMachines"] == 1
