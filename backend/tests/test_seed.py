from app.models import Company, Maintenance, Payment, ReservationLine, ServiceRequest
from app.scripts.seed import run


def test_seed_is_idempotent(db):
    first = run()
    assert all(v >= 1 for v in first.values())

    second = run()
    assert set(second) == set(first)
    assert all(v == 0 for v in second.values())

    assert db.query(Company).count() == 1
    assert db.query(ServiceRequest).count() == 1
    assert db.query(Payment).count() == 1
    line = db.query(ReservationLine).one()
    assert line.MaintenanceID == db.query(Maintenance).one().MaintenanceID


def test_seeded_data_feeds_reports(client):
    run()
    r = client.get("/reports/high-cost-heavy-maintenance")
    assert [m["Code"] for m in r.json()["data"]] == ["MANT-0001"]
    r = client.get("/reports/total-machines-by-company/constructora andina")
    assert r.json()["data"]["TotalMachines"] == 1
