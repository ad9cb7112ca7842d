def test_register_login_me(client):
    r = client.post("/auth/register", json={
        "username": "carlos", "password": "clave-segura", "email": "Carlos@Club.com.co", "role": "admin",
    })
    assert r.status_code == 201, r.text
    user = r.json()
    assert user["Username"] == "carlos"
    assert user["Email"] == "carlos@club.com.co"
    assert user["Role"] == "admin"

    r = client.post("/auth/login", data={"username": "carlos", "password": "clave-segura"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["Username"] == "carlos"


def test_register_duplicate_username_conflict(client):
    body = {"username": "ana", "password": "clave-segura"}
    assert client.post("/auth/register", json=body).status_code == 201
    r = client.post("/auth/register", json=body)
    assert r.status_code == 409
    assert r.json()["meta"]["errors"] == {"username": "ya existe"}


def test_register_rejects_unknown_role(client):
    r = client.post("/auth/register", json={"username": "ana", "password": "clave-segura", "role": "root"})
    assert r.status_code == 422


def test_login_wrong_password(client):
    client.post("/auth/register", json={"username": "ana", "password": "clave-segura"})
    r = client.post("/auth/login", data={"username": "ana", "password": "otra-clave"})
    assert r.status_code == 401
    assert r.headers.get("www-authenticate") == "Bearer"


def test_mutations_require_token(client):
    r = client.post("/companies", json={
        "TaxID": "1", "Name": "X", "Address": "a", "City": "b", "Phone": "c",
    })
    assert r.status_code == 401
    assert r.json()["ok"] is False

    assert client.delete("/requests/1").status_code == 401
    assert client.put("/payments/1", json={}).status_code == 401


def test_bad_bearer_token(client, auth):
    r = client.get("/auth/me", headers={"Authorization": "Bearer no-es-un-jwt"})
    assert r.status_code == 401

    r = client.get("/auth/me", headers={"Authorization": auth["Authorization"].replace("Bearer", "Basic")})
    assert r.status_code == 401


def test_reads_are_open(client):
    r = client.get("/companies")
    assert r.status_code == 200
    assert r.json()["data"] == []
