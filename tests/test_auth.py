from lensmatch.config import settings
from lensmatch.core.security import create_access_token
from lensmatch.models.user import User


def test_register_login_and_fetch_user(client):
    r = client.post(
        "/api/auth/register",
        json={"email": "meera@example.com", "password": "s3cret-pass", "first_name": "Meera"},
    )
    assert r.status_code == 201
    assert r.json()["role"] == "customer"

    r = client.post("/api/auth/login", json={"email": "meera@example.com", "password": "s3cret-pass"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    me = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"}).json()
    assert me["email"] == "meera@example.com"
    assert me["first_name"] == "Meera"


def test_duplicate_email_is_rejected(client, make_user):
    u = make_user()
    r = client.post("/api/auth/register", json={"email": u.email, "password": "password123"})
    assert r.status_code == 400


def test_short_password_is_rejected(client):
    r = client.post("/api/auth/register", json={"email": "a@example.com", "password": "short"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid data provided"
    assert r.json()["errors"]


def test_wrong_password(client, make_user):
    u = make_user()
    r = client.post("/api/auth/login", json={"email": u.email, "password": "not-the-password"})
    assert r.status_code == 401


def test_allow_listed_signup_becomes_admin(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_EMAILS", "chief@example.com")
    r = client.post("/api/auth/register", json={"email": "chief@example.com", "password": "password123"})
    assert r.json()["role"] == "admin"


def test_token_for_unknown_email_creates_user(client, db):
    token = create_access_token(sub="newcomer@example.com", given_name="New", family_name="Comer")
    r = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["role"] == "customer"
    user = db.query(User).filter(User.email == "newcomer@example.com").one()
    assert user.password_hash is None
    assert user.first_name == "New"


def test_garbage_token_is_401(client):
    r = client.get("/api/auth/user", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401


def test_inactive_user_is_401(client, db, make_user, headers):
    u = make_user()
    u.is_active = False
    db.commit()
    assert client.get("/api/auth/user", headers=headers(u)).status_code == 401


def test_email_case_does_not_split_accounts(client):
    r = client.post("/api/auth/register", json={"email": "Alice@Example.com", "password": "password123"})
    assert r.status_code == 201
    assert r.json()["email"] == "alice@example.com"

    again = client.post("/api/auth/register", json={"email": "alice@example.com", "password": "password123"})
    assert again.status_code == 400

    r = client.post("/api/auth/login", json={"email": "ALICE@example.com", "password": "password123"})
    assert r.status_code == 200


def test_token_lookup_ignores_case(client, db, make_user):
    u = make_user(email="bob@example.com")
    token = create_access_token(sub="Bob@Example.com")
    r = client.get("/api/auth/user", headers={"Authorization": f"Bearer {token}"})
    assert r.json()["id"] == u.id
    assert db.query(User).count() == 1


def test_invalid_token_carries_bearer_challenge(client):
    r = client.get("/api/auth/user", headers={"Authorization": "Bearer nope"})
    assert r.status_code == 401
    assert r.headers["www-authenticate"] == "Bearer"
