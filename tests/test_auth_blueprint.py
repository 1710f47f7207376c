# tests/test_auth_blueprint.py
# -*- coding: utf-8 -*-
from datetime import datetime, timedelta, timezone

import jwt

from polyhomes_app.extensions import db
from polyhomes_app.models import User

from conftest import bearer


def _register(client, **over):
    data = {"name": "Jane", "email": "jane@x.com", "password": "pw123", "phone": "0712345678"}
    data.update(over)
    return client.post("/api/register", json=data)


# -------------------------------------------------------------------
# /api/register
# -------------------------------------------------------------------
def test_register_creates_user_with_hashed_password(app, client):
    r = _register(client)
    assert r.status_code == 201
    body = r.get_json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["role"] == "user"
    assert body["user"]["email"] == "jane@x.com"

    with app.app_context():
        u = User.query.filter_by(email="jane@x.com").first()
        assert u is not None
        assert u.password_hash != "pw123"
        assert u.password_hash.startswith("$2")
        assert u.check_password("pw123")
        assert u.phone == "0712345678"


def test_register_duplicate_email(client):
    assert _register(client).status_code == 201
    r = _register(client, email="JANE@x.com ")
    assert r.status_code == 409
    assert r.get_json()["error"] == "User already exists"


def test_register_concurrent_duplicate_hits_unique_constraint(app, client, monkeypatch):
    assert _register(client).status_code == 201

    # simula a corrida: a checagem prévia não enxerga o cadastro já gravado
    class _NoMatch:
        def filter_by(self, **kw):
            return self

        def first(self):
            return None

    with app.app_context():
        monkeypatch.setattr(User, "query", _NoMatch())
    r = _register(client)
    monkeypatch.undo()

    assert r.status_code == 409
    assert r.get_json()["error"] == "User already exists"
    with app.app_context():
        assert User.query.filter_by(email="jane@x.com").count() == 1


def test_register_missing_fields(client):
    r = client.post("/api/register", json={"email": "", "password": ""})
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_bcrypt_work_factor_default_is_12():
    from config import Config
    assert Config.BCRYPT_LOG_ROUNDS == 12


def test_jwt_secret_long_enough_for_hs256(app):
    from config import Config
    assert len(Config.JWT_SECRET.encode()) >= 32
    assert len(app.config["JWT_SECRET"].encode()) >= 32


# -------------------------------------------------------------------
# /api/login
# -------------------------------------------------------------------
def test_login_success_returns_token_with_claims(app, client):
    _register(client)
    r = client.post("/api/login", json={"email": "jane@x.com", "password": "pw123"})
    assert r.status_code == 200
    token = r.get_json()["token"]
    claims = jwt.decode(token, app.config["JWT_SECRET"], algorithms=["HS256"])
    assert claims["email"] == "jane@x.com"
    assert claims["role"] == "user"
    assert isinstance(claims["userId"], int)
    # 7 dias de validade
    assert claims["exp"] - claims["iat"] == 7 * 24 * 3600


def test_login_wrong_password_and_unknown_email_look_the_same(client):
    _register(client)
    r1 = client.post("/api/login", json={"email": "jane@x.com", "password": "nope"})
    r2 = client.post("/api/login", json={"email": "ghost@x.com", "password": "pw123"})
    assert r1.status_code == r2.status_code == 401
    assert r1.get_json() == r2.get_json() == {"error": "Invalid credentials"}


# -------------------------------------------------------------------
# /api/profile e /api/verify-token
# -------------------------------------------------------------------
def test_profile_hides_password(client, user_headers):
    r = client.get("/api/profile", headers=user_headers)
    assert r.status_code == 200
    body = r.get_json()
    assert body["email"] == "jane@test.com"
    assert "password_hash" not in body and "password" not in body


def test_verify_token(client, user_headers, user_normal):
    r = client.get("/api/verify-token", headers=user_headers)
    assert r.status_code == 200
    assert r.get_json() == {
        "valid": True,
        "user": {"userId": user_normal, "email": "jane@test.com", "role": "user"},
    }


def test_expired_token_rejected(app, client, user_normal):
    past = datetime.now(timezone.utc) - timedelta(days=8)
    token = jwt.encode(
        {"userId": user_normal, "email": "jane@test.com", "role": "user",
         "iat": past, "exp": past + timedelta(days=7)},
        app.config["JWT_SECRET"], algorithm="HS256",
    )
    r = client.get("/api/profile", headers=bearer(token))
    assert r.status_code == 401


def test_token_signed_with_other_secret_rejected(client, user_normal):
    token = jwt.encode(
        {"userId": user_normal, "email": "jane@test.com", "role": "admin",
         "exp": datetime.now(timezone.utc) + timedelta(days=1)},
        "not-the-secret-but-just-as-long-as-it", algorithm="HS256",
    )
    assert client.get("/api/profile", headers=bearer(token)).status_code == 401
    assert client.get("/api/admin/users", headers=bearer(token)).status_code == 401


def test_profile_for_deleted_user_is_unauthorized(app, client, user_headers, user_normal):
    with app.app_context():
        db.session.delete(db.session.get(User, user_normal))
        db.session.commit()
    assert client.get("/api/profile", headers=user_headers).status_code == 401
