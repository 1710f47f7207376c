# tests/conftest.py
# -*- coding: utf-8 -*-
import os
import sys
import uuid
import pathlib

import pytest
from sqlalchemy import event

# =====================================================================================
# Localização do projeto (garante que "polyhomes_app" e os módulos da raiz estejam no sys.path)
# =====================================================================================
PROJECT_ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("DISABLE_SCHEDULER", "1")

from config import TestingConfig  # noqa: E402


def _set_sqlite_pragmas(dbapi_conn, _conn_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.close()


# =====================================================================================
# App Flask com SQLite temporário, schema novo a cada teste
# =====================================================================================
@pytest.fixture
def app(tmp_path):
    from polyhomes_app import create_app
    from polyhomes_app.extensions import db

    class _Cfg(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'polyhomes_test.sqlite'}"

    app = create_app(_Cfg)
    with app.app_context():
        event.listen(db.engine, "connect", _set_sqlite_pragmas)
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    from polyhomes_app.extensions import db
    with app.app_context():
        try:
            yield db.session
        finally:
            db.session.rollback()
            db.session.close()


@pytest.fixture
def completions(app):
    """Fila manual de confirmações (relógio virtual)."""
    return app.extensions["payment_completions"]


# =====================================================================================
# Usuários e tokens
# =====================================================================================
def make_user(app, *, name="User", email=None, password="secret123", phone="0712345678", role="user"):
    from polyhomes_app.extensions import db
    from polyhomes_app.models import User
    with app.app_context():
        u = User(name=name, email=email or f"user+{uuid.uuid4().hex[:6]}@test.com", phone=phone, role=role)
        u.set_password(password)
        db.session.add(u)
        db.session.commit()
        return u.id


def token_for(app, user_id):
    from polyhomes_app.extensions import db
    from polyhomes_app.models import User
    from polyhomes_app.services.auth_service import issue_token
    with app.app_context():
        return issue_token(db.session.get(User, user_id))


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_normal(app):
    return make_user(app, name="Jane Wanjiku", email="jane@test.com")


@pytest.fixture
def user_other(app):
    return make_user(app, name="Otieno", email="otieno@test.com", phone="0722000000")


@pytest.fixture
def user_admin(app):
    return make_user(app, name="Admin", email="admin@test.com", role="admin")


@pytest.fixture
def user_headers(app, user_normal):
    return bearer(token_for(app, user_normal))


@pytest.fixture
def other_headers(app, user_other):
    return bearer(token_for(app, user_other))


@pytest.fixture
def admin_headers(app, user_admin):
    return bearer(token_for(app, user_admin))


QUOTE_FORM = {
    "windowWidth": 1.2,
    "windowHeight": 1.5,
    "windowCount": 2,
    "meshType": "roller",
    "materialType": "polyester",
    "installLocation": "Westlands, Nairobi",
}


@pytest.fixture
def quote_id(client, user_headers):
    r = client.post("/api/quotes", json=QUOTE_FORM, headers=user_headers)
    assert r.status_code == 200
    return r.get_json()["quoteId"]
