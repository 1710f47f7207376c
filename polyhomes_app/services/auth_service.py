# polyhomes_app/services/auth_service.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..errors import DuplicateUser, InvalidCredentials, Unauthorized, ValidationError
from ..extensions import db
from ..models import User


@dataclass(frozen=True)
class Identity:
    """Verified token claims. Revocation is not supported; logout is client-side."""
    user_id: int
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_claims(self) -> dict:
        return {"userId": self.user_id, "email": self.email, "role": self.role}


def issue_token(user: User) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user.id,
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(days=current_app.config.get("JWT_EXPIRES_DAYS", 7)),
    }
    return jwt.encode(
        payload,
        current_app.config["JWT_SECRET"],
        algorithm=current_app.config.get("JWT_ALGORITHM", "HS256"),
    )


def verify_token(token: str) -> Identity:
    try:
        data = jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[current_app.config.get("JWT_ALGORITHM", "HS256")],
        )
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Invalid or expired token")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid or expired token")

    try:
        return Identity(user_id=int(data["userId"]), email=data["email"], role=data.get("role", "user"))
    except (KeyError, TypeError, ValueError):
        raise Unauthorized("Invalid or expired token")


def _clean_email(email) -> str:
    return str(email or "").strip().lower()


def register_user(name, email, password, phone=None) -> tuple[User, str]:
    name = str(name or "").strip()
    email = _clean_email(email)
    if not name or not email or not isinstance(password, str) or not password:
        raise ValidationError("Name, email and password are required")

    if User.query.filter_by(email=email).first():
        raise DuplicateUser("User already exists")

    u = User(name=name, email=email, phone=str(phone or "").strip() or None, role="user")
    u.set_password(password)
    db.session.add(u)
    try:
        db.session.commit()
    except IntegrityError:
        # cadastro concorrente com o mesmo e-mail
        db.session.rollback()
        raise DuplicateUser("User already exists")
    current_app.logger.info("User registered: id=%s", u.id)
    return u, issue_token(u)


def authenticate(email, password) -> tuple[User, str]:
    u = User.query.filter_by(email=_clean_email(email)).first()
    if not u or not isinstance(password, str) or not password or not u.check_password(password):
        raise InvalidCredentials("Invalid credentials")
    return u, issue_token(u)


def get_user(identity: Identity) -> User:
    u = db.session.get(User, identity.user_id)
    if u is None:
        raise Unauthorized("Invalid or expired token")
    return u


def list_users() -> list[User]:
    return User.query.order_by(User.created_at.desc(), User.id.desc()).all()


def ensure_default_admin(email: str, password: str, name: str = "System Administrator") -> tuple[User, bool]:
    email = _clean_email(email)
    u = User.query.filter_by(email=email).first()
    if u:
        return u, False
    u = User(name=name, email=email, role="admin")
    u.set_password(password)
    db.session.add(u)
    db.session.commit()
    current_app.logger.info("Default admin user created: %s", email)
    return u, True
