# polyhomes_app/models/user.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db, bcrypt

ROLES = ("user", "admin")

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(180), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(20))
    role = db.Column(db.String(10), nullable=False, default="user")   # user, admin
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    quotes = db.relationship("Quote", backref="user", lazy="dynamic")
    payments = db.relationship("Payment", backref="user", lazy="dynamic")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def set_password(self, raw: str) -> None:
        self.password_hash = bcrypt.generate_password_hash(raw).decode("utf-8")

    def check_password(self, raw: str) -> bool:
        return bcrypt.check_password_hash(self.password_hash, raw)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
