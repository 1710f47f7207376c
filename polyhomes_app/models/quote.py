# polyhomes_app/models/quote.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db

QUOTE_STATUSES = ("pending", "confirmed", "paid", "completed")
MESH_TYPES = ("fixed", "roller", "slider", "magnetic")
MATERIAL_TYPES = ("fiberglass", "polyester", "stainless")

class Quote(db.Model):
    __tablename__ = "quotes"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)

    # medidas em metros
    window_width = db.Column(db.Numeric(8, 3), nullable=False)
    window_height = db.Column(db.Numeric(8, 3), nullable=False)
    window_count = db.Column(db.Integer, nullable=False, default=1)
    mesh_type = db.Column(db.String(30), nullable=False)
    material_type = db.Column(db.String(30), nullable=False)

    # calculado uma vez na criação (KES)
    total_price = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default="pending", index=True)  # pending, confirmed, paid, completed
    install_location = db.Column(db.String(255), default="")
    install_date = db.Column(db.Date, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    payments = db.relationship("Payment", backref="quote", lazy="dynamic")

    def to_dict(self, include_owner: bool = False) -> dict:
        data = {
            "id": self.id,
            "userId": self.user_id,
            "windowWidth": float(self.window_width),
            "windowHeight": float(self.window_height),
            "windowCount": self.window_count,
            "meshType": self.mesh_type,
            "materialType": self.material_type,
            "totalPrice": float(self.total_price),
            "status": self.status,
            "installLocation": self.install_location or "",
            "installDate": self.install_date.isoformat() if self.install_date else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if include_owner:
            owner = self.user
            data["user"] = {
                "id": owner.id,
                "name": owner.name,
                "email": owner.email,
                "phone": owner.phone,
            } if owner else None
        return data
