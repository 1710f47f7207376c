# polyhomes_app/models/payment.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from ..extensions import db

PAYMENT_STATUSES = ("initiated", "completed", "failed")

class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    quote_id = db.Column(db.Integer, db.ForeignKey("quotes.id"), index=True, nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    phone = db.Column(db.String(12), nullable=False)                       # 254XXXXXXXXX
    status = db.Column(db.String(20), nullable=False, default="initiated")  # initiated, completed, failed
    provider = db.Column(db.String(30), default="mpesa-sim")
    confirmation_code = db.Column(db.String(40))
    failure_reason = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    completed_at = db.Column(db.DateTime)

    def to_status_dict(self) -> dict:
        return {
            "status": self.status,
            "confirmationCode": self.confirmation_code,
            "amount": float(self.amount),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "quoteId": self.quote_id,
        }
