# polyhomes_app/blueprints/core.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from polyhomes_app.errors import ValidationError
from polyhomes_app.extensions import db
from polyhomes_app.models import ContactMessage
from polyhomes_app.services.notifications import notify

bp = Blueprint("core", __name__, url_prefix="/api")


@bp.route("/health")
def health():
    return jsonify(
        status="OK",
        message="Expert Polyhomes API is running!",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


def check_service_area(location: str, areas) -> dict:
    loc = (location or "").lower()
    served = any(area in loc for area in areas)
    return {
        "served": served,
        "estimate": "24 hours" if served else "2-3 days",
        "message": "We serve your area!" if served else "Contact us for special arrangements",
    }


@bp.route("/service-check")
def service_check():
    location = request.args.get("location", "")
    return jsonify(check_service_area(location, current_app.config.get("SERVED_AREAS", ())))


@bp.route("/contact", methods=["POST"])
def contact():
    data = request.get_json(silent=True) or {}
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip()
    message = (data.get("message") or "").strip()
    phone = (data.get("phone") or "").strip() or None
    if not name or not email or not message:
        raise ValidationError("Name, email and message are required")

    msg = ContactMessage(name=name, email=email, phone=phone, message=message)
    db.session.add(msg)
    db.session.commit()

    notify("contact_form", {"name": name, "email": email, "message": message, "phone": phone})
    return jsonify(success=True, message="Message received! We will contact you soon.")
