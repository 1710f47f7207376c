# polyhomes_app/services/quote_service.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping

from flask import current_app

from ..errors import Forbidden, NotFound, ValidationError
from ..extensions import db
from ..models import Quote
from ..models.quote import QUOTE_STATUSES
from .auth_service import Identity
from .notifications import notify
from .pricing_service import get_calculator

# limites das colunas: medidas Numeric(8, 3), total Numeric(12, 2)
DIMENSION_PLACES = Decimal("0.001")
MAX_DIMENSION = Decimal("50")
MAX_WINDOW_COUNT = 500


def _positive_decimal(form: Mapping[str, Any], key: str) -> Decimal:
    raw = form.get(key)
    if raw is None or isinstance(raw, bool) or str(raw).strip() == "":
        raise ValidationError(f"{key} is required")
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError(f"{key} must be a number")
    if not value.is_finite():
        raise ValidationError(f"{key} must be a number")
    if value > MAX_DIMENSION:
        raise ValidationError(f"{key} must be at most {MAX_DIMENSION} m")
    value = value.quantize(DIMENSION_PLACES, rounding=ROUND_HALF_UP)
    if value <= 0:
        raise ValidationError(f"{key} must be greater than zero")
    return value


def _positive_int(form: Mapping[str, Any], key: str) -> int:
    raw = form.get(key)
    if raw is None or isinstance(raw, bool):
        raise ValidationError(f"{key} is required")
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError(f"{key} must be an integer")
    if not value.is_finite() or value != value.to_integral_value() or value < 1:
        raise ValidationError(f"{key} must be a positive integer")
    if value > MAX_WINDOW_COUNT:
        raise ValidationError(f"{key} must be at most {MAX_WINDOW_COUNT}")
    return int(value)


def _required_text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required")
    return value.strip()


def _optional_date(form: Mapping[str, Any], key: str):
    raw = form.get(key)
    if not raw:
        return None
    try:
        return date.fromisoformat(str(raw)[:10])
    except ValueError:
        raise ValidationError(f"{key} must be an ISO date (YYYY-MM-DD)")


def submit_quote(identity: Identity, form: Mapping[str, Any]) -> Quote:
    width = _positive_decimal(form, "windowWidth")
    height = _positive_decimal(form, "windowHeight")
    count = _positive_int(form, "windowCount")
    mesh = _required_text(form, "meshType")
    material = _required_text(form, "materialType")
    install_date = _optional_date(form, "installDate")

    price = get_calculator().breakdown(mesh, material, width, height, count)
    if price.used_default:
        current_app.logger.info(
            "No unit price for %s/%s; using default %s", mesh, material, price.unit_price
        )

    q = Quote(
        user_id=identity.user_id,
        window_width=width,
        window_height=height,
        window_count=count,
        mesh_type=mesh,
        material_type=material,
        total_price=price.total,
        status="pending",
        install_location=str(form.get("installLocation") or "").strip(),
        install_date=install_date,
    )
    db.session.add(q)
    db.session.commit()
    current_app.logger.info("Quote %s created for user %s: KES %s", q.id, q.user_id, q.total_price)

    notify("new_quote", q.to_dict())
    return q


def list_my_quotes(identity: Identity) -> list[Quote]:
    return (Quote.query
            .filter_by(user_id=identity.user_id)
            .order_by(Quote.created_at.desc(), Quote.id.desc())
            .all())


def list_all_quotes() -> list[Quote]:
    return Quote.query.order_by(Quote.created_at.desc(), Quote.id.desc()).all()


def get_quote(quote_id) -> Quote:
    try:
        q = db.session.get(Quote, int(quote_id))
    except (TypeError, ValueError):
        q = None
    if q is None:
        raise NotFound("Quote not found")
    return q


def set_quote_status(identity: Identity, quote_id, status) -> Quote:
    if not identity.is_admin:
        raise Forbidden("Admin access required")
    status = (status or "").strip().lower() if isinstance(status, str) else ""
    if status not in QUOTE_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(QUOTE_STATUSES)}")

    q = get_quote(quote_id)
    previous = q.status
    q.status = status
    db.session.commit()
    current_app.logger.info("Quote %s status %s -> %s by admin %s", q.id, previous, status, identity.user_id)

    notify("quote_status_update", q.to_dict(include_owner=True))
    return q
