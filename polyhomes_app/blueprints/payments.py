# polyhomes_app/blueprints/payments.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, g, jsonify, request

from ..decorators import login_required
from ..services.payment_service import get_payment_status, initiate_payment

bp = Blueprint("payments", __name__, url_prefix="/api")


@bp.route("/mpesa/payment", methods=["POST"])
@login_required
def mpesa_payment():
    """Simulated STK push: returns at once, confirmation arrives later."""
    data = request.get_json(silent=True) or {}
    payment = initiate_payment(g.identity, data.get("quoteId"), data.get("amount"), data.get("phone"))
    return jsonify(
        success=True,
        message="M-Pesa prompt sent to your phone",
        paymentId=payment.id,
    )


@bp.route("/payment-status/<payment_id>")
@login_required
def payment_status(payment_id):
    return jsonify(get_payment_status(g.identity, payment_id).to_status_dict())
