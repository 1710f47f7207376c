# polyhomes_app/blueprints/quotes.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, g, jsonify, request

from ..decorators import login_required
from ..services.quote_service import list_my_quotes, submit_quote

bp = Blueprint("quotes", __name__, url_prefix="/api")


@bp.route("/quotes", methods=["POST"])
@login_required
def create_quote():
    q = submit_quote(g.identity, request.get_json(silent=True) or {})
    return jsonify(
        success=True,
        message="Quote received successfully!",
        quoteId=q.id,
        totalPrice=float(q.total_price),
        quote=q.to_dict(),
    )


@bp.route("/my-quotes")
@login_required
def my_quotes():
    return jsonify([q.to_dict() for q in list_my_quotes(g.identity)])
