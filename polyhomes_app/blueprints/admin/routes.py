# polyhomes_app/blueprints/admin/routes.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import g, jsonify, request

from ..admin import admin_bp
from ...decorators import admin_required
from ...services.auth_service import list_users
from ...services.notifications import recent
from ...services.quote_service import list_all_quotes, set_quote_status


def _limit(default: int = 50, ceiling: int = 500) -> int:
    try:
        n = int(request.args.get("limit", default))
    except (TypeError, ValueError):
        return default
    return max(1, min(n, ceiling))


# ---------------- ADMIN: Orçamentos ----------------
@admin_bp.route("/quotes")
@admin_required
def quotes():
    return jsonify([q.to_dict(include_owner=True) for q in list_all_quotes()])


@admin_bp.route("/quotes/<quote_id>", methods=["PATCH"])
@admin_required
def quote_update(quote_id):
    data = request.get_json(silent=True) or {}
    q = set_quote_status(g.identity, quote_id, data.get("status"))
    return jsonify(q.to_dict(include_owner=True))


# ---------------- ADMIN: Usuários ----------------
@admin_bp.route("/users")
@admin_required
def users():
    return jsonify([u.to_dict() for u in list_users()])


# ---------------- ADMIN: Notificações ----------------
@admin_bp.route("/notifications")
@admin_required
def notifications():
    return jsonify([n.to_dict() for n in recent(_limit())])
