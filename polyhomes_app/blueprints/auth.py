# polyhomes_app/blueprints/auth.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, g, jsonify, request

from polyhomes_app.decorators import login_required
from polyhomes_app.services.auth_service import authenticate, get_user, register_user

bp = Blueprint("auth", __name__, url_prefix="/api")


def _summary(u) -> dict:
    return {"id": u.id, "name": u.name, "email": u.email, "role": u.role}


@bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}
    u, token = register_user(
        data.get("name"), data.get("email"), data.get("password"), data.get("phone")
    )
    return jsonify(
        success=True,
        message="User registered successfully",
        token=token,
        user=_summary(u),
    ), 201


@bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    u, token = authenticate(data.get("email"), data.get("password"))
    return jsonify(
        success=True,
        message="Logged in successfully",
        token=token,
        user=_summary(u),
    )


@bp.route("/profile")
@login_required
def profile():
    return jsonify(get_user(g.identity).to_dict())


@bp.route("/verify-token")
@login_required
def verify():
    return jsonify(valid=True, user=g.identity.to_claims())
