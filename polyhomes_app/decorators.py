# polyhomes_app/decorators.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from functools import wraps
from flask import g, request

from .errors import Forbidden, Unauthorized
from .services.auth_service import verify_token


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def login_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise Unauthorized("Access token required")
        g.identity = verify_token(token)
        return view_func(*args, **kwargs)
    return wrapper


def admin_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise Unauthorized("Access token required")
        identity = verify_token(token)
        if not identity.is_admin:
            raise Forbidden("Admin access required")
        g.identity = identity
        return view_func(*args, **kwargs)
    return wrapper
