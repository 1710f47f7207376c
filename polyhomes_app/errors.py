# polyhomes_app/errors.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .extensions import db


class PolyhomesError(Exception):
    status_code = 400
    message = "Bad request"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(PolyhomesError):
    status_code = 400
    message = "Invalid request"


class InvalidPhone(ValidationError):
    message = "Invalid phone number format. Use 2547XXXXXXXX or 07XXXXXXXX"


class InvalidCredentials(PolyhomesError):
    status_code = 401
    message = "Invalid credentials"


class Unauthorized(PolyhomesError):
    status_code = 401
    message = "Access token required"


class Forbidden(PolyhomesError):
    status_code = 403
    message = "Access denied"


class NotFound(PolyhomesError):
    status_code = 404
    message = "Not found"


class DuplicateUser(PolyhomesError):
    status_code = 409
    message = "User already exists"


def register_error_handlers(app):
    @app.errorhandler(PolyhomesError)
    def _handle_domain_error(e: PolyhomesError):
        return jsonify(error=e.message), e.status_code

    @app.errorhandler(SQLAlchemyError)
    def _handle_db_error(e: SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception("Storage failure")
        return jsonify(error="Something went wrong"), 500

    @app.errorhandler(HTTPException)
    def _handle_http_error(e: HTTPException):
        return jsonify(error=e.description or e.name), e.code
