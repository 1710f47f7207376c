# polyhomes_app/__init__.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import os

from flask import Flask
from config import Config, TestingConfig, StagingConfig, ProductionConfig
from .blueprints.admin import admin_bp
from .extensions import db, bcrypt, migrate, scheduler, init_extensions, register_cli
from .errors import register_error_handlers
from .services.pricing_service import init_pricing
from .services.notifications import init_notifications
from .services.payment_service import init_payments
from .blueprints.core import bp as core_bp
from .blueprints.auth import bp as auth_bp
from .blueprints.quotes import bp as quotes_bp
from .blueprints.payments import bp as payments_bp
from datetime import datetime

ENV_CONFIGS = {
    "testing": TestingConfig,
    "staging": StagingConfig,
    "production": ProductionConfig,
}

def create_app(config_object: type[Config] = Config) -> Flask:
    app = Flask(__name__)
    if config_object is Config:
        config_object = ENV_CONFIGS.get(os.getenv("APP_ENV", "").lower(), Config)
    app.config.from_object(config_object)

    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # Extensões (DB/Bcrypt/Migrate)
    init_extensions(app)

    # Serviços: ficam disponíveis em app.extensions
    init_pricing(app)         # app.extensions["pricing"]
    init_notifications(app)   # app.extensions["notification_outbox"]
    init_payments(app)        # app.extensions["payment_completions"]
    app.config["STARTED_AT"] = datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S UTC")

    # Blueprints
    app.register_blueprint(core_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(quotes_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(admin_bp)
    register_error_handlers(app)
    # CLI (ex.: flask init-db)
    register_cli(app)

    # Scheduler (confirmações M-Pesa simuladas)
    if (
        app.config.get("PAYMENT_COMPLETION_BACKEND") == "scheduler"
        and not app.config.get("TESTING")
        and os.getenv("DISABLE_SCHEDULER") != "1"
    ):
        if not scheduler.running:
            scheduler.start()

    return app
