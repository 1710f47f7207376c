# polyhomes_app/extensions.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_migrate import Migrate
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy import text



db = SQLAlchemy()
bcrypt = Bcrypt()
migrate = Migrate()
scheduler = BackgroundScheduler(daemon=True)

def init_extensions(app):
    # DB/Bcrypt/Migrate
    db.init_app(app)
    bcrypt.init_app(app)
    migrate.init_app(app, db)

def register_cli(app):
    @app.cli.command("init-db")
    def init_db_cmd():
        """Cria as tabelas iniciais (DEV/MVP). Para produção: use flask db upgrade."""
        with app.app_context():
            # sanity check
            db.session.execute(text("SELECT 1"))
            db.create_all()
            print("Tables created.")

    @app.cli.command("create-admin")
    def create_admin_cmd():
        """Seeds the default admin account (DEFAULT_ADMIN_EMAIL / DEFAULT_ADMIN_PASSWORD)."""
        from .services.auth_service import ensure_default_admin

        with app.app_context():
            user, created = ensure_default_admin(
                app.config["DEFAULT_ADMIN_EMAIL"],
                app.config["DEFAULT_ADMIN_PASSWORD"],
            )
            if created:
                print(f"Default admin user created: {user.email}")
            else:
                print(f"Admin user already exists: {user.email}")
