# sportmap_app/__init__.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import os
from datetime import datetime, timezone

from flask import Flask, jsonify
from config import Config, TestingConfig, StagingConfig, ProductionConfig
from .extensions import db, scheduler, init_extensions, register_cli
from .errors import register_error_handlers
from .jobs import register_jobs
from .blueprints.auth import bp as auth_bp
from .blueprints.billing import bp as billing_bp
from .blueprints.payments import bp as payments_bp
from .blueprints.subscriptions import bp as subscriptions_bp
from .blueprints.notifications import bp as notifications_bp

def create_app(config_object: type[Config] | None = None) -> Flask:


    app = Flask(__name__)
    app_env = os.getenv("APP_ENV", "").lower()

    if config_object is not None:
        app.config.from_object(config_object)
    elif app_env == "testing":
        app.config.from_object(TestingConfig)
    elif app_env == "staging":
        app.config.from_object(StagingConfig)
    elif app_env == "production":
        app.config.from_object(ProductionConfig)
    else:
        app.config.from_object(Config)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Extensões (DB/Bcrypt/Migrate/Scheduler)
    init_extensions(app)
    register_error_handlers(app)
    app.config["STARTED_AT"] = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

    # Blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(billing_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(subscriptions_bp)
    app.register_blueprint(notifications_bp)
    # CLI (ex.: flask init-db, flask poll-payments)
    register_cli(app)

    @app.get("/health")
    def health():
        return jsonify(status="ok", started_at=app.config["STARTED_AT"])

    # Scheduler: faturas a cada 3h, boletos à meia-noite, reconciliação a cada 6h
    if not app.config.get("TESTING") and os.getenv("DISABLE_SCHEDULER") != "1":
        register_jobs(app)
        if not scheduler.running:
            scheduler.start()

    return app
