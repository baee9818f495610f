# sportmap_app/extensions.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_migrate import Migrate
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy import text
import click


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
            print("Tabelas criadas.")

    # execução manual das rotinas agendadas (útil em staging/debug)
    @app.cli.command("run-billing-cycle")
    def run_billing_cycle_cmd():
        """Gera as faturas dos ciclos vencidos."""
        from .services.billing_cron import generate_billing_cycles
        with app.app_context():
            total = generate_billing_cycles()
            click.echo(f"{total} fatura(s) gerada(s).")

    @app.cli.command("issue-boletos")
    def issue_boletos_cmd():
        """Emite os boletos de fim de trial e de cobrança regular."""
        from .services.payments_cron import check_users_and_generate_boletos
        with app.app_context():
            stats = check_users_and_generate_boletos()
            click.echo(f"emitidos={stats['issued']} pulados={stats['skipped']} falhas={stats['failed']}")

    @app.cli.command("poll-payments")
    def poll_payments_cmd():
        """Consulta a Stripe e reconcilia os boletos pendentes."""
        from .services.payments_cron import poll_pending_payments
        with app.app_context():
            changes = poll_pending_payments()
            click.echo(f"{len(changes)} pagamento(s) atualizado(s).")
