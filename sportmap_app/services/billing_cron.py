# sportmap_app/services/billing_cron.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime, timedelta

from flask import current_app

from ..extensions import db
from ..models import Billing, BillingStatus
from ..utils import utcnow
from .billing import build_invoice


def due_billings(now: datetime) -> list[Billing]:
    """Cobranças com ciclo vencido e que ainda não estão em um ciclo aberto."""
    return (
        Billing.query
        .filter(Billing.next_paid_at.isnot(None), Billing.next_paid_at <= now)
        .filter(Billing.status != BillingStatus.PENDING)
        .order_by(Billing.next_paid_at.asc(), Billing.id.asc())
        .all()
    )


def generate_billing_cycles(now: datetime | None = None) -> int:
    """
    Abre um novo ciclo para cada cobrança vencida: cria a fatura PENDING
    (vence em BILLING_DUE_DAYS dias) e volta a cobrança para PENDING.

    Cada cobrança é gravada em separado; se uma falhar, as demais seguem.
    next_paid_at não é alterado, então a que falhou entra de novo na próxima
    execução.
    """
    log = current_app.logger
    now = now or utcnow()
    due_days = current_app.config.get("BILLING_DUE_DAYS", 7)
    log.info("Iniciando geração de faturas (cron)")

    billings = due_billings(now)
    log.info("%d cobrança(s) para processar", len(billings))

    generated = 0
    for billing in billings:
        billing_id = billing.id
        try:
            invoice = build_invoice(billing, now + timedelta(days=due_days), now)
            db.session.add(invoice)
            billing.status = BillingStatus.PENDING
            db.session.add(billing)
            db.session.commit()
            generated += 1
            log.info("Fatura %s gerada para cobrança %s (next_paid_at=%s)",
                     invoice.invoice_number, billing_id, billing.next_paid_at)
        except Exception:
            db.session.rollback()
            log.exception("Falha ao processar cobrança %s", billing_id)

    log.info("Geração de faturas finalizada: %d gerada(s)", generated)
    return generated
