# sportmap_app/services/payments_cron.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..models import Payment, PaymentMethod, PaymentStatus, User
from ..utils import utcnow
from . import directory, notifications, stripe_gateway
from .payments import apply_status, find_pending_boleto

ISSUED, SKIPPED, FAILED = "issued", "skipped", "failed"


# -------- emissão diária de boletos --------
def check_users_and_generate_boletos(now: datetime | None = None) -> dict:
    """Fim de trial + cobrança regular, mesmo procedimento para os dois grupos."""
    log = current_app.logger
    now = now or utcnow()
    stats = {ISSUED: 0, SKIPPED: 0, FAILED: 0}
    log.info("Iniciando verificação diária de usuários e cobranças")

    for group in (directory.users_ending_trial(now), directory.users_for_regular_billing(now)):
        partial = generate_boletos_for_users(group, now)
        for k, v in partial.items():
            stats[k] += v

    log.info("Verificação diária finalizada: %s", stats)
    return stats


def generate_boletos_for_users(users: list[User], now: datetime | None = None) -> dict:
    now = now or utcnow()
    stats = {ISSUED: 0, SKIPPED: 0, FAILED: 0}
    for user in users:
        user_id = user.id
        try:
            result = issue_boleto(user, now)
        except Exception:
            db.session.rollback()
            current_app.logger.exception("Erro ao gerar boleto para usuário %s", user_id)
            result = FAILED
        stats[result] += 1
    return stats


def issue_boleto(user: User, now: datetime) -> str:
    log = current_app.logger

    if find_pending_boleto(user.id):
        log.info("Usuário %s já possui um boleto pendente. Pulando geração.", user.id)
        return SKIPPED
    if not user.document:
        log.error("Usuário %s não possui CPF/CNPJ cadastrado. Pulando geração.", user.id)
        return SKIPPED
    court = directory.find_court_by_owner(user.id)
    if not court:
        log.error("Usuário %s não possui quadra cadastrada. Pulando geração.", user.id)
        return SKIPPED
    plan = directory.get_plan(user.subscription_plan_id)
    if not plan:
        log.error("Usuário %s sem plano de assinatura. Pulando geração.", user.id)
        return SKIPPED

    due_days = current_app.config.get("BOLETO_DUE_DAYS", 7)
    due_date = now + timedelta(days=due_days)

    intent = stripe_gateway.create_boleto_intent(
        plan.price_cents,
        billing_details={
            "name": user.full_name,
            "email": user.email,
            "address": {
                "line1": court.address,
                "line2": "",
                "city": court.city,
                "state": court.state,
                "postal_code": court.postal_code,
                "country": "BR",
            },
        },
        tax_id=user.document,
        metadata={"userId": str(user.id), "type": "SUBSCRIPTION"},
        expires_after_days=due_days,
    )

    payment = Payment(
        user_id=user.id,
        amount=plan.price_cents,
        currency=current_app.config.get("CURRENCY", "brl"),
        status=PaymentStatus.PENDING,
        method=PaymentMethod.BOLETO,
        provider_payment_id=intent["id"],
        boleto_url=intent.get("hosted_voucher_url"),
        boleto_pdf=intent.get("pdf"),
        boleto_expires_at=due_date,
        meta={"type": "SUBSCRIPTION", "planId": plan.id},
    )
    db.session.add(payment)
    try:
        db.session.commit()
    except IntegrityError:
        # outra execução criou o boleto entre a checagem e o insert
        db.session.rollback()
        log.warning("Boleto pendente concorrente para usuário %s; descartando %s", user.id, intent["id"])
        return SKIPPED

    notifications.send_payment_notification(
        user.email, user.first_name, payment.amount, payment.boleto_expires_at, payment.boleto_url
    )
    directory.advance_billing_dates(user, now)
    db.session.commit()
    log.info("Boleto gerado para proprietário %s", user.id)
    return ISSUED


# -------- reconciliação dos boletos pendentes --------
def map_processor_status(processor_status: str | None, payment: Payment, now: datetime) -> str:
    """
    succeeded -> PAID, canceled -> CANCELED,
    requires_payment_method com boleto vencido -> EXPIRED.
    Qualquer outro status mantém o atual (não adivinhamos).
    """
    if processor_status == "succeeded":
        return PaymentStatus.PAID
    if processor_status == "canceled":
        return PaymentStatus.CANCELED
    if (
        processor_status == "requires_payment_method"
        and payment.boleto_expires_at is not None
        and payment.boleto_expires_at < now
    ):
        return PaymentStatus.EXPIRED
    return payment.status


def poll_pending_payments(now: datetime | None = None) -> list[tuple[int, str, str]]:
    """Consulta na Stripe cada boleto PENDING e aplica a mudança de status."""
    log = current_app.logger
    now = now or utcnow()
    pending = (
        Payment.query
        .filter_by(status=PaymentStatus.PENDING, method=PaymentMethod.BOLETO)
        .order_by(Payment.id.asc())
        .all()
    )
    log.info("Verificando %d boleto(s) pendente(s)", len(pending))

    changes = []
    for payment in pending:
        payment_id, old_status = payment.id, payment.status
        try:
            processor_status = stripe_gateway.retrieve_intent_status(payment.provider_payment_id)
            new_status = map_processor_status(processor_status, payment, now)
            if new_status == old_status:
                continue
            apply_status(payment, new_status, now)
            changes.append((payment_id, old_status, new_status))
            log.info("Pagamento %s: %s -> %s", payment_id, old_status, new_status)
        except Exception:
            db.session.rollback()
            log.exception("Erro ao verificar pagamento %s", payment_id)

    return changes
