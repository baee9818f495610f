# sportmap_app/services/payments.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime

from flask import current_app

from ..errors import ApiError, ApiMessages, ErrorCodes, payment_failed
from ..extensions import db
from ..models import Payment, PaymentMethod, PaymentStatus, User
from ..utils import utcnow
from . import directory, notifications, stripe_gateway


def find_pending_boleto(user_id: int) -> Payment | None:
    return Payment.query.filter_by(
        user_id=user_id, status=PaymentStatus.PENDING, method=PaymentMethod.BOLETO
    ).first()


def apply_status(payment: Payment, new_status: str, now: datetime | None = None) -> bool:
    """
    Aplica o novo status e dispara os efeitos colaterais da transição.
    Retorna True se houve mudança.

    Só boletos de assinatura têm efeitos colaterais:
    PAID avança as datas de cobrança do usuário e envia a confirmação;
    EXPIRED/CANCELED envia o e-mail de falha com o motivo.
    Pagamentos de cartão (reservas) só mudam de status.
    """
    now = now or utcnow()
    if new_status == payment.status:
        return False
    if not payment.is_pending:
        # estado final: webhook atrasado ou duplicado
        current_app.logger.warning(
            "Pagamento %s já está %s; ignorando %s", payment.id, payment.status, new_status
        )
        return False

    payment.transition_to(new_status, now)
    is_boleto = payment.method == PaymentMethod.BOLETO
    user = db.session.get(User, payment.user_id) if is_boleto else None
    if new_status == PaymentStatus.PAID and user is not None:
        directory.advance_billing_dates(user, now)
    db.session.add(payment)
    db.session.commit()

    if user is None:
        return True
    # o status já foi gravado; falha no envio não desfaz a transição
    try:
        _notify_transition(user, payment, new_status, now)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Falha ao notificar usuário %s sobre pagamento %s",
                                     user.id, payment.id)
    return True


def _notify_transition(user: User, payment: Payment, new_status: str, now: datetime) -> None:
    if new_status == PaymentStatus.PAID:
        notifications.send_payment_confirmation(user.email, user.first_name, payment.amount, now)
        notifications.notify(user.id, "Pagamento confirmado",
                             f"Recebemos o pagamento de {notifications.format_brl(payment.amount)}.",
                             "PAYMENT")
    else:
        notifications.send_payment_failure(user.email, user.first_name, payment.amount, new_status)
        notifications.notify(user.id, "Pagamento não confirmado",
                             notifications.FAILURE_REASONS.get(new_status, new_status), "PAYMENT")


def create_payment_intent(data) -> dict:
    """Cria o PaymentIntent de cartão e registra o pagamento PENDING."""
    try:
        intent = stripe_gateway.create_card_intent(
            int(round(data.amount * 100)),
            metadata={
                "reservationId": str(data.reservation_id),
                "courtId": str(data.court_id),
                "userId": str(data.user_id),
            },
        )
        payment = Payment(
            user_id=data.user_id,
            amount=int(round(data.amount * 100)),
            currency=current_app.config.get("CURRENCY", "brl"),
            status=PaymentStatus.PENDING,
            method=PaymentMethod.CARD,
            provider_payment_id=intent["id"],
            reservation_id=data.reservation_id,
            court_id=data.court_id,
        )
        db.session.add(payment)
        db.session.commit()
        return {"clientSecret": intent["client_secret"], "paymentId": payment.id}
    except ApiError:
        raise
    except Exception as exc:
        db.session.rollback()
        current_app.logger.exception("Falha ao criar payment intent")
        raise payment_failed() from exc


WEBHOOK_STATUS = {
    "payment_intent.succeeded": PaymentStatus.PAID,
    "payment_intent.payment_failed": PaymentStatus.EXPIRED,
    "payment_intent.canceled": PaymentStatus.CANCELED,
}


def handle_webhook(signature: str, payload: bytes) -> dict:
    try:
        event = stripe_gateway.construct_event(payload, signature)
    except Exception as exc:
        current_app.logger.warning("Assinatura do webhook inválida: %s", exc)
        raise ApiError.of(ApiMessages.Payment.WebhookFailed, ErrorCodes.WEBHOOK_FAILED, 400) from exc

    typ = event["type"]
    data = event["data"]["object"]
    new_status = WEBHOOK_STATUS.get(typ)
    if new_status:
        payment = Payment.query.filter_by(provider_payment_id=data.get("id")).first()
        if payment:
            try:
                apply_status(payment, new_status)
            except Exception as exc:
                db.session.rollback()
                current_app.logger.exception("Falha ao aplicar webhook %s", typ)
                raise ApiError.of(ApiMessages.Payment.WebhookFailed, ErrorCodes.WEBHOOK_FAILED, 400) from exc
        else:
            current_app.logger.info("Webhook %s para intent desconhecido %s", typ, data.get("id"))
    return {"received": True}


def get_user_boletos(user_id: int) -> list[Payment]:
    return (
        Payment.query
        .filter_by(user_id=user_id, method=PaymentMethod.BOLETO)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )
