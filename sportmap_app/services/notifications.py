# sportmap_app/services/notifications.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from decimal import Decimal

from flask import current_app, render_template
import resend

from ..errors import ApiMessages, ErrorCodes, NotFoundError
from ..extensions import db
from ..models import Notification, PaymentStatus


FAILURE_REASONS = {
    PaymentStatus.EXPIRED: "O prazo do boleto terminou sem confirmação de pagamento.",
    PaymentStatus.CANCELED: "O pagamento foi cancelado pelo processador.",
}


def format_brl(cents) -> str:
    value = (Decimal(int(cents or 0)) / 100).quantize(Decimal("0.01"))
    # 1234.5 -> 1.234,50
    txt = f"{value:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    return f"R$ {txt}"


def _fmt_date(value: datetime | None) -> str:
    return value.strftime("%d/%m/%Y") if value else "—"


def send_email(to: str, subject: str, template: str, **context) -> dict:
    resend.api_key = current_app.config["RESEND_API_KEY"]
    html = render_template(template, **context)
    response = resend.Emails.send({
        "from": current_app.config["RESEND_FROM_EMAIL"],
        "to": [to],
        "subject": subject,
        "html": html,
    })
    current_app.logger.info("E-mail '%s' enviado para %s", subject, to)
    return response


def send_payment_notification(to: str, name: str, amount: int, due_date: datetime | None,
                              boleto_url: str | None = None) -> dict:
    return send_email(
        to, "Seu boleto SportMap está disponível",
        "emails/payment_notification.html",
        name=name, amount=format_brl(amount), due_date=_fmt_date(due_date), boleto_url=boleto_url,
    )


def send_payment_confirmation(to: str, name: str, amount: int, paid_at: datetime | None) -> dict:
    return send_email(
        to, "Pagamento confirmado - SportMap",
        "emails/payment_confirmation.html",
        name=name, amount=format_brl(amount), paid_at=_fmt_date(paid_at),
    )


def send_payment_failure(to: str, name: str, amount: int, reason: str) -> dict:
    """reason: EXPIRED ou CANCELED (muda o texto do e-mail)."""
    subject = "Boleto expirado - SportMap" if reason == PaymentStatus.EXPIRED else "Pagamento cancelado - SportMap"
    return send_email(
        to, subject,
        "emails/payment_failure.html",
        name=name, amount=format_brl(amount), reason=reason,
        reason_text=FAILURE_REASONS.get(reason, "Não foi possível confirmar o pagamento."),
    )


# -------- notificações in-app --------
def notify(user_id: int, title: str, message: str, type_: str = "INFO", commit: bool = True) -> Notification:
    n = Notification(user_id=user_id, title=title, message=message, type=type_)
    db.session.add(n)
    if commit:
        db.session.commit()
    return n


def list_notifications(user_id: int, unread_only: bool = False) -> list[Notification]:
    q = Notification.query.filter_by(user_id=user_id)
    if unread_only:
        q = q.filter_by(read=False)
    return q.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def mark_as_read(user_id: int, notification_id: int) -> Notification:
    n = db.session.get(Notification, notification_id)
    if not n or n.user_id != user_id:
        raise NotFoundError.of(ApiMessages.Notification.NotFound, ErrorCodes.NOTIFICATION_NOT_FOUND)
    n.read = True
    db.session.commit()
    return n
