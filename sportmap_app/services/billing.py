# sportmap_app/services/billing.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import time
from datetime import datetime, timedelta, timezone
from functools import wraps

from dateutil.relativedelta import relativedelta
from flask import current_app

from ..errors import ApiError, ApiMessages, ErrorCodes, ForbiddenError, NotFoundError, payment_failed
from ..extensions import db
from ..models import Billing, BillingStatus, Invoice, InvoicePaymentMethod
from ..utils import paginate, utcnow

AUTO_NOTES = "Fatura gerada automaticamente"


def make_invoice_number(billing_id: int, now: datetime | None = None) -> str:
    """
    INV-<epoch ms>-<id da cobrança>. O id entra inteiro (zero-padded), então
    duas cobranças no mesmo milissegundo nunca geram o mesmo número.
    """
    ms = int(now.replace(tzinfo=timezone.utc).timestamp() * 1000) if now else int(time.time() * 1000)
    return f"INV-{ms}-{int(billing_id):08d}"


def build_invoice(billing: Billing, due_date: datetime, now: datetime | None = None) -> Invoice:
    """Fatura PENDING com a cópia dos dados da cobrança."""
    return Invoice(
        billing_id=billing.id,
        user_id=billing.user_id,
        owner_id=billing.owner_id,
        reservation_id=billing.reservation_id,
        court_id=billing.court_id,
        status=BillingStatus.PENDING,
        payment_method=InvoicePaymentMethod.IN_PERSON,
        amount=billing.amount,
        due_date=due_date,
        paid_at=None,
        notes=AUTO_NOTES,
        invoice_number=make_invoice_number(billing.id, now),
        meta={
            "automaticallyGenerated": True,
            "billingType": billing.billing_type,
            "dueDate": due_date.isoformat() if due_date else None,
        },
    )


def _wrap(fn):
    """ApiError passa direto; o resto vira o erro uniforme de pagamento."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except ApiError:
            db.session.rollback()
            raise
        except Exception as exc:
            db.session.rollback()
            current_app.logger.exception("Falha em %s", fn.__name__)
            raise payment_failed() from exc
    return wrapper


def _get_billing_or_404(billing_id) -> Billing:
    billing = db.session.get(Billing, int(billing_id))
    if not billing:
        raise NotFoundError.of(ApiMessages.Billing.NotFound, ErrorCodes.BILLING_NOT_FOUND)
    return billing


@_wrap
def create_billing(data) -> Billing:
    """Cria a cobrança (sempre PENDING) e a fatura do primeiro ciclo."""
    now = utcnow()
    billing = Billing(
        reservation_id=data.reservation_id,
        owner_id=data.owner_id,
        user_id=data.user_id,
        court_id=data.court_id,
        amount=data.amount,
        billing_type=data.billing_type,
        status=BillingStatus.PENDING,
        due_date=data.due_date,
        last_paid_at=data.last_paid_at,
        next_paid_at=data.next_paid_at,
    )
    db.session.add(billing)
    db.session.flush()  # precisamos do id para o número da fatura

    invoice = build_invoice(billing, data.due_date, now)
    if data.metadata:
        invoice.meta = {**invoice.meta, **data.metadata}
    db.session.add(invoice)
    db.session.commit()
    return billing


@_wrap
def update_billing_status(owner_id: int, billing_id: int, status: str,
                          metadata: dict | None = None, now: datetime | None = None) -> Billing:
    """
    Atualiza o status de uma cobrança (pagamento presencial, por exemplo).

    Só o dono da quadra pode alterar. Status pago carimba paid_at e avança o
    próximo ciclo em um mês. A fatura PENDING vinculada recebe o mesmo status,
    com o metadata mesclado (chaves novas sobrescrevem) e os campos de auditoria.
    """
    if status not in BillingStatus.ALL:
        raise ApiError.of(ApiMessages.Generic.RequestError, ErrorCodes.VALIDATION_ERROR, 400)
    billing = _get_billing_or_404(billing_id)
    if billing.owner_id != int(owner_id):
        raise ForbiddenError.of(ApiMessages.Billing.Forbidden, ErrorCodes.UNAUTHORIZED)

    now = now or utcnow()
    is_paid = status in BillingStatus.PAID

    billing.status = status
    if is_paid:
        billing.paid_at = now
        billing.last_paid_at = now
        billing.next_paid_at = now + relativedelta(months=1)
        billing.due_date = billing.next_paid_at + timedelta(days=3)

    invoice = (
        Invoice.query
        .filter_by(billing_id=billing.id, status=BillingStatus.PENDING)
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
        .first()
    )
    if invoice:
        invoice.status = status
        invoice.paid_at = now if is_paid else None
        invoice.meta = {
            **(invoice.meta or {}),
            **(metadata or {}),
            "lastUpdated": now.isoformat(),
            "updatedBy": str(owner_id),
        }
        db.session.add(invoice)

    db.session.add(billing)
    db.session.commit()
    current_app.logger.info("Cobrança %s atualizada para %s por %s", billing.id, status, owner_id)
    return billing


def _by(filter_kwargs: dict, page: int, limit: int, status: str | None):
    q = Billing.query.filter_by(**filter_kwargs)
    if status:
        q = q.filter(Billing.status == status)
    q = q.order_by(Billing.created_at.desc(), Billing.id.desc())
    data, total = paginate(q, page, limit)
    return {"data": data, "total": total}


@_wrap
def get_billings_by_owner(owner_id: int, page: int = 1, limit: int = 10, status: str | None = None):
    return _by({"owner_id": owner_id}, page, limit, status)


@_wrap
def get_billings_by_user(user_id: int, page: int = 1, limit: int = 10, status: str | None = None):
    return _by({"user_id": user_id}, page, limit, status)


@_wrap
def get_billings_by_reservation(reservation_id: int, page: int = 1, limit: int = 10, status: str | None = None):
    return _by({"reservation_id": reservation_id}, page, limit, status)


@_wrap
def get_billings_by_status(status: str) -> list[Billing]:
    return Billing.query.filter_by(status=status).order_by(Billing.created_at.desc()).all()


@_wrap
def get_invoices_by_billing_id(user_id: int, billing_id: int, page: int = 1, limit: int = 10,
                               status: str | None = None, payment_method: str | None = None,
                               created_at_start: datetime | None = None,
                               created_at_end: datetime | None = None):
    """Faturas de uma cobrança; visível para o dono da quadra e para quem paga."""
    billing = _get_billing_or_404(billing_id)
    if int(user_id) not in (billing.owner_id, billing.user_id):
        raise ForbiddenError.of(ApiMessages.Billing.InvoicesForbidden, ErrorCodes.UNAUTHORIZED)

    q = Invoice.query.filter(Invoice.billing_id == billing.id)
    if status:
        q = q.filter(Invoice.status == status)
    if payment_method:
        q = q.filter(Invoice.payment_method == payment_method)
    if created_at_start:
        q = q.filter(Invoice.created_at >= created_at_start)
    if created_at_end:
        q = q.filter(Invoice.created_at <= created_at_end)
    q = q.order_by(Invoice.created_at.desc(), Invoice.id.desc())
    data, total = paginate(q, page, limit)
    return {"data": data, "total": total}
