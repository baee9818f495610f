# sportmap_app/models/payment.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from ..extensions import db
from ..utils import utcnow


class PaymentStatus:
    PENDING = "PENDING"
    PAID = "PAID"
    EXPIRED = "EXPIRED"
    CANCELED = "CANCELED"

    TERMINAL = (PAID, EXPIRED, CANCELED)


class PaymentMethod:
    BOLETO = "BOLETO"
    PIX = "PIX"
    CARD = "CARD"


class InvalidTransition(ValueError):
    pass


_PENDING_BOLETO = db.text("status = 'PENDING' AND method = 'BOLETO'")


class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    amount = db.Column(db.Integer, nullable=False, default=0)          # centavos
    currency = db.Column(db.String(8), default="brl")
    status = db.Column(db.String(20), nullable=False, default=PaymentStatus.PENDING)
    method = db.Column(db.String(20), nullable=False)                  # BOLETO, PIX, CARD
    # referência na Stripe (payment_intent); não muda depois de criada
    provider_payment_id = db.Column(db.String(120), unique=True, nullable=False)

    boleto_url = db.Column(db.Text)
    boleto_pdf = db.Column(db.Text)
    boleto_expires_at = db.Column(db.DateTime)

    reservation_id = db.Column(db.Integer, index=True)
    court_id = db.Column(db.Integer, index=True)
    meta = db.Column("metadata", db.JSON, default=dict)

    status_changed_at = db.Column(db.DateTime)
    failure_reason = db.Column(db.String(30))
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        # no máximo um boleto pendente por usuário
        db.Index(
            "uq_payments_pending_boleto_user", "user_id",
            unique=True,
            postgresql_where=_PENDING_BOLETO,
            sqlite_where=_PENDING_BOLETO,
        ),
    )

    @property
    def is_pending(self) -> bool:
        return self.status == PaymentStatus.PENDING

    def transition_to(self, status: str, when=None) -> bool:
        """
        PENDING -> PAID/EXPIRED/CANCELED. Estados finais não mudam mais.
        Retorna False quando o status já é o pedido (nada a fazer).
        """
        if status == self.status:
            return False
        if status not in PaymentStatus.TERMINAL or not self.is_pending:
            raise InvalidTransition(f"{self.status} -> {status}")
        self.status = status
        self.status_changed_at = when or utcnow()
        if status != PaymentStatus.PAID:
            self.failure_reason = status
        return True

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "amount": self.amount,
            "currency": self.currency,
            "status": self.status,
            "paymentMethod": self.method,
            "providerPaymentId": self.provider_payment_id,
            "boletoUrl": self.boleto_url,
            "boletoPdf": self.boleto_pdf,
            "boletoExpirationDate": self.boleto_expires_at.isoformat() if self.boleto_expires_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
