# sportmap_app/models/invoice.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from ..extensions import db
from ..utils import utcnow


class InvoicePaymentMethod:
    CREDIT_CARD = "CREDIT_CARD"
    BANK_SLIP = "BANK_SLIP"
    PIX = "PIX"
    IN_PERSON = "IN_PERSON"
    CASH = "CASH"
    DEBIT_CARD = "DEBIT_CARD"


class Invoice(db.Model):
    """Fatura de um ciclo. Guarda uma cópia dos dados da cobrança (Billing)."""
    __tablename__ = "invoices"

    id = db.Column(db.Integer, primary_key=True)
    # referência fraca: sem FK/cascade, o histórico sobrevive às mudanças da cobrança
    billing_id = db.Column(db.Integer, index=True, nullable=False)
    user_id = db.Column(db.Integer, index=True, nullable=False)
    owner_id = db.Column(db.Integer, index=True, nullable=False)
    reservation_id = db.Column(db.Integer)
    court_id = db.Column(db.Integer)

    status = db.Column(db.String(30), nullable=False)
    payment_method = db.Column(db.String(20), nullable=False, default=InvoicePaymentMethod.IN_PERSON)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    due_date = db.Column(db.DateTime)
    paid_at = db.Column(db.DateTime)
    notes = db.Column(db.Text)
    invoice_number = db.Column(db.String(60), unique=True)
    meta = db.Column("metadata", db.JSON, default=dict)

    created_at = db.Column(db.DateTime, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        def iso(v):
            return v.isoformat() if v else None
        return {
            "id": self.id,
            "billingId": self.billing_id,
            "userId": self.user_id,
            "ownerId": self.owner_id,
            "reservationId": self.reservation_id,
            "courtId": self.court_id,
            "status": self.status,
            "paymentMethod": self.payment_method,
            "amount": float(self.amount) if self.amount is not None else None,
            "dueDate": iso(self.due_date),
            "paidAt": iso(self.paid_at),
            "notes": self.notes,
            "invoiceNumber": self.invoice_number,
            "metadata": self.meta or {},
            "createdAt": iso(self.created_at),
        }
