# sportmap_app/models/billing.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from ..extensions import db
from ..utils import utcnow


class BillingStatus:
    PENDING = "PENDING"
    PAGO_PRESENCIALMENTE = "PAGO_PRESENCIALMENTE"
    PAGO_SPORTMAP = "PAGO_SPORTMAP"

    PAID = (PAGO_PRESENCIALMENTE, PAGO_SPORTMAP)
    ALL = (PENDING, PAGO_PRESENCIALMENTE, PAGO_SPORTMAP)


class BillingType:
    PRESENCIAL = "PRESENCIAL"
    ONLINE = "ONLINE"

    ALL = (PRESENCIAL, ONLINE)


class Billing(db.Model):
    __tablename__ = "billings"

    id = db.Column(db.Integer, primary_key=True)
    reservation_id = db.Column(db.Integer, index=True, nullable=False)
    court_id = db.Column(db.Integer, db.ForeignKey("courts.id"), index=True, nullable=False)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)

    amount = db.Column(db.Numeric(10, 2), nullable=False)
    billing_type = db.Column(db.String(20), nullable=False)   # PRESENCIAL, ONLINE
    # status vale para o ciclo atual; o cron volta para PENDING a cada novo ciclo
    status = db.Column(db.String(30), nullable=False, default=BillingStatus.PENDING, index=True)

    due_date = db.Column(db.DateTime)
    paid_at = db.Column(db.DateTime)
    last_paid_at = db.Column(db.DateTime)
    next_paid_at = db.Column(db.DateTime, index=True)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        def iso(v):
            return v.isoformat() if v else None
        return {
            "id": self.id,
            "reservationId": self.reservation_id,
            "courtId": self.court_id,
            "ownerId": self.owner_id,
            "userId": self.user_id,
            "amount": float(self.amount) if self.amount is not None else None,
            "billingType": self.billing_type,
            "status": self.status,
            "dueDate": iso(self.due_date),
            "paidAt": iso(self.paid_at),
            "lastPaidAt": iso(self.last_paid_at),
            "nextPaidAt": iso(self.next_paid_at),
            "createdAt": iso(self.created_at),
        }
