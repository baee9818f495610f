# sportmap_app/models/user.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from ..extensions import db, bcrypt
from ..utils import utcnow


class UserType:
    USER = "USER"
    HOUSE_OWNER = "HOUSE_OWNER"


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(80), nullable=False)
    last_name = db.Column(db.String(80), nullable=False, default="")
    email = db.Column(db.String(180), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(30))
    user_type = db.Column(db.String(20), default=UserType.USER)   # USER, HOUSE_OWNER
    document = db.Column(db.String(20))                             # CPF/CNPJ (obrigatório p/ boleto)

    # assinatura do proprietário
    subscription_plan_id = db.Column(db.Integer, db.ForeignKey("subscription_plans.id"), nullable=True)
    trial_ends_at = db.Column(db.DateTime)
    last_billing_date = db.Column(db.DateTime)
    next_billing_date = db.Column(db.DateTime, index=True)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    payments = db.relationship("Payment", backref="user", lazy="dynamic")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_owner(self) -> bool:
        return self.user_type == UserType.HOUSE_OWNER

    def set_password(self, raw: str) -> None:
        self.password_hash = bcrypt.generate_password_hash(raw).decode("utf-8")

    def check_password(self, raw: str) -> bool:
        return bcrypt.check_password_hash(self.password_hash, raw)
