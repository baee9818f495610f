# sportmap_app/models/plan.py
from __future__ import annotations
from ..extensions import db
from ..utils import utcnow


class PlanType:
    BASIC = "BASIC"
    PREMIUM = "PREMIUM"
    ENTERPRISE = "ENTERPRISE"


class SubscriptionPlan(db.Model):
    __tablename__ = "subscription_plans"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, default="")
    # preço em centavos para evitar float
    price_cents = db.Column(db.Integer, nullable=False, default=0)
    court_limit = db.Column(db.Integer, nullable=False, default=1)
    type = db.Column(db.String(20), default=PlanType.BASIC)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)


class Subscription(db.Model):
    __tablename__ = "subscriptions"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    plan_id = db.Column(db.Integer, db.ForeignKey("subscription_plans.id"), nullable=False)

    status = db.Column(db.String(20), default="trialing")  # active, canceled, past_due, unpaid, trialing
    provider_sub_id = db.Column(db.String(120), unique=True)
    cancel_at_period_end = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
