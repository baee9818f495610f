# sportmap_app/services/directory.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import and_, or_

from ..extensions import db
from ..models import Court, SubscriptionPlan, User, UserType
from ..utils import utcnow


def find_court_by_owner(owner_id: int) -> Court | None:
    return Court.query.filter_by(owner_id=owner_id).order_by(Court.id.asc()).first()


def get_plan(plan_id) -> SubscriptionPlan | None:
    if not plan_id:
        return None
    return db.session.get(SubscriptionPlan, int(plan_id))


def users_ending_trial(now: datetime | None = None) -> list[User]:
    """
    Proprietários cujo trial acabou e que ainda não tiveram nenhuma cobrança.
    Sem trial_ends_at, o trial dura TRIAL_DAYS a partir do cadastro.
    """
    now = now or utcnow()
    signup_cutoff = now - timedelta(days=current_app.config.get("TRIAL_DAYS", 30))
    return (
        User.query
        .filter(User.user_type == UserType.HOUSE_OWNER)
        .filter(or_(
            User.trial_ends_at <= now,
            and_(User.trial_ends_at.is_(None), User.created_at <= signup_cutoff),
        ))
        .filter(User.last_billing_date.is_(None))
        .order_by(User.id.asc())
        .all()
    )


def users_for_regular_billing(now: datetime | None = None) -> list[User]:
    """Proprietários já cobrados antes, com próxima cobrança vencida."""
    now = now or utcnow()
    return (
        User.query
        .filter(User.user_type == UserType.HOUSE_OWNER)
        .filter(User.last_billing_date.isnot(None))
        .filter(or_(User.next_billing_date.is_(None), User.next_billing_date <= now))
        .order_by(User.next_billing_date.asc(), User.id.asc())
        .all()
    )


def advance_billing_dates(user: User, now: datetime | None = None) -> User:
    now = now or utcnow()
    user.last_billing_date = now
    user.next_billing_date = now + timedelta(days=current_app.config.get("BILLING_PERIOD_DAYS", 30))
    db.session.add(user)
    return user
