# sportmap_app/services/subscriptions.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import current_app

from ..errors import ApiError, ApiMessages, ErrorCodes, NotFoundError, payment_failed
from ..extensions import db
from ..models import Subscription
from . import stripe_gateway


def cancel_subscription(user_id: int, at_period_end: bool = True) -> Subscription:
    """Cancela (ou reativa) a renovação da assinatura na Stripe e espelha localmente."""
    sub = (
        Subscription.query
        .filter(Subscription.user_id == user_id, Subscription.status != "canceled")
        .order_by(Subscription.created_at.desc())
        .first()
    )
    if not sub or not sub.provider_sub_id:
        raise NotFoundError.of(ApiMessages.Subscription.NotFound, ErrorCodes.SUBSCRIPTION_NOT_FOUND)

    try:
        remote = stripe_gateway.update_subscription(sub.provider_sub_id, at_period_end)
    except ApiError:
        raise
    except Exception as exc:
        current_app.logger.exception("Falha ao atualizar assinatura %s na Stripe", sub.provider_sub_id)
        raise payment_failed() from exc

    sub.cancel_at_period_end = bool(at_period_end)
    status = remote.get("status") if hasattr(remote, "get") else None
    if status:
        sub.status = status
    db.session.add(sub)
    db.session.commit()
    return sub
