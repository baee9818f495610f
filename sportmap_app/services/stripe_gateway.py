# sportmap_app/services/stripe_gateway.py
# -*- coding: utf-8 -*-
"""
Chamadas à Stripe usadas pela cobrança.

A Stripe é a fonte da verdade dos pagamentos; os registros locais são
reconciliados a partir dela (cron/webhook).
"""
from __future__ import annotations
from flask import current_app
import stripe


def _stripe():
    stripe.api_key = current_app.config["STRIPE_SECRET_KEY"]
    version = current_app.config.get("STRIPE_API_VERSION")
    if version:
        stripe.api_version = version
    return stripe


def _get(obj, key, default=None):
    # StripeObject e dict respondem a .get
    if obj is None:
        return default
    getter = getattr(obj, "get", None)
    if callable(getter):
        return getter(key, default)
    return getattr(obj, key, default)


def create_boleto_intent(amount: int, billing_details: dict, tax_id: str,
                         metadata: dict | None = None, expires_after_days: int = 7) -> dict:
    """Cria um PaymentIntent de boleto e devolve id + URLs do voucher."""
    s = _stripe()
    intent = s.PaymentIntent.create(
        amount=int(amount),
        currency=current_app.config.get("CURRENCY", "brl"),
        payment_method_types=["boleto"],
        payment_method_options={"boleto": {"expires_after_days": int(expires_after_days)}},
        payment_method_data={
            "type": "boleto",
            "billing_details": billing_details,
            "boleto": {"tax_id": tax_id},
        },
        confirm=True,
        metadata=metadata or {},
    )
    display = _get(_get(intent, "next_action"), "boleto_display_details")
    return {
        "id": _get(intent, "id"),
        "hosted_voucher_url": _get(display, "hosted_voucher_url"),
        "pdf": _get(display, "pdf"),
    }


def create_card_intent(amount: int, metadata: dict | None = None) -> dict:
    s = _stripe()
    intent = s.PaymentIntent.create(
        amount=int(amount),
        currency=current_app.config.get("CURRENCY", "brl"),
        payment_method_types=["card"],
        metadata=metadata or {},
    )
    return {"id": _get(intent, "id"), "client_secret": _get(intent, "client_secret")}


def retrieve_intent_status(reference: str) -> str | None:
    """Status atual do PaymentIntent na Stripe (ex.: succeeded, canceled)."""
    intent = _stripe().PaymentIntent.retrieve(reference)
    return _get(intent, "status")


def update_subscription(provider_sub_id: str, cancel_at_period_end: bool):
    return _stripe().Subscription.modify(provider_sub_id, cancel_at_period_end=bool(cancel_at_period_end))


def construct_event(payload: bytes, signature: str):
    secret = current_app.config["STRIPE_WEBHOOK_SECRET"]
    return _stripe().Webhook.construct_event(payload, signature, secret)
