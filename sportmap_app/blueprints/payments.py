# sportmap_app/blueprints/payments.py
from __future__ import annotations
from flask import Blueprint, jsonify, request

from ..decorators import current_user_id, login_required, owner_required
from ..schemas import CreatePaymentIntentIn, parse_body
from ..services import payments as payments_service

bp = Blueprint("payments", __name__, url_prefix="/payments")

@bp.route("/create-payment-intent", methods=["POST"])
@login_required
def create_payment_intent():
    body = parse_body(CreatePaymentIntentIn)
    return jsonify(payments_service.create_payment_intent(body))

@bp.route("/webhook", methods=["POST"])  # configure endpoint no Dashboard da Stripe
def stripe_webhook():
    sig = request.headers.get("Stripe-Signature", "")
    return jsonify(payments_service.handle_webhook(sig, request.data))

@bp.route("/boletos")
@owner_required
def list_boletos():
    return jsonify([p.to_dict() for p in payments_service.get_user_boletos(current_user_id())])
