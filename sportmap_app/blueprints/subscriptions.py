# sportmap_app/blueprints/subscriptions.py
from __future__ import annotations
from flask import Blueprint, jsonify

from ..decorators import current_user_id, owner_required
from ..schemas import CancelSubscriptionIn, parse_body
from ..services.subscriptions import cancel_subscription

bp = Blueprint("subscriptions", __name__, url_prefix="/subscriptions")

@bp.route("/cancel", methods=["POST"])
@owner_required
def cancel():
    body = parse_body(CancelSubscriptionIn)
    sub = cancel_subscription(current_user_id(), body.at_period_end)
    return jsonify(id=sub.id, status=sub.status, cancelAtPeriodEnd=sub.cancel_at_period_end)
