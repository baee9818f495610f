# sportmap_app/blueprints/notifications.py
from __future__ import annotations
from flask import Blueprint, jsonify, request

from ..decorators import current_user_id, login_required
from ..services import notifications as notification_service

bp = Blueprint("notifications", __name__, url_prefix="/notifications")

@bp.route("")
@login_required
def list_notifications():
    unread = request.args.get("unread") in ("1", "true")
    items = notification_service.list_notifications(current_user_id(), unread_only=unread)
    return jsonify([n.to_dict() for n in items])

@bp.route("/<int:notification_id>/read", methods=["PATCH"])
@login_required
def mark_read(notification_id: int):
    n = notification_service.mark_as_read(current_user_id(), notification_id)
    return jsonify(n.to_dict())
