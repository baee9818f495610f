# sportmap_app/blueprints/billing.py
from __future__ import annotations
from flask import Blueprint, current_app, jsonify

from ..decorators import current_user_id, login_required, owner_required
from ..schemas import InvoiceQuery, ListQuery, UpdateBillingIn, parse_body, parse_query
from ..services import billing as billing_service

bp = Blueprint("billing", __name__, url_prefix="/billing")

def _page(result: dict):
    return jsonify(data=[b.to_dict() for b in result["data"]], total=result["total"])

@bp.route("/<int:billing_id>/payment-status", methods=["PATCH"])
@owner_required
def update_payment_status(billing_id: int):
    """Atualiza status de pagamento (pagamentos presenciais)."""
    body = parse_body(UpdateBillingIn)
    user_id = current_user_id()
    current_app.logger.info("Atualizando status da cobrança %s para %s (usuário %s)",
                            billing_id, body.status, user_id)
    billing = billing_service.update_billing_status(user_id, billing_id, body.status, body.metadata)
    return jsonify(billing.to_dict())

@bp.route("/user")
@login_required
def user_billings():
    q = parse_query(ListQuery)
    return _page(billing_service.get_billings_by_user(current_user_id(), q.page, q.limit, q.status))

@bp.route("/owner")
@owner_required
def owner_billings():
    q = parse_query(ListQuery)
    return _page(billing_service.get_billings_by_owner(current_user_id(), q.page, q.limit, q.status))

@bp.route("/reservation/<int:reservation_id>")
@login_required
def reservation_billings(reservation_id: int):
    q = parse_query(ListQuery)
    return _page(billing_service.get_billings_by_reservation(reservation_id, q.page, q.limit, q.status))

@bp.route("/<int:billing_id>/invoices")
@login_required
def billing_invoices(billing_id: int):
    q = parse_query(InvoiceQuery)
    result = billing_service.get_invoices_by_billing_id(
        current_user_id(), billing_id, q.page, q.limit,
        status=q.status, payment_method=q.payment_method,
        created_at_start=q.created_at_start, created_at_end=q.created_at_end,
    )
    return jsonify(data=[i.to_dict() for i in result["data"]], total=result["total"])
