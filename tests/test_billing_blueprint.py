# tests/test_billing_blueprint.py
from sportmap_app.services.billing import AUTO_NOTES


def _pending_invoice(db_session, billing):
    from sportmap_app.models import Invoice
    from sportmap_app.services.billing import build_invoice
    from sportmap_app.utils import utcnow

    inv = build_invoice(billing, utcnow(), utcnow())
    db_session.add(inv); db_session.commit()
    return inv


def test_owner_marks_billing_paid(logged_client_owner, db_session, owner, make_billing):
    from sportmap_app.models import Billing, Invoice

    b = make_billing()
    inv = _pending_invoice(db_session, b)

    r = logged_client_owner.patch(f"/billing/{b.id}/payment-status",
                                  json={"status": "PAGO_PRESENCIALMENTE", "metadata": {"caixa": "2"}})
    assert r.status_code == 200
    body = r.get_json()
    assert body["status"] == "PAGO_PRESENCIALMENTE"
    assert body["paidAt"] is not None
    assert body["nextPaidAt"] is not None

    db_session.expire_all()
    fresh = db_session.get(Invoice, inv.id)
    assert fresh.status == "PAGO_PRESENCIALMENTE"
    assert fresh.meta["caixa"] == "2"
    assert fresh.meta["updatedBy"] == str(owner.id)
    assert fresh.notes == AUTO_NOTES


def test_other_owner_is_forbidden(client, db_session, make_owner, make_billing):
    from conftest import _login
    from sportmap_app.models import Billing

    b = make_billing()
    intruder = make_owner()
    _login(client, intruder)

    r = client.patch(f"/billing/{b.id}/payment-status", json={"status": "PAGO_SPORTMAP"})
    assert r.status_code == 403
    assert r.get_json()["title"] == "Acesso negado"

    db_session.expire_all()
    fresh = db_session.get(Billing, b.id)
    assert fresh.status == "PENDING"
    assert fresh.paid_at is None


def test_customer_cannot_update_status(logged_client_user, make_billing):
    b = make_billing()
    r = logged_client_user.patch(f"/billing/{b.id}/payment-status", json={"status": "PAGO_SPORTMAP"})
    assert r.status_code == 403


def test_missing_billing_returns_404(logged_client_owner):
    r = logged_client_owner.patch("/billing/999999/payment-status", json={"status": "PAGO_SPORTMAP"})
    assert r.status_code == 404
    assert r.get_json()["code"] == "BILLING_NOT_FOUND"


def test_invalid_status_returns_400(logged_client_owner, make_billing):
    b = make_billing()
    r = logged_client_owner.patch(f"/billing/{b.id}/payment-status", json={"status": "PAGO"})
    assert r.status_code == 400
    body = r.get_json()
    assert body["code"] == "VALIDATION_ERROR"
    assert "status" in body["message"]


def test_requires_login(client, make_billing):
    b = make_billing()
    r = client.patch(f"/billing/{b.id}/payment-status", json={"status": "PAGO_SPORTMAP"})
    assert r.status_code == 401


def test_user_and_owner_listings(client, owner, customer, make_billing):
    from conftest import _login

    make_billing()
    make_billing(status="PAGO_SPORTMAP")

    _login(client, customer)
    r = client.get("/billing/user?limit=1")
    assert r.status_code == 200
    body = r.get_json()
    assert body["total"] == 2
    assert len(body["data"]) == 1

    _login(client, owner)
    r = client.get("/billing/owner?status=PAGO_SPORTMAP")
    body = r.get_json()
    assert body["total"] == 1
    assert body["data"][0]["status"] == "PAGO_SPORTMAP"


def test_reservation_listing(logged_client_user, make_billing):
    make_billing(reservation_id=42)
    make_billing(reservation_id=7)
    body = logged_client_user.get("/billing/reservation/42").get_json()
    assert body["total"] == 1
    assert body["data"][0]["reservationId"] == 42


def test_invoices_route(logged_client_user, client, db_session, make_user, make_billing):
    from conftest import _login

    b = make_billing()
    _pending_invoice(db_session, b)

    r = logged_client_user.get(f"/billing/{b.id}/invoices")
    assert r.status_code == 200
    body = r.get_json()
    assert body["total"] == 1
    assert body["data"][0]["invoiceNumber"].startswith("INV-")

    _login(client, make_user())
    assert client.get(f"/billing/{b.id}/invoices").status_code == 403
