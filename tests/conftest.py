# tests/conftest.py
# -*- coding: utf-8 -*-
import os
import sys
import uuid
import pathlib
import tempfile
from datetime import timedelta
from decimal import Decimal

import pytest

# =====================================================================================
# Ambiente de testes (antes de qualquer import do app: config.py lê o ambiente no import)
# =====================================================================================
_fd, _DB_PATH = tempfile.mkstemp(prefix="sportmap_test_", suffix=".sqlite")
os.close(_fd)
os.environ["APP_ENV"] = "testing"
os.environ["FLASK_ENV"] = "testing"
os.environ["DISABLE_SCHEDULER"] = "1"
os.environ["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{_DB_PATH}"
os.environ.setdefault("SECRET_KEY", "testing-secret")

ROOT = pathlib.Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


# =====================================================================================
# App Flask com SQLite temporário e schema criado uma vez por sessão
# =====================================================================================
@pytest.fixture(scope="session")
def app():
    from sportmap_app import create_app
    from sportmap_app.extensions import db

    app = create_app()
    app.config.update(
        STRIPE_SECRET_KEY="sk_test_123",
        STRIPE_WEBHOOK_SECRET="whsec_test_123",
        RESEND_API_KEY="re_test_123",
        RESEND_FROM_EMAIL="SportMap <teste@sportmap.test>",
    )
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
    try:
        os.remove(_DB_PATH)
    except OSError:
        pass


@pytest.fixture(autouse=True)
def _clean_tables(app):
    yield
    from sportmap_app.extensions import db
    with app.app_context():
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    from sportmap_app.extensions import db
    with app.app_context():
        try:
            yield db.session
        finally:
            db.session.rollback()
            db.session.close()


# =====================================================================================
# Mocks de serviços externos (Stripe e Resend)
# =====================================================================================
class FakeStripe:
    """Guarda as chamadas e devolve respostas no formato da Stripe."""

    def __init__(self):
        self.created = []
        self.statuses = {}
        self.failing = set()
        self.retrieved = []
        self.modified = []
        self.event = None
        self._seq = 0

    def create_intent(self, **params):
        self._seq += 1
        pid = f"pi_test_{uuid.uuid4().hex[:6]}_{self._seq}"
        self.created.append(params)
        return {
            "id": pid,
            "status": "requires_action",
            "client_secret": f"{pid}_secret",
            "next_action": {
                "boleto_display_details": {
                    "hosted_voucher_url": f"https://stripe.example/voucher/{pid}",
                    "pdf": f"https://stripe.example/pdf/{pid}",
                }
            },
        }

    def retrieve_intent(self, ref, **_):
        self.retrieved.append(ref)
        if ref in self.failing:
            raise RuntimeError("stripe offline")
        return {"id": ref, "status": self.statuses.get(ref, "requires_action")}

    def modify_subscription(self, sub_id, **params):
        self.modified.append((sub_id, params))
        return {"id": sub_id, "status": "active", **params}

    def construct_event(self, payload, sig, secret):
        if sig != "t=1,v1=ok" or self.event is None:
            raise ValueError("bad signature")
        return self.event


@pytest.fixture(autouse=True)
def fake_stripe(monkeypatch):
    import stripe

    fake = FakeStripe()
    monkeypatch.setattr(stripe.PaymentIntent, "create", staticmethod(fake.create_intent), raising=False)
    monkeypatch.setattr(stripe.PaymentIntent, "retrieve", staticmethod(fake.retrieve_intent), raising=False)
    monkeypatch.setattr(stripe.Subscription, "modify", staticmethod(fake.modify_subscription), raising=False)
    monkeypatch.setattr(stripe.Webhook, "construct_event", staticmethod(fake.construct_event), raising=False)
    yield fake


@pytest.fixture(autouse=True)
def sent_emails(monkeypatch):
    import resend

    outbox = []

    def _send(params):
        outbox.append(params)
        return {"id": f"email_{len(outbox)}"}

    monkeypatch.setattr(resend.Emails, "send", staticmethod(_send), raising=False)
    yield outbox


# =====================================================================================
# Factories
# =====================================================================================
@pytest.fixture
def make_user(db_session):
    from sportmap_app.models import User, UserType

    def _make(**overrides):
        password = overrides.pop("password", "secret123")
        data = dict(
            first_name="Maria",
            last_name="Silva",
            email=f"user+{uuid.uuid4().hex[:6]}@test.com",
            user_type=UserType.USER,
        )
        data.update(overrides)
        u = User(**data)
        u.set_password(password)
        db_session.add(u); db_session.commit()
        return u
    return _make


@pytest.fixture
def plan(db_session):
    from sportmap_app.models import SubscriptionPlan
    p = SubscriptionPlan(name="Básico", description="1 quadra", price_cents=9990, court_limit=1)
    db_session.add(p); db_session.commit()
    return p


@pytest.fixture
def make_owner(db_session, make_user, plan):
    from sportmap_app.models import Court, UserType

    def _make(with_court=True, **overrides):
        data = dict(
            first_name="João",
            last_name="Pereira",
            user_type=UserType.HOUSE_OWNER,
            document="12345678909",
            subscription_plan_id=plan.id,
        )
        data.update(overrides)
        owner = make_user(**data)
        if with_court:
            db_session.add(Court(
                owner_id=owner.id, name="Arena Central", address="Rua das Quadras, 100",
                city="São Paulo", state="SP", postal_code="01001-000",
            ))
            db_session.commit()
        return owner
    return _make


@pytest.fixture
def owner(make_owner):
    return make_owner()


@pytest.fixture
def customer(make_user):
    return make_user(first_name="Ana", last_name="Souza")


@pytest.fixture
def make_billing(db_session, owner, customer):
    from sportmap_app.models import Billing, BillingStatus, BillingType, Court

    court = Court.query.filter_by(owner_id=owner.id).first()

    def _make(**overrides):
        data = dict(
            reservation_id=1,
            court_id=court.id,
            owner_id=owner.id,
            user_id=customer.id,
            amount=Decimal("100.50"),
            billing_type=BillingType.PRESENCIAL,
            status=BillingStatus.PENDING,
        )
        data.update(overrides)
        b = Billing(**data)
        db_session.add(b); db_session.commit()
        return b
    return _make


@pytest.fixture
def make_payment(db_session):
    from sportmap_app.models import Payment, PaymentMethod, PaymentStatus
    from sportmap_app.utils import utcnow

    def _make(user, **overrides):
        data = dict(
            user_id=user.id,
            amount=9990,
            status=PaymentStatus.PENDING,
            method=PaymentMethod.BOLETO,
            provider_payment_id=f"pi_{uuid.uuid4().hex[:10]}",
            boleto_expires_at=utcnow() + timedelta(days=7),
        )
        data.update(overrides)
        p = Payment(**data)
        db_session.add(p); db_session.commit()
        return p
    return _make


# =====================================================================================
# Clientes logados
# =====================================================================================
def _login(client, user):
    with client.session_transaction() as sess:
        sess["user"] = {"id": user.id, "email": user.email, "user_type": user.user_type}
    return client


@pytest.fixture
def logged_client_owner(client, owner):
    return _login(client, owner)


@pytest.fixture
def logged_client_user(client, customer):
    return _login(client, customer)
