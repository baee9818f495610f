# sportmap_app/models/__init__.py
# -*- coding: utf-8 -*-
from .user import User, UserType
from .court import Court
from .plan import SubscriptionPlan, Subscription, PlanType
from .payment import Payment, PaymentStatus, PaymentMethod, InvalidTransition
from .billing import Billing, BillingStatus, BillingType
from .invoice import Invoice, InvoicePaymentMethod
from .notification import Notification


__all__ = [
    "User",
    "UserType",
    "Court",
    "SubscriptionPlan",
    "Subscription",
    "PlanType",
    "Payment",
    "PaymentStatus",
    "PaymentMethod",
    "InvalidTransition",
    "Billing",
    "BillingStatus",
    "BillingType",
    "Invoice",
    "InvoicePaymentMethod",
    "Notification",
]
