# sportmap_app/schemas.py
# -*- coding: utf-8 -*-
"""Esquemas de entrada da API (pydantic)."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from flask import request
from pydantic import BaseModel, Field, ValidationError

from .errors import ApiError, ApiMessages, ErrorCodes

BillingStatusIn = Literal["PENDING", "PAGO_PRESENCIALMENTE", "PAGO_SPORTMAP"]
BillingTypeIn = Literal["PRESENCIAL", "ONLINE"]


class LoginIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=180)
    password: str = Field(..., min_length=1)


class UpdateBillingIn(BaseModel):
    status: BillingStatusIn
    metadata: Optional[Dict[str, Any]] = None


class CreateBillingIn(BaseModel):
    reservation_id: int = Field(..., ge=1)
    owner_id: int = Field(..., ge=1)
    user_id: int = Field(..., ge=1)
    court_id: int = Field(..., ge=1)
    amount: float = Field(..., gt=0)
    billing_type: BillingTypeIn
    due_date: Optional[datetime] = None
    last_paid_at: Optional[datetime] = None
    next_paid_at: Optional[datetime] = None
    metadata: Optional[Dict[str, Any]] = None


class CreatePaymentIntentIn(BaseModel):
    amount: float = Field(..., gt=0)
    reservation_id: int = Field(..., ge=1, alias="reservationId")
    court_id: int = Field(..., ge=1, alias="courtId")
    user_id: int = Field(..., ge=1, alias="userId")


class CancelSubscriptionIn(BaseModel):
    at_period_end: bool = True


class ListQuery(BaseModel):
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    status: Optional[BillingStatusIn] = None


class InvoiceQuery(ListQuery):
    payment_method: Optional[str] = None
    created_at_start: Optional[datetime] = None
    created_at_end: Optional[datetime] = None


def _validate(schema: type[BaseModel], data: dict):
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        title, _ = ApiMessages.Generic.RequestError
        fields = ", ".join(".".join(str(p) for p in e["loc"]) for e in exc.errors())
        raise ApiError(title, f"Campos inválidos: {fields}", ErrorCodes.VALIDATION_ERROR, 400) from exc


def parse_body(schema: type[BaseModel]):
    return _validate(schema, request.get_json(silent=True) or {})


def parse_query(schema: type[BaseModel]):
    # ignora parâmetros vazios (?status=)
    return _validate(schema, {k: v for k, v in request.args.items() if v != ""})
