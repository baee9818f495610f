# sportmap_app/models/court.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from ..extensions import db
from ..utils import utcnow


class Court(db.Model):
    __tablename__ = "courts"

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    name = db.Column(db.String(120), nullable=False)
    # endereço usado nos dados de cobrança do boleto
    address = db.Column(db.String(255), nullable=False)
    city = db.Column(db.String(120), nullable=False)
    state = db.Column(db.String(2), nullable=False)
    postal_code = db.Column(db.String(12), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
