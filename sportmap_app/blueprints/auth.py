# sportmap_app/blueprints/auth.py
# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, jsonify, session

from ..errors import ApiError, ApiMessages, ErrorCodes
from ..models import User
from ..schemas import LoginIn, parse_body

bp = Blueprint("auth", __name__, url_prefix="/auth")

@bp.route("/login", methods=["POST"])
def login():
    body = parse_body(LoginIn)
    u = User.query.filter_by(email=body.email.strip().lower()).first()
    if not u or not u.check_password(body.password):
        raise ApiError.of(ApiMessages.Auth.InvalidCredentials, ErrorCodes.INVALID_CREDENTIALS, 401)

    session["user"] = {"id": u.id, "email": u.email, "user_type": u.user_type}
    return jsonify(id=u.id, name=u.full_name, email=u.email, userType=u.user_type)

@bp.route("/logout", methods=["POST"])
def logout():
    session.clear()
    return jsonify(ok=True)
