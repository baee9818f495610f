# sportmap_app/decorators.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from functools import wraps
from flask import session

from .errors import ApiMessages, ErrorCodes, ApiError, ForbiddenError
from .models import UserType


def current_user_id() -> int | None:
    user = session.get("user") or {}
    return user.get("id")


def login_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        if not session.get("user"):
            raise ApiError.of(ApiMessages.Auth.LoginRequired, ErrorCodes.UNAUTHENTICATED, 401)
        return view_func(*args, **kwargs)
    return wrapper

def owner_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        user = session.get("user")
        if not user:
            raise ApiError.of(ApiMessages.Auth.LoginRequired, ErrorCodes.UNAUTHENTICATED, 401)
        if user.get("user_type") != UserType.HOUSE_OWNER:
            raise ForbiddenError.of(ApiMessages.Auth.Forbidden, ErrorCodes.UNAUTHORIZED)
        return view_func(*args, **kwargs)
    return wrapper
