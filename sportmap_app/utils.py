# sportmap_app/utils.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime, timezone


def utcnow() -> datetime:
    # datas gravadas sem tzinfo, sempre em UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


def paginate(query, page: int = 1, limit: int = 10):
    """Aplica offset/limit e devolve (itens, total)."""
    page = max(int(page or 1), 1)
    limit = max(int(limit or 10), 1)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total
