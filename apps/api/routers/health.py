# apps/api/routers/health.py
from __future__ import annotations
from fastapi import APIRouter, Request

router = APIRouter()

@router.get("/health")
def health(request: Request):
    data = getattr(request.app.state, "data", None)
    return {"status": "ok", "data_version": data.version if data is not None else None}
