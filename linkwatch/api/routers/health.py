"""Health endpoint used by the hosting platform's liveness probe.

Routes
------
GET /health    → {"status": "OK", "message": "Cron jobs running"}
"""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    message: str


@router.get("", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="OK", message="Cron jobs running")
