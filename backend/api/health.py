"""Health check endpoint."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.api.deps import get_settings
from backend.config import Settings

VERSION = "0.1.0"

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    output: str


@router.get("/api/health", response_model=HealthResponse)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
) -> HealthResponse:
    """Health check endpoint for monitoring and load balancers."""
    output_status = "ok" if (settings.output_dir / "index.html").is_file() else "missing"
    return HealthResponse(
        status="ok" if output_status == "ok" else "degraded",
        version=VERSION,
        output=output_status,
    )
