"""Explicit generate and deploy triggers. Failures surface to the caller."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.api.deps import get_publisher, require_auth
from backend.services.publish_service import SitePublisher

router = APIRouter(prefix="/api", tags=["site"], dependencies=[Depends(require_auth)])


class GenerateResponse(BaseModel):
    message: str
    pages: int


class DeployResponse(BaseModel):
    message: str
    files: int


@router.post("/generate")
async def generate_site(
    publisher: Annotated[SitePublisher, Depends(get_publisher)],
) -> GenerateResponse:
    """Regenerate every page, then run the post-generate hooks."""
    count = await publisher.after_change("explicit generate")
    return GenerateResponse(message="Site generated", pages=count)


@router.post("/deploy")
async def deploy_site(
    publisher: Annotated[SitePublisher, Depends(get_publisher)],
) -> DeployResponse:
    files = await publisher.deploy()
    return DeployResponse(message="Deployment complete", files=files)
