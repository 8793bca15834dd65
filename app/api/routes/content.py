"""
API routes for the content-managed pages (about sections, FAQs,
policies, contact details).
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from supabase import Client

from app.api.deps import get_admin_db, get_db
from app.db.models import ContentSection
from app.db.repository import CONTENT_TABLES, ContentRepository
from app.domain.categories import SERVICE_CATEGORIES

router = APIRouter(prefix="/api/content", tags=["content"])


class UpsertSectionRequest(BaseModel):
    title: str
    content: str
    content_type: str = "text"


@router.get("/categories")
async def list_categories() -> list[dict[str, Any]]:
    return [category.model_dump() for category in SERVICE_CATEGORIES]


@router.get("/{kind}")
async def list_content(kind: str, db: Client = Depends(get_db)) -> list[dict[str, Any]]:
    if kind not in CONTENT_TABLES:
        raise HTTPException(status_code=404, detail=f"Unknown content kind: {kind}")
    return ContentRepository(db).fetch(kind)


@router.put("/sections/{section_key}", response_model=ContentSection)
async def upsert_section(
    section_key: str,
    request: UpsertSectionRequest,
    db: Client = Depends(get_admin_db),
) -> dict[str, Any]:
    return ContentRepository(db).upsert_section(
        section_key,
        title=request.title,
        content=request.content,
        content_type=request.content_type,
    )
