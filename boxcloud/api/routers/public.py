"""
FastAPI Router — Public box view (no authentication)
"""

from typing import Optional

from fastapi import APIRouter, Depends

from boxcloud.api.dependencies import get_optional_user
from boxcloud.api.models import AuthenticatedUser
from boxcloud.database.core.public_funcs import get_public_box, get_public_box_stats

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/boxes/{box_id}")
def public_box(box_id: str, viewer: Optional[AuthenticatedUser] = Depends(get_optional_user)):
    """Box name, owner name and entries; `isOwner` is true for the signed-in owner."""
    return get_public_box(box_id=box_id, viewer_id=viewer.id if viewer else None)


@router.get("/boxes/{box_id}/stats")
def public_box_stats(box_id: str):
    return get_public_box_stats(box_id=box_id)
