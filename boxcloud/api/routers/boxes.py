"""
FastAPI Router — Boxes and entries (authenticated)
==================================================

Every route requires a bearer token. Boxes belonging to other users are
reported as 404.

- GET    /boxes                       : list own boxes with `pdfCount`
- POST   /boxes                       : create a box
- GET    /boxes/{box_id}              : one box with its entries
- PUT    /boxes/{box_id}              : replace name / retention date / status
- DELETE /boxes/{box_id}              : delete box, entries and stored files
- GET    /boxes/{box_id}/qr           : QR code of the public link
- POST   /boxes/{box_id}/pdfs         : multipart upload (`pdfs`, `title` / `titles`)
- POST   /boxes/{box_id}/titles       : title-only entry
- DELETE /boxes/{box_id}/pdfs/{pdf_id}: delete one entry
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from boxcloud.api.dependencies import get_current_user
from boxcloud.api.models import AuthenticatedUser, BoxRequest, TitleRequest
from boxcloud.database.core.box_funcs import (
    create_box,
    delete_box,
    get_box,
    get_box_qr_code,
    list_boxes,
    update_box,
)
from boxcloud.database.core.entry_funcs import create_title_only_entry, delete_entry, upload_entries

router = APIRouter(prefix="/boxes", tags=["boxes"])


@router.get("")
def get_boxes(user: AuthenticatedUser = Depends(get_current_user)):
    return list_boxes(owner_id=user.id)


@router.post("", status_code=status.HTTP_201_CREATED)
def new_box(data: BoxRequest, user: AuthenticatedUser = Depends(get_current_user)):
    """Create a box. 400 when the name is blank."""
    return create_box(
        owner_id=user.id,
        name=data.name,
        retention_date=data.retention_date,
        status=data.status,
    )


@router.get("/{box_id}")
def read_box(box_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    return get_box(owner_id=user.id, box_id=box_id)


@router.put("/{box_id}")
def replace_box(box_id: str, data: BoxRequest, user: AuthenticatedUser = Depends(get_current_user)):
    """Full replace: omitted `retentionDate` clears it, omitted `status` resets it to `active`."""
    return update_box(
        owner_id=user.id,
        box_id=box_id,
        name=data.name,
        retention_date=data.retention_date,
        status=data.status,
    )


@router.delete("/{box_id}")
def remove_box(box_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    delete_box(owner_id=user.id, box_id=box_id)
    return {"message": "Box deleted successfully"}


@router.get("/{box_id}/qr")
def box_qr_code(box_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    return get_box_qr_code(owner_id=user.id, box_id=box_id)


@router.post("/{box_id}/pdfs", status_code=status.HTTP_201_CREATED)
def upload_pdfs(
    box_id: str,
    pdfs: Optional[List[UploadFile]] = File(None),
    title: Optional[str] = Form(None),
    titles: Optional[List[str]] = Form(None),
    user: AuthenticatedUser = Depends(get_current_user),
):
    """Upload PDF files and/or titles.

    Multipart fields:
        pdfs   : zero or more PDF files
        title  : one title
        titles : one or more titles (takes precedence over `title`)

    Response:
        201: list of created entries, in request order
        400: no title, too many files, non-PDF file
        404: box missing or not owned
        413: file too large
    """
    return upload_entries(owner_id=user.id, box_id=box_id, files=pdfs, title=title, titles=titles)


@router.post("/{box_id}/titles", status_code=status.HTTP_201_CREATED)
def add_title(box_id: str, data: TitleRequest, user: AuthenticatedUser = Depends(get_current_user)):
    return create_title_only_entry(owner_id=user.id, box_id=box_id, title=data.title)


@router.delete("/{box_id}/pdfs/{pdf_id}")
def remove_entry(box_id: str, pdf_id: str, user: AuthenticatedUser = Depends(get_current_user)):
    delete_entry(owner_id=user.id, box_id=box_id, entry_id=pdf_id)
    return {"message": "Entry deleted successfully"}
