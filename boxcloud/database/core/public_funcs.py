"""
Read-only projections of a box for unauthenticated viewers.

The public view never exposes the retention date, the status, or the
owner's id and e-mail; only the owner's display name is shown.
"""

from sqlalchemy.orm import Session

from boxcloud.api.errors import NotFound
from boxcloud.database.core.serializers import serialize_entry, to_iso
from boxcloud.database.daos.box_dao import BoxDao
from boxcloud.database.daos.pdf_dao import PdfDao
from boxcloud.database.helpers.transactionManagement import transactional


def _box_not_found() -> NotFound:
    return NotFound("The requested box does not exist", error="Box not found")


@transactional
def get_public_box(session: Session, box_id: str, viewer_id: str | None = None) -> dict:
    """
    Public view of a box and its entries (newest first).

    Parameters
    ----------
    box_id : str
        Box to show.
    viewer_id : str | None
        Id of an authenticated viewer, if any; only used for `isOwner`.
    """
    row = BoxDao().fetchBoxWithOwnerName(session, box_id)
    if row is None:
        raise _box_not_found()
    box, owner_name = row
    entries = PdfDao().fetchEntriesByBoxId(session, box.id)
    return {
        "id": box.id,
        "name": box.name,
        "createdAt": to_iso(box.created_at),
        "ownerName": owner_name,
        "pdfCount": len(entries),
        "pdfs": [serialize_entry(entry) for entry in entries],
        "isOwner": viewer_id is not None and viewer_id == box.user_id,
    }


@transactional
def get_public_box_stats(session: Session, box_id: str) -> dict:
    """Entry count, file count, total bytes and upload time range of a box."""
    if BoxDao().fetchBoxById(session, box_id) is None:
        raise _box_not_found()
    total, files, size, first, last = PdfDao().fetchStatsByBoxId(session, box_id)
    return {
        "boxId": box_id,
        "totalEntries": int(total or 0),
        "totalFiles": int(files or 0),
        "totalSize": int(size or 0),
        "firstUpload": to_iso(first),
        "lastUpload": to_iso(last),
    }
