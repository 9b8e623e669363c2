"""
Service-layer operations for boxes.

Every operation is scoped to the calling user: existence and ownership are
answered by one query, so a box owned by someone else is reported exactly
like a box that does not exist (404, never 403).

Functions are wrapped with `@transactional` and receive the session as a
keyword argument.
"""

import logging
from datetime import date

from sqlalchemy.orm import Session

from boxcloud.api.errors import InvalidInput, NotFound
from boxcloud.api.qr import build_public_url, encode_qr_data_url
from boxcloud.api.upload_utilities import remove_stored_file
from boxcloud.database.core.serializers import serialize_box, serialize_entry
from boxcloud.database.daos.box_dao import BoxDao
from boxcloud.database.daos.pdf_dao import PdfDao
from boxcloud.database.entities.box import Box, BoxStatus, DEFAULT_BOX_STATUS
from boxcloud.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)


def get_owned_box_or_404(session: Session, owner_id: str, box_id: str) -> Box:
    box = BoxDao().fetchOwnedBox(session, box_id, owner_id)
    if box is None:
        raise NotFound(
            "The requested box does not exist or you do not have access to it",
            error="Box not found",
        )
    return box


def normalize_box_name(name: str | None) -> str:
    """Trimmed box name; raises InvalidInput when nothing is left."""
    name = (name or "").strip()
    if not name:
        raise InvalidInput("Box name is required and cannot be empty", error="Invalid box name")
    return name


def normalize_status(status: BoxStatus | str | None) -> str:
    """Status value to store; absent means the default."""
    if status is None or status == "":
        return DEFAULT_BOX_STATUS
    try:
        return BoxStatus(status).value
    except ValueError:
        allowed = ", ".join(s.value for s in BoxStatus)
        raise InvalidInput(f"Status must be one of: {allowed}", error="Invalid status")


@transactional
def list_boxes(session: Session, owner_id: str) -> list[dict]:
    """Boxes of the caller, newest first, each with its live `pdfCount`."""
    rows = BoxDao().fetchBoxesWithCountByUserId(session, owner_id)
    return [serialize_box(box, count) for box, count in rows]


@transactional
def get_box(session: Session, owner_id: str, box_id: str) -> dict:
    """
    One box with its entries (newest first).

    Returns
    -------
    dict
        Box JSON plus `pdfCount` and `pdfs`.
    """
    box = get_owned_box_or_404(session, owner_id, box_id)
    entries = PdfDao().fetchEntriesByBoxId(session, box.id)
    data = serialize_box(box, len(entries))
    data["pdfs"] = [serialize_entry(entry) for entry in entries]
    return data


@transactional
def create_box(
    session: Session,
    owner_id: str,
    name: str | None,
    retention_date: date | None = None,
    status: BoxStatus | str | None = None,
) -> dict:
    """
    Create a box for the caller.

    Raises
    ------
    InvalidInput
        Name missing or blank, or an unknown status.
    """
    box = Box(
        name=normalize_box_name(name),
        user_id=owner_id,
        retention_date=retention_date,
        status=normalize_status(status),
    )
    BoxDao().createBox(session, box)
    logger.info(f"Created box {box.id} for user {owner_id}")
    return serialize_box(box, 0)


@transactional
def update_box(
    session: Session,
    owner_id: str,
    box_id: str,
    name: str | None,
    retention_date: date | None = None,
    status: BoxStatus | str | None = None,
) -> dict:
    """
    Replace name, retention date and status of an owned box.

    Fields not supplied are reset: no retention date, status `active`.
    """
    box_dao = BoxDao()
    box = get_owned_box_or_404(session, owner_id, box_id)
    clean_name = normalize_box_name(name)
    clean_status = normalize_status(status)
    box_dao.updateBox(session, box, clean_name, retention_date, clean_status)
    return serialize_box(box, box_dao.countEntries(session, box.id))


@transactional
def delete_box(session: Session, owner_id: str, box_id: str) -> None:
    """
    Delete an owned box, its entries and their stored files.

    Files are unlinked first and best-effort: a file that cannot be removed is
    logged and the box is deleted anyway. Entry rows go with the box through
    the foreign-key cascade.
    """
    box = get_owned_box_or_404(session, owner_id, box_id)
    for key in PdfDao().fetchPathsByBoxId(session, box.id):
        remove_stored_file(key)
    BoxDao().deleteBox(session, box.id)
    logger.info(f"Deleted box {box_id}")


@transactional
def get_box_qr_code(session: Session, owner_id: str, box_id: str) -> dict:
    """
    QR code for the public link of an owned box.

    Returns
    -------
    dict
        {'qrCode': PNG data URL, 'url': public view URL}
    """
    box = get_owned_box_or_404(session, owner_id, box_id)
    url = build_public_url(box.id)
    return {"qrCode": encode_qr_data_url(url), "url": url}
