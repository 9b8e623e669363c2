"""
Entity → JSON-ready dict conversions shared by the core functions.

Keys are camelCase because they form the public HTTP contract.
"""

from datetime import date, datetime, timezone

from boxcloud.database.entities.box import Box
from boxcloud.database.entities.pdf_entry import PdfEntry


def to_iso(value: datetime | date | None) -> str | None:
    """ISO 8601 text; naive datetimes read back from SQLite are UTC."""
    if value is None:
        return None
    if isinstance(value, datetime) and value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def serialize_box(box: Box, pdf_count: int | None = None) -> dict:
    data = {
        "id": box.id,
        "name": box.name,
        "retentionDate": to_iso(box.retention_date),
        "status": box.status,
        "createdAt": to_iso(box.created_at),
    }
    if pdf_count is not None:
        data["pdfCount"] = int(pdf_count)
    return data


def serialize_entry(entry: PdfEntry) -> dict:
    """Entry payload; placeholder `''` file fields from legacy rows are reported as null."""
    has_file = entry.has_file
    return {
        "id": entry.id,
        "title": entry.title,
        "filename": entry.filename if has_file else None,
        "originalName": (entry.original_name or None) if has_file else None,
        "path": entry.path if has_file else None,
        "size": int(entry.size or 0) if has_file else 0,
        "uploadDate": to_iso(entry.upload_date),
        "hasFile": has_file,
    }
