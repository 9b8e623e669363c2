"""
FastAPI Router — Stored file transfer (no authentication)
=========================================================

A file is served only when it exists in the upload directory AND an entry
row references it. Files left behind without a row (orphans) are reported as
404 exactly like missing ones.
"""

import os

from fastapi import APIRouter
from fastapi.responses import FileResponse

from boxcloud.api.errors import NotFound
from boxcloud.api.upload_utilities import PDF_MIME_TYPE, resolve_storage_path
from boxcloud.database.core.entry_funcs import find_entry_by_storage_key

router = APIRouter(prefix="/files", tags=["files"])


def _file_response(key: str, disposition: str) -> FileResponse:
    path = resolve_storage_path(key)
    if path is None or not os.path.isfile(path):
        raise NotFound("The requested file does not exist", error="File not found")
    entry = find_entry_by_storage_key(key=key)
    if entry is None:
        raise NotFound("The requested file does not exist in our records", error="File not found")
    return FileResponse(
        path,
        media_type=PDF_MIME_TYPE,
        filename=entry["originalName"] or key,
        content_disposition_type=disposition,
    )


@router.get("/{key}")
def serve_file(key: str):
    """Display the PDF in the browser (`Content-Disposition: inline`)."""
    return _file_response(key, "inline")


@router.get("/{key}/download")
def download_file(key: str):
    """Download the PDF (`Content-Disposition: attachment`)."""
    return _file_response(key, "attachment")
