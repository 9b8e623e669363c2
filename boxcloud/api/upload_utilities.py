"""
Upload staging utilities (UploadFile → upload directory).

Files land in `UPLOAD_DIR` under a generated storage key,
``{uuid4}-{epoch milliseconds}{ext}``. The key doubles as the public file
identifier, so it is unguessable and never derived from client input other
than the extension.

Key Functions
-------------
- guess_ext            : Infer file extension from a filename.
- check_upload_intake  : Enforce file count and content type before anything is written.
- persist_upload       : Copy an UploadFile into the upload directory, enforcing the size limit.
- resolve_storage_path : Map a storage key to a path inside the upload directory.
- remove_stored_file   : Best-effort unlink; failures are logged, never raised.
- discard_staged_files : Unlink every file staged by a failed request.
"""

import logging
import os
import time
import uuid

from fastapi import UploadFile

from boxcloud.api.errors import InvalidFileType, InvalidInput, PayloadTooLarge
from boxcloud.api.models import FileRec
from boxcloud.database.config.config import settings

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
CHUNK_SIZE = 1024 * 1024


def guess_ext(filename: str | None) -> str:
    """
    Extract the file extension from a filename.

    Returns:
        str: Lowercased file extension (e.g., ".pdf").
    """
    _, ext = os.path.splitext(filename or "")
    return ext.lower()


def upload_dir() -> str:
    """Absolute upload directory, created on first use."""
    path = os.path.abspath(settings.UPLOAD_DIR)
    os.makedirs(path, exist_ok=True)
    return path


def generate_storage_key(original_name: str | None) -> str:
    return f"{uuid.uuid4()}-{int(time.time() * 1000)}{guess_ext(original_name)}"


def resolve_storage_path(key: str | None) -> str | None:
    """
    Path of `key` inside the upload directory.

    Returns None for anything that is not a plain file name (separators,
    `.`/`..`), so a key can never address a file outside the directory.
    """
    if not key or key in {".", ".."} or "/" in key or "\\" in key or "\x00" in key:
        return None
    return os.path.join(upload_dir(), key)


def check_upload_intake(files: list[UploadFile], max_files: int | None = None) -> None:
    """
    Reject a batch before staging.

    Raises:
        InvalidInput: more than `MAX_FILES_PER_UPLOAD` files.
        InvalidFileType: a file whose content type is not exactly application/pdf.
    """
    max_files = settings.MAX_FILES_PER_UPLOAD if max_files is None else max_files
    if len(files) > max_files:
        raise InvalidInput(f"A maximum of {max_files} files can be uploaded at once", error="Too many files")
    for upload in files:
        if (upload.content_type or "") != PDF_MIME_TYPE:
            raise InvalidFileType(f"Only PDF files are allowed ({upload.filename or 'unnamed file'})")


def persist_upload(f: UploadFile, max_bytes: int | None = None) -> FileRec:
    """
    Save an uploaded file into the upload directory.

    - Generates a unique storage key.
    - Copies in chunks, counting bytes; a file larger than `max_bytes` is
      removed again and `PayloadTooLarge` raised.

    Returns:
        FileRec: original name, storage key, byte size and MIME type.
    """
    max_bytes = settings.MAX_FILE_SIZE if max_bytes is None else max_bytes
    key = generate_storage_key(f.filename)
    dest = os.path.join(upload_dir(), key)
    size = 0
    try:
        f.file.seek(0)
        with open(dest, "wb") as out:
            while True:
                chunk = f.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    raise PayloadTooLarge("The uploaded file exceeds the maximum allowed size")
                out.write(chunk)
    except Exception:
        remove_stored_file(key)
        raise
    return FileRec(original=f.filename or key, filename=key, path=key, size=size, mime=(f.content_type or "").lower())


def remove_stored_file(key: str | None) -> bool:
    """
    Unlink the file stored under `key`.

    Returns:
        bool: True if a file was removed. Errors are logged and reported as False.
    """
    path = resolve_storage_path(key)
    if path is None:
        return False
    try:
        if os.path.exists(path):
            os.remove(path)
            return True
    except OSError as e:
        logger.error(f"Error deleting file {path}: {e}")
    return False


def discard_staged_files(staged: list[FileRec]) -> None:
    for rec in staged:
        remove_stored_file(rec.path)
