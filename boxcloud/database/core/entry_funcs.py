"""
Service-layer operations for box entries.

Upload pipeline
---------------
`upload_entries` keeps the upload directory and the `pdfs` table consistent:

1. The box must exist and belong to the caller (404 otherwise).
2. Titles are normalized (see :func:`normalize_titles` / :func:`expand_titles`).
3. The batch is checked (file count, content type) before anything is written.
4. Every file is staged into the upload directory under a fresh storage key.
5. All rows are inserted in one transaction (:func:`create_entries`).

If staging or the insert fails, every file staged by the request is removed
and no row survives. Domain errors (e.g. 413 for an oversized file) reach the
caller unchanged; anything else is logged and reported as a 500.
"""

import logging

from fastapi import HTTPException, UploadFile
from sqlalchemy.orm import Session

from boxcloud.api.errors import InternalError, InvalidInput, NotFound
from boxcloud.api.models import FileRec
from boxcloud.api.upload_utilities import (
    check_upload_intake,
    discard_staged_files,
    persist_upload,
    remove_stored_file,
)
from boxcloud.database.core.box_funcs import get_owned_box_or_404
from boxcloud.database.core.serializers import serialize_entry
from boxcloud.database.daos.pdf_dao import PdfDao
from boxcloud.database.entities.pdf_entry import PdfEntry
from boxcloud.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)


def normalize_titles(title: str | None = None, titles: list[str] | str | None = None) -> list[str]:
    """
    Collect the requested titles.

    `titles` (a single value or a list) takes precedence over `title`. The
    result stays positional so that ``titles[i]`` still belongs to file ``i``:
    each value is trimmed and a blank slot takes the first non-blank title.

    Raises
    ------
    InvalidInput
        Every supplied title is blank, or none was supplied.
    """
    if titles:
        candidates = [titles] if isinstance(titles, str) else list(titles)
    elif title is not None:
        candidates = [title]
    else:
        candidates = []

    trimmed = [str(t).strip() if t is not None else "" for t in candidates]
    first = next((t for t in trimmed if t), None)
    if first is None:
        raise InvalidInput("Please provide at least one title", error="Title required")
    return [t or first for t in trimmed]


def expand_titles(titles: list[str], file_count: int) -> list[str]:
    """One title for several files becomes ``"T (1)" ... "T (K)"``."""
    if file_count > 1 and len(titles) == 1:
        return [f"{titles[0]} ({i + 1})" for i in range(file_count)]
    return titles


def pair_title(titles: list[str], index: int) -> str:
    if index < len(titles):
        return titles[index]
    if titles:
        return titles[0]
    return f"Untitled {index + 1}"


@transactional
def create_entries(session: Session, box_id: str, staged: list[FileRec], titles: list[str]) -> list[dict]:
    """
    Insert one row per (file, title) position.

    Position ``i`` pairs ``staged[i]`` (if any) with ``titles[i]``, falling back
    to the first title. Positions without a file become title-only rows.
    """
    pdf_dao = PdfDao()
    created = []
    for i in range(max(len(staged), len(titles))):
        title = pair_title(titles, i)
        if i < len(staged):
            rec = staged[i]
            entry = PdfEntry(
                title=title,
                box_id=box_id,
                filename=rec.filename,
                original_name=rec.original,
                path=rec.path,
                size=rec.size,
            )
            pdf_dao.createEntry(session, entry)
        else:
            entry = pdf_dao.createTitleOnlyEntry(session, PdfEntry(title=title, box_id=box_id))
        created.append(serialize_entry(entry))
    return created


@transactional
def _check_upload_target(session: Session, owner_id: str, box_id: str) -> None:
    get_owned_box_or_404(session, owner_id, box_id)


def upload_entries(
    owner_id: str,
    box_id: str,
    files: list[UploadFile] | None = None,
    title: str | None = None,
    titles: list[str] | str | None = None,
) -> list[dict]:
    """
    Upload files and/or titles into an owned box.

    Parameters
    ----------
    owner_id : str
        Id of the authenticated caller.
    box_id : str
        Target box.
    files : list[UploadFile] | None
        Multipart files, in request order.
    title, titles
        Title form fields; `titles` wins when both are present.

    Returns
    -------
    list[dict]
        Created entries, in request order.

    Raises
    ------
    NotFound
        Box missing or not owned by the caller.
    InvalidInput / InvalidFileType
        No title, too many files, or a non-PDF file.
    PayloadTooLarge
        A file exceeds the size limit.
    InternalError
        Any unexpected failure while staging or inserting.
    """
    files = [f for f in (files or []) if f is not None and (f.filename or f.size)]

    _check_upload_target(owner_id=owner_id, box_id=box_id)
    clean_titles = expand_titles(normalize_titles(title, titles), len(files))
    check_upload_intake(files)

    staged: list[FileRec] = []
    try:
        for upload in files:
            staged.append(persist_upload(upload))
        # Ownership is re-checked inside the insert transaction.
        return _insert_owned_entries(owner_id=owner_id, box_id=box_id, staged=staged, titles=clean_titles)
    except HTTPException:
        discard_staged_files(staged)
        raise
    except Exception as e:
        discard_staged_files(staged)
        logger.error(f"Upload into box {box_id} failed: {e}", exc_info=e)
        raise InternalError("An error occurred while creating the entries", error="Failed to upload entries") from e


@transactional
def _insert_owned_entries(session: Session, owner_id: str, box_id: str, staged: list[FileRec], titles: list[str]):
    get_owned_box_or_404(session, owner_id, box_id)
    return create_entries(box_id=box_id, staged=staged, titles=titles)


@transactional
def create_title_only_entry(session: Session, owner_id: str, box_id: str, title: str | None) -> dict:
    """
    Add an entry without a file.

    Raises
    ------
    NotFound
        Box missing or not owned (checked before the title).
    InvalidInput
        Title missing or blank.
    """
    get_owned_box_or_404(session, owner_id, box_id)
    clean_title = (title or "").strip()
    if not clean_title:
        raise InvalidInput("Title is required and cannot be empty", error="Title required")
    entry = PdfDao().createTitleOnlyEntry(session, PdfEntry(title=clean_title, box_id=box_id))
    return serialize_entry(entry)


@transactional
def delete_entry(session: Session, owner_id: str, box_id: str, entry_id: str) -> None:
    """Remove an entry of an owned box and, best-effort, its stored file."""
    get_owned_box_or_404(session, owner_id, box_id)
    pdf_dao = PdfDao()
    entry = pdf_dao.fetchEntryInBox(session, entry_id, box_id)
    if entry is None:
        raise NotFound("The requested entry does not exist in this box", error="Entry not found")
    if entry.path:
        remove_stored_file(entry.path)
    pdf_dao.deleteEntry(session, entry)
    logger.info(f"Deleted entry {entry_id} from box {box_id}")


@transactional
def find_entry_by_storage_key(session: Session, key: str) -> dict | None:
    """Entry referencing the stored file `key`, or None for orphan files."""
    entry = PdfDao().fetchEntryByPath(session, key)
    if entry is None:
        return None
    return {"id": entry.id, "title": entry.title, "originalName": entry.original_name or None, "path": entry.path}
