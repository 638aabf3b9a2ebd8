# wacontacts/api/v1/endpoints/imports.py
"""
CSV contact import endpoints.

A session walks through upload -> mapping -> preview -> done. Every step is
its own request so the dashboard can render the modal between steps, and a
failed step leaves the session where it was.
"""
import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Response, UploadFile, status

from wacontacts.api.v1.dependencies import get_contacts_client, get_owner, get_store
from wacontacts.core.config import settings
from wacontacts.core.exceptions import ValidationError
from wacontacts.schemas.contact import ImportResult
from wacontacts.schemas.import_session import ColumnMapping, ImportSessionResponse, TextImportRequest
from wacontacts.services.contacts.client import ContactsAPIClient
from wacontacts.services.imports.normalizer import parse_manual_entries
from wacontacts.services.imports.store import ImportSessionStore
from wacontacts.services.imports.templates import SAMPLE_CSV, SAMPLE_FILENAME

router = APIRouter()
logger = logging.getLogger("wacontacts.imports")

ALLOWED_EXTENSIONS = {".csv"}


@router.post("", response_model=ImportSessionResponse, status_code=status.HTTP_201_CREATED)
async def create_import_session(
    owner: str = Depends(get_owner),
    store: ImportSessionStore = Depends(get_store),
) -> ImportSessionResponse:
    """Open a new import session in the upload step."""
    session = store.create(owner)
    return session.to_response()


@router.get("/sample")
async def download_sample_csv() -> Response:
    """Download the fixed sample CSV to model an import file on."""
    return Response(
        content=SAMPLE_CSV,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{SAMPLE_FILENAME}"'},
    )


@router.post("/manual", response_model=ImportResult)
async def manual_import(
    request: TextImportRequest,
    client: ContactsAPIClient = Depends(get_contacts_client),
) -> ImportResult:
    """
    Import quick-entry text directly, one "phone,name,email" per line.
    
    No header, no mapping and no preview: the contacts go to the backend
    as one batch.
    """
    contacts = parse_manual_entries(request.text)
    if not contacts:
        raise ValidationError(message="No valid contacts found", code="NO_VALID_CONTACTS")
    return await client.import_contacts(contacts)


@router.get("/{session_id}", response_model=ImportSessionResponse)
async def get_import_session(
    session_id: str,
    owner: str = Depends(get_owner),
    store: ImportSessionStore = Depends(get_store),
) -> ImportSessionResponse:
    """Get the current state of an import session."""
    return store.get(session_id, owner).to_response()


@router.post("/{session_id}/file", response_model=ImportSessionResponse)
async def upload_csv_file(
    session_id: str,
    file: UploadFile = File(..., description="CSV file containing contact data"),
    owner: str = Depends(get_owner),
    store: ImportSessionStore = Depends(get_store),
) -> ImportSessionResponse:
    """
    Load an uploaded CSV file into the session.
    
    Parses the header and the first rows for preview, proposes a column
    mapping and moves the session to the mapping step.
    
    Raises:
        ValidationError: Wrong extension, too large, not UTF-8, or fewer
            than two non-blank lines
        ImportStateError: Session is not in the upload step
    """
    session = store.get(session_id, owner)
    filename = file.filename or ""
    if Path(filename).suffix.lower() not in ALLOWED_EXTENSIONS:
        raise ValidationError(
            message="Please select a CSV file",
            code="INVALID_FILE_TYPE",
            details={"filename": filename},
        )

    content = await file.read(settings.IMPORT_MAX_FILE_SIZE + 1)
    if len(content) > settings.IMPORT_MAX_FILE_SIZE:
        raise ValidationError(
            message=f"File exceeds {settings.IMPORT_MAX_FILE_SIZE // (1024 * 1024)}MB limit",
            code="FILE_TOO_LARGE",
        )
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError(message="Failed to read file", code="INVALID_ENCODING")

    session.load_text(text, filename=filename)
    return session.to_response()


@router.post("/{session_id}/text", response_model=ImportSessionResponse)
async def upload_csv_text(
    session_id: str,
    request: TextImportRequest,
    owner: str = Depends(get_owner),
    store: ImportSessionStore = Depends(get_store),
) -> ImportSessionResponse:
    """Load pasted CSV text into the session."""
    session = store.get(session_id, owner)
    session.load_text(request.text, filename=request.filename)
    return session.to_response()


@router.put("/{session_id}/mapping", response_model=ImportSessionResponse)
async def update_column_mapping(
    session_id: str,
    mapping: ColumnMapping,
    owner: str = Depends(get_owner),
    store: ImportSessionStore = Depends(get_store),
) -> ImportSessionResponse:
    """Replace the proposed column mapping."""
    session = store.get(session_id, owner)
    session.update_mapping(mapping)
    return session.to_response()


@router.post("/{session_id}/preview", response_model=ImportSessionResponse)
async def preview_import(
    session_id: str,
    owner: str = Depends(get_owner),
    store: ImportSessionStore = Depends(get_store),
) -> ImportSessionResponse:
    """Confirm the mapping and move to the preview step."""
    session = store.get(session_id, owner)
    session.to_preview()
    return session.to_response()


@router.post("/{session_id}/back", response_model=ImportSessionResponse)
async def step_back(
    session_id: str,
    owner: str = Depends(get_owner),
    store: ImportSessionStore = Depends(get_store),
) -> ImportSessionResponse:
    """Go back one step."""
    session = store.get(session_id, owner)
    session.back()
    return session.to_response()


@router.post("/{session_id}/submit", response_model=ImportSessionResponse)
async def submit_import(
    session_id: str,
    owner: str = Depends(get_owner),
    store: ImportSessionStore = Depends(get_store),
    client: ContactsAPIClient = Depends(get_contacts_client),
) -> ImportSessionResponse:
    """
    Normalize the whole file and send it to the contacts backend in one batch.
    
    On failure the session stays in preview and the request can be retried.
    """
    session = store.get(session_id, owner)
    await session.submit(client)
    return session.to_response()


@router.post("/{session_id}/reset", response_model=ImportSessionResponse)
async def reset_import(
    session_id: str,
    owner: str = Depends(get_owner),
    store: ImportSessionStore = Depends(get_store),
) -> ImportSessionResponse:
    """Discard the loaded file and start again from the upload step."""
    session = store.get(session_id, owner)
    session.reset()
    return session.to_response()


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_import_session(
    session_id: str,
    owner: str = Depends(get_owner),
    store: ImportSessionStore = Depends(get_store),
) -> Response:
    """Close the session. A submission already sent is not cancelled."""
    store.discard(session_id, owner)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
