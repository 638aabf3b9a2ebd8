"""
Contact export endpoint.
"""
import logging

from fastapi import APIRouter, Depends, Response

from wacontacts.api.v1.dependencies import get_contacts_client
from wacontacts.services.contacts.client import ContactsAPIClient
from wacontacts.services.imports.templates import export_contacts_csv, export_filename
from wacontacts.utils.datetime import utc_today_iso

router = APIRouter()
logger = logging.getLogger("wacontacts.contacts")


@router.get("/export")
async def export_contacts(
    client: ContactsAPIClient = Depends(get_contacts_client),
) -> Response:
    """Download all contacts as a CSV file that can be imported again."""
    contacts = await client.export_contacts()
    logger.info(f"Exporting {len(contacts)} contacts to CSV")
    return Response(
        content=export_contacts_csv(contacts),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(utc_today_iso())}"'},
    )
