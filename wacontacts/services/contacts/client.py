# wacontacts/services/contacts/client.py
"""
Client for the external contacts REST API.

Each request carries the caller's bearer token from an explicitly passed
ApiContext; the client keeps no auth state of its own.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from wacontacts.core.config import settings
from wacontacts.core.exceptions import AuthenticationError, ContactsAPIError
from wacontacts.schemas.contact import ContactBulkImport, ContactRecord, ExportedContact, ImportResult

logger = logging.getLogger("wacontacts.contacts.client")


@dataclass(frozen=True)
class ApiContext:
    """Where the contacts API lives and whose token to call it with."""
    base_url: str
    token: str

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class ContactsAPIClient:
    """
    Thin async wrapper around the contacts endpoints the import flow needs.
    """

    def __init__(
        self,
        context: ApiContext,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            context: Base URL and bearer token for the calls
            timeout: Request timeout in seconds, None to wait indefinitely
            transport: Optional httpx transport (used to stub the backend)
        """
        self.context = context
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.context.base_url,
            headers=self.context.headers,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def import_contacts(self, contacts: List[ContactRecord]) -> ImportResult:
        """
        Submit one batch of contacts to the bulk import endpoint.

        Args:
            contacts: Normalized contacts, all with a phone

        Returns:
            ImportResult: Imported count and per-contact errors from the backend

        Raises:
            AuthenticationError: If the backend rejects the token
            ContactsAPIError: On transport failure or any other error response
        """
        payload = ContactBulkImport(contacts=contacts)
        logger.info(f"Submitting {len(contacts)} contacts to {settings.CONTACTS_IMPORT_PATH}")
        body = await self._request(
            "POST",
            settings.CONTACTS_IMPORT_PATH,
            json=payload.model_dump(),
        )
        data = _unwrap(body)
        if not isinstance(data, dict):
            raise ContactsAPIError(
                message="Unexpected import response from contacts API",
                details={"type": type(data).__name__},
            )
        try:
            result = ImportResult.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Contacts API import response did not validate: {e}")
            raise ContactsAPIError(
                message="Unexpected import response from contacts API",
                details={"errors": e.errors(include_url=False, include_context=False)},
            )
        logger.info(f"Backend imported {result.imported} contacts, {result.error_count} errors")
        return result

    async def export_contacts(self) -> List[ExportedContact]:
        """
        Fetch every contact of the tenant as JSON.

        Returns:
            List[ExportedContact]: Contacts in backend order
        """
        body = await self._request(
            "GET",
            settings.CONTACTS_EXPORT_PATH,
            params={"format": "json"},
        )
        data = _unwrap(body)
        if not isinstance(data, list):
            raise ContactsAPIError(
                message="Unexpected export response from contacts API",
                details={"type": type(data).__name__},
            )
        try:
            return [ExportedContact.model_validate(item) for item in data]
        except PydanticValidationError as e:
            logger.error(f"Contacts API export response did not validate: {e}")
            raise ContactsAPIError(
                message="Unexpected export response from contacts API",
                details={"errors": e.errors(include_url=False, include_context=False)},
            )

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            async with self._client() as client:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            message = _error_message(e.response)
            logger.error(f"Contacts API {method} {path} failed: {status_code} - {message}")
            if status_code == 401:
                raise AuthenticationError(message=message)
            raise ContactsAPIError(
                message=message,
                details={"upstream_status": status_code},
            )
        except httpx.RequestError as e:
            logger.error(f"Contacts API {method} {path} unreachable: {e}")
            raise ContactsAPIError(
                message="Contacts API is unreachable",
                code="CONTACTS_API_UNREACHABLE",
                details={"error": str(e)},
            )
        except ValueError as e:
            # Invalid JSON body
            logger.error(f"Contacts API {method} {path} returned invalid JSON: {e}")
            raise ContactsAPIError(message="Invalid response from contacts API")


def _unwrap(body: Any) -> Any:
    """Backend responses wrap their payload in {"data": ...}."""
    if isinstance(body, dict) and "data" in body:
        return body["data"]
    return body


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            if isinstance(body.get(key), str):
                return body[key]
    return f"Import failed with status {response.status_code}"
