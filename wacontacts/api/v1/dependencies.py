"""
Dependencies for API endpoints.
"""
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from wacontacts.core.config import settings
from wacontacts.core.exceptions import AuthenticationError
from wacontacts.services.contacts.client import ApiContext, ContactsAPIClient
from wacontacts.services.imports.store import ImportSessionStore, get_session_store, owner_key

# Bearer token issued by the contacts backend; forwarded as-is
bearer_scheme = HTTPBearer(auto_error=False)


async def get_api_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> ApiContext:
    """
    Build the per-request context used to call the contacts backend.

    Raises:
        AuthenticationError: If no bearer token was sent
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing bearer token")
    return ApiContext(base_url=settings.CONTACTS_API_URL, token=credentials.credentials)


async def get_owner(context: ApiContext = Depends(get_api_context)) -> str:
    """Key identifying the caller as owner of import sessions."""
    return owner_key(context.token)


async def get_contacts_client(context: ApiContext = Depends(get_api_context)) -> ContactsAPIClient:
    """Get a contacts API client bound to the caller's token."""
    return ContactsAPIClient(context, timeout=settings.CONTACTS_API_TIMEOUT)


async def get_store() -> ImportSessionStore:
    """Get the import session store."""
    return get_session_store()
