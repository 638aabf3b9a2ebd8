import json
from collections.abc import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from fastapi import Depends
from httpx import AsyncClient, ASGITransport

from wacontacts.main import app
from wacontacts.api.v1 import dependencies
from wacontacts.services.contacts.client import ApiContext, ContactsAPIClient
from wacontacts.services.imports.store import get_session_store

TEST_TOKEN = "test-token"
AUTH_HEADERS = {"Authorization": f"Bearer {TEST_TOKEN}"}
OTHER_AUTH_HEADERS = {"Authorization": "Bearer someone-else"}

TEST_EXPORT = [
    {"name": "John Doe", "phone": "919876543210", "email": "john@example.com", "tags": ["customer", "vip"]},
    {"name": None, "phone": "918765432109", "email": None, "tags": None},
]


class FakeContactsBackend:
    """Stands in for the contacts REST API and records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.import_status = 200
        self.import_body = None
        self.fail_with_connect_error = False

    @property
    def import_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith("/contacts/import")]

    def imported_contacts(self, call: int = 0) -> list[dict]:
        return json.loads(self.import_requests[call].content)["contacts"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with_connect_error:
            raise httpx.ConnectError("connection refused", request=request)

        if request.url.path.endswith("/contacts/import"):
            if self.import_body is not None:
                return httpx.Response(self.import_status, json=self.import_body)
            contacts = json.loads(request.content)["contacts"]
            return httpx.Response(
                self.import_status,
                json={"success": True, "data": {"imported": len(contacts), "errors": []}},
            )
        if request.url.path.endswith("/contacts/export"):
            return httpx.Response(200, json={"success": True, "data": TEST_EXPORT})
        return httpx.Response(404, json={"error": "Not found"})


@pytest.fixture
def backend() -> FakeContactsBackend:
    return FakeContactsBackend()


@pytest.fixture(autouse=True)
def override_contacts_client(backend):
    async def fake_client(
        context: ApiContext = Depends(dependencies.get_api_context),
    ) -> ContactsAPIClient:
        return ContactsAPIClient(context, transport=httpx.MockTransport(backend.handler))

    app.dependency_overrides[dependencies.get_contacts_client] = fake_client
    yield
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_session_store():
    store = get_session_store()
    store.clear()
    yield
    store.clear()


@pytest_asyncio.fixture()
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(base_url="http://testserver", transport=transport) as client:
        yield client


@pytest.fixture
def auth_headers() -> dict:
    return dict(AUTH_HEADERS)


@pytest.fixture
def other_auth_headers() -> dict:
    return dict(OTHER_AUTH_HEADERS)
