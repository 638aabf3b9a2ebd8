import json

import httpx
import pytest

from wacontacts.core.exceptions import AuthenticationError, ContactsAPIError
from wacontacts.schemas.contact import ContactRecord
from wacontacts.services.contacts.client import ApiContext, ContactsAPIClient

CONTEXT = ApiContext(base_url="http://backend.test/api", token="tok-123")
CONTACTS = [
    ContactRecord(phone="111", name="A", tags=["vip"]),
    ContactRecord(phone="222"),
]


def make_client(handler) -> ContactsAPIClient:
    return ContactsAPIClient(CONTEXT, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_import_posts_batch_with_bearer_token():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": {"imported": 2, "errors": []}})

    result = await make_client(handler).import_contacts(CONTACTS)

    assert result.imported == 2
    assert result.error_count == 0
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "http://backend.test/api/contacts/import"
    assert request.headers["Authorization"] == "Bearer tok-123"
    assert json.loads(request.content) == {"contacts": [
        {"phone": "111", "name": "A", "email": "", "tags": ["vip"]},
        {"phone": "222", "name": "", "email": "", "tags": []},
    ]}


@pytest.mark.asyncio
async def test_import_accepts_unwrapped_body_with_errors():
    def handler(request):
        return httpx.Response(200, json={"imported": 1, "errors": [{"phone": "222", "error": "duplicate"}]})

    result = await make_client(handler).import_contacts(CONTACTS)

    assert result.imported == 1
    assert result.error_count == 1


@pytest.mark.asyncio
async def test_unauthorized_raises_authentication_error():
    def handler(request):
        return httpx.Response(401, json={"error": "Token expired"})

    with pytest.raises(AuthenticationError) as exc_info:
        await make_client(handler).import_contacts(CONTACTS)
    assert exc_info.value.message == "Token expired"


@pytest.mark.asyncio
async def test_backend_error_message_is_surfaced():
    def handler(request):
        return httpx.Response(400, json={"success": False, "error": "Contact limit reached"})

    with pytest.raises(ContactsAPIError) as exc_info:
        await make_client(handler).import_contacts(CONTACTS)
    assert exc_info.value.message == "Contact limit reached"
    assert exc_info.value.details == {"upstream_status": 400}
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_backend_error_without_json_body():
    def handler(request):
        return httpx.Response(500, text="Internal Server Error")

    with pytest.raises(ContactsAPIError) as exc_info:
        await make_client(handler).import_contacts(CONTACTS)
    assert exc_info.value.message == "Import failed with status 500"


@pytest.mark.asyncio
async def test_unreachable_backend():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ContactsAPIError) as exc_info:
        await make_client(handler).import_contacts(CONTACTS)
    assert exc_info.value.code == "CONTACTS_API_UNREACHABLE"


@pytest.mark.asyncio
async def test_unexpected_import_payload():
    def handler(request):
        return httpx.Response(200, json={"data": ["not", "a", "result"]})

    with pytest.raises(ContactsAPIError):
        await make_client(handler).import_contacts(CONTACTS)


@pytest.mark.asyncio
async def test_export_contacts():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"data": [
            {"name": "A", "phone": "111", "email": None, "tags": ["x"]},
            {"phone": "222", "tags": None},
        ]})

    contacts = await make_client(handler).export_contacts()

    assert seen[0].url.params["format"] == "json"
    assert seen[0].url.path == "/api/contacts/export"
    assert [c.phone for c in contacts] == ["111", "222"]
    assert contacts[0].email == ""
    assert contacts[1].name == ""
    assert contacts[1].tags == []


@pytest.mark.asyncio
async def test_import_null_errors_becomes_empty_list():
    def handler(request):
        return httpx.Response(200, json={"data": {"imported": 2, "errors": None}})

    result = await make_client(handler).import_contacts(CONTACTS)

    assert result.errors == []
    assert result.error_count == 0


@pytest.mark.asyncio
async def test_import_result_with_wrong_types():
    def handler(request):
        return httpx.Response(200, json={"data": {"imported": "many", "errors": []}})

    with pytest.raises(ContactsAPIError) as exc_info:
        await make_client(handler).import_contacts(CONTACTS)
    assert exc_info.value.message == "Unexpected import response from contacts API"
    assert exc_info.value.details["errors"][0]["loc"] == ("imported",)


@pytest.mark.asyncio
async def test_export_with_non_object_items():
    def handler(request):
        return httpx.Response(200, json={"data": ["111", "222"]})

    with pytest.raises(ContactsAPIError) as exc_info:
        await make_client(handler).export_contacts()
    assert exc_info.value.message == "Unexpected export response from contacts API"
