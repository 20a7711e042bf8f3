"""Tests for PermissionRequestsEndpoint against the mock client."""

import asyncio
import json

import pytest

from clientquery.client.client_factory import create_mock_client
from clientquery.client.utils.client_utils import ClientQueryClientError
from clientquery.query.errors import BusinessError

from tests.fixtures.taxonomy_responses import ADMIN_URL, ENVELOPE, create_mock_config, error_response, metadata

REQUEST_ID = "4dc4c043-25ee-40f2-81d3-b3bf63da7538"


def resolve_body(method_name: str) -> str:
    return (
        ENVELOPE +
        '<Actions><ObjectPath Id="2" ObjectPathId="1" /><ObjectPath Id="4" ObjectPathId="3" />'
        f'<ObjectPath Id="6" ObjectPathId="5" /><Method Name="{method_name}" Id="7" ObjectPathId="5" /></Actions>'
        '<ObjectPaths><Constructor Id="1" TypeId="{104e8f06-1e00-4675-99c6-1b9b504ed8d8}" />'
        '<Property Id="3" ParentId="1" Name="PermissionRequests" />'
        '<Method Id="5" ParentId="3" Name="GetById"><Parameters>'
        f'<Parameter Type="Guid">{{{REQUEST_ID}}}</Parameter>'
        '</Parameters></Method></ObjectPaths></Request>'
    )


@pytest.fixture
def mock_client():
    client = create_mock_client(config=create_mock_config())
    asyncio.run(client.open())
    yield client
    asyncio.run(client.close())


class TestPermissionRequests:

    def test_denies_permission_request(self, mock_client):
        # ObjectPath results may come back under ids the request never used
        mock_client.queue_response(json.dumps([
            metadata(), 211, {"IsNull": False}, 213, {"IsNull": False}, 215, {"IsNull": False},
        ]))

        result = asyncio.run(mock_client.permission_requests.deny_permission_request(REQUEST_ID))

        assert result is None
        assert mock_client.requests[0].web_url == ADMIN_URL
        assert mock_client.requests[0].body == resolve_body("Deny")

    def test_approves_permission_request(self, mock_client):
        mock_client.queue_response(json.dumps([metadata()]))

        asyncio.run(mock_client.permission_requests.approve_permission_request(REQUEST_ID))

        assert mock_client.requests[0].body == resolve_body("Approve")

    def test_unknown_request_raises_business_error(self, mock_client):
        message = "A permission request with the ID f0feaecf-24be-402b-a080-3a55738ec56a could not be found."
        mock_client.queue_response(error_response(
            message, code=-2147024894, type_name="Microsoft.SharePoint.Client.ResourceNotFoundException"))

        with pytest.raises(BusinessError) as exc_info:
            asyncio.run(mock_client.permission_requests.deny_permission_request(
                "f0feaecf-24be-402b-a080-3a55738ec56a"))

        assert exc_info.value.message == message
        assert exc_info.value.code == -2147024894

    @pytest.mark.parametrize("request_id", ["", None, "123"])
    def test_invalid_id(self, mock_client, request_id):
        with pytest.raises(ClientQueryClientError):
            asyncio.run(mock_client.permission_requests.deny_permission_request(request_id))
        assert mock_client.requests == []

    def test_responder_answers_by_body(self, mock_client):
        def responder(web_url, body):
            if 'Name="Deny"' in body:
                return json.dumps([metadata()])
            return None

        mock_client.add_responder(responder)
        asyncio.run(mock_client.permission_requests.deny_permission_request(REQUEST_ID))

        assert len(mock_client.requests) == 1
