"""Tests for TermGroupsEndpoint.add_term_group against the mock client."""

import asyncio
import logging

import pytest

from clientquery.client.client_factory import create_mock_client
from clientquery.client.utils.client_utils import ClientQueryClientError, TransportError
from clientquery.query.errors import BusinessError, MalformedResponseError, RefinementError

from tests.fixtures.taxonomy_responses import (
    ENVELOPE, TERM_GROUP_ID, TERM_GROUP_IDENTITY, TERM_STORE_IDENTITY, create_mock_config,
    empty_success_response, error_response, term_group_created_response,
)

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')

CREATION_BODY = (
    ENVELOPE +
    '<Actions>'
    '<ObjectPath Id="2" ObjectPathId="1" /><ObjectIdentityQuery Id="3" ObjectPathId="1" />'
    '<ObjectPath Id="5" ObjectPathId="4" /><ObjectIdentityQuery Id="6" ObjectPathId="4" />'
    '<ObjectPath Id="8" ObjectPathId="7" /><ObjectIdentityQuery Id="9" ObjectPathId="7" />'
    '<Query Id="10" ObjectPathId="7"><Query SelectAllProperties="false"><Properties>'
    '<Property Name="Name" ScalarProperty="true" />'
    '<Property Name="Id" ScalarProperty="true" />'
    '<Property Name="Description" ScalarProperty="true" />'
    '</Properties></Query></Query>'
    '</Actions>'
    '<ObjectPaths>'
    '<StaticMethod Id="1" Name="GetTaxonomySession" TypeId="{981cbc68-9edc-4f8d-872f-71146fcbb84f}" />'
    '<Method Id="4" ParentId="1" Name="GetDefaultSiteCollectionTermStore" />'
    '<Method Id="7" ParentId="4" Name="CreateGroup"><Parameters>'
    '<Parameter Type="String">PnPTermSets</Parameter>'
    f'<Parameter Type="Guid">{{{TERM_GROUP_ID}}}</Parameter>'
    '</Parameters></Method>'
    '</ObjectPaths></Request>'
)


@pytest.fixture
def mock_client():
    client = create_mock_client(config=create_mock_config())
    asyncio.run(client.open())
    yield client
    asyncio.run(client.close())


class TestAddTermGroup:

    def test_adds_term_group(self, mock_client):
        mock_client.queue_response(term_group_created_response())

        group = asyncio.run(mock_client.termgroups.add_term_group("PnPTermSets", id=TERM_GROUP_ID))

        assert [r.body for r in mock_client.requests] == [CREATION_BODY]
        assert group.to_output() == {"Name": "PnPTermSets", "Id": TERM_GROUP_ID, "Description": ""}

    def test_adds_term_group_with_description(self, mock_client):
        mock_client.queue_response(term_group_created_response())
        mock_client.queue_response(empty_success_response())

        group = asyncio.run(mock_client.termgroups.add_term_group(
            "PnPTermSets", id=TERM_GROUP_ID, description="Term sets for PnP"))

        assert mock_client.requests[1].body == (
            ENVELOPE +
            '<Actions><SetProperty Id="3" ObjectPathId="1" Name="Description">'
            '<Parameter Type="String">Term sets for PnP</Parameter></SetProperty>'
            '<Method Name="CommitAll" Id="4" ObjectPathId="2" /></Actions>'
            f'<ObjectPaths><Identity Id="1" Name="{TERM_GROUP_IDENTITY}" />'
            f'<Identity Id="2" Name="{TERM_STORE_IDENTITY}" /></ObjectPaths></Request>'
        )
        assert group.description == "Term sets for PnP"

    def test_duplicate_group_raises_business_error(self, mock_client):
        mock_client.queue_response(error_response("Group names must be unique."))

        with pytest.raises(BusinessError, match="Group names must be unique."):
            asyncio.run(mock_client.termgroups.add_term_group("PnPTermSets"))

    def test_description_failure_raises_refinement_error(self, mock_client):
        mock_client.queue_response(term_group_created_response())
        mock_client.queue_response(error_response("An error has occurred"))

        with pytest.raises(RefinementError) as exc_info:
            asyncio.run(mock_client.termgroups.add_term_group(
                "PnPTermSets", id=TERM_GROUP_ID, description="Term sets for PnP"))

        assert exc_info.value.created.name == "PnPTermSets"
        assert exc_info.value.created.description == ""

    @pytest.mark.parametrize("second_response, cause_type", [
        ("<html>gateway</html>", MalformedResponseError),
        (None, TransportError),
    ])
    def test_description_transport_or_parse_failure_raises_refinement_error(self, mock_client, second_response,
                                                                          cause_type):
        mock_client.queue_response(term_group_created_response())
        if second_response is not None:
            mock_client.queue_response(second_response)

        with pytest.raises(RefinementError) as exc_info:
            asyncio.run(mock_client.termgroups.add_term_group(
                "PnPTermSets", id=TERM_GROUP_ID, description="Term sets for PnP"))

        assert isinstance(exc_info.value.cause, cause_type)
        assert exc_info.value.created.name == "PnPTermSets"
        assert len(mock_client.requests) == 2

    @pytest.mark.parametrize("name, kwargs", [
        ("", {}),
        (None, {}),
        ("PnPTermSets", {"id": "invalid"}),
        ("PnPTermSets", {"description": 5}),
    ])
    def test_invalid_arguments(self, mock_client, name, kwargs):
        with pytest.raises(ClientQueryClientError):
            asyncio.run(mock_client.termgroups.add_term_group(name, **kwargs))
        assert mock_client.requests == []
