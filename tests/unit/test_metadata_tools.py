"""Unit tests for the metadata editing tools."""

import httpx
import pytest

from openkm_mcp.repository import ADD_CATEGORY
from openkm_mcp.repository import ADD_GROUP
from openkm_mcp.repository import ADD_KEYWORD
from openkm_mcp.repository import REMOVE_KEYWORD
from openkm_mcp.repository import SET_PROPERTIES_SIMPLE


def text_of(response):
    return response.content[0].text


class TestKeywordTools:
    """Tests for add_keyword and remove_keyword."""

    @pytest.mark.asyncio
    async def test_add_keyword(self, dispatcher, fake_openkm):
        fake_openkm.on("POST", ADD_KEYWORD, httpx.Response(204))

        response = await dispatcher.dispatch("add_keyword", {"nodeId": "u1", "keyword": "finance"})

        assert not response.is_error
        assert text_of(response) == 'Successfully added keyword "finance" to u1'
        request = fake_openkm.requests[0]
        assert request.method == "POST"
        assert dict(request.url.params) == {"nodeId": "u1", "keyword": "finance"}

    @pytest.mark.asyncio
    async def test_remove_keyword(self, dispatcher, fake_openkm):
        fake_openkm.on("DELETE", REMOVE_KEYWORD, httpx.Response(204))

        response = await dispatcher.dispatch("remove_keyword", {"nodeId": "u1", "keyword": "draft"})

        assert text_of(response) == 'Successfully removed keyword "draft" from u1'
        assert fake_openkm.requests[0].method == "DELETE"

    @pytest.mark.asyncio
    async def test_empty_keyword_rejected(self, dispatcher, fake_openkm):
        response = await dispatcher.dispatch("add_keyword", {"nodeId": "u1", "keyword": ""})

        assert response.is_error
        assert fake_openkm.requests == []

    @pytest.mark.asyncio
    async def test_repository_failure(self, dispatcher, fake_openkm):
        fake_openkm.on("POST", ADD_KEYWORD, httpx.Response(403))

        response = await dispatcher.dispatch("add_keyword", {"nodeId": "u1", "keyword": "finance"})

        assert response.is_error
        assert text_of(response) == "Error: 403 Forbidden"


class TestCategoryAndGroupTools:
    """Tests for add_category and add_property_group."""

    @pytest.mark.asyncio
    async def test_add_category(self, dispatcher, fake_openkm):
        fake_openkm.on("POST", ADD_CATEGORY, httpx.Response(204))

        response = await dispatcher.dispatch(
            "add_category", {"nodeId": "/okm:root/a.pdf", "catId": "/okm:categories/contracts"}
        )

        assert text_of(response) == 'Successfully added category "/okm:categories/contracts" to /okm:root/a.pdf'
        assert fake_openkm.requests[0].url.params["catId"] == "/okm:categories/contracts"

    @pytest.mark.asyncio
    async def test_add_property_group(self, dispatcher, fake_openkm):
        fake_openkm.on("PUT", ADD_GROUP, httpx.Response(204))

        response = await dispatcher.dispatch("add_property_group", {"nodeId": "u1", "grpName": "okg:technology"})

        assert text_of(response) == 'Successfully added property group "okg:technology" to u1'
        request = fake_openkm.requests[0]
        assert request.method == "PUT"
        assert request.url.params["grpName"] == "okg:technology"


class TestSetPropertyGroup:
    """Tests for set_property_group."""

    @pytest.mark.asyncio
    async def test_sends_xml_body(self, dispatcher, fake_openkm):
        fake_openkm.on("PUT", SET_PROPERTIES_SIMPLE, httpx.Response(204))

        response = await dispatcher.dispatch(
            "set_property_group",
            {
                "nodeId": "u1",
                "grpName": "okg:technology",
                "properties": {"okp:technology.type": "manual", "okp:technology.comment": "A & B"},
            },
        )

        assert text_of(response) == 'Successfully set properties for group "okg:technology" on u1'
        request = fake_openkm.requests[0]
        assert request.headers["Content-Type"] == "application/xml"
        assert request.url.params["grpName"] == "okg:technology"
        assert request.content.decode() == (
            "<simplePropertiesGroup>\n"
            "<okp:technology.type>manual</okp:technology.type>\n"
            "<okp:technology.comment>A &amp; B</okp:technology.comment>\n"
            "</simplePropertiesGroup>"
        )

    @pytest.mark.asyncio
    async def test_invalid_keys_rejected_without_request(self, dispatcher, fake_openkm):
        response = await dispatcher.dispatch(
            "set_property_group",
            {"nodeId": "u1", "grpName": "okg:technology", "properties": {"<script>": "x"}},
        )

        assert response.is_error
        assert "<script>" in text_of(response)
        assert fake_openkm.requests == []
