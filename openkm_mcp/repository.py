"""Async client for the OpenKM REST API.

Every call opens a fresh ``httpx.AsyncClient``: no connection is shared
between tool invocations, and no call is retried. A non-2xx response raises
``TransportError`` carrying the status; a request that never got a response
raises ``TransportError`` with ``status_code=None``.
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Iterable
from collections.abc import Mapping
from typing import Any
from typing import Union

import httpx

from .config import Settings
from .exceptions import TransportError

logger = logging.getLogger(__name__)

QueryParams = Union[Mapping[str, str], Iterable[tuple[str, str]], None]

# === OpenKM REST endpoints ===
GET_CHILDREN = "/services/rest/document/getChildren"
GET_CONTENT = "/services/rest/document/getContent"
FIND_BY_CONTENT = "/services/rest/search/findByContent"
GET_PROPERTIES = "/services/rest/document/getProperties"
ADD_KEYWORD = "/services/rest/property/addKeyword"
REMOVE_KEYWORD = "/services/rest/property/removeKeyword"
ADD_CATEGORY = "/services/rest/property/addCategory"
ADD_GROUP = "/services/rest/propertyGroup/addGroup"
SET_PROPERTIES_SIMPLE = "/services/rest/propertyGroup/setPropertiesSimple"


class RepositoryClient:
    """Authenticated GET/POST/PUT/DELETE calls against one OpenKM instance.

    Args:
        settings: Connection settings (base URL, credentials, timeout).
        transport: Optional httpx transport, used by tests to fake the server.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = settings.base_url
        self.timeout = settings.http_timeout
        self._transport = transport
        token = f"{settings.user}:{settings.password.get_secret_value()}".encode()
        self._authorization = f"Basic {base64.b64encode(token).decode('ascii')}"

    def __repr__(self) -> str:
        return f"RepositoryClient(base_url={self.base_url!r})"

    def default_headers(self, overrides: Mapping[str, str] | None = None) -> dict[str, str]:
        """Authorization and JSON Accept headers, with per-call overrides applied."""
        headers = {"Authorization": self._authorization, "Accept": "application/json"}
        if overrides:
            headers.update(overrides)
        return headers

    def build_url(self, endpoint: str, params: QueryParams = None) -> httpx.URL:
        """Append ``endpoint`` to the base URL and add each parameter pair.

        Parameters may be a mapping or a sequence of pairs; repeated keys are
        kept in order.
        """
        if not params:
            return httpx.URL(f"{self.base_url}{endpoint}")
        pairs = list(params.items()) if isinstance(params, Mapping) else list(params)
        return httpx.URL(f"{self.base_url}{endpoint}", params=pairs)

    @staticmethod
    def _encode_body(body: Any, headers: dict[str, str]) -> bytes | None:
        """Encode a request body.

        Strings are treated as pre-formatted XML markup. Byte buffers are sent
        untouched. Any other object is serialized to JSON.
        """
        if body is None:
            return None
        if isinstance(body, (bytes, bytearray)):
            return bytes(body)
        if isinstance(body, str):
            headers.setdefault("Content-Type", "application/xml")
            return body.encode("utf-8")
        headers.setdefault("Content-Type", "application/json")
        return json.dumps(body).encode("utf-8")

    async def request(
        self,
        method: str,
        endpoint: str,
        params: QueryParams = None,
        body: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send one request and return the response if its status is 2xx.

        Raises:
            TransportError: The response status is not 2xx, or no response
                was received.
        """
        url = self.build_url(endpoint, params)
        request_headers = self.default_headers(headers)
        content = self._encode_body(body, request_headers)

        logger.debug("%s %s", method, url)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, headers=request_headers, content=content)
        except httpx.HTTPError as e:
            raise TransportError(None, f"Request to OpenKM failed: {e}", url=str(url)) from e

        if not response.is_success:
            raise TransportError(response.status_code, response.reason_phrase, url=str(url))
        return response

    async def get(self, endpoint: str, params: QueryParams = None, headers: Mapping[str, str] | None = None):
        return await self.request("GET", endpoint, params, headers=headers)

    async def post(
        self, endpoint: str, params: QueryParams = None, body: Any = None, headers: Mapping[str, str] | None = None
    ):
        return await self.request("POST", endpoint, params, body, headers)

    async def put(
        self, endpoint: str, params: QueryParams = None, body: Any = None, headers: Mapping[str, str] | None = None
    ):
        return await self.request("PUT", endpoint, params, body, headers)

    async def delete(self, endpoint: str, params: QueryParams = None, headers: Mapping[str, str] | None = None):
        return await self.request("DELETE", endpoint, params, headers=headers)
