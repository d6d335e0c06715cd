# freemind_cli/freemind_api/client.py
#
#
# Imports
from typing import Optional
#
# 3rd-party Libraries
import httpx
from loguru import logger
#
# Local Imports
from freemind_cli.Constants import (
    ENDPOINT_FETCH, ENDPOINT_GET_BY_ID, ENDPOINT_UPDATE, USER_AGENT, USER_HEADER, XML_MEDIA_TYPE,
)
from freemind_cli.config import AppConfig, AuthMethod
from .exceptions import APIConnectionError
#
########################################################################################################################
#
# Functions:

def is_xml_response(response: httpx.Response) -> bool:
    """True when the response declares the XML media type (parameters such as charset are ignored)."""
    content_type = response.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == XML_MEDIA_TYPE


class FreemindAPIClient:
    """
    Authenticated access to the registry server.

    The underlying httpx client is built once here and reused for every call.
    Every request is a POST carrying the caller identity, one credential header
    named after the auth method, and the XML content type.
    """

    def __init__(self, base_url: str, username: str, secret: str,
                 auth_method: AuthMethod = AuthMethod.TOKEN, timeout: float = 30.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip('/')
        self.username = username
        self.auth_method = auth_method
        self.timeout = timeout
        headers = {
            "user-agent": USER_AGENT,
            USER_HEADER: username,
            auth_method.header_name: secret,
            "content-type": XML_MEDIA_TYPE,
        }
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_config(cls, config: AppConfig, transport: Optional[httpx.AsyncBaseTransport] = None) -> "FreemindAPIClient":
        return cls(
            base_url=config.server_address,
            username=config.username,
            secret=config.secret,
            auth_method=config.auth_method,
            timeout=config.timeout,
            transport=transport,
        )

    async def close(self):
        if not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "FreemindAPIClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def _post(self, endpoint: str, payload: str = "") -> httpx.Response:
        url = f"{self.base_url}{endpoint}"
        try:
            response = await self._client.post(endpoint, content=payload.encode("utf-8"))
        except httpx.RequestError as e:  # Covers ConnectError, TimeoutException, etc.
            raise APIConnectionError(f"Connection error to {url}: {e}") from e
        logger.debug(f"POST {url} -> {response.status_code} ({response.headers.get('content-type', 'no content type')})")
        return response

    async def _xml_body(self, endpoint: str) -> str:
        response = await self._post(endpoint)
        if not response.is_success:
            logger.warning(f"Server answered {response.status_code} for {endpoint}; treating the body as empty.")
            return ""
        if not is_xml_response(response):
            logger.warning(f"Server answered {endpoint} with content type "
                           f"'{response.headers.get('content-type', '')}'; treating the body as empty.")
            return ""
        return response.text

    async def fetch(self) -> str:
        """Fetches the whole registry document. Returns '' for non-XML or unsuccessful responses."""
        return await self._xml_body(ENDPOINT_FETCH)

    async def upload(self, payload: str) -> int:
        """Uploads a registry document and returns the HTTP status code."""
        response = await self._post(ENDPOINT_UPDATE, payload)
        return response.status_code

    async def get_by_id(self, entry_id: int) -> str:
        """Fetches a single entry document straight from the server."""
        return await self._xml_body(ENDPOINT_GET_BY_ID.format(entry_id=entry_id))

#
# End of client.py
########################################################################################################################
