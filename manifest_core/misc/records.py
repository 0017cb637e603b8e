"""
Manifest core client library to retrieve records from the Record API (the origin)
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from ..schemas import OriginResponse


CONNECTION_FAILURE_STATUS = 502
TIMEOUT_FAILURE_STATUS = 504


class RecordClient:
    """
    Client for conditional requests of record JSON documents from the Record API

    The client never raises on transport problems. Instead, connection errors
    and timeouts are reported with the statuses 502 and 504, respectively,
    so that any caller treats them as unexpected origin replies. There's no
    retry of failed requests. The underlying ``aiohttp.ClientSession`` is
    created with the first request and should be closed with ``close``.
    """

    def __init__(self, base_url: str, timeout: float = 10.0, session: Optional[aiohttp.ClientSession] = None):
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.logger = logging.getLogger(__name__)
        self._session = session

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self):
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def make_url(self, record_id: str, record_api: Optional[str] = None) -> str:
        return (record_api or self.base_url).rstrip("/") + record_id + ".json"

    async def fetch_record(
            self,
            record_id: str,
            wskey: str,
            record_api: Optional[str] = None,
            if_none_match: Optional[str] = None,
            if_match: Optional[str] = None,
            if_modified_since: Optional[str] = None,
            origin: Optional[str] = None
    ) -> OriginResponse:
        """
        Retrieve the record JSON document, forwarding the given conditional headers

        :param record_id: record identifier in the form ``/{collectionId}/{recordId}``
        :param wskey: API key passed along to the Record API
        :param record_api: optional base URL to use instead of the configured one
        :param if_none_match: optional origin fingerprint (or ``*``) for ``If-None-Match``
        :param if_match: optional origin fingerprint (or ``*``) for ``If-Match``
        :param if_modified_since: optional value for ``If-Modified-Since``
        :param origin: optional value for ``Origin`` to receive CORS headers
        :return: snapshot of the origin reply
        """

        url = self.make_url(record_id, record_api)
        via_if_none_match = if_none_match is not None
        headers = {
            name: value
            for name, value in [
                ("If-None-Match", if_none_match),
                ("If-Match", if_match),
                ("If-Modified-Since", if_modified_since),
                ("Origin", origin)
            ]
            if value is not None
        }

        self.logger.debug(f"Requesting 'GET {url}' with headers {headers}")
        try:
            async with self._get_session().get(
                    url,
                    params={"wskey": wskey},
                    headers=headers,
                    timeout=self.timeout
            ) as response:
                body = None
                if response.status == 200:
                    body = await response.text()
                return OriginResponse.from_headers(
                    response.status,
                    response.headers.items(),
                    body=body,
                    via_if_none_match=via_if_none_match
                )

        except asyncio.TimeoutError:
            self.logger.warning(f"Timeout while trying 'GET {url}'")
            return OriginResponse(http_status=TIMEOUT_FAILURE_STATUS, via_if_none_match=via_if_none_match)
        except aiohttp.ClientError as exc:
            self.logger.info(
                f"{type(exc).__name__} during 'GET {url}' with the following "
                f"arguments: {', '.join(map(repr, exc.args))}"
            )
            return OriginResponse(http_status=CONNECTION_FAILURE_STATUS, via_if_none_match=via_if_none_match)
