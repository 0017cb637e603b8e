"""
Helper functions to make writing unit tests for the manifest core easier
"""

import os
import secrets
import tempfile
import unittest
import email.utils
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import httpx
from fastapi.testclient import TestClient

from manifest_core import schemas as _schemas, settings as _settings
from manifest_core.api.api import create_app

from . import conf


class FakeRecordClient:
    """
    Stand-in for the Record API client, replying like the Record API would

    Every call is recorded in ``calls``. Setting ``status`` forces
    replies with that status and without any header.
    """

    def __init__(self, etag: str = conf.ETAG_RECORD_API, last_modified: str = conf.TIMESTAMP_UPDATE):
        self.etag = etag
        self.last_modified = last_modified
        self.status: Optional[int] = None
        self.calls: List[Dict[str, Any]] = []

    async def close(self):
        pass

    async def fetch_record(
            self,
            record_id: str,
            wskey: str,
            record_api: Optional[str] = None,
            if_none_match: Optional[str] = None,
            if_match: Optional[str] = None,
            if_modified_since: Optional[str] = None,
            origin: Optional[str] = None
    ) -> _schemas.OriginResponse:
        self.calls.append({
            "record_id": record_id,
            "wskey": wskey,
            "record_api": record_api,
            "if_none_match": if_none_match,
            "if_match": if_match,
            "if_modified_since": if_modified_since,
            "origin": origin
        })
        via_if_none_match = if_none_match is not None
        if self.status is not None:
            return _schemas.OriginResponse(http_status=self.status, via_if_none_match=via_if_none_match)

        headers = [("ETag", self.etag), ("Last-Modified", self.last_modified)]
        if origin is not None:
            headers.extend([
                ("Access-Control-Allow-Methods", conf.ALLOWED_METHODS),
                ("Access-Control-Allow-Headers", conf.ALLOWED_HEADERS),
                ("Access-Control-Expose-Headers", conf.EXPOSED_HEADERS),
                ("Access-Control-Max-Age", conf.MAX_AGE)
            ])

        if if_none_match is not None and if_none_match in ("*", self.etag):
            status = 304
        elif if_match is not None and if_match not in ("*", self.etag):
            status = 412
        elif if_modified_since is not None and (
                email.utils.parsedate_to_datetime(if_modified_since) >=
                email.utils.parsedate_to_datetime(self.last_modified)
        ):
            status = 304
        else:
            status = 200

        return _schemas.OriginResponse.from_headers(
            status,
            headers,
            body=conf.JSON_RECORD if status == 200 else None,
            via_if_none_match=via_if_none_match
        )


class BaseTest(unittest.TestCase):
    """
    A base class for unit tests which introduces simple setup and teardown of unit tests

    If a subclass needs special setup or teardown functionality, it **MUST**
    call the superclasses setup and teardown methods: the superclass setup
    method at the beginning of the subclass setup method, the superclass
    teardown method at the end of the subclass teardown method.
    """

    config_file: Optional[str] = None
    _config_paths: Optional[List[str]] = None

    def setUp(self) -> None:
        self.config_file = os.path.join(tempfile.gettempdir(), f"config_{os.getpid()}_{secrets.token_hex(8)}.json")
        self._config_paths = _settings.CONFIG_PATHS
        _settings.CONFIG_PATHS = [self.config_file]

    def tearDown(self) -> None:
        _settings.CONFIG_PATHS = self._config_paths
        if self.config_file and os.path.exists(self.config_file):
            os.remove(self.config_file)


class BaseAPITests(BaseTest):
    """
    A base class for unit tests of the REST API with a fake Record API
    """

    settings: _settings.Settings
    records: FakeRecordClient
    client: TestClient

    def setUp(self) -> None:
        super().setUp()
        self.settings = _settings.Settings(general={"app_version": conf.APP_VERSION})
        self.records = FakeRecordClient()
        self.client = TestClient(
            create_app(self.settings, configure_logging=False, record_client=self.records),
            raise_server_exceptions=False
        )

    def tearDown(self) -> None:
        self.client.close()
        super().tearDown()

    @property
    def manifest_path(self) -> str:
        return f"/presentation{conf.RECORD_ID}/manifest"

    def assertQuery(
            self,
            endpoint: Tuple[str, str],
            status_code: Union[int, Iterable[int]] = 200,
            headers: Optional[dict] = None,
            params: Optional[dict] = None,
            r_none: bool = False,
            r_is_json: bool = True,
            r_headers: Optional[Union[Mapping, Iterable]] = None,
            r_absent_headers: Optional[Iterable[str]] = None,
            **kwargs
    ) -> httpx.Response:
        """
        Do a query to the specified endpoint and return the response

        Besides also carrying the optional headers and other keyword arguments,
        this function asserts that the response has the specified status code.
        Furthermore, the optional asserted response headers can be used, where
        the headers are either an iterable to only assert certain keys or a
        mapping to also assert values, while the absent headers must not be present.

        :param endpoint: tuple of the method and the path of the endpoint
        :param status_code: asserted status code(s) of the final server's response
        :param headers: optional set of headers to sent in the request
        :param params: optional query parameters of the request
        :param r_none: switch to expect no (=empty) result and skip all other response content checks
        :param r_is_json: switch to check that the response contains JSON data
        :param r_headers: optional set of headers which are asserted in the response
        :param r_absent_headers: optional set of headers which must not be in the response
        :param kwargs: dict of any further keyword arguments, passed to the test client
        :return: response to the requested resource
        """

        method, path = endpoint
        response = self.client.request(method.upper(), path, headers=headers, params=params, **kwargs)

        if isinstance(status_code, int):
            self.assertEqual(status_code, response.status_code, response.text)
        else:
            self.assertIn(response.status_code, list(status_code), response.text)

        if r_headers is not None:
            for k in (r_headers.keys() if isinstance(r_headers, Mapping) else r_headers):
                self.assertIsNotNone(response.headers.get(k), response.headers)
                if isinstance(r_headers, Mapping):
                    self.assertEqual(r_headers[k], response.headers.get(k), response.headers)

        for k in r_absent_headers or []:
            self.assertIsNone(response.headers.get(k), response.headers)

        if r_none:
            self.assertEqual("", response.text)
        elif r_is_json:
            try:
                self.assertIsNotNone(response.json())
            except ValueError:
                self.fail(("No JSON content detected", response.headers, response.text))

        return response

    def query_manifest(self, status_code: Union[int, Iterable[int]] = 200, **kwargs) -> httpx.Response:
        params = {"wskey": conf.API_KEY}
        params.update(kwargs.pop("params", None) or {})
        return self.assertQuery(("GET", self.manifest_path), status_code, params=params, **kwargs)
