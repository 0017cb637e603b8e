"""
Conditional request handling of the core REST API

The ``ConditionalRequest`` translates the conditional headers of a client
request into the conditional parameters of the origin query and translates
the origin reply back into the client response. It doesn't store any
response locally: caching means negotiating validators with the client
on the one side and with the origin on the other side.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from fastapi import Response

from . import etag
from .base import OriginFailure
from .headers import add_cors_headers, generate_cache_headers
from ..schemas import OriginResponse


OriginQuery = Callable[..., Awaitable[OriginResponse]]


def _get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is None or value.strip() == "":
        return None
    return value


class ConditionalRequest:
    """
    Helper class translating conditional requests between the client and the origin

    An instance is bound to exactly one client request. The validator
    version is fixed for the lifetime of the instance and is used to match
    the validators of the client as well as to create the new validators.
    """

    def __init__(
            self,
            headers: Mapping[str, str],
            validator_version: str,
            cache_control: Optional[str] = "no-cache",
            vary: Optional[str] = "Accept"
    ):
        self.if_none_match = _get_header(headers, "If-None-Match")
        self.if_match = _get_header(headers, "If-Match")
        self.if_modified_since = _get_header(headers, "If-Modified-Since")
        self.origin = _get_header(headers, "Origin")
        self.validator_version = validator_version
        self.cache_control = cache_control
        self.vary = vary
        self.logger = logging.getLogger(__name__)

    def get_origin_parameters(self) -> Optional[Dict[str, Optional[str]]]:
        """
        Determine the conditional parameters of the origin query

        ``If-None-Match`` takes precedence over ``If-Match``, which takes
        precedence over ``If-Modified-Since``. The ``Origin`` is always
        forwarded to receive the CORS headers of the origin.

        :return: keyword arguments for the origin query or None if the
            precondition of the request already failed (so that the origin
            doesn't need to be queried at all)
        """

        parameters = {
            "if_none_match": None,
            "if_match": None,
            "if_modified_since": None,
            "origin": self.origin
        }

        if self.if_none_match is not None:
            if etag.is_wildcard(self.if_none_match):
                parameters["if_none_match"] = etag.WILDCARD
                parameters["if_modified_since"] = self.if_modified_since
                return parameters
            result = etag.match_etag(self.if_none_match, self.validator_version)
            if isinstance(result, etag.Found):
                parameters["if_none_match"] = result.fingerprint
            elif isinstance(result, etag.Undecodable):
                self.logger.debug(f"Ignoring undecodable 'If-None-Match' validator {result.token!r}")
            return parameters

        if self.if_match is not None:
            if etag.is_wildcard(self.if_match):
                parameters["if_match"] = etag.WILDCARD
                return parameters
            result = etag.match_etag(self.if_match, self.validator_version)
            if isinstance(result, etag.Found):
                parameters["if_match"] = result.fingerprint
                return parameters
            self.logger.debug(f"No 'If-Match' validator for version {self.validator_version!r}: {result!r}")
            return None

        parameters["if_modified_since"] = self.if_modified_since
        return parameters

    async def query(self, query: OriginQuery, **kwargs: Any) -> Optional[OriginResponse]:
        """
        Query the origin once with the conditional parameters of this request

        :param query: coroutine function of the origin client, accepting the
            keyword arguments ``if_none_match``, ``if_match``,
            ``if_modified_since`` and ``origin`` besides the given ones
        :param kwargs: further keyword arguments for the origin query
        :return: snapshot of the origin reply or None if the precondition
            failed without querying the origin
        """

        parameters = self.get_origin_parameters()
        if parameters is None:
            return None
        return await query(**kwargs, **parameters)

    def make_response(
            self,
            response: Optional[OriginResponse],
            media_type: str,
            render: Callable[[str], str]
    ) -> Response:
        """
        Create the client response from the origin reply

        :param response: snapshot of the origin reply (None if the precondition failed)
        :param media_type: content type of the rendered representation
        :param render: function to create the representation from the origin body
        :return: response that should be sent to the client
        :raises OriginFailure: if the origin reply had any unexpected status
        """

        if response is None or response.http_status == 412:
            return Response(status_code=412)

        if response.http_status == 304:
            if response.via_if_none_match:
                headers = generate_cache_headers(response, self.validator_version, self.cache_control, self.vary)
                return Response(status_code=304, headers=headers)
            return Response(status_code=304)

        if response.http_status != 200:
            raise OriginFailure(response.http_status)

        headers = generate_cache_headers(response, self.validator_version, self.cache_control, self.vary)
        add_cors_headers(headers, response)
        return Response(content=render(response.body or ""), status_code=200, headers=headers, media_type=media_type)
