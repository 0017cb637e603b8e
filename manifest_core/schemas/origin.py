"""
Manifest core schemas describing replies of the Record API (the origin)
"""

from typing import Iterable, Optional, Tuple

import pydantic


__all__ = ["OriginResponse", "ORIGIN_HEADER_FIELDS"]


ORIGIN_HEADER_FIELDS = {
    "etag": "etag",
    "last-modified": "last_modified",
    "cache-control": "cache_control",
    "access-control-allow-methods": "access_control_allow_methods",
    "access-control-allow-headers": "access_control_allow_headers",
    "access-control-expose-headers": "access_control_expose_headers",
    "access-control-max-age": "access_control_max_age"
}
"""
mapping of lowercase origin header names to the fields of the ``OriginResponse`` schema
"""


class OriginResponse(pydantic.BaseModel):
    """
    OriginResponse: immutable snapshot of one reply of the Record API

    The field `etag` holds the origin's native entity tag (the fingerprint
    of the record), which is never exposed to clients as it is. Instead,
    it's combined with the validator version to form composite validators.
    The field `last_modified` is kept as the opaque string the origin sent.
    The field `cache_control` is kept for diagnostics only, since responses
    always carry the configured `Cache-Control` value.
    The field `via_if_none_match` records whether the reply has been requested
    with an `If-None-Match` header, which is necessary to interpret `304`
    (Not Modified) replies correctly. The field `body` holds the record
    JSON of successful replies and should be empty for any other status.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    http_status: int
    etag: Optional[str] = None
    last_modified: Optional[str] = None
    cache_control: Optional[str] = None
    access_control_allow_methods: Optional[str] = None
    access_control_allow_headers: Optional[str] = None
    access_control_expose_headers: Optional[str] = None
    access_control_max_age: Optional[str] = None
    body: Optional[str] = None
    via_if_none_match: bool = False

    @classmethod
    def from_headers(
            cls,
            http_status: int,
            headers: Iterable[Tuple[str, str]],
            body: Optional[str] = None,
            via_if_none_match: bool = False
    ) -> "OriginResponse":
        """
        Create a snapshot from the raw header list of an origin reply

        The headers are scanned in the order they were received. For every
        field of interest, the first occurrence with a non-blank value wins
        (header names are compared case-insensitively), while any later
        duplicate will be ignored.

        :param http_status: status code of the origin reply
        :param headers: ordered sequence of (name, value) pairs as received
        :param body: optional body text of the origin reply
        :param via_if_none_match: whether the origin was queried with `If-None-Match`
        :return: new immutable snapshot of the origin reply
        """

        values = {}
        for name, value in headers:
            field = ORIGIN_HEADER_FIELDS.get(name.lower())
            if field is None or field in values:
                continue
            if value is not None and value.strip() != "":
                values[field] = value
        return cls(http_status=http_status, body=body, via_if_none_match=via_if_none_match, **values)

    @property
    def cors_headers(self) -> Tuple[Tuple[str, str], ...]:
        """
        Return the CORS-related headers of the origin reply that are present
        """

        return tuple((name, value) for name, value in [
            ("Access-Control-Allow-Methods", self.access_control_allow_methods),
            ("Access-Control-Allow-Headers", self.access_control_allow_headers),
            ("Access-Control-Expose-Headers", self.access_control_expose_headers),
            ("Access-Control-Max-Age", self.access_control_max_age)
        ] if value is not None and value.strip() != "")
