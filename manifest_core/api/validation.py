"""
Validation of the user-supplied input of the manifest endpoint
"""

import re
from typing import Optional

import pydantic

from .base import BadRequest


WSKEY_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
RECORD_ID_PATTERN = re.compile(r"^/[a-zA-Z0-9_]+/[a-zA-Z0-9_]+$")

_HTTP_URL_ADAPTER = pydantic.TypeAdapter(pydantic.HttpUrl)


def validate_wskey(wskey: str) -> str:
    if not WSKEY_PATTERN.match(wskey):
        raise BadRequest("Invalid API key format.", detail=f"wskey={wskey!r}")
    return wskey


def validate_record_id(record_id: str) -> str:
    if not RECORD_ID_PATTERN.match(record_id):
        raise BadRequest("Invalid record identifier.", detail=f"record_id={record_id!r}")
    return record_id


def validate_api_url(url: Optional[str], name: str) -> Optional[str]:
    """
    Validate an optional override URL of a remote API (absolute HTTP(S) URLs only)

    The URL is returned as given, since the normalized form
    of ``pydantic.HttpUrl`` may differ in trailing slashes.
    """

    if url is None:
        return None
    try:
        _HTTP_URL_ADAPTER.validate_python(url)
    except pydantic.ValidationError as exc:
        raise BadRequest(f"Invalid URL for parameter {name!r}.", detail=str(exc)) from exc
    return url
