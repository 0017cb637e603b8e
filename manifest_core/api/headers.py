"""
Builder of the caching and CORS response headers of the core REST API
"""

from typing import Dict, Optional

from .etag import encode_etag
from ..schemas import OriginResponse


def generate_cache_headers(
        response: OriginResponse,
        version: str,
        cache_control: Optional[str] = None,
        vary: Optional[str] = None
) -> Dict[str, str]:
    """
    Generate the default headers for sending a response with HTTP caching

    :param response: snapshot of the origin reply, providing the origin fingerprint
    :param version: validator version, needed to create the composite validator
    :param cache_control: optional, if not None then a ``Cache-Control`` header is added
    :param vary: optional, if not None then a ``Vary`` header is added
    :return: ordered headers required for HTTP caching
    """

    headers = {}
    if response.etag is not None:
        headers["ETag"] = encode_etag(response.etag, version)
    if response.last_modified is not None:
        headers["Last-Modified"] = response.last_modified
    if cache_control is not None:
        headers["Cache-Control"] = cache_control
    if vary is not None:
        headers["Vary"] = vary
    return headers


def add_cors_headers(headers: Dict[str, str], response: OriginResponse) -> Dict[str, str]:
    """
    Add the CORS headers of the origin reply to the given headers (in-place)
    """

    for name, value in response.cors_headers:
        headers[name] = value
    return headers
