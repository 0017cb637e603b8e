"""
Content negotiation of the manifest representation version
"""

import re
import enum
from typing import Optional, Union


ACCEPT_PROFILE_PATTERN = re.compile(r"profile=\"(.*?)\"")

MEDIA_TYPE_JSON = "application/json"
MEDIA_TYPE_JSONLD = "application/ld+json"
MEDIA_TYPE_ANY = "*/*"
ACCEPTABLE_MEDIA_TYPES = (MEDIA_TYPE_ANY, MEDIA_TYPE_JSON, MEDIA_TYPE_JSONLD)

MEDIA_TYPE_IIIF_V2 = "http://iiif.io/api/presentation/2/context.json"
MEDIA_TYPE_IIIF_V3 = "http://iiif.io/api/presentation/3/context.json"


@enum.unique
class ManifestVersion(str, enum.Enum):
    V2 = "2"
    V3 = "3"

    @property
    def context(self) -> str:
        return {ManifestVersion.V2: MEDIA_TYPE_IIIF_V2, ManifestVersion.V3: MEDIA_TYPE_IIIF_V3}[self]

    @property
    def content_type(self) -> str:
        return f"{MEDIA_TYPE_JSONLD};profile=\"{self.context}\""


DEFAULT_VERSION = ManifestVersion.V2


@enum.unique
class Negotiation(enum.Enum):
    NOT_ACCEPTABLE = enum.auto()
    UNRESOLVED = enum.auto()


class NegotiationFailed(ValueError):
    """
    Exception raised when no acceptable representation version could be determined
    """


def is_acceptable(accept: str) -> bool:
    """
    Determine whether any media range of the ``Accept`` header allows a JSON(-LD) manifest
    """

    for media_range in accept.split(","):
        if media_range.split(";", 1)[0].strip().lower() in ACCEPTABLE_MEDIA_TYPES:
            return True
    return False


def read_accept_header(accept: Optional[str]) -> Union[ManifestVersion, Negotiation]:
    """
    Read the manifest version from the profile parameter of the ``Accept`` header

    :param accept: value of the ``Accept`` header, if available
    :return: the requested manifest version, ``Negotiation.UNRESOLVED`` if the
        header is absent or has no profile, ``Negotiation.NOT_ACCEPTABLE`` if
        the header or its profile can't be satisfied
    """

    if accept is None or accept.strip() == "":
        return Negotiation.UNRESOLVED
    if not is_acceptable(accept):
        return Negotiation.NOT_ACCEPTABLE

    m = ACCEPT_PROFILE_PATTERN.search(accept)
    if m is None:
        return Negotiation.UNRESOLVED
    profiles = m.group(1).lower()
    if MEDIA_TYPE_IIIF_V3 in profiles:
        return ManifestVersion.V3
    if MEDIA_TYPE_IIIF_V2 in profiles:
        return ManifestVersion.V2
    return Negotiation.NOT_ACCEPTABLE


def negotiate_version(accept: Optional[str], format_: Optional[str] = None) -> ManifestVersion:
    """
    Determine the manifest version of the request

    The profile in the ``Accept`` header takes precedence over the explicit
    ``format`` query parameter, which takes precedence over the default version.

    :param accept: value of the ``Accept`` header, if available
    :param format_: value of the ``format`` query parameter, if available
    :return: the manifest version to be generated for the request
    :raises NegotiationFailed: if no acceptable version could be determined
    """

    result = read_accept_header(accept)
    if result is Negotiation.NOT_ACCEPTABLE:
        raise NegotiationFailed(f"Accept header {accept!r} can't be satisfied")
    if isinstance(result, ManifestVersion):
        return result

    if format_ is None or format_.strip() == "":
        return DEFAULT_VERSION
    try:
        return ManifestVersion(format_.strip())
    except ValueError as exc:
        raise NegotiationFailed(f"Unsupported manifest format {format_!r}") from exc
