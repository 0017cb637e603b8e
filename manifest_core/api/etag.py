"""
ETag helper library for the core REST API

Clients never see the entity tag of the Record API. Instead, the API sends
composite validators, which bind the origin's entity tag (the fingerprint)
to the version of the representation that has been generated from it:

    W/"BASE64(fingerprint|version)"

This allows to forward conditional requests to the origin while making sure
that a cached representation of another version never matches.
"""

import base64
import logging
import dataclasses
from typing import Optional, Tuple, Union


logger = logging.getLogger(__name__)

WEAK_PREFIX = "W/"
WILDCARD = "*"
ENCODING_SEPARATOR = "|"
DECODING_SEPARATORS = ("|", ",", " ")


class ValidatorDecodeError(ValueError):
    """
    Exception raised when a value is no composite validator created by ``encode_etag``
    """


@dataclasses.dataclass(frozen=True)
class Found:
    """
    Match result holding the origin fingerprint of the matching validator
    """

    fingerprint: str


@dataclasses.dataclass(frozen=True)
class NotFound:
    """
    Match result when no validator of the current version has been given
    """


@dataclasses.dataclass(frozen=True)
class Undecodable:
    """
    Match result when a validator couldn't be decoded
    """

    token: str


MatchResult = Union[Found, NotFound, Undecodable]


def strip_etag(value: str) -> str:
    """
    Remove surrounding whitespace, the weak validator marker and any double quotes
    """

    value = value.strip()
    if value.startswith(WEAK_PREFIX):
        value = value[len(WEAK_PREFIX):]
    return value.replace('"', "")


def is_wildcard(header: Optional[str]) -> bool:
    """
    Determine whether the header value of a conditional request is the wildcard ``*``
    """

    return header is not None and strip_etag(header) == WILDCARD


def encode_etag(fingerprint: str, version: str) -> str:
    """
    Create the weak composite validator of the origin fingerprint and the version

    :param fingerprint: entity tag as sent by the origin
    :param version: validator version of the generated representation
    :return: quoted, weak entity tag ready to be used as ``ETag`` header value
    """

    contents = fingerprint + ENCODING_SEPARATOR + version
    return WEAK_PREFIX + '"' + base64.b64encode(contents.encode("UTF-8")).decode("ASCII") + '"'


def decode_etag(value: str) -> Tuple[str, str]:
    """
    Decode a composite validator into the origin fingerprint and the version

    The weak validator marker and quotes are optional. The decoded contents
    are split at the first separator that's present in the decoded text,
    checked in the order pipe, comma and space, since other producers of
    those validators used different separators. The version is everything
    after the last occurrence of that separator.

    :param value: composite validator (e.g. from an ``If-None-Match`` header)
    :return: tuple of the origin fingerprint and the version
    :raises ValidatorDecodeError: if the value wasn't created by ``encode_etag``
    """

    try:
        decoded = base64.b64decode(strip_etag(value), validate=True).decode("UTF-8")
    except ValueError as exc:
        raise ValidatorDecodeError(f"Invalid encoding of validator {value!r}") from exc

    for separator in DECODING_SEPARATORS:
        if separator in decoded:
            fingerprint, _, version = decoded.rpartition(separator)
            if fingerprint == "" or version == "":
                raise ValidatorDecodeError(f"Incomplete validator {value!r}")
            return fingerprint, version
    raise ValidatorDecodeError(f"No separator found in validator {value!r}")


def match_etag(header: Optional[str], version: Optional[str]) -> MatchResult:
    """
    Find the origin fingerprint of the validator in the header that matches the version

    The header value may contain a comma-separated list of validators (as
    allowed for ``If-None-Match`` and ``If-Match``). The validators are tried
    in order. The first one that can't be decoded stops the search, so that
    later validators in the list won't be considered anymore.

    :param header: value of a conditional request header
    :param version: current validator version (compared case-insensitively)
    :return: ``Found`` for the first validator with matching version,
        ``Undecodable`` for the first broken validator, ``NotFound`` otherwise
    """

    if header is None or header.strip() == "" or version is None or version.strip() == "":
        return NotFound()

    for token in map(strip_etag, header.split(",")):
        if token == "":
            continue
        try:
            fingerprint, token_version = decode_etag(token)
        except ValidatorDecodeError as exc:
            logger.debug(f"Stopped matching validators in {header!r}: {exc}")
            return Undecodable(token)
        if token_version.lower() == version.lower():
            return Found(fingerprint)

    logger.debug(f"No validator in {header!r} matches version {version!r}")
    return NotFound()
