"""
Manifest core router module for the IIIF presentation manifests
"""

from typing import Optional

from fastapi import Depends, Query, Response

from ._router import router
from .. import negotiation, validation
from ..base import NotAcceptable
from ..conditional import ConditionalRequest
from ..dependency import LocalRequestData
from ... import schemas


@router.get(
    "/presentation/{collection_id}/{record_id}/manifest",
    tags=["Presentation"],
    response_class=Response,
    responses={
        200: {"description": "Manifest in the requested version"},
        304: {"description": "The cached manifest of the client is still valid"},
        406: {"model": schemas.APIError},
        412: {"description": "The manifest has been changed or is available in another version only"},
        500: {"model": schemas.APIError}
    }
)
async def get_manifest(
        collection_id: str,
        record_id: str,
        wskey: str = Query(...),
        format_: Optional[str] = Query(None, alias="format"),
        record_api: Optional[str] = Query(None, alias="recordApi"),
        full_text: bool = Query(True, alias="fullText"),
        full_text_api: Optional[str] = Query(None, alias="fullTextApi"),
        local: LocalRequestData = Depends(LocalRequestData)
):
    """
    Return the manifest of the record in the negotiated version

    The version is taken from the `profile` of the `Accept` header, the
    `format` query parameter or defaults to `2`. The entity tag is a weak
    validator bound to the record state as well as to the manifest version.
    Conditional requests (`If-None-Match`, `If-Match` and `If-Modified-Since`)
    are forwarded to the Record API, which decides about `304` (Not Modified)
    and `412` (Precondition Failed) responses. A `412` response is also
    returned directly if none of the `If-Match` validators is a validator
    of the current manifest version.
    """

    record = validation.validate_record_id(f"/{collection_id}/{record_id}")
    validation.validate_wskey(wskey)
    validation.validate_api_url(record_api, "recordApi")
    validation.validate_api_url(full_text_api, "fullTextApi")

    try:
        version = negotiation.negotiate_version(local.headers.get("Accept"), format_)
    except negotiation.NegotiationFailed as exc:
        raise NotAcceptable(str(exc)) from exc

    general = local.config.general
    conditional = ConditionalRequest(
        local.headers,
        general.app_version or version.value,
        general.cache_control,
        general.vary
    )
    response = await conditional.query(
        local.records.fetch_record,
        record_id=record,
        wskey=wskey,
        record_api=record_api
    )

    def render(body: str) -> str:
        return local.builder.serialize(local.builder.build(version, record, body, full_text, full_text_api))

    return conditional.make_response(response, version.content_type, render)
