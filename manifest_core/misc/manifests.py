"""
Manifest core library to generate and serialize minimal IIIF presentation manifests
"""

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

try:
    import ujson as json
except ImportError:
    import json

if TYPE_CHECKING:
    from ..api.negotiation import ManifestVersion


class ManifestBuilder:
    """
    Builder of skeleton manifests for both supported presentation API versions

    Only the identifying parts of a manifest are generated: context, id,
    type, label and (optionally) the reference to the full-text API. The
    record JSON is expected to be a Record API document with an ``object``.
    """

    def __init__(self, manifest_base_url: str, full_text_api: str):
        self.manifest_base_url = manifest_base_url.rstrip("/")
        self.full_text_api = full_text_api.rstrip("/")
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def _read_record(record_json: str) -> Dict[str, Any]:
        try:
            record = json.loads(record_json)
        except ValueError as exc:
            raise ValueError(f"Record JSON can't be parsed: {exc}") from exc
        if not isinstance(record, dict) or not isinstance(record.get("object"), dict):
            raise ValueError("Record JSON has no 'object' member")
        return record["object"]

    @staticmethod
    def _read_titles(record: Dict[str, Any]) -> List[str]:
        titles = record.get("title") or []
        if isinstance(titles, str):
            return [titles]
        return [str(title) for title in titles]

    def build(
            self,
            version: "ManifestVersion",
            record_id: str,
            record_json: str,
            add_full_text: bool = True,
            full_text_api: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Generate a manifest of the given version from the record JSON

        :param version: presentation API version of the manifest
        :param record_id: record identifier in the form ``/{collectionId}/{recordId}``
        :param record_json: body of the Record API reply
        :param add_full_text: switch whether to reference the full-text API
        :param full_text_api: optional full-text API base URL overwriting the configured one
        :return: manifest as JSON-serializable dictionary
        :raises ValueError: if the record JSON is not a valid record document
        """

        record = self._read_record(record_json)
        about = record.get("about") or record_id
        manifest_id = f"{self.manifest_base_url}{about}/manifest"
        titles = self._read_titles(record) or [about]

        if version.value == "3":
            manifest = {
                "@context": version.context,
                "id": manifest_id,
                "type": "Manifest",
                "label": {"none": titles}
            }
        else:
            manifest = {
                "@context": version.context,
                "@id": manifest_id,
                "@type": "sc:Manifest",
                "label": titles[0] if len(titles) == 1 else titles
            }

        if add_full_text:
            full_text_base = (full_text_api or self.full_text_api).rstrip("/")
            manifest["seeAlso"] = [{
                "id" if version.value == "3" else "@id": f"{full_text_base}/presentation{about}",
                "format": "application/ld+json"
            }]

        self.logger.debug(f"Generated v{version.value} manifest {manifest_id!r}")
        return manifest

    @staticmethod
    def serialize(manifest: Dict[str, Any]) -> str:
        return json.dumps(manifest, indent=2)
