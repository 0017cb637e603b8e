"""
Manifest core API dependency library
"""

from fastapi import Depends, Request

from ..misc.manifests import ManifestBuilder
from ..misc.records import RecordClient
from ..settings import Settings


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_record_client(request: Request) -> RecordClient:
    return request.app.state.record_client


def get_manifest_builder(request: Request) -> ManifestBuilder:
    return request.app.state.manifest_builder


class MinimalRequestData:
    """
    Collection of minimal dependencies used only for internal functionalities
    """

    def __init__(self, request: Request, config: Settings = Depends(get_settings)):
        self.request = request
        self.headers = request.headers
        self.config = config


class LocalRequestData(MinimalRequestData):
    """
    Collection of core dependencies used by the manifest path operations

    This class stores references to the collaborators of a request: the
    settings, the client of the Record API and the manifest builder. Each
    of them can be replaced using FastAPI's dependency overrides. Note that
    any dependency added here will be added to the OpenAPI definition,
    if it refers to a Query, Header, Path or Cookie.
    """

    def __init__(
            self,
            request: Request,
            config: Settings = Depends(get_settings),
            records: RecordClient = Depends(get_record_client),
            builder: ManifestBuilder = Depends(get_manifest_builder)
    ):
        super().__init__(request, config)
        self.records = records
        self.builder = builder
