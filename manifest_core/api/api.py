"""
Manifest core REST API definitions

This API serves IIIF presentation manifests generated from the records of
the Record API. Manifests are available in the presentation API versions
2 and 3. The version is negotiated using the `profile` parameter of the
`Accept` header or the `format` query parameter.

The API fully supports HTTP conditional requests. Entity tags sent by
the API are weak validators that bind the state of the record to the
version of the manifest. Conditional requests using `If-None-Match`,
`If-Match` or `If-Modified-Since` are forwarded to the Record API.
"""

import logging.config
import contextlib
from typing import Any, Callable, Dict, Optional, Type

import fastapi
import fastapi.responses
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import base
from .routers import router
from .. import schemas, __version__
from ..misc.manifests import ManifestBuilder
from ..misc.records import RecordClient
from ..settings import Settings


DEFAULT_EXCEPTION_HANDLERS = {
    StarletteHTTPException: base.APIException.handle,
    RequestValidationError: base.handle_request_validation_error,
    Exception: base.handle_generic_exception
}

LICENSE_INFO = {
    "name": "European Union Public Licence v1.2",
    "url": "https://joinup.ec.europa.eu/collection/eupl/eupl-text-eupl-12"
}


def _make_app(
        title: str,
        version: str,
        description: str,
        license_info: Optional[Dict[str, str]] = None,
        exception_handlers: Optional[Dict[Any, Callable]] = None,
        root_redirect: bool = True,
        api_class: Optional[Type[fastapi.FastAPI]] = None,
        **kwargs
) -> fastapi.FastAPI:
    if api_class is None:
        api_class = fastapi.FastAPI
    app = api_class(
        title=title,
        version=version,
        description=description,
        license_info=license_info or LICENSE_INFO,
        responses={400: {"model": schemas.APIError}},
        **kwargs
    )

    handlers = exception_handlers or DEFAULT_EXCEPTION_HANDLERS
    for exc in handlers:
        app.add_exception_handler(exc, handlers[exc])

    if root_redirect:
        @app.get("/", include_in_schema=False)
        async def redirect_root():
            return fastapi.responses.RedirectResponse("./docs")

    return app


def create_app(
        settings: Optional[Settings] = None,
        configure_logging: bool = True,
        record_client: Optional[RecordClient] = None,
        manifest_builder: Optional[ManifestBuilder] = None
) -> fastapi.FastAPI:
    """
    Create a new ``FastAPI`` instance using the specified settings and switches

    This function is conveniently used to allow overwriting the settings
    before launching the application as well as to allow multiple ``FastAPI``
    instances in one program, which in turn makes unit testing much easier.

    :param settings: optional Settings instance (would be created if not present)
    :param configure_logging: switch whether to configure logging
    :param record_client: optional client of the Record API (would be created if not present)
    :param manifest_builder: optional manifest builder (would be created if not present)
    :return: new ``FastAPI`` instance
    """

    if settings is None:
        settings = Settings()

    if configure_logging:
        logging.config.dictConfig(settings.logging.model_dump())
    logger = logging.getLogger(__name__)
    logger.debug("Starting application...")

    if record_client is None:
        record_client = RecordClient(settings.general.record_api, settings.general.origin_timeout)
    if manifest_builder is None:
        manifest_builder = ManifestBuilder(settings.general.manifest_base_url, settings.general.full_text_api)

    @contextlib.asynccontextmanager
    async def lifespan(_: fastapi.FastAPI):
        logger.info("Starting API...")
        yield
        logger.info("Shutting down...")
        await record_client.close()

    servers = None
    if settings.server.public_base_url is not None:
        servers = [{"url": str(settings.server.public_base_url)}]

    app = _make_app(
        title="Manifest core REST API",
        version=__version__,
        description=__doc__,
        lifespan=lifespan,
        servers=servers,
        api_class=base.APIWithoutValidationError
    )
    app.state.settings = settings
    app.state.record_client = record_client
    app.state.manifest_builder = manifest_builder
    app.include_router(router)
    return app


class APIWrapper:
    """
    Wrapper class around the FastAPI main object, accessible via the ``app`` property

    There should be only one global instance of this object, which should only
    export its functionality to hold the ``app`` property. This wrapper can be
    used to allow easy command-line usage via ``uvicorn`` calls. Example:

    .. code-block::

        uvicorn manifest_core.api:api.app
    """

    def __init__(self):
        self._app: Optional[fastapi.FastAPI] = None

    def get_app(self) -> fastapi.FastAPI:
        return self.app

    def set_app(self, application: fastapi.FastAPI):
        if not isinstance(application, fastapi.FastAPI):
            raise TypeError
        self._app = application

    @property
    def app(self) -> fastapi.FastAPI:
        """
        Return the ``app`` instance (or create it with default settings if it doesn't exist)
        """

        if self._app is not None:
            return self._app
        self._app = create_app()
        return self._app


api = APIWrapper()
