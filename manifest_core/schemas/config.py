"""
Special schemas for the configuration file and its properties
"""

from typing import Dict, Optional, Union

import pydantic


class GeneralConfig(pydantic.BaseModel):
    app_version: Optional[pydantic.constr(min_length=1)] = None
    record_api: str = "https://api.europeana.eu/record/v2"
    full_text_api: str = "https://api.europeana.eu/fulltext"
    manifest_base_url: str = "https://iiif.europeana.eu/presentation"
    origin_timeout: pydantic.PositiveFloat = 10.0
    cache_control: str = "no-cache"
    vary: str = "Accept"


class ServerConfig(pydantic.BaseModel):
    host: str = "127.0.0.1"
    port: pydantic.conint(gt=0, lt=65536) = 8000
    public_base_url: Optional[pydantic.HttpUrl] = None


class LoggingConfig(pydantic.BaseModel):
    version: pydantic.conint(ge=1, le=1) = 1
    disable_existing_loggers: bool = False
    incremental: bool = False
    filters: Dict[str, Dict[str, Union[str, list]]] = {
        "aiohttp_no_debug": {
            "()": "manifest_core.misc.logger.NoDebugFilter",
            "name": "aiohttp.client"
        }
    }
    formatters: Dict[str, Dict[str, str]] = {
        "default": {
            "style": "{",
            "format": "{asctime}: Manifest {process}: [{levelname}] {name}: {message}",
            "datefmt": "%d.%m.%Y %H:%M:%S"
        },
        "file": {
            "style": "{",
            "format": "{asctime} ({process}): [{levelname}] {name}: {message}",
            "datefmt": "%d.%m.%Y %H:%M"
        },
        "access": {
            "()": "uvicorn.logging.AccessFormatter",
            "fmt": "%(asctime)s %(client_addr)s - \"%(request_line)s\" %(status_code)s"
        }
    }
    loggers: Dict[str, dict] = {
        "uvicorn.access": {
            "level": "INFO",
            "handlers": ["access"],
            "propagate": False
        }
    }
    handlers: Dict[str, Dict[str, Union[str, list]]] = {
        "default": {
            "level": "INFO",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
            "formatter": "default",
            "filters": ["aiohttp_no_debug"]
        },
        "file": {
            "level": "DEBUG",
            "class": "logging.FileHandler",
            "filename": "./manifest.log",
            "formatter": "file",
            "filters": ["aiohttp_no_debug"]
        },
        "access": {
            "level": "INFO",
            "class": "logging.FileHandler",
            "filename": "./access.log",
            "formatter": "access"
        }
    }
    root: dict = {
        "level": "INFO",
        "handlers": ["default", "file"]
    }


class CoreConfig(pydantic.BaseModel):
    general: GeneralConfig = GeneralConfig()
    server: ServerConfig = ServerConfig()
    logging: LoggingConfig = LoggingConfig()

    @pydantic.field_validator("general")
    @classmethod
    def enforce_absolute_api_urls(cls, value: GeneralConfig) -> GeneralConfig:
        for name in ("record_api", "full_text_api", "manifest_base_url"):
            if not getattr(value, name).startswith(("http://", "https://")):
                raise ValueError(f"Field {name!r} must be an absolute HTTP(S) URL")
        return value
