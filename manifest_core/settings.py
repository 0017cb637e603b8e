"""
Manifest core settings provider
"""

import os
from typing import Any, Callable, List, Optional, Tuple, Type

try:
    import ujson as json
except ImportError:
    import json

import pydantic_settings
from pydantic_settings import JsonConfigSettingsSource, PydanticBaseSettingsSource

from .schemas import config


SETTINGS_LOG_INFO_FUNCTION: Optional[Callable[[str], Any]] = None
"""
optional function to accept log messages when creating a new configuration file
"""

CONFIG_PATHS: List[str] = ["config.json", os.path.join("..", "config.json")]
"""
list of search paths for the config file, can be overwritten by the env variable ``CONFIG_PATH``
"""

if os.environ.get("CONFIG_PATH"):
    CONFIG_PATHS = [os.environ.get("CONFIG_PATH")]


def find_config_file() -> Optional[str]:
    """
    Return the first existing config file of the search paths (or None)
    """

    for path in CONFIG_PATHS:
        if os.path.isfile(path):
            return path
    return None


class Settings(pydantic_settings.BaseSettings, config.CoreConfig):
    """
    Manifest core settings

    Do not change the settings at runtime, since this might lead to unspecified
    behavior. Always restart the server after changing the config file. Values
    are taken from (highest priority first): init arguments, environment
    variables (with ``__`` as nested delimiter, e.g. ``GENERAL__APP_VERSION``),
    the ``.env`` file, the first config file found in ``CONFIG_PATHS``
    and the built-in defaults.
    """

    model_config = pydantic_settings.SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore"
    )

    @classmethod
    def settings_customise_sources(
            cls,
            settings_cls: Type[pydantic_settings.BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,
            file_secret_settings: PydanticBaseSettingsSource
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        sources = [init_settings, env_settings, dotenv_settings]
        path = find_config_file()
        if path is not None:
            sources.append(JsonConfigSettingsSource(settings_cls, json_file=path))
        sources.append(file_secret_settings)
        return tuple(sources)


def get_default_core_config() -> config.CoreConfig:
    return config.CoreConfig(
        general=config.GeneralConfig(),
        server=config.ServerConfig(),
        logging=config.LoggingConfig()
    )


def store_configuration(conf: Optional[config.CoreConfig] = None, path: Optional[str] = None) -> config.CoreConfig:
    """
    Write the given (or the default) configuration as JSON file to the given (or the first search) path
    """

    p = path or os.path.abspath(CONFIG_PATHS[0])
    conf = conf or get_default_core_config()
    with open(p, "w", encoding="UTF-8") as f:
        f.write(json.dumps(conf.model_dump(mode="json"), indent=4))
    SETTINGS_LOG_INFO_FUNCTION and SETTINGS_LOG_INFO_FUNCTION(f"A new config file has been created as {p!r}.")
    return conf
