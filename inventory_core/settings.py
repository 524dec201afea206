"""
Inventory core settings provider
"""

import os
import json
import logging
from typing import Optional, Tuple, Type

import pydantic_settings
from pydantic_settings import JsonConfigSettingsSource, PydanticBaseSettingsSource

from .schemas import config


CONFIG_PATHS: list = [os.environ["CONFIG_PATH"]] if os.environ.get("CONFIG_PATH") else [
    "config.json",
    os.path.join("..", "config.json")
]
"""
locations searched for the JSON config file in this order, replaced by the env variable ``CONFIG_PATH``
"""


def get_db_from_env(db_override: Optional[str] = None) -> Optional[str]:
    """
    Return the given database URL or the one from the environment, if any
    """

    for value in (db_override, os.environ.get("DATABASE_CONNECTION"), os.environ.get("DATABASE__CONNECTION")):
        if value:
            return value
    return None


def find_config_file() -> Optional[str]:
    return next((path for path in CONFIG_PATHS if os.path.exists(path)), None)


class Settings(pydantic_settings.BaseSettings, config.CoreConfig):
    """
    Inventory core settings

    Restart the server after changing the config file, since most values
    are only read once during startup. The sources take precedence in this
    order: keyword arguments, environment variables (nested keys joined
    by ``__``, e.g. ``DATABASE__CONNECTION``), the ``.env`` file and the
    first existing file of ``CONFIG_PATHS``. Every value has a default,
    so the server starts without any config file, too.
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
        json_settings = JsonConfigSettingsSource(settings_cls, json_file=find_config_file())
        return init_settings, env_settings, dotenv_settings, file_secret_settings, json_settings


def get_default_core_config(database_override: Optional[str] = None) -> config.CoreConfig:
    core_config = config.CoreConfig()
    if database_override:
        core_config.database.connection = database_override
    return core_config


def store_configuration(conf: Optional[config.CoreConfig] = None, path: Optional[str] = None) -> config.CoreConfig:
    """
    Write the given or the default configuration as JSON file to the path or the first config location
    """

    target = path or os.path.abspath(CONFIG_PATHS[0])
    conf = conf or get_default_core_config(get_db_from_env())
    with open(target, "w") as f:
        json.dump(conf.model_dump(), f, indent=4)
    logging.getLogger(__name__).info(f"Stored the configuration in {target!r}")
    return conf
