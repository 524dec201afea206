"""
Special schemas for the configuration file and its properties
"""

import copy
from typing import Dict, List, Union

import pydantic


DEFAULT_LOG_FORMATTERS = {
    "console": {
        "style": "{",
        "format": "{asctime} inventory[{process}] {levelname:<8} {name}: {message}",
        "datefmt": "%Y-%m-%d %H:%M:%S"
    },
    "file": {
        "style": "{",
        "format": "{asctime} [{process}] {levelname} {name}: {message}",
        "datefmt": "%Y-%m-%d %H:%M:%S"
    },
    "access": {
        "()": "uvicorn.logging.AccessFormatter",
        "fmt": "%(asctime)s %(client_addr)s \"%(request_line)s\" %(status_code)s"
    }
}

DEFAULT_LOG_HANDLERS = {
    "console": {
        "level": "INFO",
        "class": "logging.StreamHandler",
        "stream": "ext://sys.stdout",
        "formatter": "console"
    },
    "file": {
        "level": "DEBUG",
        "class": "logging.FileHandler",
        "filename": "./inventory.log",
        "formatter": "file",
        "filters": ["urllib3_no_debug"]
    },
    "access": {
        "level": "INFO",
        "class": "logging.FileHandler",
        "filename": "./access.log",
        "formatter": "access"
    }
}


class ServerConfig(pydantic.BaseModel):
    host: str = "127.0.0.1"
    port: pydantic.conint(gt=0, lt=65536) = 8000
    allowed_origins: List[str] = ["http://localhost:8080"]
    log_failed_requests: bool = True


class DatabaseConfig(pydantic.BaseModel):
    connection: str = "sqlite://"
    debug_sql: bool = False


class GtinConfig(pydantic.BaseModel):
    url_format: str = "https://{country}.openfoodfacts.org/api/v0/product/{gtin}.json"
    countries: pydantic.conlist(pydantic.constr(min_length=1), min_length=1) = ["ch", "world"]
    language: pydantic.constr(min_length=2, max_length=8) = "de"
    user_agent: str = "inventory-core - Web - https://github.com/rhorber/inventory-gui"
    timeout: pydantic.PositiveFloat = 30.0
    max_redirects: pydantic.NonNegativeInt = 4


class LoggingConfig(pydantic.BaseModel):
    """
    Configuration dictionary for ``logging.config.dictConfig``
    """

    version: pydantic.conint(ge=1, le=1) = 1
    disable_existing_loggers: bool = False
    incremental: bool = False
    filters: Dict[str, Dict[str, Union[str, list]]] = {
        "urllib3_no_debug": {"()": "inventory_core.misc.logger.NoDebugFilter", "name": "urllib3"}
    }
    formatters: Dict[str, Dict[str, str]] = pydantic.Field(
        default_factory=lambda: copy.deepcopy(DEFAULT_LOG_FORMATTERS)
    )
    loggers: Dict[str, dict] = {}
    handlers: Dict[str, Dict[str, Union[str, list]]] = pydantic.Field(
        default_factory=lambda: copy.deepcopy(DEFAULT_LOG_HANDLERS)
    )
    root: dict = {"level": "INFO", "handlers": ["console", "file"]}


class CoreConfig(pydantic.BaseModel):
    server: ServerConfig = ServerConfig()
    database: DatabaseConfig = DatabaseConfig()
    gtin: GtinConfig = GtinConfig()
    logging: LoggingConfig = LoggingConfig()

    @pydantic.field_validator("server")
    @classmethod
    def enforce_origin_constraints(cls, value: ServerConfig):
        if "*" in value.allowed_origins and len(value.allowed_origins) > 1:
            raise ValueError("The wildcard origin '*' can't be combined with other origins")
        return value
