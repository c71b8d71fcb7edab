"""
Runtime configuration for authsession.

Values come from environment variables (a ``.env`` file in the working
directory is loaded first) and are validated by a pydantic model.
"""

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from authsession.errors import ConfigurationError

DEFAULT_STORE_PATH = Path.home() / ".authsession" / "session.json"


class Config(BaseModel):
    # Persistence
    store_backend: Literal["file", "ephemeral"] = "file"
    store_path: Path = DEFAULT_STORE_PATH
    poll_interval: float = Field(default=1.0, gt=0)

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("store_path", mode="before")
    @classmethod
    def _expand_path(cls, value):
        return Path(value).expanduser() if value else DEFAULT_STORE_PATH

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


_ENV_MAP = {
    "AUTHSESSION_STORE": "store_backend",
    "AUTHSESSION_STORE_PATH": "store_path",
    "AUTHSESSION_POLL_INTERVAL": "poll_interval",
    "LOG_LEVEL": "log_level",
    "LOG_FILE": "log_file",
}


def load_config(env: Optional[dict] = None) -> Config:
    """
    Build a Config from environment variables.

    Args:
        env: Mapping to read instead of ``os.environ`` (the ``.env`` file is
             only consulted when reading the real environment).

    Raises:
        ConfigurationError: If a value fails validation.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    values = {field: env[var] for var, field in _ENV_MAP.items() if env.get(var)}
    try:
        return Config(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid authsession configuration: {e}") from e


CONFIG = load_config()
