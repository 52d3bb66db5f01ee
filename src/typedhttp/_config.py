import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from ._utils.constants import (
    ENV_FOLLOW_REDIRECTS,
    ENV_LOG_REQUEST_BODY,
    ENV_LOG_RESPONSE_BODY,
    ENV_TIMEOUT,
    ENV_USER_AGENT,
    ENV_VERIFY_SSL,
)
from ._version import __version__


class Config(BaseModel):
    """Transport settings and client-wide defaults, fixed at construction."""

    model_config = ConfigDict(frozen=True)

    timeout: float = Field(default=30.0, gt=0)
    follow_redirects: bool = True
    verify_ssl: bool = True
    log_request_body: bool = False
    log_response_body: bool = False
    user_agent: str = Field(default=f"typedhttp/{__version__}", min_length=1)

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "Config":
        """Build a config from ``TYPEDHTTP_*`` environment variables.

        Variables found in ``dotenv_path`` (or a ``.env`` in the working
        directory) are loaded first without overriding the real environment.
        Unset variables keep their defaults.
        """
        load_dotenv(dotenv_path=dotenv_path or find_dotenv(usecwd=True))

        env_fields = {
            "timeout": ENV_TIMEOUT,
            "follow_redirects": ENV_FOLLOW_REDIRECTS,
            "verify_ssl": ENV_VERIFY_SSL,
            "log_request_body": ENV_LOG_REQUEST_BODY,
            "log_response_body": ENV_LOG_RESPONSE_BODY,
            "user_agent": ENV_USER_AGENT,
        }
        values = {
            name: os.environ[env_name]
            for name, env_name in env_fields.items()
            if os.environ.get(env_name) not in (None, "")
        }
        return cls.model_validate(values)
