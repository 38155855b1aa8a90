"""Configuration management using pydantic-settings.

Key patterns:
1. Multiple env files (.env, .env.local) - local overrides shared
2. Required values stay optional at load time so ``--help`` works without them
3. validation_alias for explicit env var names
4. Cached accessor instead of an import-time singleton

Usage:
    from htbcli.config import get_settings
    print(get_settings().api_url)
"""

import logging
from functools import cache
from pathlib import Path
from typing import Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from htbcli.errors import MissingSettingError

logger = logging.getLogger(__name__)

API_URL = "https://www.hackthebox.com/api/v4"


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    The API key and lab root use the bare names the shell profile already
    exports (HTB_API_KEY, CS_OPT); client tuning uses an HTB_ prefix.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def log_missing_keys(self) -> Self:
        """Log unset values some commands need."""
        missing = []
        if not self.api_key:
            missing.append("HTB_API_KEY")
        if self.cs_opt is None:
            missing.append("CS_OPT")

        if missing:
            logger.debug("Unset settings (some commands will fail): %s", ", ".join(missing))
        return self

    # ==========================================================================
    # CREDENTIALS
    # ==========================================================================

    api_key: str | None = Field(
        default=None,
        validation_alias="HTB_API_KEY",
        description="App token used as the bearer credential",
    )

    # ==========================================================================
    # PATHS
    # ==========================================================================

    cs_opt: Path | None = Field(
        default=None,
        validation_alias="CS_OPT",
        description="Base directory holding htb/lab/<machine> notes folders",
    )

    # ==========================================================================
    # HTTP
    # ==========================================================================

    api_url: str = Field(
        default=API_URL,
        validation_alias="HTB_API_URL",
        description="Base URL of the v4 API",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="HTB_HTTP_TIMEOUT_SECONDS",
        description="Timeout for HTTP requests",
    )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise MissingSettingError("HTB_API_KEY")
        return self.api_key

    def require_cs_opt(self) -> Path:
        if self.cs_opt is None:
            raise MissingSettingError("CS_OPT")
        return self.cs_opt


@cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings.model_validate({})
