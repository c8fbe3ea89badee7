from typing import FrozenSet, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from errors import ConfigurationError

DEFAULT_SIM_API_BASE_URL = "https://api.sim.dune.com"
DEFAULT_SPAM_TOKEN_SYMBOLS = "RTFKT"


def parse_symbols(raw: Optional[str]) -> FrozenSet[str]:
    if not raw:
        return frozenset()
    return frozenset(s.strip() for s in raw.split(",") if s.strip())


class Settings(BaseSettings):
    """Process-wide configuration, read once at startup."""

    sim_api_key: str = Field(..., alias="SIM_API_KEY")
    sim_api_base_url: str = Field(DEFAULT_SIM_API_BASE_URL, alias="SIM_API_BASE_URL")
    spam_token_symbols_raw: str = Field(DEFAULT_SPAM_TOKEN_SYMBOLS, alias="SPAM_TOKEN_SYMBOLS")
    activity_limit: int = Field(25, alias="ACTIVITY_LIMIT", gt=0)
    collectibles_limit: int = Field(50, alias="COLLECTIBLES_LIMIT", gt=0)
    http_timeout: float = Field(20.0, alias="SIM_HTTP_TIMEOUT", gt=0)
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=(".env",),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @property
    def spam_token_symbols(self) -> FrozenSet[str]:
        return parse_symbols(self.spam_token_symbols_raw)

    @field_validator("sim_api_key")
    @classmethod
    def _require_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("SIM_API_KEY is blank")
        return value

    @field_validator("sim_api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return (value.strip() or DEFAULT_SIM_API_BASE_URL).rstrip("/")

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return (value.strip() or "INFO").upper()


def load_settings(env_file: Optional[str] = ".env") -> Settings:
    """
    Read settings from the process environment (and .env, if present).

    Raises ConfigurationError when SIM_API_KEY is not set or a value does not validate.
    """
    try:
        return Settings(_env_file=env_file)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"FATAL ERROR: invalid environment configuration: {details}") from e
