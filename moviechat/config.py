from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from .exceptions import ConfigurationError


class Settings(BaseSettings):
    TMDB_API_KEY: Optional[str] = None
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = 'gpt-3.5-turbo'
    OPENAI_BASE_URL: str = 'https://api.openai.com/v1'
    OPENAI_MAX_TOKENS: Optional[int] = 2048
    TMDB_BASE_URL: str = 'https://api.themoviedb.org/3'
    TMDB_LANGUAGE: str = 'en-US'
    WATCH_REGION: str = 'US'
    REQUEST_TIMEOUT: float = 10.0
    LOG_LEVEL: str = 'INFO'

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )


settings = Settings()


def require_setting(name: str) -> str:
    """
    Return a configured credential, failing fast when it is missing.

    :param name: Name of the setting, e.g. 'TMDB_API_KEY'.
    :return: The non-empty setting value.
    :raises ConfigurationError: If the setting is unset or blank.
    """
    value = getattr(settings, name, None)
    if not value or not str(value).strip():
        raise ConfigurationError(name)
    return value
