import logging

from pydantic_settings import BaseSettings

DEFAULT_BASE_URL = "https://restful-booker.herokuapp.com"


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "BOOKER_"}

    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    username: str = "admin"
    password: str = "password123"
    log_level: str = "INFO"
    live: bool = False


def configure_logging(settings: Settings) -> None:
    """Set package and httpx log levels; handlers come from the runner."""
    logging.getLogger("booker").setLevel(settings.log_level.upper())
    logging.getLogger("httpx").setLevel(logging.WARNING)
