"""Pydantic Settings — loads configuration from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

DEFAULT_RELAY_ENDPOINTS = [
    "https://api.allorigins.win/raw?url={quoted_url}",
    "https://cors-anywhere.herokuapp.com/{url}",
    "https://cors-proxy.htmldriven.com/?url={quoted_url}",
    "https://crossorigin.me/{url}",
    "https://thingproxy.freeboard.io/fetch/{url}",
]


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    # Empty disables the X-API-Key guard on the HTTP API
    api_key: str = ""

    scraping_api_key: str = ""
    scraping_api_url: str = "https://api.zenrows.com/v1"
    relay_endpoints: list[str] = DEFAULT_RELAY_ENDPOINTS

    user_agent: str = DEFAULT_USER_AGENT
    request_timeout_ms: int = 30000
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
