from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5/weather"


class ConfigError(ValueError):
    """Raised when the OpenWeatherMap settings are unusable."""


@dataclass(frozen=True)
class Settings:
    """Immutable OpenWeatherMap access settings.

    Build one at process start (usually with `Settings.load()`) and hand it
    to `WeatherClient`; nothing reads it from module state.
    """

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    units: str = "metric"
    timeout: float = 10.0
    user_agent: str = "weather-report/1.0"

    def __post_init__(self) -> None:
        if not self.base_url or not self.base_url.strip():
            raise ConfigError("OpenWeatherMap base URL cannot be empty.")
        if self.timeout <= 0:
            raise ConfigError(f"Request timeout must be positive, got {self.timeout}.")

    @classmethod
    def load(cls) -> "Settings":
        # .env is optional; real environment variables win over it
        load_dotenv()

        raw_timeout = _env("OPENWEATHER_TIMEOUT")
        try:
            timeout = float(raw_timeout) if raw_timeout else 10.0
        except ValueError as e:
            raise ConfigError(f"OPENWEATHER_TIMEOUT is not a number: {raw_timeout!r}") from e

        settings = cls(
            api_key=_env("OPENWEATHER_API_KEY") or "",
            base_url=_env("OPENWEATHER_BASE_URL") or DEFAULT_BASE_URL,
            units=_env("OPENWEATHER_UNITS") or "metric",
            timeout=timeout,
        )
        if not settings.api_key:
            logger.warning("OPENWEATHER_API_KEY is not set; requests will likely be rejected.")
        if settings.units != "metric":
            # Output is always suffixed with °C
            logger.warning("Units are %r but temperatures are still labelled °C.", settings.units)
        return settings


def _env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()
