from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import requests

from .config import Settings

logger = logging.getLogger(__name__)


class WeatherLookupError(Exception):
    """Base class for every failure of a current-weather lookup."""


class InvalidInputError(WeatherLookupError):
    """Raised when the city name is empty or whitespace."""


class RemoteError(WeatherLookupError):
    """Raised when the weather API answers with a non-success status."""

    def __init__(self, status_code: int, reason: str = "", body: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        message = f"Weather API error {status_code}"
        if reason:
            message += f" ({reason})"
        if body:
            message += f": {body}"
        super().__init__(message)


class ParseError(WeatherLookupError):
    """Raised when the response body is not the expected JSON shape."""


class TransportError(WeatherLookupError):
    """Raised when the request never got an HTTP response."""


@dataclass(frozen=True)
class WeatherResult:
    name: str
    description: str
    temperature: float


def build_url(city: str, settings: Settings) -> str:
    # quote() with no safe characters escapes everything outside the
    # unreserved set, so spaces become %20 rather than +
    encoded_city = quote(city, safe="")
    return f"{settings.base_url}?q={encoded_city}&appid={settings.api_key}&units={settings.units}"


def parse_weather(payload: Any) -> WeatherResult:
    """Pull `name`, `weather[0].description` and `main.temp` out of a response."""
    if not isinstance(payload, dict):
        raise ParseError("Weather response is not a JSON object.")

    main = payload.get("main")
    if not isinstance(main, dict) or "temp" not in main:
        raise ParseError("Weather response is missing 'main.temp'.")
    temp = main["temp"]
    if isinstance(temp, bool) or not isinstance(temp, (int, float)):
        raise ParseError(f"'main.temp' is not a number: {temp!r}")

    weather = payload.get("weather")
    if not isinstance(weather, list) or not weather or not isinstance(weather[0], dict):
        raise ParseError("Weather response is missing 'weather[0]'.")
    description = weather[0].get("description")
    if not isinstance(description, str):
        raise ParseError("Weather response is missing 'weather[0].description'.")

    name = payload.get("name")
    if not isinstance(name, str):
        raise ParseError("Weather response is missing 'name'.")

    try:
        temperature = float(temp)
    except OverflowError as e:
        raise ParseError(f"'main.temp' is out of range: {str(temp)[:20]}...") from e
    if not math.isfinite(temperature):
        raise ParseError(f"'main.temp' is not a finite number: {temp!r}")

    return WeatherResult(name=name, description=description, temperature=temperature)


def format_temperature(value: float) -> str:
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    text = repr(value)
    if text.endswith(".0"):
        text = text[:-2]
    # 1e+16 -> 1E+16
    return text.upper()


def format_weather(result: WeatherResult) -> str:
    # Always °C, whatever units the request used
    return f"{result.name}: {result.description}, {format_temperature(result.temperature)}°C"


@dataclass
class WeatherClient:
    """OpenWeatherMap current-weather client."""

    settings: Settings

    def get_current_weather(self, city: str | None) -> str:
        if city is None or not city.strip():
            raise InvalidInputError("City name cannot be empty.")

        url = build_url(city, self.settings)
        logger.info("Sending request to OpenWeatherMap: %s", _redact(url, self.settings.api_key))

        try:
            response = requests.get(
                url,
                headers={"User-Agent": self.settings.user_agent},
                timeout=self.settings.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"Request to weather API failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RemoteError(response.status_code, response.reason or "", response.text or "")

        body = response.text
        logger.info("Received raw JSON: %s", body)
        try:
            payload = response.json()
        except ValueError as e:
            raise ParseError(f"Weather response is not valid JSON: {e}") from e

        formatted = format_weather(parse_weather(payload))
        logger.info("Parsed weather info: %s", formatted)
        return formatted


def fetch_current_weather(city: str | None, settings: Settings) -> str:
    """Look up the current weather for `city` and return the one-line summary.

    Raises a `WeatherLookupError` subclass on failure; never returns a
    partial string.
    """
    return WeatherClient(settings).get_current_weather(city)


def _redact(url: str, api_key: str) -> str:
    if not api_key:
        return url
    return url.replace(f"appid={api_key}", "appid=***")
