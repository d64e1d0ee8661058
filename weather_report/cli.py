from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from typing import Optional, TextIO

from .config import ConfigError, Settings
from .weather import WeatherClient, WeatherLookupError

logger = logging.getLogger(__name__)

PROMPT = "Enter a city name (or 'exit' to quit): "
CITY_PATTERN = re.compile(r"^[a-zA-Z\s-]+$")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_city(city: Optional[str]) -> Optional[str]:
    """Return a message for the user if `city` should not be looked up."""
    if city is None or not city.strip():
        return "City name cannot be empty. Please try again."
    if not CITY_PATTERN.match(city):
        return "Invalid city name. Only letters, spaces, and hyphens are allowed. Please try again."
    return None


def run_interactive(client: WeatherClient, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> int:
    """Prompt for cities until 'exit' or end of input.

    Returns the number of successful lookups.
    """
    count = 0
    while True:
        stdout.write(PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line:
            # EOF
            stdout.write("\n")
            break
        city = line.rstrip("\r\n")

        if city.lower() == "exit":
            logger.info("Application terminated by user.")
            break

        problem = validate_city(city)
        if problem:
            logger.warning("Rejected city name: %r", city)
            stdout.write(problem + "\n")
            continue

        try:
            weather = client.get_current_weather(city.strip())
        except WeatherLookupError as e:
            logger.error("An error occurred while fetching weather information: %s", e)
            stdout.write(f"Error: {e}\n")
            continue

        stdout.write(f"\nWeather for {city}:\n")
        stdout.write(weather + "\n\n")
        logger.info("Successfully fetched weather for %s.", city)
        count += 1
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weather-report",
        description="Print the current weather for a city using OpenWeatherMap.",
    )
    parser.add_argument("city", nargs="*", help="City to look up. Omit to start the interactive prompt.")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.environ.get("LOG_LEVEL", "WARNING").upper(),
        help="Logging level (default: $LOG_LEVEL or WARNING).",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level not in LOG_LEVELS:
        # argparse does not check defaults against choices
        parser.error(f"invalid LOG_LEVEL: {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = Settings.load()
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    client = WeatherClient(settings)
    logger.info("Weather console application started.")

    if not args.city:
        run_interactive(client)
        return 0

    city = " ".join(args.city)
    problem = validate_city(city)
    if problem:
        print(problem, file=sys.stderr)
        return 2
    try:
        print(client.get_current_weather(city.strip()))
    except WeatherLookupError as e:
        logger.error("An error occurred while fetching weather information: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0
