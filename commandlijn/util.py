"""Shared helpers: transit points, exit codes, time formatting and verbose output."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, IntEnum
from typing import Iterable


class TransitProvider(str, Enum):
    """Public transport operators known to the tool."""

    DELIJN = "De Lijn"
    SNCB = "SNCB"


@dataclass
class TransitPoint:
    """A general representation of a stop or station."""

    name: str
    id: str
    transit_provider: str
    description: str = ""


class ExitCode(IntEnum):
    """Process exit codes used by the command line."""

    CLI = 1
    FILE_READ = 2
    FILE_EXISTS = 3
    UNMARSHAL = 5


_STATUS_TEXT = {
    200: "\033[32m200 OK\033[0m",
    500: "\033[31m500 Internal Server Error\033[0m",
}


@dataclass
class _Settings:
    verbose: bool = False


_settings = _Settings()


def replace_spaces_with_url_code(text: str) -> str:
    """Replace every space with its URL escape ``%20``."""
    return text.replace(" ", "%20")


def print_transit_points(points: Iterable[TransitPoint]) -> None:
    """Print one line per transit point."""
    for point in points:
        print(
            f"ID: {point.id} Name: {point.name} "
            f"Description: {point.description} Provider: {point.transit_provider}"
        )


def get_current_time_hhmm() -> str:
    """Return the local time as hours followed by two-digit minutes."""
    now = datetime.now()
    return f"{now.hour}{now.minute:02d}"


def normalize_time(value: str) -> str:
    """Strip spaces and colons from a time string."""
    return value.replace(" ", "").replace(":", "")


def set_verbose(enabled: bool) -> None:
    """Switch verbose output on or off."""
    _settings.verbose = bool(enabled)


def log_verbose(message: str) -> None:
    """Print the message only when verbose output is on."""
    if _settings.verbose:
        print(message)


def unix_to_hhmm(timestamp: int) -> str:
    """Format a Unix timestamp as local ``HH:MM``."""
    return datetime.fromtimestamp(timestamp).strftime("%H:%M")


def format_delay(minutes: int) -> str:
    """Format a delay in minutes, switching to hours from one hour on."""
    if minutes >= 60:
        hours, rest = divmod(minutes, 60)
        if rest > 0:
            return f"{hours}h {rest}m"
        return f"{hours}h"
    return str(minutes)


def status_text(code: int) -> str:
    """Return a coloured description of an HTTP status, or an empty string."""
    return _STATUS_TEXT.get(code, "")