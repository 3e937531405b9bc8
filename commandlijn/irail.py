"""Client for the iRail API: stations and live boards of the Belgian railways."""

from __future__ import annotations

import json
import re
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from commandlijn.util import (
    TransitPoint,
    TransitProvider,
    format_delay,
    log_verbose,
    status_text,
    unix_to_hhmm,
)

# Timetables are queried by ID only, so the station name stays blank.
STATION_NAME = ""
IRAIL_API_BASE_URL = "https://api.irail.be"
ALL_STATIONS_URL = IRAIL_API_BASE_URL + "/stations/?format=json&lang=nl"
STATION_TIMETABLE_URL_TIMED = (
    IRAIL_API_BASE_URL + "/liveboard/?id={id}&station={station}&time={time}&arrdep={arrdep}&lang=nl&format=json"
)
STATION_TIMETABLE_URL_NOT_TIMED = (
    IRAIL_API_BASE_URL + "/liveboard/?id={id}&station={station}&arrdep={arrdep}&lang=nl&format=json"
)

_INTEGER = re.compile(r"[+-]?[0-9]+")

T = TypeVar("T")


class IRailError(Exception):
    """Raised when the iRail API cannot be reached or its reply cannot be read."""


@dataclass
class StationInfo:
    id: str = ""
    name: str = ""
    location_x: str = ""
    location_y: str = ""
    standard_name: str = ""


@dataclass
class VehicleInfo:
    name: str = ""
    short_name: str = ""
    number: str = ""
    type: str = ""
    location_x: str = ""
    location_y: str = ""
    id: str = ""


@dataclass
class PlatformInfo:
    name: str = ""
    normal: str = ""


@dataclass
class Occupancy:
    id: str = ""
    name: str = ""


def _mapping(value: Any, what: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TypeError(f"{what} must be an object")
    return value


def _list(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"{what} must be an array")
    return value


def _text(obj: Mapping[str, Any], key: str) -> str:
    value = obj.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string")
    return value


def _station_info(value: Any) -> StationInfo:
    obj = _mapping(value, "stationinfo")
    return StationInfo(
        id=_text(obj, "id"),
        name=_text(obj, "name"),
        location_x=_text(obj, "locationX"),
        location_y=_text(obj, "locationY"),
        standard_name=_text(obj, "standardname"),
    )


def _vehicle_info(value: Any) -> VehicleInfo:
    obj = _mapping(value, "vehicleinfo")
    return VehicleInfo(
        name=_text(obj, "name"),
        short_name=_text(obj, "shortname"),
        number=_text(obj, "number"),
        type=_text(obj, "type"),
        location_x=_text(obj, "locationX"),
        location_y=_text(obj, "locationY"),
        id=_text(obj, "@id"),
    )


def _platform_info(value: Any) -> PlatformInfo:
    obj = _mapping(value, "platforminfo")
    return PlatformInfo(name=_text(obj, "name"), normal=_text(obj, "normal"))


def _occupancy(value: Any) -> Occupancy:
    obj = _mapping(value, "occupancy")
    return Occupancy(id=_text(obj, "@id"), name=_text(obj, "name"))


@dataclass
class Departure:
    """One entry of a station's live board."""

    id: str = ""
    station: str = ""
    station_info: StationInfo = field(default_factory=StationInfo)
    time: str = ""
    delay: str = ""  # seconds
    canceled: str = ""
    left: str = ""
    is_extra: str = ""
    vehicle: str = ""
    vehicle_info: VehicleInfo = field(default_factory=VehicleInfo)
    platform: str = ""
    platform_info: PlatformInfo = field(default_factory=PlatformInfo)
    occupancy: Occupancy = field(default_factory=Occupancy)
    departure_connection: str = ""

    @classmethod
    def from_mapping(cls, data: Any) -> "Departure":
        """Build a departure from a decoded JSON object."""
        obj = _mapping(data, "departure")
        return cls(
            id=_text(obj, "id"),
            station=_text(obj, "station"),
            station_info=_station_info(obj.get("stationinfo")),
            time=_text(obj, "time"),
            delay=_text(obj, "delay"),
            canceled=_text(obj, "canceled"),
            left=_text(obj, "left"),
            is_extra=_text(obj, "isExtra"),
            vehicle=_text(obj, "vehicle"),
            vehicle_info=_vehicle_info(obj.get("vehicleinfo")),
            platform=_text(obj, "platform"),
            platform_info=_platform_info(obj.get("platforminfo")),
            occupancy=_occupancy(obj.get("occupancy")),
            departure_connection=_text(obj, "departureConnection"),
        )


def _decode(data: bytes | str, build: Callable[[Any], T]) -> T:
    text = data.decode("utf-8", errors="replace") if isinstance(data, (bytes, bytearray)) else data
    try:
        return build(json.loads(text))
    except (ValueError, TypeError) as err:
        raise IRailError(f"failed to unmarshal JSON: {err} - input data: {text}") from err


def _get(request: str | urllib.request.Request) -> tuple[int, bytes]:
    try:
        with urllib.request.urlopen(request) as response:
            return response.status, response.read()
    except urllib.error.HTTPError as err:
        return err.code, err.read()
    except (urllib.error.URLError, OSError) as err:
        raise IRailError(f"Error making request: {err}") from err


def station_timetable_url(station_id: str, time: str | None, arrdep: str) -> str:
    """URL of a station's live board, with or without a requested time."""
    if not time:
        return STATION_TIMETABLE_URL_NOT_TIMED.format(id=station_id, station=STATION_NAME, arrdep=arrdep)
    return STATION_TIMETABLE_URL_TIMED.format(id=station_id, station=STATION_NAME, time=time, arrdep=arrdep)


def fetch_station_timetable(station_id: str, time: str | None, arrdep: str) -> bytes:
    """Fetch the raw live board of a station."""
    _, body = _get(station_timetable_url(station_id, time, arrdep))
    return body


def parse_departures(data: bytes | str) -> list[Departure]:
    """Decode a live board reply into its departures."""

    def build(payload: Any) -> list[Departure]:
        departures = _mapping(_mapping(payload, "response").get("departures"), "departures")
        return [Departure.from_mapping(item) for item in _list(departures.get("departure"), "departure")]

    return _decode(data, build)


def fetch_stations_json() -> bytes:
    """Fetch the raw list of all stations."""
    status, body = _get(urllib.request.Request(ALL_STATIONS_URL, method="GET"))
    log_verbose(f"\nStatus code: {status_text(status)}")
    return body


def parse_transit_points(data: bytes | str) -> list[TransitPoint]:
    """Decode a station list reply into transit points."""

    def point(entry: Any) -> TransitPoint:
        obj = _mapping(entry, "station")
        return TransitPoint(
            name=_text(obj, "name"),
            id=_text(obj, "id"),
            transit_provider=TransitProvider.SNCB.value,
            description="",
        )

    def build(payload: Any) -> list[TransitPoint]:
        stations = _list(_mapping(payload, "response").get("station"), "station")
        return [point(entry) for entry in stations]

    return _decode(data, build)


def format_departure(departure: Departure) -> str:
    """One display line for a departure, with its delay highlighted."""
    if not _INTEGER.fullmatch(departure.time):
        raise IRailError(f"Could not convert string {departure.time}")
    departure_time = unix_to_hhmm(int(departure.time))

    delay_seconds = int(departure.delay) if _INTEGER.fullmatch(departure.delay) else 0
    delay_minutes = delay_seconds // 60 if delay_seconds > 0 else 0
    if delay_minutes > 0:
        departure_time = f"+{departure_time}\033[31m+{format_delay(delay_minutes)}\033[0m"

    return f"↳ {departure.station} at {departure_time}, Platform: {departure.platform}"