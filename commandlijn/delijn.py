"""Client for the De Lijn open data API: stop search and stop timetables."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from commandlijn.util import replace_spaces_with_url_code

SEARCH_STOPS_URL = (
    "https://api.delijn.be/DLZoekOpenData/v1/zoek/haltes/{term}?startIndex=0&maxAantalHits={limit}"
)
STOP_TIMETABLE_URL = "https://api.delijn.be/DLKernOpenData/api/v1/haltes/{entity}/{halte}/dienstregelingen"


class DeLijnError(Exception):
    """Raised when the De Lijn API cannot be reached or its reply cannot be read."""


@dataclass
class Halte:
    """A De Lijn stop as returned by the search API."""

    entiteitnummer: str = ""
    haltenummer: str = ""
    omschrijving: str = ""


def search_stops_url(term: str, limit: int) -> str:
    """URL of a stop search for the given term and result limit."""
    return SEARCH_STOPS_URL.format(term=replace_spaces_with_url_code(term), limit=limit)


def request_headers(api_key: str) -> dict[str, str]:
    """Headers sent with every authenticated De Lijn request."""
    return {"Cache-Control": "no-cache", "Ocp-Apim-Subscription-Key": api_key}


def _get(request: str | urllib.request.Request) -> bytes:
    try:
        with urllib.request.urlopen(request) as response:
            return response.read()
    except urllib.error.HTTPError as err:
        return err.read()
    except OSError as err:
        raise DeLijnError(f"Error making request: {err}") from err


def fetch_stops_json(term: str, limit: int, api_key: str) -> bytes:
    """Fetch the raw search reply for stops matching the term."""
    return _get(urllib.request.Request(search_stops_url(term, limit), headers=request_headers(api_key)))


def _text(entry: Mapping[str, Any], key: str) -> str:
    value = entry.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"field {key!r} must be a string")
    return value


def parse_stops(data: bytes | str) -> list[Halte]:
    """Decode a stop search reply into its stops."""
    names = [item.name for item in fields(Halte)]
    try:
        payload = json.loads(data) or {}
        if not isinstance(payload, Mapping):
            raise TypeError("response must be an object")
        return [
            Halte(**{name: _text(entry or {}, name) for name in names})
            for entry in payload.get("haltes") or []
        ]
    except (ValueError, TypeError, AttributeError) as err:
        raise DeLijnError(str(err)) from err


def stop_timetable_url(entity_id: str, halte_id: str) -> str:
    """URL of the timetable of one stop."""
    return STOP_TIMETABLE_URL.format(entity=entity_id, halte=halte_id)


def fetch_stop_timetable(entity_id: str, halte_id: str) -> bytes:
    """Fetch the raw timetable of one stop."""
    return _get(stop_timetable_url(entity_id, halte_id))


def format_halte(halte: Halte) -> str:
    """One display line for a stop."""
    return (
        f"Entiteitnummer: {halte.entiteitnummer} Name: {halte.omschrijving} "
        f"Description: {halte.haltenummer}"
    )