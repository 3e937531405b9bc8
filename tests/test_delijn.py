import json
import urllib.error
from unittest import mock

import pytest

from commandlijn.delijn import (
    DeLijnError,
    Halte,
    fetch_stop_timetable,
    fetch_stops_json,
    format_halte,
    parse_stops,
    request_headers,
    search_stops_url,
    stop_timetable_url,
)


class _Response:
    def __init__(self, body):
        self.body = body
        self.status = 200

    def read(self):
        return self.body

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


def _url(request):
    return request if isinstance(request, str) else request.full_url


def test_search_stops_url_escapes_spaces():
    assert search_stops_url("Gent Sint Pieters", 10) == (
        "https://api.delijn.be/DLZoekOpenData/v1/zoek/haltes/Gent%20Sint%20Pieters"
        "?startIndex=0&maxAantalHits=10"
    )


def test_request_headers():
    assert request_headers("placeholder") == {
        "Cache-Control": "no-cache",
        "Ocp-Apim-Subscription-Key": "placeholder",
    }


def test_parse_stops_reads_haltes():
    data = json.dumps(
        {
            "aantalHits": 2,
            "haltes": [
                {"entiteitnummer": "2", "haltenummer": "201010", "omschrijving": "Gent Zuid"},
                {"entiteitnummer": "3", "haltenummer": "301020", "omschrijving": "Brugge Station"},
            ],
        }
    ).encode()
    assert parse_stops(data) == [
        Halte("2", "201010", "Gent Zuid"),
        Halte("3", "301020", "Brugge Station"),
    ]


def test_parse_stops_without_haltes_is_empty():
    assert parse_stops('{"aantalHits": 0}') == []


@pytest.mark.parametrize("data", [b"", b"not json", b"[1, 2]", b'{"haltes": [{"haltenummer": 5}]}'])
def test_parse_stops_rejects_bad_input(data):
    with pytest.raises(DeLijnError):
        parse_stops(data)


def test_stop_timetable_url():
    assert stop_timetable_url("2", "201010") == (
        "https://api.delijn.be/DLKernOpenData/api/v1/haltes/2/201010/dienstregelingen"
    )


def test_format_halte():
    line = format_halte(Halte(entiteitnummer="2", haltenummer="201010", omschrijving="Gent Zuid"))
    assert line == "Entiteitnummer: 2 Name: Gent Zuid Description: 201010"


def test_fetch_stops_json_sends_key_and_url():
    seen = []

    def fake(request, *args, **kwargs):
        seen.append(request)
        return _Response(b'{"haltes": []}')

    with mock.patch("urllib.request.urlopen", fake):
        body = fetch_stops_json("Gent Zuid", 5, "placeholder")

    assert body == b'{"haltes": []}'
    assert _url(seen[0]) == search_stops_url("Gent Zuid", 5)
    headers = {key.lower(): value for key, value in seen[0].header_items()}
    assert headers["ocp-apim-subscription-key"] == "placeholder"
    assert headers["cache-control"] == "no-cache"


def test_fetch_stops_json_network_failure():
    with mock.patch("urllib.request.urlopen", side_effect=urllib.error.URLError("down")):
        with pytest.raises(DeLijnError):
            fetch_stops_json("Gent", 10, "placeholder")


def test_fetch_stop_timetable_returns_body():
    seen = []

    def fake(request, *args, **kwargs):
        seen.append(request)
        return _Response(b"{}")

    with mock.patch("urllib.request.urlopen", fake):
        assert fetch_stop_timetable("2", "201010") == b"{}"
    assert _url(seen[0]) == stop_timetable_url("2", "201010")