"""Command line interface: stop search, live boards and configuration setup."""

from __future__ import annotations

import argparse
import sys
import threading
import time
from collections.abc import Sequence
from datetime import datetime
from typing import Callable, TextIO

from commandlijn.config import ConfigError, config_file_path, initialize_config, load_config
from commandlijn.delijn import DeLijnError, fetch_stops_json, format_halte, parse_stops
from commandlijn.irail import (
    IRailError,
    fetch_station_timetable,
    fetch_stations_json,
    format_departure,
    parse_departures,
    parse_transit_points,
)
from commandlijn.util import ExitCode, log_verbose, print_transit_points, set_verbose

VERSION = "0.0.0"
SEARCH_LIMIT = 10

FRAMES_DOTS = ("∙∙∙", "●∙∙", "∙●∙", "∙∙●", "∙∙∙")
FRAMES_BRAILLE = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")

_PAUSE_SECONDS = 1.0
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_KEY_PROMPT = "Enter DeLijn API key: "


class Spinner:
    """A progress indicator drawn on a terminal while work is going on."""

    def __init__(
        self,
        frames: Sequence[str],
        interval: float,
        prefix: str = "",
        suffix: str = "",
        stream: TextIO | None = None,
    ) -> None:
        self.frames = tuple(frames)
        self.interval = interval
        self.prefix = prefix
        self.suffix = suffix
        self.stream = stream if stream is not None else sys.stdout
        self._halt = threading.Event()
        self._thread: threading.Thread | None = None
        self._width = 0

    @property
    def active(self) -> bool:
        return self._thread is not None

    def _draw(self, frame: str) -> None:
        text = f"{self.prefix}{frame}{self.suffix}"
        self._width = max(self._width, len(text))
        self.stream.write(f"\r{text}")
        self.stream.flush()

    def _run(self) -> None:
        index = 1
        while not self._halt.wait(self.interval):
            self._draw(self.frames[index % len(self.frames)])
            index += 1

    def start(self) -> None:
        """Begin drawing; does nothing when not attached to a terminal."""
        if self._thread is not None or not self.frames:
            return
        isatty = getattr(self.stream, "isatty", None)
        if isatty is None or not isatty():
            return
        self._halt.clear()
        self._draw(self.frames[0])
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop drawing and erase the spinner line."""
        if self._thread is None:
            return
        self._halt.set()
        self._thread.join()
        self._thread = None
        self.stream.write("\r" + " " * self._width + "\r")
        self.stream.flush()

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(int(ExitCode.CLI), f"Error: {message}\n")


def _add_verbose(parser: argparse.ArgumentParser, default: object) -> None:
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=default, help="Enable verbose output"
    )


def _api_key() -> str:
    try:
        return load_config().delijn_api_key
    except ConfigError as err:
        log_verbose(str(err))
        return ""


def _today() -> str:
    now = datetime.now()
    return f"{now.day} {_MONTHS[now.month - 1]} '{now:%y}"


def _run_init(args: argparse.Namespace) -> int:
    path = config_file_path()
    if path.exists():
        print(f"Config is already present at {path}")
        return int(ExitCode.FILE_EXISTS)
    try:
        answer = input(_KEY_PROMPT)
    except (EOFError, KeyboardInterrupt) as err:
        print(
            "Error initializing configuration:",
            f"error reading DeLijn API key: prompt failed: {err or type(err).__name__}",
        )
        return 0
    try:
        initialize_config(answer, path)
    except ConfigError as err:
        print("Error initializing configuration:", err)
        return 0
    print("\nConfiguration file initialized successfully.")
    return 0


def _run_search_delijn(args: argparse.Namespace) -> int:
    subscription = _api_key()
    with Spinner(FRAMES_DOTS, 0.25, prefix="searching stops "):
        time.sleep(_PAUSE_SECONDS)
        try:
            body = fetch_stops_json(args.searchterm, args.limit, subscription)
        except DeLijnError as err:
            failure: DeLijnError | None = err
        else:
            failure = None
    if failure is not None:
        print(failure)
        return 0
    try:
        haltes = parse_stops(body)
    except DeLijnError as err:
        print("Error parsing JSON:", err)
        return 0
    for halte in haltes:
        print(format_halte(halte))
    return 0


def _run_search_sncb(args: argparse.Namespace) -> int:
    with Spinner(FRAMES_BRAILLE, 0.1, suffix=" searching stations..."):
        time.sleep(_PAUSE_SECONDS)
        try:
            body = fetch_stations_json()
        except IRailError as err:
            failure: IRailError | None = err
        else:
            failure = None
    if failure is not None:
        print(failure)
        return 0
    try:
        points = parse_transit_points(body)
    except IRailError as err:
        print("Error parsing JSON:", err)
        return 0
    term = args.searchterm.casefold()
    print_transit_points(point for point in points if term in point.name.casefold())
    return 0


def _run_timetable(args: argparse.Namespace) -> int:
    arrdep = "arrival" if args.arrival else "departure"
    with Spinner(FRAMES_DOTS, 0.25, prefix="Loading timetable "):
        time.sleep(_PAUSE_SECONDS)
        try:
            body = fetch_station_timetable(args.transitpoint, args.time, arrdep)
        except IRailError:
            body = b""
        try:
            departures = parse_departures(body)
        except IRailError as err:
            failure: IRailError | None = err
        else:
            failure = None
    if failure is not None:
        print(f"error {failure}", file=sys.stderr)
        return 1

    print(f"{args.transitpoint} {_today()}")
    for departure in departures:
        try:
            print(format_departure(departure))
        except IRailError as err:
            print(err)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for all commands."""
    parser = _Parser(prog="commandlijn", description="Belgian public transport on the command line.")
    parser.add_argument(
        "-V", "--version", action="store_true", help="Print the version number and exit"
    )
    _add_verbose(parser, False)
    parser.add_argument("-t", "--toggle", action="store_true", help="Help message for toggle")
    parser.set_defaults(handler=None)

    commands = parser.add_subparsers(dest="command")

    init = commands.add_parser(
        "init",
        help="Initialize the commandlijn configuration file",
        description="Initialize a configuration file at ~/.config/commandlijn/commandlijn.yaml "
        "with the required API key for DeLijn.",
    )
    _add_verbose(init, argparse.SUPPRESS)
    init.set_defaults(handler=_run_init)

    search = commands.add_parser(
        "search",
        help="Search for public transport stops.",
        description="Search for public transport stops using a search term. "
        "The term can be a name of a place or stop. Searches for both De Lijn and SNCB.",
    )
    _add_verbose(search, argparse.SUPPRESS)

    def show_search_help(args: argparse.Namespace) -> int:
        search.print_help()
        return 0

    search.set_defaults(handler=show_search_help)
    providers = search.add_subparsers(dest="provider")

    delijn = providers.add_parser(
        "delijn",
        help="Search for De Lijn public transport stops.",
        description="Search for De Lijn public transport stops using a search term. "
        "The term can be a name of a place or stop.",
    )
    delijn.add_argument("searchterm")
    delijn.add_argument(
        "-l", "--limit", type=int, default=SEARCH_LIMIT, help="Limit the number of results"
    )
    _add_verbose(delijn, argparse.SUPPRESS)
    delijn.set_defaults(handler=_run_search_delijn)

    sncb = providers.add_parser(
        "sncb",
        help="Search for SNCB/NMBS public transport stops.",
        description="Search for SNCB/NMBS public transport stops using a search term. "
        "The term can be a name of a place or stop.",
    )
    sncb.add_argument("searchterm")
    _add_verbose(sncb, argparse.SUPPRESS)
    sncb.set_defaults(handler=_run_search_sncb)

    timetable = commands.add_parser(
        "timetable",
        help="Fetch the timetable for a given transit point.",
        description="Fetch the timetable for a given transit point. By default, it uses the "
        "current time. A time can be given with -t/--time in 24-hour format (e.g., 1200 or 12:00).",
    )
    timetable.add_argument("transitpoint")
    timetable.add_argument(
        "-t", "--time", default="", help="Specify the time in 24-hour format (e.g., 1200 or 12:00)"
    )
    timetable.add_argument("-a", "--arrival", action="store_true", help="Get arrival times")
    _add_verbose(timetable, argparse.SUPPRESS)
    timetable.set_defaults(handler=_run_timetable)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return its exit code."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code is None:
            return 0
        return exc.code if isinstance(exc.code, int) else int(ExitCode.CLI)

    set_verbose(args.verbose)
    handler: Callable[[argparse.Namespace], int] | None = args.handler
    if handler is None:
        if args.version:
            print(f"Version: {VERSION}")
            return int(ExitCode.CLI)
        print("Use --help to see available commands.")
        return 0
    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main())