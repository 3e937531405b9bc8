# commandlijn

A small command-line tool for looking up Belgian public transport from the
terminal. It searches De Lijn stops and SNCB/NMBS stations, and shows live
boards (departures or arrivals) for SNCB stations through the iRail API.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Setup

Searching De Lijn needs an API key. Create the configuration file with:

```
commandlijn init
```

You are asked for the key. The file is written to
`~/.config/commandlijn/commandlijn.yaml` (readable by you only), together with
a sample alias. If the file is already there, `init` prints its path, leaves it
unchanged and exits with code 3. The new file looks like this:

```yaml
delijn_api_key: placeholder
aliases:
- name: GSP
  provider: SNCB
  ID:
  - BE.NMBS.008892007
```

If no configuration file can be read, De Lijn searches are sent without a key
(with `--verbose` the reason is printed).

## Usage

Search for De Lijn stops by place or stop name. At most 10 results are asked
for unless `-l/--limit` says otherwise:

```
commandlijn search delijn "Gent Zuid"
commandlijn search delijn Korenmarkt --limit 5
```

Each stop is printed with its entity number, name and stop number.

Search SNCB/NMBS stations. The full station list is fetched and only stations
whose name contains the search term (ignoring case) are printed:

```
commandlijn search sncb Gent
```

Show the live board of an SNCB station by its identifier. Without `-t/--time`
the current time is used; without `-a/--arrival` departures are shown:

```
commandlijn timetable BE.NMBS.008892007
commandlijn timetable BE.NMBS.008892007 -t 15:30
commandlijn timetable BE.NMBS.008892007 -t 18:00 --arrival
```

The board starts with the station identifier and today's date, followed by one
line per train with its destination, time and platform. A delay of a minute or
more is added in red after the scheduled time, in minutes, or in hours and
minutes from one hour on (for example `1h 15m`).

Other options:

```
commandlijn --version
commandlijn --verbose search sncb Gent
commandlijn --help
```

`-v/--verbose` may be given before or after a command. While a search or a
timetable is loading, a spinner is drawn when output goes to a terminal.

## Library use

The modules can also be used from Python:

- `commandlijn.irail`: `parse_transit_points` turns an iRail stations reply
  into `TransitPoint` objects, `parse_departures` turns a live board reply into
  `Departure` objects, `format_departure` gives the display line of one
  departure, and `station_timetable_url` / `fetch_station_timetable` /
  `fetch_stations_json` build and fetch the requests. Failures raise
  `IRailError`.
- `commandlijn.delijn`: `search_stops_url`, `fetch_stops_json`, `parse_stops`
  (giving `Halte` objects) and `format_halte` for stop search, and
  `stop_timetable_url` / `fetch_stop_timetable` for the raw timetable of one
  stop. Failures raise `DeLijnError`.
- `commandlijn.config`: `load_config`, `initialize_config` and
  `default_config` with the `Config` and `Alias` classes. Failures raise
  `ConfigError`, whose `exit_code` tells what went wrong.
- `commandlijn.util`: helpers such as `format_delay` (a delay in minutes to
  text such as `1h 15m`), `unix_to_hhmm`, `normalize_time` and
  `replace_spaces_with_url_code`.

## What it does not do

- The aliases in the configuration file are stored but no command uses them.
- There is no command for De Lijn stop timetables; `fetch_stop_timetable`
  only returns the raw reply, which the package does not parse.
- The `-t/--toggle` option of the top-level command is accepted but does
  nothing.

## Exit codes

| Code | Meaning                                                              |
|------|----------------------------------------------------------------------|
| 0    | success                                                              |
| 1    | command-line error, `--version`, or a live board that could not be read |
| 3    | `init` found an existing configuration file                          |

`ConfigError.exit_code` also uses 2 (configuration file unreadable) and
5 (configuration file invalid) for callers of `load_config`.