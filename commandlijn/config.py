"""Reading and creating the YAML configuration file."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from commandlijn.util import ExitCode, TransitProvider


class ConfigError(Exception):
    """Raised when the configuration cannot be read, parsed or written."""

    def __init__(self, message: str, exit_code: ExitCode = ExitCode.CLI) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass
class Alias:
    """A short name for one or more stops of a provider."""

    name: str = ""
    provider: str = ""
    ids: list[str] = field(default_factory=list)


@dataclass
class Config:
    """The user's configuration."""

    delijn_api_key: str = ""
    aliases: list[Alias] = field(default_factory=list)

    def to_yaml(self) -> str:
        """Serialise the configuration to YAML text."""
        document = {
            "delijn_api_key": self.delijn_api_key,
            "aliases": [
                {"name": alias.name, "provider": alias.provider, "ID": list(alias.ids)}
                for alias in self.aliases
            ],
        }
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)

    @classmethod
    def from_mapping(cls, data: Any) -> "Config":
        """Build a configuration from parsed YAML data."""
        data = data or {}
        try:
            aliases = [
                Alias(
                    str(entry.get("name") or ""),
                    str(entry.get("provider") or ""),
                    [str(value) for value in entry.get("ID") or []],
                )
                for entry in data.get("aliases") or []
            ]
            return cls(str(data.get("delijn_api_key") or ""), aliases)
        except (AttributeError, TypeError) as err:
            raise ConfigError(f"Error parsing config: {err}", ExitCode.UNMARSHAL) from err


def config_dir() -> Path:
    """Directory that holds the configuration file."""
    return Path(os.environ.get("HOME", "")) / ".config" / "commandlijn"


def config_file_path() -> Path:
    """Path of the configuration file."""
    return config_dir() / "commandlijn.yaml"


def default_config(api_key: str) -> Config:
    """The configuration written on first initialisation."""
    return Config(api_key, [Alias("GSP", TransitProvider.SNCB.value, ["BE.NMBS.008892007"])])


def load_config(path: str | os.PathLike[str] | None = None) -> Config:
    """Read and parse the configuration file."""
    target = Path(path) if path is not None else config_file_path()
    try:
        text = target.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigError(f"Error getting config file at {target}: {err}", ExitCode.FILE_READ) from err
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise ConfigError(f"Error parsing config: {err}", ExitCode.UNMARSHAL) from err
    return Config.from_mapping(data)


def initialize_config(api_key: str, path: str | os.PathLike[str] | None = None) -> Config:
    """Create a new configuration file holding the given API key."""
    target = Path(path) if path is not None else config_file_path()
    if target.exists():
        raise ConfigError(f"Config is already present at {target}", ExitCode.FILE_EXISTS)
    try:
        target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as err:
        raise ConfigError(f"error creating config directory: {err}") from err

    config = default_config(api_key)
    try:
        descriptor = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(descriptor, "w", encoding="utf-8") as handle:
            handle.write(config.to_yaml())
    except OSError as err:
        raise ConfigError(f"error writing config file: {err}") from err
    return config