import stat

import pytest
import yaml

from commandlijn.config import (
    Alias,
    Config,
    ConfigError,
    config_dir,
    config_file_path,
    default_config,
    initialize_config,
    load_config,
)
from commandlijn.util import ExitCode


def test_config_paths_follow_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert config_dir() == tmp_path / ".config" / "commandlijn"
    assert config_file_path() == config_dir() / "commandlijn.yaml"


def test_default_config_contents():
    config = default_config("placeholder")
    assert config.delijn_api_key == "placeholder"
    assert config.aliases == [Alias("GSP", "SNCB", ["BE.NMBS.008892007"])]


def test_to_yaml_uses_file_keys():
    parsed = yaml.safe_load(default_config("placeholder").to_yaml())
    assert list(parsed) == ["delijn_api_key", "aliases"]
    assert parsed["aliases"][0]["ID"] == ["BE.NMBS.008892007"]
    assert parsed["aliases"][0]["provider"] == "SNCB"


def test_yaml_round_trip():
    config = Config(
        delijn_api_key="placeholder",
        aliases=[Alias("home", "De Lijn", ["1", "2"]), Alias("work", "SNCB", [])],
    )
    assert Config.from_mapping(yaml.safe_load(config.to_yaml())) == config


def test_from_mapping_none_gives_empty_config():
    config = Config.from_mapping(None)
    assert config.delijn_api_key == ""
    assert config.aliases == []


def test_from_mapping_rejects_non_mapping():
    with pytest.raises(ConfigError) as info:
        Config.from_mapping(["a", "b"])
    assert info.value.exit_code == ExitCode.UNMARSHAL


def test_from_mapping_rejects_non_list_aliases():
    with pytest.raises(ConfigError) as info:
        Config.from_mapping({"aliases": {"name": "x"}})
    assert info.value.exit_code == ExitCode.UNMARSHAL


def test_from_mapping_stringifies_numeric_ids():
    config = Config.from_mapping({"aliases": [{"name": "x", "provider": "De Lijn", "ID": [123]}]})
    assert config.aliases[0].ids == ["123"]


def test_initialize_then_load(tmp_path):
    path = tmp_path / "nested" / "dir" / "commandlijn.yaml"
    written = initialize_config("placeholder", path)
    assert path.is_file()
    assert load_config(path) == written
    assert written == default_config("placeholder")


def test_initialize_writes_private_file(tmp_path):
    path = tmp_path / "commandlijn.yaml"
    initialize_config("placeholder", path)
    assert stat.S_IMODE(path.stat().st_mode) == 0o600


def test_initialize_refuses_existing_file(tmp_path):
    path = tmp_path / "commandlijn.yaml"
    path.write_text("delijn_api_key: kept\n", encoding="utf-8")
    with pytest.raises(ConfigError) as info:
        initialize_config("placeholder", path)
    assert info.value.exit_code == ExitCode.FILE_EXISTS
    assert path.read_text(encoding="utf-8") == "delijn_api_key: kept\n"


def test_initialize_uses_home_by_default(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    initialize_config("placeholder")
    assert load_config().delijn_api_key == "placeholder"


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigError) as info:
        load_config(tmp_path / "absent.yaml")
    assert info.value.exit_code == ExitCode.FILE_READ


def test_load_invalid_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("aliases: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as info:
        load_config(path)
    assert info.value.exit_code == ExitCode.UNMARSHAL