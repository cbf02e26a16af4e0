"""Tests for configuration loading, saving and validation."""

import os
from datetime import timedelta
from pathlib import Path

import pytest

from whatsapp_archiver.config import (
    CONFIG_FILENAME,
    ArchiverConfig,
    ConfigNotFoundError,
    ConfigValidationError,
    InvalidTimezoneOffsetError,
    find_config,
    load_config,
    parse_offset,
    save_config,
)
from whatsapp_archiver.constants import MessageFormatType


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for key in list(os.environ):
        if key.startswith("WHATSAPP_ARCHIVER_"):
            monkeypatch.delenv(key)


def test_defaults():
    config = ArchiverConfig()

    assert config.google_docs.credentials_path is None
    assert config.state.base_path == "~/.whatsapp-archiver/state"
    assert config.state.directory == Path("~/.whatsapp-archiver/state").expanduser()
    assert config.parser.offset == timedelta(0)
    assert config.output.format is MessageFormatType.DEFAULT


def test_load_without_file_returns_defaults(tmp_path: Path):
    config = load_config(start_dir=tmp_path)

    assert config == ArchiverConfig()


def test_save_then_load_round_trip(tmp_path: Path):
    # Given
    config = ArchiverConfig()
    config.parser.timezone_offset = "-03:00"
    config.output.format = MessageFormatType.VERBOSE

    # When
    path = save_config(config, tmp_path)
    loaded = load_config(path)

    # Then
    assert path.name == CONFIG_FILENAME
    assert loaded.parser.offset == timedelta(hours=-3)
    assert loaded.output.format is MessageFormatType.VERBOSE


def test_find_config_searches_parent_directories(tmp_path: Path):
    save_config(ArchiverConfig(), tmp_path)
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_config(nested) == (tmp_path / CONFIG_FILENAME).resolve()


def test_environment_overrides_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Verify WHATSAPP_ARCHIVER_SECTION__KEY beats the config file."""
    # Given
    (tmp_path / CONFIG_FILENAME).write_text('[output]\nformat = "compact"\n', encoding="utf-8")
    monkeypatch.setenv("WHATSAPP_ARCHIVER_OUTPUT__FORMAT", "verbose")

    # When
    config = load_config(start_dir=tmp_path)

    # Then
    assert config.output.format is MessageFormatType.VERBOSE


def test_credentials_path_expands_home(tmp_path: Path):
    (tmp_path / CONFIG_FILENAME).write_text(
        '[google_docs]\ncredentials_path = "~/keys/service.json"\n', encoding="utf-8"
    )

    config = load_config(start_dir=tmp_path)

    assert config.google_docs.credentials_file == Path.home() / "keys" / "service.json"


def test_unknown_keys_are_rejected(tmp_path: Path):
    (tmp_path / CONFIG_FILENAME).write_text("[colour]\nenabled = true\n", encoding="utf-8")

    with pytest.raises(ConfigValidationError) as exc_info:
        load_config(start_dir=tmp_path)

    assert exc_info.value.source == (tmp_path / CONFIG_FILENAME).resolve()


def test_invalid_offset_is_rejected(tmp_path: Path):
    (tmp_path / CONFIG_FILENAME).write_text('[parser]\ntimezone_offset = "UTC+3"\n', encoding="utf-8")

    with pytest.raises(ConfigValidationError, match="timezone_offset"):
        load_config(start_dir=tmp_path)


def test_malformed_toml_is_rejected(tmp_path: Path):
    (tmp_path / CONFIG_FILENAME).write_text("[output\n", encoding="utf-8")

    with pytest.raises(ConfigValidationError):
        load_config(start_dir=tmp_path)


def test_explicit_missing_config_file(tmp_path: Path):
    with pytest.raises(ConfigNotFoundError):
        load_config(tmp_path / "nope.toml")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("+00:00", timedelta(0)),
        ("+05:30", timedelta(hours=5, minutes=30)),
        ("-03:00", timedelta(hours=-3)),
        (" +01:00 ", timedelta(hours=1)),
    ],
)
def test_parse_offset(value: str, expected: timedelta):
    assert parse_offset(value) == expected


@pytest.mark.parametrize("value", ["", "0", "+5:30", "+24:00", "+01:60", "UTC"])
def test_parse_offset_rejects_malformed(value: str):
    with pytest.raises(InvalidTimezoneOffsetError):
        parse_offset(value)
