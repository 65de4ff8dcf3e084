"""Tests for configuration handling."""

import json

import pytest

from gitwork.config import (
    DEFAULTS,
    check_config,
    get_config_file,
    get_max_attempts,
    load_config,
    parse_value,
    resolve_key_path,
    save_config,
    set_option,
)
from gitwork.errors import ConfigError, InvalidBranchNameError


def test_defaults_without_file():
    config = load_config()
    assert config == DEFAULTS
    assert config["trunk_branch"] == "main"
    assert config["auto_save_message"] == "Auto-save changes before switching branches"
    assert config["direct_push_message"] == "Direct update to main"


def test_config_dir_follows_gitwork_home(isolated_env):
    assert get_config_file() == isolated_env / ".gitwork" / "config.json"


def test_saved_values_override_defaults():
    save_config({"trunk_branch": "develop", "strict": True})
    config = load_config()
    assert config["trunk_branch"] == "develop"
    assert config["strict"] is True
    assert config["ssh_key_path"] == DEFAULTS["ssh_key_path"]


def test_unknown_keys_in_file_are_ignored():
    get_config_file().write_text(json.dumps({"bogus": 1, "color": False}))
    config = load_config()
    assert "bogus" not in config
    assert config["color"] is False


def test_corrupt_file_falls_back_to_defaults(capsys):
    get_config_file().write_text("{not json")
    assert load_config() == DEFAULTS
    assert "Warning" in capsys.readouterr().out


def test_parse_value():
    assert parse_value("true") is True
    assert parse_value("3") == 3
    assert parse_value("null") is None
    assert parse_value("develop") == "develop"
    assert parse_value("~/.ssh/key") == "~/.ssh/key"


def test_set_option_persists():
    set_option("max_prompt_attempts", "5")
    assert load_config()["max_prompt_attempts"] == 5


def test_resolve_key_path_expands_home(isolated_env):
    assert resolve_key_path({"ssh_key_path": "~/.ssh/k"}) == isolated_env / ".ssh" / "k"


def test_max_attempts():
    assert get_max_attempts({"max_prompt_attempts": None}) is None
    assert get_max_attempts({"max_prompt_attempts": 3}) == 3
    assert get_max_attempts({"max_prompt_attempts": 0}) == 1


def test_max_attempts_rejects_non_numbers():
    with pytest.raises(ConfigError):
        get_max_attempts({"max_prompt_attempts": "abc"})


def test_set_option_keeps_strings_verbatim():
    set_option("direct_push_message", "123")
    assert load_config()["direct_push_message"] == "123"


def test_set_option_validates_before_saving():
    with pytest.raises(InvalidBranchNameError):
        set_option("trunk_branch", "two words")
    with pytest.raises(ConfigError):
        set_option("max_prompt_attempts", "-2")
    assert not get_config_file().exists()


def test_check_config():
    check_config(dict(DEFAULTS))
    with pytest.raises(ConfigError):
        check_config({**DEFAULTS, "color": "yes"})
    with pytest.raises(InvalidBranchNameError):
        check_config({**DEFAULTS, "trunk_branch": "a b"})
