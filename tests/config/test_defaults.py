# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module tests the defaults module."""

import os
from pathlib import Path

import pytest

from wk2mmd.config.defaults import defaults, load_defaults
from wk2mmd.config.global_config import GlobalConfig


def test_load_packaged_defaults() -> None:
    """Test the values shipped in the packaged ``defaults.ini``."""
    assert load_defaults("") is True
    assert defaults.getint("requests", "timeout") == 10
    assert defaults.get("action_reference", "default_ref") == "main"
    assert defaults.getint("uses_tree", "default_depth") == 2
    assert defaults.get_list("fetcher", "action_files") == ["action.yml", "action.yaml"]


def test_load_user_defaults(tmp_path: Path) -> None:
    """Test that the values in the user configuration are prioritized."""
    user_config_path = os.path.join(tmp_path, "defaults.ini")
    with open(user_config_path, "w", encoding="utf-8") as user_config_file:
        user_config_file.write("[action_reference]\ndefault_ref = master\n")

    assert load_defaults(user_config_path) is True
    assert defaults.get("action_reference", "default_ref") == "master"
    assert defaults.get("uses_tree", "root_name") == "workflow"


def test_load_missing_user_defaults() -> None:
    """Test that a missing user configuration is ignored."""
    assert load_defaults("invalid") is True
    assert defaults.get("diagram", "default_type") == "flowchart"


def test_load_invalid_user_defaults(tmp_path: Path) -> None:
    """Test loading a user configuration that is not an INI file."""
    user_config_path = os.path.join(tmp_path, "defaults.ini")
    with open(user_config_path, "w", encoding="utf-8") as user_config_file:
        user_config_file.write("no section header\n")

    assert load_defaults(user_config_path) is False


@pytest.mark.parametrize(
    ("user_config_input", "delimiter", "duplicated_ok", "expect"),
    [
        (
            "[test.list]\nlist =\n    action.yml\n    action.yaml\n    action.yml\n",
            None,
            False,
            ["action.yml", "action.yaml"],
        ),
        (
            "[test.list]\nlist =\n    action.yml\n    action.yaml\n    action.yml\n",
            None,
            True,
            ["action.yml", "action.yaml", "action.yml"],
        ),
        (
            "[test.list]\nlist = main,dev,main\n",
            ",",
            False,
            ["main", "dev"],
        ),
    ],
)
def test_get_list(
    user_config_input: str,
    delimiter: str | None,
    duplicated_ok: bool,
    expect: list[str],
    tmp_path: Path,
) -> None:
    """Test getting a list of strings from ``defaults.ini``."""
    user_config_path = os.path.join(tmp_path, "config.ini")
    with open(user_config_path, "w", encoding="utf-8") as user_config_file:
        user_config_file.write(user_config_input)
    load_defaults(user_config_path)

    assert defaults.get_list("test.list", "list", delimiter=delimiter, duplicated_ok=duplicated_ok) == expect


def test_get_list_fallback() -> None:
    """Test the fallback of missing sections and options."""
    assert defaults.get_list("missing.section", "list", fallback=["a"]) == ["a"]
    assert defaults.get_list("fetcher", "missing_option") == []


def test_global_config_load() -> None:
    """Test loading the global configuration."""
    config = GlobalConfig()
    config.load(gh_token="token")
    assert config.gh_token == "token"
    config.load()
    assert config.gh_token == ""
