#!/usr/bin/env python3
#-*- coding: utf-8 -*-
#
# Include Splicer
# Copyright (C) 2025 Peter J. Marko
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
#
# Filename: tests/test_config_loader.py

from configparser import ConfigParser

import pytest

import config_loader
from config_loader import (
    DEFAULT_COMPANION_BASE_DIR, get_companion_base_dir, get_config_value, load_app_config
)

# A valid config content for happy path testing
VALID_CONFIG_CONTENT = """
[Splicer]
base_dir = /opt/build/out/   ; generated by build.rs
"""


@pytest.fixture
def mock_config_file(tmp_path):
    """A fixture to create a temporary config file for testing."""
    def _create_file(content):
        config_path = tmp_path / "config.ini"
        config_path.write_text(content)
        return str(config_path)
    return _create_file


@pytest.fixture
def loaded_config(mock_config_file):
    config = ConfigParser()
    config.read(mock_config_file(VALID_CONFIG_CONTENT))
    return config


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("SPLICE_BASE_DIR", raising=False)


def test_get_config_value_strips_inline_comment(loaded_config):
    assert get_config_value(loaded_config, 'Splicer', 'base_dir') == "/opt/build/out/"


def test_get_config_value_fallback(loaded_config):
    assert get_config_value(loaded_config, 'Splicer', 'missing_key', fallback="x") == "x"
    assert get_config_value(ConfigParser(), 'Splicer', 'base_dir', fallback="x") == "x"


def test_get_config_value_none_string(mock_config_file):
    config = ConfigParser()
    config.read(mock_config_file("[Splicer]\nbase_dir = None\n"))
    assert get_config_value(config, 'Splicer', 'base_dir', fallback="x") is None


def test_load_app_config_honours_override(mock_config_file, monkeypatch):
    monkeypatch.setenv('PROJECT_CONFIG_OVERRIDE', mock_config_file(VALID_CONFIG_CONTENT))
    config = load_app_config()
    assert get_config_value(config, 'Splicer', 'base_dir') == "/opt/build/out/"


def test_companion_base_dir_from_config(loaded_config, clean_env):
    assert get_companion_base_dir(loaded_config) == "/opt/build/out/"


def test_companion_base_dir_env_wins(loaded_config, monkeypatch):
    monkeypatch.setenv("SPLICE_BASE_DIR", "/from/env/")
    assert get_companion_base_dir(loaded_config) == "/from/env/"


def test_companion_base_dir_default(clean_env):
    assert get_companion_base_dir(ConfigParser()) == DEFAULT_COMPANION_BASE_DIR
    assert DEFAULT_COMPANION_BASE_DIR == "./target/debug/build/cranelift-codegen-ba4dc72176f6ae31/out/"


def test_companion_base_dir_none_in_config_uses_default(mock_config_file, clean_env):
    config = ConfigParser()
    config.read(mock_config_file("[Splicer]\nbase_dir = None\n"))
    assert get_companion_base_dir(config) == DEFAULT_COMPANION_BASE_DIR


def test_companion_base_dir_uses_global_config(monkeypatch, loaded_config, clean_env):
    monkeypatch.setattr(config_loader, 'APP_CONFIG', loaded_config)
    assert get_companion_base_dir() == "/opt/build/out/"

# === End of tests/test_config_loader.py ===
