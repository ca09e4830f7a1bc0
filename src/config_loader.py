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
# Filename: src/config_loader.py

"""
Configuration Loader (config_loader.py)

Loads the project settings used by the include splicer.

Key Features:
-   **Loads `config.ini`**: Parses the configuration file into a global
    `APP_CONFIG` object, found relative to the project root. The
    `PROJECT_CONFIG_OVERRIDE` environment variable points to an alternative
    file (used by the tests).
-   **Loads `.env`**: Environment variables such as `SPLICE_BASE_DIR` may be
    kept in a `.env` file at the project root.
-   **Safe Value Retrieval**: `get_config_value()` reads a string value with a
    fallback, stripping inline comments.
-   **Companion Directory**: `get_companion_base_dir()` resolves the directory
    that generated companion files are read from.

Global Objects Provided:
-   `PROJECT_ROOT`: The directory holding `pyproject.toml`, or the current
    working directory when the package is installed elsewhere.
-   `APP_CONFIG`: A `configparser.ConfigParser` holding `config.ini`.
-   `ENV_LOADED`: Whether a `.env` file was loaded.

Usage by other scripts:
    from config_loader import APP_CONFIG, get_config_value, get_companion_base_dir

    base_dir = get_companion_base_dir()
"""

import configparser
import os
import logging
import pathlib
from dotenv import load_dotenv

CONFIG_FILENAME = "config.ini"
DOTENV_FILENAME = ".env"

SPLICER_SECTION = "Splicer"
BASE_DIR_ENV_VAR = "SPLICE_BASE_DIR"
# Build output directory of the cranelift-codegen crate the tool was written for.
DEFAULT_COMPANION_BASE_DIR = "./target/debug/build/cranelift-codegen-ba4dc72176f6ae31/out/"

logger = logging.getLogger(__name__)


def get_project_root() -> str:
    """Determines the project root by searching upwards for pyproject.toml."""
    current_path = pathlib.Path(__file__).resolve()
    while current_path != current_path.parent:
        if (current_path / "pyproject.toml").exists():
            return str(current_path)
        current_path = current_path.parent
    # Installed outside a source checkout.
    return os.getcwd()

PROJECT_ROOT = get_project_root()

def load_app_config():
    config = configparser.ConfigParser()

    override_path = os.getenv('PROJECT_CONFIG_OVERRIDE')
    if override_path and os.path.exists(override_path):
        config_path = override_path
        logger.debug(f"Using override config from env var: {config_path}")
    else:
        config_path = os.path.join(PROJECT_ROOT, CONFIG_FILENAME)

    if os.path.exists(config_path):
        try:
            # 'utf-8-sig' tolerates a BOM.
            config.read(config_path, encoding='utf-8-sig')
            logger.debug(f"Successfully loaded configuration from: {config_path}")
        except configparser.Error as e:
            logger.error(f"Error parsing configuration file {config_path}: {e}")
    else:
        logger.debug(f"{CONFIG_FILENAME} not found at project root: {config_path}. Using fallbacks.")

    return config

def load_env_vars():
    """Loads environment variables from .env file located at the project root."""
    dotenv_path = os.path.join(PROJECT_ROOT, DOTENV_FILENAME)
    if os.path.exists(dotenv_path):
        if load_dotenv(dotenv_path):
            logger.debug(f"Successfully loaded .env file from: {dotenv_path}")
            return True
        else:
            logger.warning(f"Found .env file at {dotenv_path}, but it may be empty or failed to load.")
            return False
    return False

def get_config_value(config: configparser.ConfigParser, section: str, key: str, fallback=None):
    """
    Helper to get a string value from a configparser.ConfigParser object,
    stripping common inline comments ("value ; comment", "value # comment").

    Returns the fallback if the section or key is missing. The string "None"
    maps to Python None.
    """
    if not config.has_option(section, key):
        return fallback

    cleaned_value = config.get(section, key)
    for comment_char in [';', '#']:
        if comment_char in cleaned_value:
            cleaned_value = cleaned_value.split(comment_char, 1)[0]
    cleaned_value = cleaned_value.strip()

    if cleaned_value.lower() == 'none':
        return None
    return cleaned_value

def get_companion_base_dir(config: configparser.ConfigParser | None = None) -> str:
    """
    Resolves the directory that companion files are read from.

    The `SPLICE_BASE_DIR` environment variable wins over `[Splicer] base_dir`
    in config.ini, which wins over the built-in default. The value is used as a
    plain string prefix: tokens such as "/registers-x86.rs" are appended to it
    as-is.
    """
    env_value = os.getenv(BASE_DIR_ENV_VAR)
    if env_value:
        return env_value

    if config is None:
        config = APP_CONFIG
    configured = get_config_value(config, SPLICER_SECTION, 'base_dir')
    if configured:
        return configured

    return DEFAULT_COMPANION_BASE_DIR

# Global config object, loaded once
APP_CONFIG = load_app_config()
ENV_LOADED = load_env_vars()

# === End of src/config_loader.py ===
