#!/usr/bin/env python3
# -*- coding: utf-8 -*-
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
# Filename: tests/conftest.py

import logging
import os
import sys

import pytest

# Add the 'src' directory to the Python path so tests can import
# 'splice_includes', 'config_loader' and 'utils.file_utils' directly.
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(project_root, 'src')

if src_path not in sys.path:
    sys.path.insert(0, src_path)


@pytest.fixture(autouse=True)
def detach_stdout_handlers():
    """Drops the stdout handlers main() installs, since they hold a per-test capture stream."""
    yield
    from splice_includes import STDOUT_HANDLER_NAME, logger
    for name in (logger.name, "utils.file_utils"):
        target = logging.getLogger(name)
        for handler in target.handlers[:]:
            if handler.get_name() == STDOUT_HANDLER_NAME:
                target.removeHandler(handler)
        target.setLevel(logging.NOTSET)


@pytest.fixture
def companion_dir(tmp_path):
    """A build output directory; returns (path, base_dir string with trailing slash)."""
    out_dir = tmp_path / "target" / "out"
    out_dir.mkdir(parents=True)
    return out_dir, str(out_dir) + "/"

# === End of tests/conftest.py ===
