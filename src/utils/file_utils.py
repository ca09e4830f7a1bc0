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
# Filename: src/utils/file_utils.py

"""
Provides shared utility functions for file operations.
"""
import logging
import os

TEMP_SUFFIX = "~"

logger = logging.getLogger(__name__)


class FileReplaceError(OSError):
    """Raised when a fully written temporary file cannot be renamed into place."""


def write_atomically(path, content: str, suffix: str = TEMP_SUFFIX, errors: str = "strict") -> str:
    """
    Writes text to a sibling temporary file, then renames it over `path`.

    The temporary file lives next to the target (`<path><suffix>`), so the
    final `os.replace` stays on one filesystem and a concurrent reader sees
    either the old content or the new content, never a partial write.

    Args:
        path (str | Path): The file to replace.
        content (str): The complete new content.
        suffix (str): Appended to the file name to form the temporary path.
        errors (str): Encoding error handler, as for `open()`.

    Returns:
        str: The path that was replaced.

    Raises:
        OSError: If the temporary file cannot be written. The temporary file
            is removed before the error propagates.
        FileReplaceError: If the rename fails. The temporary file is removed
            and the original file is left as it was.
    """
    path = os.fspath(path)
    temp_path = path + suffix

    try:
        with open(temp_path, 'w', encoding='utf-8', errors=errors, newline='') as f:
            f.write(content)
    except OSError:
        _discard(temp_path)
        raise

    try:
        os.replace(temp_path, path)
    except OSError as e:
        _discard(temp_path)
        raise FileReplaceError(f"Could not rename '{temp_path}' to '{path}': {e}") from e

    return path


def _discard(temp_path: str):
    if os.path.exists(temp_path):
        try:
            os.remove(temp_path)
        except OSError as e:
            logger.warning(f"Could not remove temporary file {temp_path}: {e}")

# === End of src/utils/file_utils.py ===
