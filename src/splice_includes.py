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
# Filename: src/splice_includes.py

"""
Splices generated build artifacts into Rust sources in place of their
`include!(concat!(env!("OUT_DIR"), "..."))` invocations.

Crates such as cranelift-codegen generate part of their code from build.rs
into `OUT_DIR` and pull it in with the `include!` macro. This script inlines
those generated files so the sources can be read (or indexed) without a
build directory at hand.

For every occurrence of the marker, the file name after it (up to the next
double quote) is appended to the companion base directory, that file is read,
and its contents replace the invocation. The rest of the original line is kept
behind a `//` comment, starting two characters into the marker:

    include!(concat!(env!("OUT_DIR"), "/registers-x86.rs"));

becomes

    <contents of registers-x86.rs>
    //clude!(concat!(env!("OUT_DIR"), "/registers-x86.rs"));

Key Features:
-   **Transactional per file**: If any companion file of a source cannot be
    read, that source is left untouched. Partial results never reach disk.
-   **Atomic Rewrite**: The new content is written to `<file>~` and renamed
    over the original. The temporary file is removed on any failure.
-   **No-op Safe**: Files without the marker are never written.
-   **Non-recursive**: Spliced content is not scanned for further markers.

The companion base directory comes from `SPLICE_BASE_DIR` (environment or
`.env`), then `[Splicer] base_dir` in config.ini, then the built-in default.

Usage:
    python src/splice_includes.py cranelift-codegen/src/isa/x86/*.rs
"""

import argparse
import logging
import sys
from pathlib import Path

from colorama import Fore, init

# Ensure the src directory is in the Python path for nested imports
sys.path.append(str(Path(__file__).resolve().parent))
from config_loader import get_companion_base_dir  # noqa: E402
from utils.file_utils import write_atomically, FileReplaceError  # noqa: E402

# Initialize colorama
init(autoreset=True, strip=False)

MARKER = 'include!(concat!(env!("OUT_DIR"), "'
TOKEN_END = '"'
COMMENT = "//"
# The commented tail starts this many characters into the marker.
TAIL_OFFSET = 2
# Bytes that are not valid UTF-8 round-trip unchanged.
ENCODING_ERRORS = "surrogateescape"
HELP_FLAGS = ("-h", "--help")

STDOUT_HANDLER_NAME = "splice_includes.stdout"

logger = logging.getLogger(__name__)


# --- Logging Setup ---
class CustomFormatter(logging.Formatter):
    log_format = "%(message)s"
    FORMATS = {logging.WARNING: Fore.YELLOW + log_format, logging.ERROR: Fore.RED + log_format}
    def format(self, record):
        return logging.Formatter(self.FORMATS.get(record.levelno, self.log_format)).format(record)


class CompanionReadError(OSError):
    """A companion file named by a marker could not be read."""

    def __init__(self, companion_path, cause):
        super().__init__(f"{companion_path}: {cause}")
        self.companion_path = companion_path
        self.cause = cause


def parse_token(content: str, start: int) -> str:
    """Returns the text from `start` up to (not including) the next double quote."""
    end = content.find(TOKEN_END, start)
    if end == -1:
        return content[start:]
    return content[start:end]


def line_ending(content: str, pos: int) -> str:
    """Returns the line terminator used nearest before `pos`, else after it, else a bare LF."""
    end = content.rfind("\n", 0, pos)
    if end == -1:
        end = content.find("\n", pos)
    if end > 0 and content[end - 1] == "\r":
        return "\r\n"
    return "\n"


def read_companion(companion_path: str) -> str:
    try:
        with open(companion_path, 'r', encoding='utf-8', errors=ENCODING_ERRORS, newline='') as f:
            return f.read()
    except OSError as e:
        raise CompanionReadError(companion_path, e) from e


def splice_text(content: str, base_dir: str) -> tuple[str, int]:
    """
    Replaces every marker occurrence in `content` with its companion file.

    Args:
        content (str): The full text of a source file.
        base_dir (str): Prefix for companion paths. Tokens are appended with
            plain string concatenation.

    Returns:
        tuple[str, int]: The spliced text and the number of occurrences replaced.

    Raises:
        CompanionReadError: On the first companion that cannot be read. No
            partial result is returned.
    """
    count = 0
    cursor = 0
    while True:
        pos = content.find(MARKER, cursor)
        if pos == -1:
            break

        token = parse_token(content, pos + len(MARKER))
        companion_path = base_dir + token
        logger.debug(f"  - Resolving '{token}' -> {companion_path}")
        companion = read_companion(companion_path)

        newline = line_ending(content, pos)
        head = content[:pos]
        if head and not head.endswith("\n"):
            head += newline
        spliced = companion + newline + COMMENT

        # Continue after the inserted text so spliced content is never rescanned.
        cursor = len(head) + len(spliced)
        content = head + spliced + content[pos + TAIL_OFFSET:]
        count += 1

    return content, count


def splice_file(file_path, base_dir: str | None = None) -> bool:
    """
    Splices companion files into `file_path` in place.

    Returns True if the file was rewritten. Files without the marker, and files
    that fail at any step, are left untouched and return False. Failures are
    logged, never raised.
    """
    file_path = str(file_path)
    try:
        with open(file_path, 'r', encoding='utf-8', errors=ENCODING_ERRORS, newline='') as f:
            content = f.read()
    except OSError as e:
        logger.error(f"ERROR: Could not read file {file_path}: {e}")
        return False

    if MARKER not in content:
        logger.debug(f"  - No include markers in {file_path}.")
        return False

    if base_dir is None:
        base_dir = get_companion_base_dir()

    try:
        new_content, count = splice_text(content, base_dir)
    except CompanionReadError as e:
        logger.error(f"ERROR: Could not read companion {e.companion_path} for {file_path}: {e.cause}")
        return False

    try:
        write_atomically(file_path, new_content, errors=ENCODING_ERRORS)
    except FileReplaceError as e:
        logger.error(f"ERROR: Could not replace file {file_path}: {e}")
        return False
    except OSError as e:
        logger.error(f"ERROR: Could not write file {file_path}: {e}")
        return False

    logger.debug(f"Spliced {count} include(s) into {file_path}.")
    return True


def setup_logging(level=logging.INFO):
    """Sends this script's log records to stdout with coloured warnings and errors."""
    for name in (logger.name, "utils.file_utils"):
        target = logging.getLogger(name)
        for existing in target.handlers[:]:
            if existing.get_name() == STDOUT_HANDLER_NAME:
                target.removeHandler(existing)
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(STDOUT_HANDLER_NAME)
        handler.setFormatter(CustomFormatter())
        target.addHandler(handler)
        target.setLevel(level)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Replaces include!(concat!(env!(\"OUT_DIR\"), ...)) invocations with the generated files they name."
    )
    parser.add_argument("files", nargs='*', help="Source files to rewrite in place, processed in order.")
    argv = sys.argv[1:] if argv is None else list(argv)
    # Every argument is a file name, including ones that start with a dash.
    if argv and not (len(argv) == 1 and argv[0] in HELP_FLAGS):
        argv = ["--"] + argv
    args = parser.parse_args(argv)

    if not args.files:
        parser.print_usage(sys.stdout)
        return 0

    setup_logging()

    rewritten_count = 0
    for file_path in args.files:
        if splice_file(file_path):
            rewritten_count += 1

    logger.debug(f"Rewrote {rewritten_count} of {len(args.files)} file(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())

# === End of src/splice_includes.py ===
