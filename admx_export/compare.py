#
# admx-export - ADMX policy metadata export
#
# Copyright (C) 2025-2026 BaseALT Ltd.
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
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""
Set difference of two exported tables by a key column
"""

import csv
import logging
from pathlib import Path
from typing import TextIO

from .errors import MissingKeyColumn
from .output import read_table

logger = logging.getLogger('admx-export')

DEFAULT_KEY = "Name"


def difference(left: list[dict], right: list[dict], key: str) -> list[dict]:
    """Rows of left whose key value does not occur in right, in left order."""
    right_keys = {row.get(key) for row in right}
    return [row for row in left if row.get(key) not in right_keys]


def compare_files(left_path: Path, right_path: Path, key: str = DEFAULT_KEY):
    """
    Compare two CSV exports.

    Returns (fieldnames, only_left, only_right). Raises MissingKeyColumn
    if either table lacks the key column.
    """
    left_fields, left_rows = read_table(left_path)
    right_fields, right_rows = read_table(right_path)

    if key not in left_fields:
        raise MissingKeyColumn(key, str(left_path))
    if key not in right_fields:
        raise MissingKeyColumn(key, str(right_path))

    only_left = difference(left_rows, right_rows, key)
    only_right = difference(right_rows, left_rows, key)
    logger.info(f"{len(only_left)} rows only in {left_path}, {len(only_right)} rows only in {right_path}")

    fieldnames = list(left_fields)
    for name in right_fields:
        if name not in fieldnames:
            fieldnames.append(name)
    return fieldnames, only_left, only_right


def write_difference(fieldnames: list[str], only_left: list[dict], only_right: list[dict], stream: TextIO) -> int:
    """Write both sides as one CSV with a leading Side column ('<' or '>')."""
    writer = csv.DictWriter(stream, fieldnames=["Side"] + fieldnames, restval="")
    writer.writeheader()
    for side, rows in (("<", only_left), (">", only_right)):
        for row in rows:
            writer.writerow({"Side": side, **row})
    return len(only_left) + len(only_right)
