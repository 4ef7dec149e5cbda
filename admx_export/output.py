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
Tabular (CSV) and JSON serialization of policy records
"""

import csv
import json
from pathlib import Path
from typing import Iterable, TextIO

from .records import HEADER, PolicyRecord


def record_to_dict(record: PolicyRecord) -> dict:
    """Map a record to {column name: value} using the output header."""
    return dict(zip(HEADER, record))


def dumps(obj, *, ensure_ascii: bool = False, indent: int = 2) -> str:
    return json.dumps(obj, ensure_ascii=ensure_ascii, indent=indent)


def write_csv(records: Iterable[PolicyRecord], stream: TextIO) -> int:
    """Write a header row and one row per record. Returns the row count."""
    writer = csv.writer(stream)
    writer.writerow(HEADER)
    count = 0
    for record in records:
        writer.writerow(record)
        count += 1
    return count


def write_json(records: Iterable[PolicyRecord], stream: TextIO) -> int:
    rows = [record_to_dict(r) for r in records]
    stream.write(dumps(rows))
    stream.write("\n")
    return len(rows)


WRITERS = {
    "csv": write_csv,
    "json": write_json,
}


def read_table(path: Path) -> tuple[list[str], list[dict]]:
    """Read a CSV table written by write_csv (or any headed CSV)."""
    with open(path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        rows = list(reader)
        return list(reader.fieldnames or []), rows
