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
Literal text search over a directory of XML reports
"""

import logging
from pathlib import Path
from typing import Iterator

logger = logging.getLogger('admx-export')

# Report exports are commonly UTF-16 with a BOM
_BOMS = (
    (b"\xef\xbb\xbf", "utf-8-sig"),
    (b"\xff\xfe", "utf-16"),
    (b"\xfe\xff", "utf-16"),
)


def read_report(path: Path) -> str:
    raw = path.read_bytes()
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return raw.decode(encoding, errors="replace")
    return raw.decode("utf-8", errors="replace")


def search_reports(report_dir: Path, text: str, ignore_case: bool = False) -> Iterator[Path]:
    """Yield *.xml files under report_dir (sorted) whose content contains text."""
    report_dir = Path(report_dir)
    if not report_dir.is_dir():
        raise RuntimeError(f"Report directory does not exist: {report_dir}")

    needle = text.casefold() if ignore_case else text
    for report in sorted(report_dir.rglob("*.xml")):
        try:
            content = read_report(report)
        except OSError as e:
            logger.warning(f"Cannot read report {report}: {e}")
            continue

        if ignore_case:
            content = content.casefold()
        if needle in content:
            yield report
