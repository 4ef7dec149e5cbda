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
XML helpers shared by the ADMX and ADML loaders
"""

import io
import re
from pathlib import Path
import xml.etree.ElementTree as ET


# encoding="unicode" in the XML declaration, which expat does not know
UNICODE_ENCODING = re.compile(br"encoding\s*=\s*(['\"])unicode\1", re.IGNORECASE)
UNICODE_ENCODING_TEXT = re.compile(r"encoding\s*=\s*(['\"])unicode\1", re.IGNORECASE)


def strip_ns(tag) -> str:
    """Remove XML namespace from tag. Comments and PIs yield an empty name."""
    if not isinstance(tag, str):
        return ""
    return tag.split("}", 1)[-1]


def is_element(node: ET.Element, local_name: str) -> bool:
    return strip_ns(node.tag) == local_name


def _fix_unicode_declaration(raw: bytes) -> bytes | None:
    if UNICODE_ENCODING.search(raw):
        # ASCII-compatible bytes, so the file itself is not UTF-16
        return UNICODE_ENCODING.sub(lambda m: b"encoding=" + m.group(1) + b"utf-8" + m.group(1), raw, count=1)

    # UTF-16 encoded file: the declaration is not visible as bytes
    for encoding in ("utf-16", "utf-16-le", "utf-16-be"):
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError:
            continue
        if UNICODE_ENCODING_TEXT.search(text):
            text = UNICODE_ENCODING_TEXT.sub(lambda m: f"encoding={m.group(1)}utf-16{m.group(1)}", text, count=1)
            return text.encode(encoding)

    return None


def load_xml_tree(path: Path) -> ET.ElementTree:
    """
    Parse an XML file.

    A declared encoding="unicode" is rewritten before a second attempt.
    Raises ET.ParseError for malformed XML and LookupError for an
    unknown encoding that cannot be repaired.
    """
    try:
        return ET.parse(path)
    except (LookupError, ET.ParseError):
        fixed = _fix_unicode_declaration(path.read_bytes())
        if fixed is None:
            raise
        return ET.parse(io.BytesIO(fixed))
