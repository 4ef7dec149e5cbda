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
ADML string tables and the per-run localization catalog
"""

import logging
from pathlib import Path
from types import MappingProxyType
import xml.etree.ElementTree as ET

from .config import DEFAULT_LANGUAGE
from .errors import MissingLocalizationFile
from .xmltree import load_xml_tree, strip_ns

logger = logging.getLogger('admx-export')


class StringTable:
    """Read-only mapping of string ids to text for one ADML file."""

    def __init__(self, name: str, entries: dict[str, str] | None = None):
        self.name = name
        self._entries = MappingProxyType(dict(entries or {}))

    @classmethod
    def empty(cls, name: str) -> "StringTable":
        return cls(name)

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"StringTable({self.name!r}, {len(self)} strings)"


def load_string_table(adml_path: Path) -> StringTable:
    """Load all <string id="..."> entries of one ADML file."""
    tree = load_xml_tree(adml_path)

    strings = {}
    for el in tree.getroot().iter():
        if strip_ns(el.tag) != "string":
            continue

        sid = el.attrib.get("id")
        if not sid:
            continue

        strings[sid] = (el.text or "").strip()

    return StringTable(adml_path.stem, strings)


def _has_adml(locale_dir: Path) -> bool:
    return locale_dir.is_dir() and any(p.is_file() for p in locale_dir.glob("*.adml"))


def pick_language(base_dir: Path, requested: str | None) -> str:
    """
    If the requested language folder is missing or holds no ADML,
    fall back to 'en-US' (if it has ADML), then to the first folder
    that does. With no ADML at all the requested name is kept.
    """
    if requested and _has_adml(base_dir / requested):
        return requested

    if _has_adml(base_dir / DEFAULT_LANGUAGE):
        chosen = DEFAULT_LANGUAGE
    else:
        candidates = sorted(p for p in base_dir.iterdir() if _has_adml(p))
        if not candidates:
            logger.warning(f"No ADML files found under {base_dir}")
            return requested or DEFAULT_LANGUAGE
        chosen = candidates[0].name

    if requested:
        logger.warning(f"Language '{requested}' not available in {base_dir}, using '{chosen}'")
    else:
        logger.info(f"No language requested, using '{chosen}'")
    return chosen


class LocalizationCatalog:
    """
    Run-scoped cache of string tables for one language.

    Tables are keyed by ADML base name (case-insensitive). A base name
    whose file is absent or unparsable is remembered as missing, so every
    file is read at most once per run.
    """

    def __init__(self, base_dir: Path, language: str):
        self.base_dir = Path(base_dir)
        self.language = language
        self.locale_dir = self.base_dir / language
        self._tables: dict[str, StringTable] = {}
        self._missing: dict[str, str] = {}
        self._index: dict[str, Path] | None = None

    def _file_index(self) -> dict[str, Path]:
        if self._index is None:
            self._index = {}
            if self.locale_dir.is_dir():
                for adml_file in sorted(self.locale_dir.glob("*.adml")):
                    if not adml_file.is_file():
                        continue
                    self._index.setdefault(adml_file.stem.casefold(), adml_file)
        return self._index

    def get(self, base_name: str) -> StringTable:
        """Return the string table for base_name, loading it on first use."""
        key = base_name.casefold()
        if key not in self._tables and key not in self._missing:
            try:
                self._tables[key] = self._load(base_name)
            except MissingLocalizationFile as e:
                self._missing[key] = e.reason
                raise

        if key in self._missing:
            raise MissingLocalizationFile(base_name, self.language, self._missing[key])
        return self._tables[key]

    def _load(self, base_name: str) -> StringTable:
        adml_file = self._file_index().get(base_name.casefold())
        if adml_file is None:
            logger.debug(f"ADML not found for '{base_name}' in {self.locale_dir}")
            raise MissingLocalizationFile(base_name, self.language)

        try:
            table = load_string_table(adml_file)
        except (ET.ParseError, LookupError) as e:
            logger.warning(f"ADML parse error: {adml_file}: {e}")
            raise MissingLocalizationFile(base_name, self.language, f"parse error: {e}") from e
        except OSError as e:
            logger.warning(f"ADML read error: {adml_file}: {e}")
            raise MissingLocalizationFile(base_name, self.language, f"read error: {e}") from e

        logger.debug(f"Loaded {len(table)} strings from {adml_file}")
        return table

    def loaded(self) -> list[str]:
        """Base names of the tables loaded so far."""
        return [t.name for t in self._tables.values()]

    def __len__(self) -> int:
        return len(self._tables) + len(self._missing)
