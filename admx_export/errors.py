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
Exceptions raised while loading policy definitions and localizations
"""

from pathlib import Path


class AdmxExportError(RuntimeError):
    """Base class for admx-export errors."""


class MalformedDefinitionFile(AdmxExportError):
    """An ADMX file could not be parsed at all."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"ADMX parse error: {path}: {reason}")
        self.path = path
        self.reason = reason


class MissingLocalizationFile(AdmxExportError):
    """No usable ADML file exists for a base name in the selected language."""

    def __init__(self, base_name: str, language: str, reason: str = "not found"):
        super().__init__(f"ADML '{base_name}' ({language}): {reason}")
        self.base_name = base_name
        self.language = language
        self.reason = reason


class MissingKeyColumn(AdmxExportError):
    """A compared table has no column with the requested key name."""

    def __init__(self, key: str, source: str):
        super().__init__(f"Key column '{key}' not found in {source}")
        self.key = key
        self.source = source
