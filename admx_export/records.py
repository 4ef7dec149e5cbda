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
PolicyRecord building for single documents and whole directories
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, NamedTuple

from . import document
from .config import DEFAULT_LANGUAGE
from .document import DefinitionDocument, Reference
from .errors import MalformedDefinitionFile, MissingLocalizationFile
from .resolver import UNRESOLVED, resolve, resolve_string
from .strings import LocalizationCatalog, StringTable, pick_language

logger = logging.getLogger('admx-export')


class PolicyRecord(NamedTuple):
    source_file: str
    parent_category: str
    name: str
    display_name: str
    policy_class: str
    explain_text: str
    supported_on: str
    registry_key: str
    registry_value_name: str


# Column names of the tabular output, in PolicyRecord field order
HEADER = (
    "SourceFile",
    "ParentCategory",
    "Name",
    "DisplayName",
    "Class",
    "ExplainText",
    "SupportedOn",
    "RegistryKey",
    "RegistryValueName",
)


def build(doc: DefinitionDocument,
          default_table: StringTable,
          catalog: LocalizationCatalog) -> Iterator[PolicyRecord]:
    """Yield one PolicyRecord per policy of doc, in document order."""

    def definition_text(ref: Reference | None) -> str:
        if ref is None:
            return ""
        return resolve(ref, doc, default_table, catalog)

    for policy in doc.policies:
        yield PolicyRecord(
            source_file=policy.source_file,
            parent_category=definition_text(policy.parent_category_ref),
            name=policy.name,
            display_name=resolve_string(policy.display_name_ref, default_table, catalog),
            policy_class=policy.policy_class,
            explain_text=resolve_string(policy.explain_text_ref, default_table, catalog),
            supported_on=definition_text(policy.applicability_ref),
            registry_key=policy.registry_key,
            registry_value_name=policy.registry_value_name,
        )


def resolved_fields(record: PolicyRecord) -> tuple[str, ...]:
    """Fields that come out of reference resolution."""
    return (record.parent_category, record.display_name, record.explain_text, record.supported_on)


@dataclass
class ExportSummary:
    files: int = 0
    policies: int = 0
    unresolved: int = 0
    skipped_files: list[str] = field(default_factory=list)
    missing_localizations: list[str] = field(default_factory=list)


class PolicyExport:
    """
    One export run over a PolicyDefinitions directory.

    The language is chosen once, and a single LocalizationCatalog is
    shared by every file of the run.
    """

    def __init__(self, policy_definitions_path: str | Path, language: str = DEFAULT_LANGUAGE):
        self.base_dir = Path(policy_definitions_path).resolve()
        if not self.base_dir.is_dir():
            raise RuntimeError(f"Policy definitions path does not exist: {self.base_dir}")

        self.language_requested = language
        self.language = pick_language(self.base_dir, language)
        self.catalog = LocalizationCatalog(self.base_dir, self.language)
        self.summary = ExportSummary()

    def definition_files(self) -> list[Path]:
        return sorted(self.base_dir.glob("*.admx"), key=lambda p: p.name.casefold())

    def _default_table(self, doc: DefinitionDocument) -> StringTable:
        try:
            return self.catalog.get(doc.base_name)
        except MissingLocalizationFile as e:
            logger.warning(f"{doc.path.name}: {e}, its strings stay unresolved")
            self.summary.missing_localizations.append(doc.base_name)
            return StringTable.empty(doc.base_name)

    def records(self) -> Iterator[PolicyRecord]:
        """Yield the records of every definition file, file by file."""
        for admx_file in self.definition_files():
            try:
                doc = document.load(admx_file)
            except MalformedDefinitionFile as e:
                logger.warning(f"Skipping {admx_file.name}: {e}")
                self.summary.skipped_files.append(admx_file.name)
                continue

            self.summary.files += 1
            if not doc.policies:
                logger.debug(f"{admx_file.name}: no policies")
                continue

            count = 0
            for record in build(doc, self._default_table(doc), self.catalog):
                count += 1
                self.summary.unresolved += sum(1 for value in resolved_fields(record) if value == UNRESOLVED)
                yield record

            self.summary.policies += count
            logger.info(f"{admx_file.name}: {count} policies")


def build_records_for_dir(policy_definitions_path: str | Path,
                          language: str = DEFAULT_LANGUAGE) -> list[PolicyRecord]:
    """Resolve every policy under policy_definitions_path into a list."""
    return list(PolicyExport(policy_definitions_path, language).records())
