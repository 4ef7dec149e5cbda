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
DefinitionDocument - parsed structure of one ADMX file
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union
import xml.etree.ElementTree as ET

from .errors import MalformedDefinitionFile
from .xmltree import load_xml_tree, strip_ns


# $(string.ID)
STRING_REF = re.compile(r"\$\(\s*string\.([A-Za-z0-9_.-]+)\s*\)", re.IGNORECASE)


@dataclass(frozen=True)
class Local:
    """String id in the document's own ADML."""
    key: str


@dataclass(frozen=True)
class Cross:
    """String id in the ADML of another file (by base name)."""
    file: str
    key: str


@dataclass(frozen=True)
class Named:
    """Name of a category or supportedOn definition in the same document."""
    name: str


Reference = Union[Local, Cross, Named]


@dataclass(frozen=True)
class CategoryDefinition:
    name: str
    display_name_ref: Reference


@dataclass(frozen=True)
class ApplicabilityDefinition:
    name: str
    display_name_ref: Reference


@dataclass(frozen=True)
class Policy:
    source_file: str
    name: str
    display_name_ref: Reference
    explain_text_ref: Reference
    policy_class: str
    applicability_ref: Reference | None
    parent_category_ref: Reference | None
    registry_key: str
    registry_value_name: str


@dataclass
class DefinitionDocument:
    path: Path
    target_prefix: str | None = None
    namespaces: dict[str, str] = field(default_factory=dict)
    policies: list[Policy] = field(default_factory=list)
    categories: list[CategoryDefinition] = field(default_factory=list)
    applicability: list[ApplicabilityDefinition] = field(default_factory=list)

    @property
    def base_name(self) -> str:
        """Base name shared with the default ADML file."""
        return self.path.stem

    def find_definition(self, name: str) -> CategoryDefinition | ApplicabilityDefinition | None:
        """Categories are searched before supportedOn definitions."""
        for definition in self.categories:
            if definition.name == name:
                return definition
        for definition in self.applicability:
            if definition.name == name:
                return definition
        return None


def _split_prefix(value: str) -> tuple[str | None, str]:
    if ":" in value:
        prefix, tail = value.split(":", 1)
        return prefix.strip() or None, tail.strip()
    return None, value


def parse_string_ref(value: str | None) -> Reference:
    """
    Parse a displayName/explainText attribute:
      $(string.ID)  -> Local(ID)
      prefix:ID     -> Cross(prefix, ID)
      anything else -> Local(value)
    """
    value = (value or "").strip()
    m = STRING_REF.fullmatch(value)
    if m:
        return Local(m.group(1))

    prefix, tail = _split_prefix(value)
    if prefix and tail:
        return Cross(prefix, tail)
    return Local(value)


def parse_definition_ref(value: str | None, own_prefix: str | None = None) -> Reference | None:
    """
    Parse a parentCategory/supportedOn ref:
      $(string.ID)   -> Local(ID)
      own:NAME       -> Named(NAME)   (qualified with the file's own prefix)
      prefix:NAME    -> Cross(prefix, NAME)
      NAME           -> Named(NAME)
    Empty refs yield None.
    """
    value = (value or "").strip()
    if not value:
        return None

    m = STRING_REF.fullmatch(value)
    if m:
        return Local(m.group(1))

    prefix, tail = _split_prefix(value)
    if not tail:
        return None
    if prefix is None or (own_prefix and prefix.casefold() == own_prefix.casefold()):
        return Named(tail)
    return Cross(prefix, tail)


def _children(node: ET.Element, local_name: str):
    for ch in node:
        if strip_ns(ch.tag) == local_name:
            yield ch


def _first_ref(node: ET.Element, local_name: str) -> str | None:
    for ch in _children(node, local_name):
        ref = ch.attrib.get("ref")
        if ref:
            return ref
    return None


def _parse_namespaces(root: ET.Element, doc: DefinitionDocument) -> None:
    for block in _children(root, "policyNamespaces"):
        for ns in block:
            local = strip_ns(ns.tag)
            prefix = ns.attrib.get("prefix")
            if not prefix:
                continue
            if local == "target":
                doc.target_prefix = prefix
            elif local == "using":
                doc.namespaces[prefix] = ns.attrib.get("namespace", "")


def _parse_categories(root: ET.Element, doc: DefinitionDocument) -> None:
    for block in _children(root, "categories"):
        for cat in _children(block, "category"):
            name = cat.attrib.get("name")
            if not name:
                continue
            doc.categories.append(
                CategoryDefinition(name, parse_string_ref(cat.attrib.get("displayName")))
            )


def _parse_applicability(root: ET.Element, doc: DefinitionDocument) -> None:
    for block in _children(root, "supportedOn"):
        for definitions in _children(block, "definitions"):
            for definition in _children(definitions, "definition"):
                name = definition.attrib.get("name")
                if not name:
                    continue
                doc.applicability.append(
                    ApplicabilityDefinition(name, parse_string_ref(definition.attrib.get("displayName")))
                )


def _parse_policies(root: ET.Element, doc: DefinitionDocument) -> None:
    source_file = doc.path.name
    for block in _children(root, "policies"):
        # comments and processing instructions have no element name
        for pol in _children(block, "policy"):
            doc.policies.append(Policy(
                source_file=source_file,
                name=pol.attrib.get("name") or "",
                display_name_ref=parse_string_ref(pol.attrib.get("displayName")),
                explain_text_ref=parse_string_ref(pol.attrib.get("explainText")),
                policy_class=(pol.attrib.get("class") or "").strip(),
                applicability_ref=parse_definition_ref(_first_ref(pol, "supportedOn"), doc.target_prefix),
                parent_category_ref=parse_definition_ref(_first_ref(pol, "parentCategory"), doc.target_prefix),
                registry_key=(pol.attrib.get("key") or "").replace("/", "\\"),
                registry_value_name=pol.attrib.get("valueName") or pol.attrib.get("valuename") or "",
            ))


def load(path: Path) -> DefinitionDocument:
    """Parse one ADMX file. Raises MalformedDefinitionFile if it is not XML."""
    path = Path(path)
    try:
        tree = load_xml_tree(path)
    except (ET.ParseError, LookupError, OSError) as e:
        raise MalformedDefinitionFile(path, str(e)) from e

    root = tree.getroot()
    doc = DefinitionDocument(path)
    _parse_namespaces(root, doc)
    _parse_categories(root, doc)
    _parse_applicability(root, doc)
    _parse_policies(root, doc)
    return doc
