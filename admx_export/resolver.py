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
Reference resolution against string tables and named definitions.

Three kinds of reference reach the resolver:

  Local(key)        looked up in the document's own ADML
  Cross(file, key)  looked up in another file's ADML via the catalog
  Named(name)       a category or supportedOn definition of the same
                    document; its displayName reference is resolved

Resolution is total: anything that cannot be found yields UNRESOLVED.
"""

import logging

from .document import Cross, DefinitionDocument, Local, Named, Reference
from .errors import MissingLocalizationFile
from .strings import LocalizationCatalog, StringTable

logger = logging.getLogger('admx-export')

UNRESOLVED = "unresolved"


def resolve_string(ref: Reference,
                   default_table: StringTable,
                   catalog: LocalizationCatalog) -> str:
    """Resolve a Local or Cross reference to text."""
    if isinstance(ref, Local):
        text = default_table.get(ref.key)
        if text is None:
            logger.debug(f"String '{ref.key}' not found in {default_table.name}")
            return UNRESOLVED
        return text

    if isinstance(ref, Cross):
        try:
            table = catalog.get(ref.file)
        except MissingLocalizationFile as e:
            logger.debug(f"Cannot resolve {ref.file}:{ref.key}: {e}")
            return UNRESOLVED
        text = table.get(ref.key)
        if text is None:
            logger.debug(f"String '{ref.key}' not found in {table.name}")
            return UNRESOLVED
        return text

    # definitions do not chain
    logger.debug(f"Unexpected named reference {ref!r} in string position")
    return UNRESOLVED


def resolve(ref: Reference,
            doc: DefinitionDocument,
            default_table: StringTable,
            catalog: LocalizationCatalog) -> str:
    """Resolve any reference, following one level of named definitions."""
    if not isinstance(ref, Named):
        return resolve_string(ref, default_table, catalog)

    definition = doc.find_definition(ref.name)
    if definition is None:
        logger.debug(f"No category or supportedOn definition '{ref.name}' in {doc.path.name}")
        return UNRESOLVED

    return resolve_string(definition.display_name_ref, default_table, catalog)
