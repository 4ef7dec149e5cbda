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
admx-export - resolve ADMX/ADML policy definitions into flat policy records
"""

from .document import Cross, Local, Named, load
from .errors import (
    AdmxExportError,
    MalformedDefinitionFile,
    MissingKeyColumn,
    MissingLocalizationFile,
)
from .records import HEADER, PolicyExport, PolicyRecord, build, build_records_for_dir
from .resolver import UNRESOLVED, resolve
from .strings import LocalizationCatalog, StringTable

__version__ = "0.1.0"
