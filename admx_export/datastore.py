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
RecordStore - Storage for resolved policy records loaded from directory
"""

import threading
import logging

from .output import record_to_dict
from .records import HEADER, PolicyExport

logger = logging.getLogger('admx-export')


def record_path(record):
    """Store path of a record: <Class>/<ParentCategory>/<Name>"""
    parts = (record.policy_class, record.parent_category, record.name)
    return '/'.join(p.replace('/', '\\') or '-' for p in parts)


class RecordStore:
    """Storage for resolved policy records loaded from directory"""

    def __init__(self):
        self.data = {}
        self.summary = None
        self.lock = threading.RLock()

    def load_from_directory(self, directory_path, language):
        """Resolve policy definitions from directory and replace the stored records"""
        logger.info(f"Loading policy records from {directory_path} ({language})")
        export = PolicyExport(directory_path, language)

        data = {}
        for record in export.records():
            path = record_path(record)
            if path in data:
                suffix = 2
                while f"{path}_{suffix}" in data:
                    suffix += 1
                path = f"{path}_{suffix}"
            data[path] = record_to_dict(record)

        with self.lock:
            self.data = data
            self.summary = export.summary

        logger.info(f"Loaded {len(data)} policy records")
        return len(data)

    def get(self, path):
        """Get record by path"""
        with self.lock:
            return self.data.get(path)

    def list_children(self, parent_path):
        """List children under parent path"""
        with self.lock:
            children = []
            prefix = parent_path.strip('/')
            prefix = prefix + '/' if prefix else ''
            for key in self.data.keys():
                if key.startswith(prefix):
                    child = key[len(prefix):].split('/')[0]
                    if child not in children:
                        children.append(child)
            return children

    def find(self, pattern, field=''):
        """Paths of records whose field (any field if empty) contains pattern"""
        if field and field not in HEADER:
            raise ValueError(f"Unknown field '{field}', expected one of: {', '.join(HEADER)}")

        needle = pattern.casefold()
        with self.lock:
            results = []
            for path, record in self.data.items():
                values = [record[field]] if field else record.values()
                if any(needle in (v or '').casefold() for v in values):
                    results.append(path)
            return results
