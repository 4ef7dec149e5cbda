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
AdmxExportService - DBus service exposing resolved policy records
"""

import dbus
import dbus.service
import logging
import json

from .config import INTERFACE, OBJECT_PATH

logger = logging.getLogger('admx-export')


def to_variant(value):
    """JSON string for complex values, plain value otherwise"""
    if value is None:
        return ""
    if isinstance(value, (dict, list, tuple, set)):
        return json.dumps(value, default=str, ensure_ascii=False)
    elif isinstance(value, (int, float, bool)):
        return value
    else:
        return str(value)


class AdmxExportService(dbus.service.Object):
    """
    DBus service for browsing resolved ADMX policy records
    Records are addressed as <Class>/<ParentCategory>/<Name>
    """

    def __init__(self, bus_name, object_path, data_store, definitions_path, language):
        super().__init__(bus_name, object_path)
        self.data_store = data_store
        self.definitions_path = definitions_path
        self.language = language
        logger.info(f"AdmxExportService initialized at {object_path}")

    @dbus.service.method(dbus_interface='org.freedesktop.DBus.Introspectable',
                         out_signature='s',
                         connection_keyword='connection')
    def Introspect(self, connection=None):
        """
        Provide introspection data for DBus clients
        """
        return f"""<!DOCTYPE node PUBLIC "-//freedesktop//DTD D-BUS Object Introspection 1.0//EN"
                "http://www.freedesktop.org/standards/dbus/1.0/introspect.dtd">
                <node name="{OBJECT_PATH}">
                <interface name="{INTERFACE}">
                    <method name="get">
                    <arg name="path" direction="in" type="s"/>
                    <arg name="value" direction="out" type="v"/>
                    </method>
                    <method name="list_children">
                    <arg name="parent_path" direction="in" type="s"/>
                    <arg name="children" direction="out" type="v"/>
                    </method>
                    <method name="find">
                    <arg name="search_pattern" direction="in" type="s"/>
                    <arg name="field" direction="in" type="s"/>
                    <arg name="results" direction="out" type="v"/>
                    </method>
                    <method name="reload">
                    <arg name="success" direction="out" type="b"/>
                    </method>
                </interface>
                <interface name="org.freedesktop.DBus.Introspectable">
                    <method name="Introspect">
                    <arg name="data" direction="out" type="s"/>
                    </method>
                </interface>
                </node>"""

    @dbus.service.method(INTERFACE, in_signature='s', out_signature='v')
    def get(self, path):
        """
        Get a resolved policy record
        Args:
            path: <Class>/<ParentCategory>/<Name>
        Returns:
            Record as JSON string, empty string if not found
        """
        logger.info(f"get method called with path: {path}")
        return to_variant(self.data_store.get(path))

    @dbus.service.method(INTERFACE, in_signature='s', out_signature='v')
    def list_children(self, parent_path):
        """
        List child path segments under a parent path
        Returns:
            JSON array of segment names
        """
        logger.info(f"list_children method called with parent_path: {parent_path}")
        return to_variant(self.data_store.list_children(parent_path))

    @dbus.service.method(INTERFACE, in_signature='ss', out_signature='v')
    def find(self, search_pattern, field):
        """
        Find records whose field contains search_pattern (case-insensitive)
        Args:
            search_pattern: Text to search for
            field: Column name (e.g. DisplayName), empty string for any column
        Returns:
            JSON array of matching record paths
        """
        logger.info(f"find method called with pattern: {search_pattern}, field: {field}")
        try:
            results = self.data_store.find(search_pattern, field)
        except ValueError as e:
            raise dbus.exceptions.DBusException(str(e), name=f"{INTERFACE}.InvalidArgs")
        return to_variant(results)

    @dbus.service.method(INTERFACE, out_signature='b')
    def reload(self):
        """
        Re-resolve all policy definitions from the configured directory
        Returns:
            True if successful
        """
        logger.info("Manual reload requested")
        try:
            count = self.data_store.load_from_directory(self.definitions_path, self.language)
        except RuntimeError as e:
            logger.error(f"Reload failed: {e}")
            return False

        summary = self.data_store.summary
        logger.info(f"Reloaded {count} policies from {summary.files} files, "
                    f"{summary.unresolved} unresolved fields, "
                    f"{len(summary.skipped_files)} skipped")
        return True
