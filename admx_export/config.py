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
Defaults and dconf-backed settings
"""

import logging

logger = logging.getLogger('admx-export')

DEFAULT_DEFINITIONS_PATH = "/usr/share/PolicyDefinitions"
DEFAULT_LANGUAGE = "en-US"

SETTINGS_SCHEMA = "org.altlinux.admxexport"
BUS_NAME = "org.altlinux.admxexport"
OBJECT_PATH = "/org/altlinux/admxexport"
INTERFACE = "org.altlinux.AdmxExport"

SYSLOG_ADDRESS = "/dev/log"


def load_dconf_settings():
    """Return Gio.Settings for our schema, or None if it is not installed."""
    try:
        from gi.repository import Gio
    except ImportError as e:
        logger.debug(f"PyGObject not available, using default settings: {e}")
        return None

    # Gio.Settings.new() aborts the process on an unknown schema
    source = Gio.SettingsSchemaSource.get_default()
    if source is None or source.lookup(SETTINGS_SCHEMA, True) is None:
        logger.debug(f"Settings schema {SETTINGS_SCHEMA} is not installed")
        return None

    try:
        return Gio.Settings.new(SETTINGS_SCHEMA)
    except Exception as e:
        logger.debug(f"Could not load dconf settings: {e}")
        return None


class ExportSettings:
    """Definition path and language: explicit value, then dconf, then default"""

    def __init__(self, settings=None):
        self.settings = settings if settings is not None else load_dconf_settings()

    def _get_string(self, key):
        if not self.settings:
            return None
        try:
            value = self.settings.get_string(key)
        except Exception as e:
            logger.debug(f"Could not read {key} from dconf: {e}")
            return None
        if value:
            logger.info(f"Using {key} from dconf: {value}")
        return value or None

    def get_definitions_path(self, override=None):
        if override:
            return str(override)
        return self._get_string('definitions-path') or DEFAULT_DEFINITIONS_PATH

    def get_language(self, override=None):
        if override:
            return override
        return self._get_string('language') or DEFAULT_LANGUAGE
