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
ServiceDaemon - resolves policy records once and serves them on the system bus
"""

import signal
import threading
from gi.repository import GLib
import dbus
import dbus.mainloop.glib
import dbus.service
import logging

from .config import BUS_NAME, OBJECT_PATH, ExportSettings
from .datastore import RecordStore
from .service import AdmxExportService

logger = logging.getLogger('admx-export')


def system_bus():
    dbus.mainloop.glib.DBusGMainLoop(set_as_default=True)
    return dbus.SystemBus()


class ServiceDaemon:
    """
    Records are resolved before the bus name is requested, so a
    directory that yields nothing never shows up on the bus.
    """

    def __init__(self, daemon_mode=True, definitions_path=None, language=None,
                 settings=None, bus_factory=system_bus, loop_factory=GLib.MainLoop):
        settings = settings or ExportSettings()
        self.daemon_mode = daemon_mode
        self.definitions_path = settings.get_definitions_path(definitions_path)
        self.language = settings.get_language(language)
        self.bus_factory = bus_factory
        self.loop_factory = loop_factory
        self.data_store = RecordStore()
        self.loop = None
        self.bus = None
        self.service = None
        self.shutdown_event = threading.Event()

    def signal_handler(self, signum, frame):
        logger.info(f"Received signal {signum}, initiating shutdown...")
        self.shutdown_event.set()
        if self.loop:
            self.loop.quit()

    def load_records(self):
        """Resolve the configured directory; False if nothing can be served"""
        try:
            count = self.data_store.load_from_directory(self.definitions_path, self.language)
        except RuntimeError as e:
            logger.error(f"Cannot load policy definitions: {e}")
            return False

        summary = self.data_store.summary
        if count == 0:
            logger.error(f"No policy records resolved from {self.definitions_path} "
                         f"({summary.files} files, {len(summary.skipped_files)} skipped)")
            return False

        logger.info(f"Serving {count} policies from {summary.files} files, "
                    f"{summary.unresolved} unresolved fields")
        if summary.skipped_files:
            logger.warning(f"Skipped malformed files: {', '.join(summary.skipped_files)}")
        return True

    def register_service(self):
        """Request the bus name and export the service object"""
        try:
            self.bus = self.bus_factory()
            bus_name = dbus.service.BusName(BUS_NAME, self.bus)
        except dbus.exceptions.DBusException as e:
            logger.error(f"Failed to acquire {BUS_NAME}: {e}")
            return False

        self.service = AdmxExportService(bus_name, OBJECT_PATH, self.data_store,
                                         self.definitions_path, self.language)
        logger.info(f"DBus service registered as {BUS_NAME}")
        return True

    def run(self):
        logger.info(f"Starting admx-export daemon for {self.definitions_path} ({self.language})")

        if not self.load_records() or not self.register_service():
            return 1

        signal.signal(signal.SIGTERM, self.signal_handler)
        signal.signal(signal.SIGINT, self.signal_handler)
        self.loop = self.loop_factory()

        if self.daemon_mode:
            loop_thread = threading.Thread(target=self.loop.run, daemon=True)
            loop_thread.start()
            self.shutdown_event.wait()
            self.loop.quit()
            loop_thread.join(timeout=5)
        else:
            try:
                self.loop.run()
            except KeyboardInterrupt:
                logger.info("Keyboard interrupt received")
            finally:
                self.loop.quit()

        logger.info("admx-export daemon stopped")
        return 0
