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
Command line interface: export, compare, search, serve
"""

import argparse
import logging
import logging.handlers
import sys
from pathlib import Path

from .compare import DEFAULT_KEY, compare_files, write_difference
from .config import SYSLOG_ADDRESS, ExportSettings
from .output import WRITERS
from .records import PolicyExport
from .report_search import search_reports

logger = logging.getLogger('admx-export')


def setup_logging(verbose: bool = False, syslog: bool = False) -> None:
    """Log to stderr, or to syslog/journald for the daemon."""
    handler = None
    formatter = None
    if syslog:
        try:
            handler = logging.handlers.SysLogHandler(address=SYSLOG_ADDRESS)
            formatter = logging.Formatter('admx-export[%(process)d]: %(levelname)s: %(message)s')
        except OSError:
            # Fallback to stdout if syslog is not available
            handler = logging.StreamHandler(sys.stdout)
            formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter('%(levelname)s: %(message)s')

    handler.setFormatter(formatter)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="admx-export",
        description="Resolve ADMX/ADML policy definitions into flat policy records.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    export = sub.add_parser("export", help="Resolve a PolicyDefinitions directory.")
    export.add_argument("path", nargs="?", help="PolicyDefinitions directory (default: from dconf).")
    export.add_argument("-l", "--language", help="Language folder, e.g. en-US (default: from dconf).")
    export.add_argument("-f", "--format", choices=sorted(WRITERS), default="csv", help="Output format.")
    export.add_argument("-o", "--output", type=Path, help="Write to this file instead of stdout.")

    compare = sub.add_parser("compare", help="Rows present in only one of two CSV exports.")
    compare.add_argument("left", type=Path)
    compare.add_argument("right", type=Path)
    compare.add_argument("-k", "--key", default=DEFAULT_KEY, help=f"Key column (default: {DEFAULT_KEY}).")
    compare.add_argument("-o", "--output", type=Path, help="Write to this file instead of stdout.")

    search = sub.add_parser("search", help="List XML reports containing a literal string.")
    search.add_argument("directory", type=Path)
    search.add_argument("text")
    search.add_argument("-i", "--ignore-case", action="store_true")

    serve = sub.add_parser("serve", help="Serve resolved records over DBus.")
    serve.add_argument("--foreground", action="store_true", help="Run the main loop in the foreground.")
    serve.add_argument("path", nargs="?", help="PolicyDefinitions directory (default: from dconf).")
    serve.add_argument("-l", "--language")

    return parser


def _open_output(path: Path | None):
    if path is None:
        return sys.stdout
    path.parent.mkdir(parents=True, exist_ok=True)
    return open(path, "w", newline="", encoding="utf-8")


def cmd_export(args) -> int:
    settings = ExportSettings()
    export = PolicyExport(settings.get_definitions_path(args.path), settings.get_language(args.language))

    out = _open_output(args.output)
    try:
        count = WRITERS[args.format](export.records(), out)
    finally:
        if out is not sys.stdout:
            out.close()

    summary = export.summary
    logger.info("Export completed:")
    logger.info(f"  - Language: {export.language}")
    logger.info(f"  - Definition files: {summary.files}")
    logger.info(f"  - Total policies: {count}")
    logger.info(f"  - Unresolved fields: {summary.unresolved}")
    if summary.skipped_files:
        logger.warning(f"  - Skipped files: {', '.join(summary.skipped_files)}")
    return 0


def cmd_compare(args) -> int:
    fieldnames, only_left, only_right = compare_files(args.left, args.right, args.key)
    out = _open_output(args.output)
    try:
        write_difference(fieldnames, only_left, only_right, out)
    finally:
        if out is not sys.stdout:
            out.close()
    return 0


def cmd_search(args) -> int:
    found = 0
    for report in search_reports(args.directory, args.text, args.ignore_case):
        print(report)
        found += 1
    logger.info(f"{found} reports contain '{args.text}'")
    return 0


def cmd_serve(args) -> int:
    # DBus and GLib are only needed for the service
    from .daemon import ServiceDaemon

    daemon = ServiceDaemon(daemon_mode=not args.foreground,
                           definitions_path=args.path,
                           language=args.language)
    return daemon.run()


COMMANDS = {
    "export": cmd_export,
    "compare": cmd_compare,
    "search": cmd_search,
    "serve": cmd_serve,
}


def main(argv=None) -> int:
    args = build_argument_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, syslog=args.command == "serve")

    try:
        return COMMANDS[args.command](args)
    except RuntimeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
