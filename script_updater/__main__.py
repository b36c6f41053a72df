# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
Command-line interface for the script updater.

Examples:
  python -m script_updater check --version 0.1 --interval daily
  python -m script_updater download
  python -m script_updater install
  python -m script_updater clean
"""

import argparse
import asyncio
import sys
from datetime import datetime
from typing import List, Optional

from . import __version__
from .config import load_config, setup_logging
from .errors import UpdaterError
from .schemas import UpdateCheckInterval
from .updater import ScriptUpdater, init_script_updater


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="script_updater",
        description="Check for, download and install script updates",
    )
    parser.add_argument("--config", "-c", help="Path to the YAML config file")
    parser.add_argument("--log-level", help="Override the configured log level")
    parser.add_argument("-V", action="version", version=f"%(prog)s {__version__}")

    commands = parser.add_subparsers(dest="command", required=True)

    check = commands.add_parser("check", help="List versions newer than the running one")
    check.add_argument("--version", dest="current_version", help="Running version (default from config)")
    check.add_argument(
        "--interval",
        choices=[i.value for i in UpdateCheckInterval],
        help="Manifest check interval (default from config)",
    )
    check.add_argument("--url", help="Manifest URL (default from config)")

    download = commands.add_parser("download", help="Download and unpack an update")
    download.add_argument("url", nargs="?", help="Archive URL (default: newest available version)")

    commands.add_parser("install", help="Swap the staged update into place")
    commands.add_parser("clean", help="Remove backup and staging files")
    commands.add_parser("restore", help="Move the backup back into place")
    commands.add_parser("cache", help="Show the cached manifest")
    return parser


async def _run(updater: ScriptUpdater, args: argparse.Namespace) -> int:
    if args.command == "check":
        versions = await updater.check_for_update(args.current_version, args.interval, args.url)
        if not versions:
            print("No newer version available")
        for v in versions:
            print(f"{v.version}\t{v.date}\t{v.url}")
            if v.notes:
                print(f"  {v.notes}")
    elif args.command == "download":
        if args.url:
            files = await updater.download(args.url)
        else:
            latest = await updater.download_latest(await updater.check_for_update())
            print(f"Downloaded version {latest.version}")
            files = await updater.installer.fs.list_tree(updater.staging_dir)
        for path in files:
            print(path)
    elif args.command == "install":
        await updater.install()
        print(f"Installed. Previous version kept at {updater.backup_dir}")
    elif args.command == "clean":
        await updater.cleanup()
        print("Cleaned update files")
    elif args.command == "restore":
        await updater.restore()
        print(f"Restored previous version from {updater.backup_dir}")
    elif args.command == "cache":
        cached = updater.get_cache()
        if cached is None:
            print("No cached update data")
        else:
            checked = datetime.fromtimestamp(cached.last_checked / 1000)
            print(f"Last checked: {checked.isoformat(timespec='seconds')}")
            for v in cached.versions:
                print(f"{v.version}\t{v.date}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = create_parser().parse_args(argv)

    config = load_config(args.config)
    if args.log_level:
        config.logging.level = args.log_level
    setup_logging(config.logging)

    updater = init_script_updater(config)
    try:
        return asyncio.run(_run(updater, args))
    except (UpdaterError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
