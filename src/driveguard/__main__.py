"""Command line entry point: ``python -m driveguard``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from driveguard.auth import OAuthClient
from driveguard.config import MonitorConfig
from driveguard.errors import DriveGuardError
from driveguard.logging_config import setup_logging
from driveguard.observers import LoggingObserver
from driveguard.service import DriveGuardService

logger = logging.getLogger("driveguard")


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="driveguard",
        description="Watch a Drive scan folder and quarantine EICAR-like files.",
    )
    parser.add_argument(
        "--authorize",
        action="store_true",
        help="run the OAuth consent flow when no token file exists",
    )
    parser.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    parser.add_argument(
        "--once",
        action="store_true",
        help="run a single poll, wait for launched scans, then exit",
    )
    return parser.parse_args(argv)


async def _run(service: DriveGuardService, once: bool) -> None:
    await service.connect(LoggingObserver())
    if not once:
        await service.run_forever()
        return
    await service.reconciler.tick()
    await service.join_scans()


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        config = MonitorConfig.from_env()
    except DriveGuardError as exc:
        print(f"driveguard: {exc}", file=sys.stderr)
        return 2

    setup_logging(args.log_level or config.log_level)
    logger.info(
        "Scan folder: %s, quarantine folder: %s, sheet: %s",
        config.scan_folder_id,
        config.quarantine_folder_id or "NOT SET",
        config.sheet_id or "NOT SET",
    )

    client = OAuthClient(config.auth_info)
    try:
        if client.load_credentials() is None:
            if not args.authorize:
                logger.error("No OAuth token found; run with --authorize")
                return 1
            client.authorize()
        service = DriveGuardService.from_oauth(config, client)
    except DriveGuardError as exc:
        logger.error("Startup failed: %s", exc)
        return 1

    try:
        asyncio.run(_run(service, args.once))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
