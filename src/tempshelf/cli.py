# Filename: cli.py
# Author: Rich Lewis @RichLewis007
# Description: Command-line interface utilities for Temp Shelf. Provides tools for comparing
#              files, locating copies, and running verified deletion outside the shelf UI.

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication, QTimer

from .services import config as config_service
from .services import logger as logger_service
from .services.comparator import same_content
from .services.copy_locator import (
    CandidateSearch,
    CopyLocator,
    ScanCopyLocator,
    StaticCopyLocator,
    default_copy_locator,
)
from .services.drag_policy import qt_scheduler
from .services.formatting import format_bytes, format_count
from .services.verification import VerificationResult, VerifiedDeletionEngine

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    # Create and configure the command-line argument parser.
    parser = argparse.ArgumentParser(
        prog="tempshelf",
        description="Verify dragged-out copies and trash the originals.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console log level (default: DEBUG when enabled in settings, else WARNING).",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for the rotating log file (default: per-user log folder).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compare = subparsers.add_parser(
        "compare",
        help="Check whether two files hold the same content.",
    )
    compare.add_argument("first", type=Path)
    compare.add_argument("second", type=Path)

    find = subparsers.add_parser("find", help="List files sharing a file's name.")
    find.add_argument("path", type=Path)
    find.add_argument("--timeout", type=float, default=None, help="Seconds to wait for a copy.")

    verify = subparsers.add_parser(
        "verify",
        help="Trash each file once a content-identical copy is found elsewhere.",
    )
    verify.add_argument("paths", type=Path, nargs="+")
    verify.add_argument(
        "--grace-delay",
        type=float,
        default=None,
        help="Seconds to wait before looking for copies.",
    )
    verify.add_argument("--timeout", type=float, default=None, help="Seconds to wait for a copy.")
    verify.add_argument(
        "--candidate",
        type=Path,
        action="append",
        default=None,
        help="Compare against this path instead of searching (repeatable).",
    )
    return parser


def _ensure_qcoreapp() -> QCoreApplication:
    # Return the active Qt application, creating a headless one if needed.
    existing = QCoreApplication.instance()
    if existing is not None:
        return existing
    app = QCoreApplication(sys.argv[:1])
    app.setApplicationName(config_service.APP_NAME)
    app.setOrganizationName(config_service.ORG_NAME)
    return app


def _shutdown_locator(locator: CopyLocator) -> None:
    # Scan threads must exit before the interpreter tears down their Qt objects.
    if isinstance(locator, ScanCopyLocator):
        locator.shutdown(wait=True)


def _run_compare(args: argparse.Namespace) -> int:
    first = args.first.expanduser()
    second = args.second.expanduser()
    if same_content(first, second):
        print(f"same\t{format_bytes(first.stat().st_size)}")
        return 0
    print("different")
    return 1


def _run_find(args: argparse.Namespace, store: config_service.SettingsStore) -> int:
    source = args.path.expanduser().resolve()
    timeout = args.timeout if args.timeout is not None else store.load_query_timeout()
    app = _ensure_qcoreapp()
    locator = default_copy_locator(
        poll_interval=store.load_poll_interval(),
        scan_roots=store.load_scan_roots() or None,
    )

    def on_candidates(candidates: list[Path]) -> None:
        for candidate in candidates:
            marker = "*" if candidate == source else " "
            print(f"{marker} {candidate}")
        print(f"Found {format_count(len(candidates), 'path')} named {source.name}")
        app.exit(0 if candidates else 1)

    # The running search must stay referenced until the event loop exits.
    searches: list[CandidateSearch | None] = []
    QTimer.singleShot(
        0, lambda: searches.append(locator.find_candidates(source, timeout, on_candidates))
    )
    try:
        return app.exec()
    finally:
        _shutdown_locator(locator)


def _run_verify(
    args: argparse.Namespace,
    store: config_service.SettingsStore,
    parser: argparse.ArgumentParser,
) -> int:
    sources = [path.expanduser().resolve() for path in args.paths]
    missing = [path for path in sources if not path.exists()]
    if missing:
        parser.error(f"Path does not exist: {missing[0]}")

    settings = store.load_verification_settings()
    grace_delay = args.grace_delay if args.grace_delay is not None else settings.grace_delay
    timeout = args.timeout if args.timeout is not None else settings.query_timeout

    app = _ensure_qcoreapp()
    locator: CopyLocator
    if args.candidate:
        locator = StaticCopyLocator([path.expanduser().resolve() for path in args.candidate])
    else:
        locator = default_copy_locator(
            poll_interval=settings.poll_interval,
            scan_roots=store.load_scan_roots() or None,
        )
    engine = VerifiedDeletionEngine(locator, timeout=timeout)
    kept: list[Path] = []

    def on_verified(result: VerificationResult) -> None:
        if result.trashed:
            print(f"trashed\t{result.source}\t(copy at {result.matched})")
        else:
            kept.append(result.source)
            print(f"kept\t{result.source}")

    engine.verified.connect(on_verified)
    engine.idle.connect(lambda: app.exit(1 if kept else 0))
    qt_scheduler(grace_delay, lambda: engine.verify_and_delete(sources))
    try:
        return app.exec()
    finally:
        engine.shutdown(wait=True)
        _shutdown_locator(locator)


def main(argv: list[str] | None = None) -> int:
    # Entry point for the CLI utility.
    parser = build_parser()
    args = parser.parse_args(argv)

    store = config_service.SettingsStore()
    log_path = logger_service.configure(
        log_level=args.log_level,
        log_dir=args.log_dir,
        debug=store.load_debug_log_level(),
    )
    logger.debug("Logging to %s; argv=%s", log_path, argv)

    if args.command == "compare":
        return _run_compare(args)
    if args.command == "find":
        return _run_find(args, store)
    return _run_verify(args, store, parser)


if __name__ == "__main__":
    raise SystemExit(main())
