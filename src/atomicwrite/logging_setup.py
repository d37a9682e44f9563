# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Process logging configuration for the command line entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path

_PACKAGE = "atomicwrite"
_LOG_BYTES = 1 * 1024 * 1024  # 1 MiB per file
_LOG_BACKUPS = 3


def configure(
    log_file: Path | None = None,
    *,
    debug: bool = False,
    reconfigure: bool = False,
) -> None:
    """Attach handlers to the atomicwrite package logger.

    Idempotent unless *reconfigure* is True. Library users who never call
    this get whatever their own logging configuration says.
    """
    pkg_logger = logging.getLogger(_PACKAGE)
    if pkg_logger.handlers and not reconfigure:
        return
    if reconfigure:
        pkg_logger.handlers.clear()

    pkg_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=_LOG_BYTES,
                backupCount=_LOG_BACKUPS,
                encoding="utf-8",
            )
            fh.setLevel(logging.DEBUG)
            fh.setFormatter(
                logging.Formatter(
                    "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            pkg_logger.addHandler(fh)
        except OSError as exc:
            print(
                f"atomicwrite: WARNING: could not open log file {log_file}: {exc}",
                file=sys.stderr,
            )

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(logging.DEBUG if debug else logging.WARNING)
    sh.setFormatter(logging.Formatter("atomicwrite: %(message)s"))
    pkg_logger.addHandler(sh)

    pkg_logger.propagate = False
