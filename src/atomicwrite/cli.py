# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""CLI for atomicwrite: copy stdin (or a file) atomically onto a target."""

import argparse
import contextlib
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import BinaryIO

from rich.console import Console
from rich.markup import escape

from atomicwrite import logging_setup
from atomicwrite.config import Settings, load_settings
from atomicwrite.errors import AtomicWriteError
from atomicwrite.logging import EventLog
from atomicwrite.request import WriteRequest
from atomicwrite.writer import write_file

console = Console(stderr=True)


def _mode(text: str) -> int:
    """Octal permission bits, e.g. 644 or 0o600."""
    try:
        value = int(text, 8)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid octal mode: {text!r}") from None
    if not 0 <= value <= 0o7777:
        raise argparse.ArgumentTypeError(f"mode out of range: {text!r}")
    return value


def _size(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid size: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"size must not be negative: {text!r}")
    return value


def _version() -> str:
    try:
        return version("atomicwrite")
    except PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="atomicwrite",
        description="Atomically replace a file with data from stdin or another file.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    parser.add_argument("target", type=Path, help="File to create or replace")
    parser.add_argument("-i", "--input", default="-",
                        help="Input file (default: '-' for stdin)")
    parser.add_argument("--min-size", type=_size,
                        help="Reject unless more than this many bytes are written")
    parser.add_argument("--checksum", action="store_true",
                        help="Verify the staged file against a digest of the data written")
    parser.add_argument("--expected-checksum", metavar="HEX",
                        help="Verify the staged file against this SHA-1 hexdigest")
    binmode = parser.add_mutually_exclusive_group()
    binmode.add_argument("--binary", dest="binary", action="store_true", default=True,
                         help="Raw binary transfer (default)")
    binmode.add_argument("--text", dest="binary", action="store_false",
                         help="Text mode transfer")
    parser.add_argument("--mode", type=_mode, help="Octal permission bits for the result")
    parser.add_argument("--owner", metavar="USER[:GROUP]",
                        help="Owner to set, as accepted by chown(1)")
    parser.add_argument("--tmpdir", type=Path,
                        help="Staging directory (must be on the target's partition)")
    parser.add_argument("--template", help="Temp name template ending in XXXX")
    parser.add_argument("-p", "--mkpath", action="store_true",
                        help="Create missing parent directories")
    parser.add_argument("--event-log", type=Path, help="Append a JSONL audit record here")
    parser.add_argument("--log-file", type=Path, help="Diagnostic log file")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def request_from_args(
    args: argparse.Namespace,
    source: BinaryIO,
    settings: Settings,
) -> WriteRequest:
    """Map parsed flags (over settings) onto a WriteRequest."""
    return WriteRequest(
        target_path=args.target,
        data_source=source,
        temp_dir=args.tmpdir or settings.temp_dir,
        temp_name_pattern=args.template or settings.template,
        create_parent_dirs=args.mkpath,
        min_size=args.min_size,
        checksum_enabled=args.checksum,
        expected_checksum=args.expected_checksum,
        binary_mode=args.binary,
        file_mode=args.mode,
        owner_spec=args.owner,
    )


def run(argv: list[str] | None = None) -> int:
    """Parse argv, perform one write. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    settings = load_settings()
    logging_setup.configure(
        args.log_file or settings.log_file,
        debug=args.debug or settings.debug,
    )

    event_log_path = args.event_log or settings.event_log
    with contextlib.ExitStack() as stack:
        try:
            if args.input == "-":
                source: BinaryIO = sys.stdin.buffer
            else:
                source = stack.enter_context(Path(args.input).open("rb"))
            log = None
            if event_log_path is not None:
                log = stack.enter_context(
                    EventLog(event_log_path, context={"source": str(args.input)})
                )
        except OSError as exc:
            console.print(f"[red]error:[/red] {escape(str(exc))}")
            return 1
        try:
            write_file(request_from_args(args, source, settings), log=log)
        except AtomicWriteError as exc:
            console.print(f"[red]error:[/red] {escape(str(exc))}", highlight=False)
            return 1
    return 0


def main() -> None:
    sys.exit(run())
