# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Crash-safe filesystem primitives used by the staged writer."""

import os
import tempfile
from pathlib import Path

from atomicwrite.errors import (
    CrossPartition,
    InvalidTemplate,
    MissingParentDir,
    StageFailed,
)

DEFAULT_TEMPLATE = ".tmp.XXXXXXXX"
# Fewer trailing placeholders than this is too little randomness.
MIN_PLACEHOLDERS = 4
PLACEHOLDER = "X"


def full_write(fd: int, data: bytes) -> None:
    """Write all bytes, retrying on short writes."""
    view = memoryview(data)
    while view:
        n = os.write(fd, view)
        view = view[n:]


def fsync_dir(dirpath: Path) -> None:
    """Fsync a directory to make its entries durable."""
    fd = os.open(dirpath, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def ensure_dir(path: Path, *, create: bool) -> None:
    """Make sure `path` is a directory, creating it only when allowed."""
    if path.is_dir():
        return
    if not create:
        raise MissingParentDir(f"directory does not exist: {path}")
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise MissingParentDir(f"could not create directory {path}: {exc}", exc) from exc
    if not path.is_dir():
        raise MissingParentDir(f"could not create directory: {path}")


def _device_id(path: Path) -> int:
    return os.stat(path).st_dev


def check_same_device(target_dir: Path, staging_dir: Path) -> None:
    """Raise CrossPartition unless both directories share a device id."""
    target_dev = _device_id(target_dir)
    staging_dev = _device_id(staging_dir)
    if target_dev != staging_dev:
        msg = (
            f"staging dir {staging_dir} (dev {staging_dev}) and target dir "
            f"{target_dir} (dev {target_dev}) are on different partitions"
        )
        raise CrossPartition(msg)


def template_prefix(template: str) -> str:
    """Validate a temp name template and return its fixed prefix.

    A template is a file name (no directory part) ending in at least
    MIN_PLACEHOLDERS `X` characters, which are replaced with randomness.
    """
    if not template or os.sep in template or (os.altsep and os.altsep in template):
        raise InvalidTemplate(f"invalid temp name template: {template!r}")
    prefix = template.rstrip(PLACEHOLDER)
    if len(template) - len(prefix) < MIN_PLACEHOLDERS:
        msg = (
            f"template {template!r} must end in at least "
            f"{MIN_PLACEHOLDERS} {PLACEHOLDER!r} characters"
        )
        raise InvalidTemplate(msg)
    return prefix


def make_temp(directory: Path, template: str) -> tuple[int, Path]:
    """Exclusively create a uniquely named file in `directory`.

    Returns the open fd and the absolute path. The file is created 0600.
    """
    prefix = template_prefix(template)
    try:
        fd, name = tempfile.mkstemp(prefix=prefix, dir=directory)
    except OSError as exc:
        raise StageFailed(f"unable to create temporary file in {directory}: {exc}", exc) from exc
    return fd, Path(name)
