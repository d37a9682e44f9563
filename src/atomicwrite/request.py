# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Write request model, validation and directory resolution."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import IO

from atomicwrite.checksum import DigestFactory, sha1
from atomicwrite.errors import InvalidRequest
from atomicwrite.persistence import (
    DEFAULT_TEMPLATE,
    check_same_device,
    ensure_dir,
)

# In-memory buffer or a readable stream producing bytes (or str in text mode).
DataSource = bytes | bytearray | memoryview | str | IO[bytes] | IO[str]


@dataclass(frozen=True)
class WriteRequest:
    """Everything one staged write needs. Immutable for its duration."""

    target_path: str | os.PathLike[str]
    data_source: DataSource | None = None
    temp_dir: str | os.PathLike[str] | None = None
    temp_name_pattern: str = DEFAULT_TEMPLATE
    create_parent_dirs: bool = False
    min_size: int | None = None
    checksum_enabled: bool = False
    expected_checksum: str | None = None
    binary_mode: bool = False
    file_mode: int | None = None
    owner_spec: str | None = None
    encoding: str = "utf-8"
    digest_factory: DigestFactory = sha1

    @property
    def target(self) -> Path:
        return Path(self.target_path)

    @property
    def verify_checksum(self) -> bool:
        """A caller-supplied digest implies validation."""
        return self.checksum_enabled or self.expected_checksum is not None

    def validate(self, *, require_source: bool) -> None:
        """Raise InvalidRequest for missing fields or unusable values."""
        if self.target_path is None or str(self.target_path) == "":
            raise InvalidRequest("missing target path")
        if require_source:
            if self.data_source is None:
                raise InvalidRequest("missing data source")
            _check_source(self.data_source, binary=self.binary_mode)
        elif self.data_source is not None:
            raise InvalidRequest("data source is only accepted by write_file")
        if self.min_size is not None and (
            isinstance(self.min_size, bool)
            or not isinstance(self.min_size, int)
            or self.min_size < 0
        ):
            raise InvalidRequest(f"invalid min_size: {self.min_size!r}")
        if self.expected_checksum is not None and not isinstance(
            self.expected_checksum, str
        ):
            raise InvalidRequest("expected checksum must be a hex string")

    def resolve_dirs(self) -> tuple[Path, Path]:
        """Return (target_dir, staging_dir), creating them if permitted.

        Raises MissingParentDir or CrossPartition.
        """
        target_dir = self.target.parent
        ensure_dir(target_dir, create=self.create_parent_dirs)
        if self.temp_dir is None:
            return target_dir, target_dir
        staging_dir = Path(self.temp_dir)
        if staging_dir.resolve() == target_dir.resolve():
            return target_dir, target_dir
        ensure_dir(staging_dir, create=self.create_parent_dirs)
        check_same_device(target_dir, staging_dir)
        return target_dir, staging_dir


def _check_source(source: object, *, binary: bool) -> None:
    if isinstance(source, bytes | bytearray | memoryview):
        return
    if isinstance(source, str):
        if binary:
            raise InvalidRequest("binary mode requires bytes input, got str")
        return
    if callable(getattr(source, "read", None)):
        return
    raise InvalidRequest(f"invalid type for data source: {type(source).__name__}")
