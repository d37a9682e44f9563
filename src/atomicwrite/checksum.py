# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Pluggable digest used to detect write-path corruption."""

import hashlib
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

CHUNK_SIZE = 64 * 1024


@runtime_checkable
class Digest(Protocol):
    """Incremental hash. hashlib objects satisfy this as-is."""

    def update(self, data: bytes, /) -> None:
        """Feed more bytes."""
        ...

    def hexdigest(self) -> str:
        """Finalize to a lowercase hex string."""
        ...


DigestFactory = Callable[[], Digest]


def sha1() -> Digest:
    """Default digest, matching the SHA-1 hexdigests callers already have."""
    return hashlib.sha1()


def file_hexdigest(path: Path, factory: DigestFactory = sha1) -> str:
    """Re-read `path` from disk in chunks and return its hex digest."""
    digest = factory()
    with path.open("rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            digest.update(chunk)
    return digest.hexdigest()


def normalize(hexdigest: str) -> str:
    return hexdigest.strip().lower()


__all__ = ["Digest", "DigestFactory", "file_hexdigest", "normalize", "sha1"]
