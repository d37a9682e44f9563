# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Error taxonomy for staged writes. Every error is terminal for its write."""


class AtomicWriteError(Exception):
    """Base class. `cause` holds the underlying OSError, if any."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidRequest(AtomicWriteError):
    """Missing required field or wrong input type."""


class MissingParentDir(AtomicWriteError):
    """Parent (or staging) directory absent and creation not permitted."""


class CrossPartition(AtomicWriteError):
    """Staging directory and target directory live on different devices."""


class InvalidTemplate(AtomicWriteError):
    """Temp name template lacks enough trailing placeholder characters."""


class StageFailed(AtomicWriteError):
    """Could not create or open the temporary file."""


class WriteFailed(AtomicWriteError):
    pass


class SyncFailed(AtomicWriteError):
    pass


class BelowMinSize(AtomicWriteError):
    """Staged content does not exceed min_size."""


class ChecksumMismatch(AtomicWriteError):
    """On-disk digest of the staged file differs from the expected digest."""


class CloseFailed(AtomicWriteError):
    pass


class InvalidMode(AtomicWriteError):
    pass


class ChmodFailed(AtomicWriteError):
    pass


class OwnershipError(AtomicWriteError):
    """Owner spec could not be parsed or applied."""


class UnknownUser(OwnershipError):
    pass


class UnknownGroup(OwnershipError):
    pass


class RenameFailed(AtomicWriteError):
    pass


class Interrupted(AtomicWriteError):
    """A signal discarded the staged file before the write finished."""


__all__ = [
    "AtomicWriteError",
    "BelowMinSize",
    "ChecksumMismatch",
    "ChmodFailed",
    "CloseFailed",
    "CrossPartition",
    "Interrupted",
    "InvalidMode",
    "InvalidRequest",
    "InvalidTemplate",
    "MissingParentDir",
    "OwnershipError",
    "RenameFailed",
    "StageFailed",
    "SyncFailed",
    "UnknownGroup",
    "UnknownUser",
    "WriteFailed",
]
