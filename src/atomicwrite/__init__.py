# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Atomic file replacement via a same-partition temp file and rename()."""

from atomicwrite.errors import *  # noqa: F403
from atomicwrite.errors import __all__ as _error_names
from atomicwrite.request import WriteRequest
from atomicwrite.staged import StagedState, StagedStateError
from atomicwrite.writer import AtomicWriter, write_file

__all__ = [
    *_error_names,
    "AtomicWriter",
    "StagedState",
    "StagedStateError",
    "WriteRequest",
    "write_file",
]
