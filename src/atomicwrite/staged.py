# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Staged file data model and state machine."""

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from atomicwrite.checksum import Digest


class StagedState(enum.Enum):
    OPEN = "open"
    COMMITTED = "committed"
    ABORTED = "aborted"


# Valid state transitions. Only OPEN may move.
_TRANSITIONS: dict[StagedState, frozenset[StagedState]] = {
    StagedState.OPEN: frozenset({StagedState.COMMITTED, StagedState.ABORTED}),
    StagedState.COMMITTED: frozenset(),
    StagedState.ABORTED: frozenset(),
}


class StagedStateError(Exception):
    """Raised on use of a staged file outside the OPEN state."""


@dataclass
class StagedFile:
    """One in-flight temp file. Owned by exactly one writer.

    `path` is cleared once the file is renamed into place or unlinked;
    `handle` is cleared once closed. Cleanup never touches a cleared field.
    """

    path: Path | None
    handle: BinaryIO | None
    digest: Digest | None = None
    bytes_written: int = 0
    state: StagedState = field(default=StagedState.OPEN)

    def transition(self, target: StagedState) -> None:
        """Transition to a new state. Raises StagedStateError if invalid."""
        allowed = _TRANSITIONS[self.state]
        if target not in allowed:
            msg = f"{self.state.value} → {target.value}"
            raise StagedStateError(msg)
        self.state = target

    def require_open(self) -> None:
        if self.state is not StagedState.OPEN:
            msg = f"staged file is {self.state.value}"
            raise StagedStateError(msg)
