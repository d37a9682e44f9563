# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""chown(1)-style owner specs: USER[:GROUP] or USER[.GROUP].

Each part is numeric (used as-is) or a name looked up in the system
databases. A missing or empty part maps to UNCHANGED, which os.chown
treats as "leave this id alone".
"""

import grp
import logging
import os
import pwd
from pathlib import Path

from atomicwrite.errors import OwnershipError, UnknownGroup, UnknownUser

_log = logging.getLogger(__name__)

UNCHANGED = -1


def _split(owner_spec: str) -> tuple[str, str | None]:
    """Split on ':' when present, else on the first '.'."""
    for delim in (":", "."):
        if delim in owner_spec:
            user, group = owner_spec.split(delim, 1)
            return user, group
    return owner_spec, None


def _is_numeric(part: str) -> bool:
    return part.isascii() and part.isdigit()


def _resolve_user(name: str) -> int:
    if not name:
        return UNCHANGED
    if _is_numeric(name):
        return int(name)
    try:
        return pwd.getpwnam(name).pw_uid
    except KeyError:
        raise UnknownUser(f"user not in password database: {name!r}") from None


def _resolve_group(name: str | None) -> int:
    # Absent and empty both keep the current group; never fall back to
    # the user's primary group.
    if not name:
        return UNCHANGED
    if _is_numeric(name):
        return int(name)
    try:
        return grp.getgrnam(name).gr_gid
    except KeyError:
        raise UnknownGroup(f"group not in group database: {name!r}") from None


def parse_owner(owner_spec: str) -> tuple[int, int]:
    """Return (uid, gid), either of which may be UNCHANGED."""
    if not isinstance(owner_spec, str) or not owner_spec:
        raise OwnershipError(f"invalid owner data: {owner_spec!r}")
    user, group = _split(owner_spec)
    return _resolve_user(user), _resolve_group(group)


def parse_and_apply(owner_spec: str, path: Path) -> None:
    """Parse `owner_spec` and chown `path` accordingly."""
    uid, gid = parse_owner(owner_spec)
    if uid == UNCHANGED and gid == UNCHANGED:
        return
    try:
        os.chown(path, uid, gid)
    except (OSError, OverflowError) as exc:
        # OverflowError: numeric id outside the platform uid_t/gid_t range.
        raise OwnershipError(f"unable to chown {path} to {owner_spec!r}: {exc}", exc) from exc
    _log.debug("chown %s -> uid=%d gid=%d", path, uid, gid)


__all__ = ["UNCHANGED", "parse_and_apply", "parse_owner"]
