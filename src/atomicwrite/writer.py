# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Atomic writer: stage to a temp file, validate, then rename into place.

Readers of the target see either the old or the new content, never a mix.
Every failure after the temp file exists closes and unlinks it before the
error propagates; the target is only ever touched by the final rename.

Concurrent writers to the same target are not coordinated: each stages its
own temp file and the last rename wins. Writers for different targets share
nothing.
"""

import contextlib
import logging
import os
from collections.abc import Iterator
from pathlib import Path
from types import TracebackType
from typing import Any, BinaryIO

from atomicwrite.checksum import CHUNK_SIZE, file_hexdigest, normalize
from atomicwrite.errors import (
    BelowMinSize,
    ChecksumMismatch,
    ChmodFailed,
    CloseFailed,
    Interrupted,
    InvalidMode,
    InvalidRequest,
    RenameFailed,
    StageFailed,
    SyncFailed,
    WriteFailed,
)
from atomicwrite.logging import EventLog, log_method, record_error
from atomicwrite.ownership import parse_and_apply
from atomicwrite.persistence import fsync_dir, make_temp
from atomicwrite.request import DataSource, WriteRequest
from atomicwrite.signals import cleanup_on_signal
from atomicwrite.staged import StagedFile, StagedState, StagedStateError

_log = logging.getLogger(__name__)

_MAX_MODE = 0o7777


class AtomicWriter:
    """One staged write: OPEN until commit() renames or abort() discards.

    Use as a context manager to commit on normal exit, abort on exception,
    and clean up on SIGTERM/SIGINT while the block runs. Dropping an OPEN
    writer aborts it.
    """

    def __init__(self, request: WriteRequest, *, log: EventLog | None = None) -> None:
        request.validate(require_source=False)
        self._setup(request, log)

    @classmethod
    def _for_source(cls, request: WriteRequest, log: EventLog | None) -> "AtomicWriter":
        writer = cls.__new__(cls)
        writer._setup(request, log)
        return writer

    def _setup(self, request: WriteRequest, log: EventLog | None) -> None:
        self._request = request
        self._log = log
        self._log_context = {"target": str(request.target)}
        self._expected = request.expected_checksum
        self._verify = request.verify_checksum
        self._signal_scope: contextlib.ExitStack | None = None
        self._interrupted = False

        _, staging_dir = request.resolve_dirs()
        fd, path = make_temp(staging_dir, request.temp_name_pattern)
        try:
            handle: BinaryIO = os.fdopen(fd, "wb")
        except OSError as exc:
            os.close(fd)
            with contextlib.suppress(FileNotFoundError):
                path.unlink()
            raise StageFailed(f"unable to obtain temporary file handle: {exc}", exc) from exc

        digest = None
        if self._verify and self._expected is None:
            digest = request.digest_factory()
        self._staged = StagedFile(path=path, handle=handle, digest=digest)
        _log.debug("staged %s for %s", path, request.target)

    # -- Introspection ----------------------------------------------------

    @property
    def target(self) -> Path:
        return self._request.target

    @property
    def state(self) -> StagedState:
        return self._staged.state

    @property
    def temp_path(self) -> Path | None:
        """Temp file name while OPEN; None once renamed or discarded."""
        return self._staged.path

    @property
    def handle(self) -> BinaryIO:
        """Raw binary handle. Bytes written here bypass the running digest."""
        self._staged.require_open()
        assert self._staged.handle is not None
        return self._staged.handle

    @property
    def bytes_written(self) -> int:
        """Bytes passed through write() so far."""
        return self._staged.bytes_written

    # -- Writing ----------------------------------------------------------

    def write(self, data: bytes | bytearray | memoryview | str) -> int:
        """Append data to the temp file. Any failure aborts the write."""
        with self._rollback("write"):
            self._check_open()
            chunk = self._encode(data)
            self._write_chunk(chunk)
        return len(chunk)

    def write_from(self, source: DataSource) -> int:
        """Copy a buffer or drain a readable stream into the temp file."""
        if isinstance(source, bytes | bytearray | memoryview | str):
            return self.write(source)
        total = 0
        while True:
            with self._rollback("write_from"):
                self._check_open()
                try:
                    chunk = source.read(CHUNK_SIZE)
                except OSError as exc:
                    raise WriteFailed(f"error reading input: {exc}", exc) from exc
            if not chunk:
                return total
            total += self.write(chunk)

    def set_checksum(self, hexdigest: str) -> "AtomicWriter":
        """Verify the staged file against `hexdigest` at commit time."""
        self._check_open()
        if not isinstance(hexdigest, str):
            raise InvalidRequest("expected checksum must be a hex string")
        self._expected = hexdigest
        self._verify = True
        return self

    def _encode(self, data: Any) -> bytes:
        if isinstance(data, bytes | bytearray | memoryview):
            return bytes(data)
        if isinstance(data, str):
            if self._request.binary_mode:
                raise InvalidRequest("binary mode requires bytes input, got str")
            if os.linesep != "\n":
                data = data.replace("\n", os.linesep)
            return data.encode(self._request.encoding)
        raise InvalidRequest(f"cannot write {type(data).__name__} to staged file")

    def _write_chunk(self, chunk: bytes) -> None:
        staged = self._staged
        assert staged.handle is not None
        try:
            staged.handle.write(chunk)
        except OSError as exc:
            raise WriteFailed(f"error writing to temporary file: {exc}", exc) from exc
        if staged.digest is not None:
            staged.digest.update(chunk)
        staged.bytes_written += len(chunk)

    # -- Finalization -----------------------------------------------------

    @log_method(after=True)
    def commit(self) -> None:
        """Sync, validate, close, apply mode/owner, rename. All or nothing."""
        steps = (
            self._sync,
            self._check_min_size,
            self._check_checksum,
            self._close,
            self._apply_mode,
            self._apply_owner,
            self._rename,
        )
        with self._rollback():
            for step in steps:
                self._check_open()
                step()
            self._check_open()
            self._staged.transition(StagedState.COMMITTED)
        _log.debug("committed %s", self.target)

    @log_method(after=True)
    def abort(self) -> None:
        """Discard the temp file. The target is left untouched."""
        if self._interrupted:
            return
        self._staged.require_open()
        self._discard()

    def _sync(self) -> None:
        handle = self._staged.handle
        assert handle is not None
        try:
            handle.flush()
            fsync = getattr(os, "fsync", None)
            if fsync is not None:
                fsync(handle.fileno())
        except OSError as exc:
            raise SyncFailed(f"unable to sync temporary file: {exc}", exc) from exc

    def _check_min_size(self) -> None:
        min_size = self._request.min_size
        if min_size is None:
            return
        handle = self._staged.handle
        assert handle is not None
        # On-disk size, so bytes written through `handle` count too.
        try:
            size = os.fstat(handle.fileno()).st_size
        except OSError as exc:
            raise BelowMinSize(f"unable to stat temporary file: {exc}", exc) from exc
        if size <= min_size:
            msg = f"bytes written ({size}) failed to exceed min_size ({min_size})"
            raise BelowMinSize(msg)

    def _check_checksum(self) -> None:
        if not self._verify:
            return
        staged = self._staged
        if self._expected is not None:
            expected = self._expected
        else:
            assert staged.digest is not None
            expected = staged.digest.hexdigest()
        assert staged.path is not None
        try:
            on_disk = file_hexdigest(staged.path, self._request.digest_factory)
        except OSError as exc:
            raise ChecksumMismatch(f"unable to re-read temporary file: {exc}", exc) from exc
        if normalize(on_disk) != normalize(expected):
            msg = f"temporary file digest {on_disk} does not match {expected}"
            raise ChecksumMismatch(msg)

    def _close(self) -> None:
        staged = self._staged
        handle, staged.handle = staged.handle, None
        assert handle is not None
        try:
            handle.close()
        except OSError as exc:
            raise CloseFailed(f"problem closing temporary file: {exc}", exc) from exc

    def _apply_mode(self) -> None:
        mode = self._request.file_mode
        if mode is None:
            return
        if isinstance(mode, bool) or not isinstance(mode, int) or not 0 <= mode <= _MAX_MODE:
            raise InvalidMode(f"invalid mode data: {mode!r}")
        assert self._staged.path is not None
        try:
            os.chmod(self._staged.path, mode)
        except OSError as exc:
            raise ChmodFailed(f"unable to chmod temporary file: {exc}", exc) from exc

    def _apply_owner(self) -> None:
        owner = self._request.owner_spec
        if owner is None:
            return
        assert self._staged.path is not None
        parse_and_apply(owner, self._staged.path)

    def _rename(self) -> None:
        staged = self._staged
        assert staged.path is not None
        try:
            os.replace(staged.path, self.target)
        except OSError as exc:
            raise RenameFailed(f"unable to rename file: {exc}", exc) from exc
        # The inode is the target now; cleanup must not reference it.
        staged.path = None
        try:
            fsync_dir(self.target.parent)
        except OSError as exc:
            _log.debug("directory fsync unsupported for %s: %s", self.target.parent, exc)

    # -- Cleanup ----------------------------------------------------------

    def _discard(self) -> None:
        """Close and unlink whatever is left. Idempotent, never raises OSError."""
        staged = self._staged
        if staged.handle is not None:
            handle, staged.handle = staged.handle, None
            try:
                handle.close()
            except OSError as exc:
                _log.warning("cleanup: could not close temp handle: %s", exc)
        if staged.path is not None:
            path, staged.path = staged.path, None
            try:
                path.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                _log.warning("cleanup: could not remove %s: %s", path, exc)
        if staged.state is StagedState.OPEN:
            staged.transition(StagedState.ABORTED)
            _log.debug("aborted staged write for %s", self.target)

    def _check_open(self) -> None:
        if self._interrupted:
            raise Interrupted(f"write to {self.target} interrupted by a signal")
        self._staged.require_open()

    @contextlib.contextmanager
    def _rollback(self, event: str | None = None) -> Iterator[None]:
        """Discard the temp file if the block raises.

        Once a signal has discarded the file, whatever the block trips over
        next is reported as Interrupted. With `event`, the failure is
        recorded as `<event>.error`.
        """
        try:
            yield
        except StagedStateError:
            raise
        except Exception as exc:
            self._discard()
            if self._interrupted and not isinstance(exc, Interrupted):
                interrupted = Interrupted(f"write to {self.target} interrupted by a signal", exc)
                if event is not None:
                    record_error(self, event, interrupted)
                raise interrupted from exc
            if event is not None:
                record_error(self, event, exc)
            raise
        except BaseException:
            self._discard()
            raise

    def _on_signal(self) -> None:
        if self._staged.state is StagedState.OPEN:
            self._interrupted = True
        self._discard()

    def __enter__(self) -> "AtomicWriter":
        self._staged.require_open()
        scope = contextlib.ExitStack()
        scope.enter_context(cleanup_on_signal(self._on_signal))
        self._signal_scope = scope
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is None:
                # An interrupted writer is no longer OPEN; commit reports it.
                if self._staged.state is StagedState.OPEN or self._interrupted:
                    self.commit()
            elif self._staged.state is StagedState.OPEN:
                self.abort()
        finally:
            if self._signal_scope is not None:
                self._signal_scope.close()
                self._signal_scope = None

    def __del__(self) -> None:
        staged = getattr(self, "_staged", None)
        if staged is not None and staged.state is StagedState.OPEN:
            self._discard()


def write_file(request: WriteRequest, *, log: EventLog | None = None) -> None:
    """Write `request.data_source` to `request.target_path` atomically.

    Raises an AtomicWriteError subclass on failure, after removing the temp
    file. The target is unchanged unless the call returns normally.
    """
    request.validate(require_source=True)
    assert request.data_source is not None
    with AtomicWriter._for_source(request, log) as writer:
        writer.write_from(request.data_source)


__all__ = ["AtomicWriter", "StagedStateError", "write_file"]
