# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Scoped best-effort cleanup on SIGTERM/SIGINT.

Handlers are installed only for the duration of the `with` block and the
previous handlers are restored on exit. After cleanup the signal is passed
on to whatever handler was there before, so the process still reacts the
way it would have. Python only allows handler changes from the main
thread; elsewhere the hook is a no-op and cleanup falls back to the
writer's normal error paths.
"""

import contextlib
import logging
import os
import signal
import threading
from collections.abc import Callable, Iterator
from types import FrameType
from typing import Any

_log = logging.getLogger(__name__)

CLEANUP_SIGNALS: tuple[signal.Signals, ...] = (signal.SIGTERM, signal.SIGINT)


def _forward(signum: int, frame: FrameType | None, previous: Any) -> None:
    """Deliver the signal to the handler we displaced."""
    if callable(previous):
        previous(signum, frame)
        return
    if signum == signal.SIGINT:
        raise KeyboardInterrupt
    # SIG_DFL (or a handler installed outside Python): re-raise with default.
    signal.signal(signum, signal.SIG_DFL)
    os.kill(os.getpid(), signum)


@contextlib.contextmanager
def cleanup_on_signal(
    cleanup: Callable[[], None],
    signals: tuple[signal.Signals, ...] = CLEANUP_SIGNALS,
) -> Iterator[None]:
    """Run `cleanup` if one of `signals` arrives inside the block."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    previous: dict[int, Any] = {}

    def handler(signum: int, frame: FrameType | None) -> None:
        _log.debug("signal %d during staged write, cleaning up", signum)
        try:
            cleanup()
        finally:
            _forward(signum, frame, previous.get(signum))

    for sig in signals:
        current = signal.getsignal(sig)
        if current is signal.SIG_IGN:
            continue
        previous[sig] = current
        signal.signal(sig, handler)
    try:
        yield
    finally:
        for sig, prev in previous.items():
            signal.signal(sig, prev if prev is not None else signal.SIG_DFL)
