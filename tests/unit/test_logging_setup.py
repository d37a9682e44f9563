# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Tests for process logging configuration."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from atomicwrite import logging_setup


@pytest.fixture(autouse=True)
def pristine_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger("atomicwrite")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    logger.handlers.clear()
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


def test_stderr_only(pristine_logger: logging.Logger) -> None:
    logging_setup.configure()
    assert len(pristine_logger.handlers) == 1
    assert pristine_logger.handlers[0].level == logging.WARNING
    assert pristine_logger.propagate is False


def test_file_handler(tmp_path: Path, pristine_logger: logging.Logger) -> None:
    log_file = tmp_path / "logs" / "aw.log"
    logging_setup.configure(log_file, debug=True)
    logging.getLogger("atomicwrite.writer").debug("hello file")
    for h in pristine_logger.handlers:
        h.flush()
    assert "hello file" in log_file.read_text()
    assert pristine_logger.level == logging.DEBUG
    for h in pristine_logger.handlers:
        h.close()


def test_idempotent(pristine_logger: logging.Logger) -> None:
    logging_setup.configure()
    logging_setup.configure()
    assert len(pristine_logger.handlers) == 1
    logging_setup.configure(reconfigure=True, debug=True)
    assert len(pristine_logger.handlers) == 1
    assert pristine_logger.handlers[0].level == logging.DEBUG
