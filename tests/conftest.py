# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Shared test configuration."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-stress",
        action="store_true",
        default=False,
        help="Run long-running stress tests.",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    skip_stress = not config.getoption("--run-stress")
    is_root = hasattr(os, "geteuid") and os.geteuid() == 0
    for item in items:
        if skip_stress and "stress" in item.keywords:
            item.add_marker(pytest.mark.skip(reason="needs --run-stress flag"))
        if not is_root and item.get_closest_marker("root") is not None:
            item.add_marker(pytest.mark.skip(reason="needs root"))


def _leftovers(directory: Path, *keep: str) -> list[str]:
    return sorted(p.name for p in directory.iterdir() if p.name not in keep)


@pytest.fixture()
def leftovers() -> Callable[..., list[str]]:
    """Names in a directory other than the given ones, i.e. stray temp files."""
    return _leftovers
