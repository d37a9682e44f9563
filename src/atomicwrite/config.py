# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

"""Defaults for the command line, overridable from the environment.

  ATOMICWRITE_TEMPLATE   temp file name template (must end in XXXX)
  ATOMICWRITE_TMPDIR     staging directory
  ATOMICWRITE_DEBUG      "true"/"1" enables debug logging
  ATOMICWRITE_LOG_FILE   rotating diagnostic log file
  ATOMICWRITE_EVENT_LOG  JSONL audit log of commits/aborts

Command line flags take precedence over all of these.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from atomicwrite.errors import InvalidTemplate
from atomicwrite.persistence import DEFAULT_TEMPLATE, template_prefix

_log = logging.getLogger(__name__)

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


@dataclass
class Settings:
    template: str = DEFAULT_TEMPLATE
    temp_dir: Path | None = None
    debug: bool = False
    log_file: Path | None = None
    event_log: Path | None = None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from defaults plus environment overrides."""
    env = os.environ if environ is None else environ
    settings = Settings()

    template = env.get("ATOMICWRITE_TEMPLATE")
    if template:
        try:
            template_prefix(template)
        except InvalidTemplate:
            _log.warning("Invalid ATOMICWRITE_TEMPLATE value %r; ignoring", template)
        else:
            settings.template = template

    debug = env.get("ATOMICWRITE_DEBUG")
    if debug is not None:
        value = debug.strip().lower()
        if value in _TRUE:
            settings.debug = True
        elif value not in _FALSE:
            _log.warning("Invalid ATOMICWRITE_DEBUG value %r; ignoring", debug)

    for attr, env_var in (
        ("temp_dir", "ATOMICWRITE_TMPDIR"),
        ("log_file", "ATOMICWRITE_LOG_FILE"),
        ("event_log", "ATOMICWRITE_EVENT_LOG"),
    ):
        val = env.get(env_var)
        if val:
            setattr(settings, attr, Path(val).expanduser())

    return settings
