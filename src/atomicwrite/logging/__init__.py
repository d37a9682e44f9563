# SPDX-FileCopyrightText: 2026 atomicwrite authors
#
# SPDX-License-Identifier: Apache-2.0

from atomicwrite.logging.decorator import Loggable, log_method, record_error
from atomicwrite.logging.event_log import EventLog, read_log

__all__ = ["EventLog", "Loggable", "log_method", "read_log", "record_error"]
