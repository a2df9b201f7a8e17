# SPDX-FileCopyrightText: 2026 Burnbox authors
#
# SPDX-License-Identifier: Apache-2.0

from burnbox.logging.decorator import Loggable, log_method
from burnbox.logging.event_log import EventLog, read_log

__all__ = ["EventLog", "Loggable", "log_method", "read_log"]
