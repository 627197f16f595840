# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Logging helpers for apibase.

Every module logs through `logging.getLogger(__name__)`, so all records live under
the `apibase` logger. The package logger carries a NullHandler; applications opt in
to output with setup_logging() or their own configuration.
"""

from __future__ import annotations

import logging
import os

LOGGER_NAME = "apibase"
DEFAULT_LOG_LEVEL = os.getenv("APIBASE_LOG_LEVEL", "WARNING").upper()

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def setup_logging(level: str | None = None) -> logging.Logger:
    """Attach a stderr handler via basicConfig and set the apibase logger level."""
    effective_level = getattr(logging, (level or DEFAULT_LOG_LEVEL).upper(), logging.WARNING)
    logging.basicConfig(
        level=effective_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(effective_level)
    return package_logger


__all__ = ["LOGGER_NAME", "setup_logging"]
