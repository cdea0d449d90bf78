#!/usr/bin/env python3
# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Logging setup shared by the command line and the file notifier."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional, Tuple

DEFAULT_FORMATTER = logging.Formatter(
    "[%(asctime)s] - [%(levelname)s] - [%(name)s] - %(message)s"
)


def init_logger(
    logger_name: str,
    log_file: Optional[str],
    *,
    log_formatter: Optional[logging.Formatter] = DEFAULT_FORMATTER,
    log_level: int = logging.INFO,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 2,
    propagate: bool = True,
) -> Tuple[logging.Logger, logging.Handler]:
    """Attach a handler to the named logger: a rotating file at `log_file`, or
    stdout if `log_file` is `None`. The caller owns the returned handler and
    should remove and close it when done.
    """
    handler: logging.Handler
    if log_file is None:
        handler = logging.StreamHandler(sys.stdout)
    else:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handler = RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count
        )
    if log_formatter is not None:
        handler.setFormatter(log_formatter)

    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)
    logger.propagate = propagate
    logger.addHandler(handler)
    return logger, handler
