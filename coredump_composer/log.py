################################################################################
# Copyright (c) 2022,2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import logging
import sys

from .common.constants import LOG

LOG_FORMAT = '%(asctime)s %(levelname)s %(threadName)s %(message)s'
LOG_DATE_FORMAT = '%FT%T'


def setup_logging(level, log_file):
    """Attach the composer handler to LOG.

    The kernel starts the composer without a terminal, so the log file is
    the only place where failures can be diagnosed. When the file can't be
    opened the messages go to stderr instead.

    Parameters
    ----------
    level : str
        Name of the log level (e.g. "INFO")
    log_file : str
        Path of the log file

    Returns
    -------
    str
        Where the log is being written
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    location = log_file
    fallback_reason = None
    try:
        handler = logging.FileHandler(log_file)
    except OSError as e:
        handler = logging.StreamHandler(stream=sys.stderr)
        location = "<stderr>"
        fallback_reason = e
    handler.setFormatter(formatter)

    for old_handler in list(LOG.handlers):
        LOG.removeHandler(old_handler)
        old_handler.close()
    LOG.addHandler(handler)
    LOG.setLevel(level)
    LOG.propagate = False

    if fallback_reason is not None:
        LOG.error(f"Failed to open log file {log_file}: {fallback_reason}")
    return location


def flush_logging():
    for handler in LOG.handlers:
        handler.flush()
