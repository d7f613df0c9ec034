################################################################################
# Copyright (c) 2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import os
import queue
import threading

from .common.constants import EXIT_FAILURE
from .common.constants import EXIT_TIMEOUT
from .common.constants import LOG
from .log import flush_logging


def _worker(func, result):
    try:
        code = func()
    except Exception:
        LOG.exception("Core dump processing failed")
        code = EXIT_FAILURE
    result.put(code)


def run_with_deadline(func, timeout):
    """Function that runs the pipeline on a worker thread with a deadline.

    When the deadline expires the process is terminated right away, the
    worker is not joined and its cleanup does not run.

    Parameters
    ----------
    func : callable
        Pipeline to run, returns the exit code
    timeout : int
        Number of seconds the pipeline is allowed to run

    Returns
    -------
    int
        Exit code returned by the pipeline
    """
    result = queue.Queue(maxsize=1)
    worker = threading.Thread(target=_worker, args=(func, result),
                              name="composer-worker", daemon=True)
    worker.start()
    try:
        return result.get(timeout=timeout)
    except queue.Empty:
        LOG.error("Timeout error during coredump processing.")
        flush_logging()
        os._exit(EXIT_TIMEOUT)
