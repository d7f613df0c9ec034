################################################################################
# Copyright (c) 2022,2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import socket
import sys

from . import config
from . import log
from .common.constants import EXIT_FAILURE
from .common.constants import LOG
from .common.exception import ConfigError
from .composer import CoreDumpComposer
from .crictl import CrictlClient
from .supervisor import run_with_deadline


def main(argv=None):
    # https://man7.org/linux/man-pages/man5/core.5.html
    # core_pattern: |coredump-composer %c %e %p %s %t %h %E
    argv = sys.argv[1:] if argv is None else argv
    try:
        conf = config.load_config()
        log.setup_logging(conf.log_level, conf.log_file)
        params = config.CoreParams.from_argv(argv, conf.node_hostname or socket.gethostname())
        job = config.CaptureJob.from_conf(conf, params)
    except ConfigError as e:
        LOG.error(f"Failed to load configuration: {e}")
        sys.exit(EXIT_FAILURE)

    LOG.critical("Process %s (%s) dumped core with signal %s." %
                 (params.pid, params.exe_name, params.signal))
    LOG.debug(f"Arguments: {argv}")
    job.log_summary()

    cli = CrictlClient.from_conf(conf)
    composer = CoreDumpComposer(job, cli)
    sys.exit(run_with_deadline(composer.run, job.timeout))


if __name__ == "__main__":
    main()
