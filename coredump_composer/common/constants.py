################################################################################
# Copyright (c) 2022,2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import logging


COREDUMP_COMPOSER_CONF = "/etc/coredump-composer/coredump-composer.conf"
COREDUMP_COMPOSER_LOG = "/var/log/coredump-composer.log"

CRICTL_BIN_PATH = "/usr/local/bin/crictl"
CRICTL_CONFIG_PATH = "/etc/crictl.yaml"

CORE_DIRECTORY = "/var/mnt/core-dump-handler/cores"
EVENT_DIRECTORY = "/var/mnt/core-dump-handler/events"
STAGING_DIRECTORY = "/tmp/core"

# Top level directory of every archive
ARCHIVE_ROOT = "core"

DEFAULT_FILENAME_TEMPLATE = "{uuid}-dump-{timestamp}-{hostname}-{exe_name}-{pid}-{signal}"
UNKNOWN = "unknown"

COMPRESSION_EXTENSIONS = {
    'lz4': 'lz4',
    'gzip': 'gz',
}

# Size of the chunks read from stdin while compressing the dump
STREAM_CHUNK_SIZE = 64 * 1024

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_TIMEOUT = 32


LOG = logging.getLogger("coredump-composer")
