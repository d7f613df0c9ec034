################################################################################
# Copyright (c) 2022,2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import os.path
import socket
import string
import uuid

from oslo_config import cfg

from .common import constants
from .common.constants import LOG
from .common.exception import ConfigError


composer_opts = [
    cfg.StrOpt("log_level",
               default="INFO",
               choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
               help="Log level of the composer"),
    cfg.StrOpt("log_file",
               default=constants.COREDUMP_COMPOSER_LOG,
               help="File that receives the composer log"),
    cfg.BoolOpt("ignore_crio",
                default=False,
                help="Archive the dump without collecting pod and container information"),
    cfg.StrOpt("crio_image_cmd",
               default="img",
               choices=["img", "images", "inspecti"],
               help="crictl sub command used to get the image information"),
    cfg.BoolOpt("use_crio_config",
                default=False,
                help="Pass crictl_config_path to crictl"),
    cfg.StrOpt("crictl_config_path",
               default=constants.CRICTL_CONFIG_PATH,
               help="crictl configuration file"),
    cfg.StrOpt("bin_path",
               default=constants.CRICTL_BIN_PATH,
               help="crictl executable"),
    cfg.IntOpt("command_timeout",
               default=30,
               min=1,
               help="Number of seconds to wait for each crictl call"),
    cfg.StrOpt("filename_template",
               default=constants.DEFAULT_FILENAME_TEMPLATE,
               help="Template of the name given to every file of a run"),
    cfg.IntOpt("log_length",
               default=500,
               min=0,
               help="Number of container log lines to keep"),
    cfg.StrOpt("pod_selector_label",
               default="",
               help="Only correlate pods that have this label"),
    cfg.IntOpt("timeout",
               default=600,
               min=1,
               help="Number of seconds before the composer gives up"),
    cfg.StrOpt("compression",
               default="lz4",
               choices=sorted(constants.COMPRESSION_EXTENSIONS),
               help="Codec used to compress the dump"),
    cfg.BoolOpt("core_events",
                default=False,
                help="Write an event file for every archived dump"),
    cfg.StrOpt("event_directory",
               default=constants.EVENT_DIRECTORY,
               help="Directory that receives the event files"),
    cfg.StrOpt("core_directory",
               default=constants.CORE_DIRECTORY,
               help="Directory that receives the archives"),
    cfg.StrOpt("staging_directory",
               default=constants.STAGING_DIRECTORY,
               help="Parent of the scratch directories"),
    cfg.StrOpt("node_hostname",
               default=socket.gethostname(),
               sample_default="<hostname>",
               help="Name of the node recorded in the dump info"),
]

TEMPLATE_FIELDS = ("uuid", "timestamp", "hostname", "exe_name", "pid", "signal",
                   "limit_size", "directory", "namespace", "podname")


def load_config(config_files=None):
    """Function that loads the composer configuration.

    Besides the config files, every option can be set through the
    environment as OS_DEFAULT__<OPTION>.

    Parameters
    ----------
    config_files : list
        Config files to read. Defaults to the system config file, when it exists.

    Returns
    -------
    cfg.ConfigOpts
        Loaded configuration
    """
    if config_files is None:
        config_files = [constants.COREDUMP_COMPOSER_CONF]
    config_files = [path for path in config_files if os.path.isfile(path)]

    conf = cfg.ConfigOpts()
    conf.register_opts(composer_opts)
    try:
        conf(args=[], project="coredump-composer", default_config_files=config_files)
        # Values are parsed lazily, read them all so bad ones fail here
        for opt in composer_opts:
            getattr(conf, opt.dest)
    except (cfg.Error, ValueError) as e:
        raise ConfigError(reason=e)
    return conf


class CoreParams(object):
    """Values the kernel passes through core_pattern (see core(5))."""

    def __init__(self, limit_size, exe_name, pid, signal, timestamp, hostname, directory):
        self.limit_size = limit_size  # %c
        self.exe_name = exe_name  # %e
        self.pid = pid  # %p
        self.signal = signal  # %s
        self.timestamp = timestamp  # %t
        self.hostname = hostname  # %h
        self.directory = directory  # %E

    @classmethod
    def from_argv(cls, argv, default_hostname):
        names = ['limit_size', 'exe_name', 'pid', 'signal', 'timestamp', 'hostname', 'directory']
        values = dict(zip(names, argv))
        kwargs = {name: values.get(name, "") for name in names}
        if not kwargs['hostname']:
            kwargs['hostname'] = default_hostname
        return cls(**kwargs)


def validate_template(template):
    try:
        fields = [field for _, field, _, _ in string.Formatter().parse(template)
                  if field is not None]
    except ValueError as e:
        raise ConfigError(reason=f"filename_template {template!r}: {e}")
    unknown = [field for field in fields if field not in TEMPLATE_FIELDS]
    if unknown:
        raise ConfigError(reason=f"filename_template {template!r} uses unknown fields {unknown}")


class CaptureJob(object):
    """One crash event: everything needed to name, stage and archive it.

    namespace and podname start as "unknown" and are refined once the pod
    is resolved. The archive name is fixed the first time it is needed so
    that the event always points to the file that was written.
    """

    def __init__(self, params, core_directory=constants.CORE_DIRECTORY,
                 staging_directory=constants.STAGING_DIRECTORY,
                 ignore_crio=False, pod_selector_label="", log_length=500,
                 timeout=600, compression="lz4", core_events=False,
                 event_directory=constants.EVENT_DIRECTORY, node_hostname=None,
                 filename_template=constants.DEFAULT_FILENAME_TEMPLATE, run_uuid=None):
        validate_template(filename_template)
        if compression not in constants.COMPRESSION_EXTENSIONS:
            raise ConfigError(reason=f"unsupported compression {compression}")
        self.uuid = run_uuid or str(uuid.uuid4())
        self.params = params
        self.namespace = constants.UNKNOWN
        self.podname = constants.UNKNOWN
        self.core_directory = core_directory
        self.staging_directory = os.path.join(staging_directory, self.uuid)
        self.ignore_crio = ignore_crio
        self.pod_selector_label = pod_selector_label
        self.log_length = log_length
        self.timeout = timeout
        self.compression = compression
        self.core_events = core_events
        self.event_directory = event_directory
        self.node_hostname = node_hostname or socket.gethostname()
        self.filename_template = filename_template
        self._archive_name = None

    @classmethod
    def from_conf(cls, conf, params):
        return cls(params,
                   core_directory=conf.core_directory,
                   staging_directory=conf.staging_directory,
                   ignore_crio=conf.ignore_crio,
                   pod_selector_label=conf.pod_selector_label,
                   log_length=conf.log_length,
                   timeout=conf.timeout,
                   compression=conf.compression,
                   core_events=conf.core_events,
                   event_directory=conf.event_directory,
                   node_hostname=conf.node_hostname,
                   filename_template=conf.filename_template)

    def set_pod(self, namespace, podname):
        self.namespace = namespace or constants.UNKNOWN
        self.podname = podname or constants.UNKNOWN

    def get_templated_name(self):
        values = {
            'uuid': self.uuid,
            'timestamp': self.params.timestamp,
            'hostname': self.params.hostname,
            'exe_name': self.params.exe_name,
            'pid': self.params.pid,
            'signal': self.params.signal,
            'limit_size': self.params.limit_size,
            'directory': self.params.directory,
            'namespace': self.namespace,
            'podname': self.podname,
        }
        return self.filename_template.format(**values)

    @property
    def extension(self):
        return constants.COMPRESSION_EXTENSIONS[self.compression]

    @property
    def archive_name(self):
        if self._archive_name is None:
            self._archive_name = f"{self.get_templated_name()}.tar"
        return self._archive_name

    def get_archive_path(self):
        return os.path.join(self.core_directory, self.archive_name)

    def get_core_filename(self):
        return f"{self.get_templated_name()}.core.{self.extension}"

    def get_dump_info_filename(self):
        return f"{self.get_templated_name()}-dump-info.json"

    def get_pod_filename(self):
        return f"{self.get_templated_name()}-pod-info.json"

    def get_inspect_pod_filename(self):
        return f"{self.get_templated_name()}-runtime-info.json"

    def get_ps_filename(self):
        return f"{self.get_templated_name()}-ps-info.json"

    def get_log_filename(self, index):
        return f"{self.get_templated_name()}-{index}.log"

    def get_image_filename(self, index):
        return f"{self.get_templated_name()}-{index}-image-info.json"

    def get_event_filename(self):
        return f"{self.get_templated_name()}-event.json"

    def get_dump_info(self):
        return {
            "uuid": self.uuid,
            "dump_file": self.get_core_filename(),
            "ext": self.extension,
            "timestamp": self.params.timestamp,
            "hostname": self.params.hostname,
            "exe": self.params.exe_name,
            "real_pid": self.params.pid,
            "signal": self.params.signal,
            "limit_size": self.params.limit_size,
            "directory": self.params.directory,
            "node_hostname": self.node_hostname,
            "namespace": self.namespace,
            "podname": self.podname,
        }

    def log_summary(self):
        LOG.info(f"Job {self.uuid}: ignore_crio={self.ignore_crio} "
                 f"pod_selector_label={self.pod_selector_label!r} log_length={self.log_length} "
                 f"compression={self.compression} core_events={self.core_events} "
                 f"timeout={self.timeout}s")
