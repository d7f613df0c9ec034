################################################################################
# Copyright (c) 2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import collections

from .common.constants import LOG
from .common.exception import CrictlError

"""Container of the runtime, in the order crictl reports them.
index is used to name the per container artifacts.
"""
ContainerRecord = collections.namedtuple('ContainerRecord', 'index id image_ref')


class Enrichment(object):
    """Result of an optional crictl call.

    An unavailable result keeps the error and the value that is written to
    the archive in its place, so the archive format doesn't change.
    """

    def __init__(self, value, available, error=None):
        self.value = value
        self.available = available
        self.error = error

    @classmethod
    def present(cls, value):
        return cls(value, True)

    @classmethod
    def unavailable(cls, error, default):
        return cls(default, False, error)

    @property
    def artifact(self):
        return self.value

    def __repr__(self):
        if self.available:
            return "Enrichment.present(%r)" % (self.value,)
        return "Enrichment.unavailable(%r)" % (self.error,)


def pod_labels(pod):
    labels = pod.get('labels') if isinstance(pod, dict) else None
    return labels if isinstance(labels, dict) else {}


def pod_identifier(pod):
    pod_id = pod.get('id') if isinstance(pod, dict) else None
    return pod_id if isinstance(pod_id, str) and pod_id else None


def _metadata_value(pod, key):
    metadata = pod.get('metadata') if isinstance(pod, dict) else None
    if not isinstance(metadata, dict):
        return None
    value = metadata.get(key)
    return value if isinstance(value, str) and value else None


def pod_namespace(pod):
    return _metadata_value(pod, 'namespace')


def pod_name(pod):
    return _metadata_value(pod, 'name')


def parse_containers(ps_object):
    containers = ps_object.get('containers') if isinstance(ps_object, dict) else None
    records = []
    for index, container in enumerate(containers or []):
        if not isinstance(container, dict):
            container = {}
        image_ref = container.get('imageRef')
        records.append(ContainerRecord(index=index,
                                       id=container.get('id') or "",
                                       image_ref=image_ref if image_ref else None))
    return records


class MetadataCollector(object):
    """Queries crictl for the pod, container, log and image records.

    Every call except list_containers degrades to an unavailable
    Enrichment when crictl fails.
    """

    def __init__(self, cli, log_length):
        self.cli = cli
        self.log_length = log_length

    def _degrade(self, operation, default, func, *args):
        try:
            return Enrichment.present(func(*args))
        except CrictlError as e:
            LOG.error(f"{operation} failed: {e}")
            return Enrichment.unavailable(e, default)

    def resolve_pod(self, hostname):
        LOG.debug(f"Resolving pod of host {hostname}")
        return self._degrade("Pod lookup", {}, self.cli.pod, hostname)

    def inspect_pod(self, pod_id):
        LOG.debug(f"Getting inspectp output using pod_id: {pod_id}")
        return self._degrade("Pod inspection", {}, self.cli.inspect_pod, pod_id)

    def list_containers(self, pod_id):
        """Function that lists the containers of the pod.

        Unlike the other calls a failure here is raised, without the
        container list there is nothing left to correlate.

        Returns
        -------
        tuple(dict, list)
            Raw crictl output and the ContainerRecords it describes
        """
        ps_object = self.cli.pod_containers(pod_id)
        containers = parse_containers(ps_object)
        LOG.debug(f"Pod {pod_id} has {len(containers)} containers")
        return ps_object, containers

    def tail_log(self, container):
        LOG.debug(f"Getting logs for container id {container.id}")
        return self._degrade("Container log", "", self.cli.tail_logs,
                             container.id, self.log_length)

    def inspect_image(self, container):
        LOG.debug(f"Getting image {container.image_ref}")
        return self._degrade("Image lookup", {}, self.cli.image, container.image_ref)
