################################################################################
# Copyright (c) 2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import json
import os

from .common.constants import LOG


class CoreEvent(object):
    """Record telling consumers that an archive is complete."""

    def __init__(self, job, pod=None, images=None, correlated=False):
        self.job = job
        self.pod = pod
        self.images = images
        self.correlated = correlated

    @classmethod
    def no_correlation(cls, job):
        return cls(job)

    @classmethod
    def correlated_with(cls, job, pod, images):
        return cls(job, pod=pod, images=list(images), correlated=True)

    def to_dict(self):
        job = self.job
        event = {
            "uuid": job.uuid,
            "dump_file": job.archive_name,
            "ext": job.extension,
            "timestamp": job.params.timestamp,
            "hostname": job.params.hostname,
            "exe": job.params.exe_name,
            "real_pid": job.params.pid,
            "signal": job.params.signal,
            "node_hostname": job.node_hostname,
            "namespace": job.namespace,
            "podname": job.podname,
        }
        if self.correlated:
            event["pod"] = self.pod
            event["images"] = self.images
        return event

    def write_event(self, directory):
        os.makedirs(directory, exist_ok=True)
        path = os.path.join(directory, self.job.get_event_filename())
        with open(path, "w") as f:
            json.dump(self.to_dict(), f)
        LOG.info(f"Wrote event {path}")
        return path
