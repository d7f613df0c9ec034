################################################################################
# Copyright (c) 2022,2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import sys
import tarfile

from .archive import CoreArchive
from .collector import MetadataCollector
from .collector import pod_identifier
from .collector import pod_labels
from .collector import pod_name
from .collector import pod_namespace
from .common.constants import EXIT_FAILURE
from .common.constants import EXIT_SUCCESS
from .common.constants import LOG
from .common.exception import ComposerError
from .common.exception import CrictlError
from .common.exception import PipelineExit
from .compressor import compress_stream
from .events import CoreEvent
from .workspace import Workspace


class CoreDumpComposer(object):
    """Captures one core dump and packs it with its pod information.

    run() never calls sys.exit: every path ends in a PipelineExit that
    carries the exit code, so the pipeline can run on a worker thread.
    """

    def __init__(self, job, cli, stdin=None):
        self.job = job
        self.collector = MetadataCollector(cli, job.log_length)
        self.stdin = stdin if stdin is not None else sys.stdin.buffer
        self.workspace = Workspace(job.staging_directory)
        self.archive = None
        self.pod = None
        self.selected = True

    def run(self):
        try:
            self._compose()
        except PipelineExit as e:
            return e.code
        except Exception:
            LOG.exception("Unexpected error while composing the core dump archive")
            self._seal()
            self.workspace.remove()
            return EXIT_FAILURE
        return EXIT_SUCCESS

    def _abort(self, reason, cleanup=True):
        LOG.error(reason)
        self._seal()
        if cleanup:
            self.workspace.remove()
        raise PipelineExit(EXIT_FAILURE, reason)

    def _seal(self):
        if self.archive is None:
            return
        try:
            self.archive.seal(self.workspace.path)
        except (OSError, tarfile.TarError) as e:
            LOG.error(f"Failed to seal archive {self.archive.path}: {e}")

    def _finish(self, event=None):
        try:
            self.archive.seal(self.workspace.path)
        except (OSError, tarfile.TarError) as e:
            self._abort(f"Failed to seal archive {self.archive.path}: {e}")
        self.workspace.remove()
        if event is not None and self.job.core_events:
            try:
                event.write_event(self.job.event_directory)
            except OSError as e:
                LOG.error(f"Failed to write event in {self.job.event_directory}: {e}")
                raise PipelineExit(EXIT_FAILURE, str(e))
        raise PipelineExit(EXIT_SUCCESS)

    def _stage(self, name, data):
        try:
            self.workspace.write(name, data)
        except OSError as e:
            self._abort(f"Error writing {name} in scratch directory: {e}")

    def _select_pod(self):
        job = self.job
        self.pod = self.collector.resolve_pod(job.params.hostname)

        if job.ignore_crio:
            # The lookup only names the run, it never filters it
            LOG.info("Runtime correlation is disabled, archiving the dump only")
        elif job.pod_selector_label:
            LOG.debug(f"Pod selector specified. Will record only if pod has label "
                      f"{job.pod_selector_label}")
            if job.pod_selector_label not in pod_labels(self.pod.value):
                LOG.info(f"Skipping pod as it did not match selector label "
                         f"{job.pod_selector_label}")
                self.selected = False
        else:
            LOG.debug("No pod selector specified, selecting all pods")

        job.set_pod(pod_namespace(self.pod.value), pod_name(self.pod.value))
        LOG.info(f"Pod {job.namespace}/{job.podname} handling core dump for {job.params.pid}")

    def _capture_dump(self):
        job = self.job
        self.archive = CoreArchive(job.get_archive_path())
        try:
            self.archive.open()
        except (ComposerError, OSError) as e:
            self.archive = None
            self._abort(f"Failed to create archive {job.get_archive_path()}: {e}", cleanup=False)

        try:
            self.workspace.create()
        except OSError as e:
            self._abort(f"Failed to create scratch directory {self.workspace.path}: {e}")

        try:
            compress_stream(self.stdin, self.workspace.path_for(job.get_core_filename()),
                            job.compression)
        except Exception as e:
            self._abort(f"Error writing core file {job.get_core_filename()}: {e}")

        if self.selected:
            LOG.debug(f"Create a JSON file to store the dump meta data {job.get_dump_info_filename()}")
            self._stage(job.get_dump_info_filename(), job.get_dump_info())

    def _collect_containers(self, pod_id):
        job = self.job
        try:
            ps_object, containers = self.collector.list_containers(pod_id)
        except CrictlError as e:
            self._abort(f"Failed to list containers of pod {pod_id}: {e}")
        self._stage(job.get_ps_filename(), ps_object)

        images = []
        for container in containers:
            if container.image_ref is None:
                LOG.error(f"Container {container.index} ({container.id}) has no image "
                          f"reference, skipping the remaining containers")
                break
            log = self.collector.tail_log(container)
            self._stage(job.get_log_filename(container.index), log.artifact)
            image = self.collector.inspect_image(container)
            images.append(image.artifact)
            self._stage(job.get_image_filename(container.index), image.artifact)
        return images

    def _compose(self):
        job = self.job
        LOG.debug(f"Creating dump for {job.get_templated_name()}")
        self._select_pod()
        self._capture_dump()

        if not self.selected:
            self._finish()

        if job.ignore_crio:
            self._finish(CoreEvent.no_correlation(job))

        LOG.debug(f"Using pod file name: {job.get_pod_filename()}")
        self._stage(job.get_pod_filename(), self.pod.artifact)
        if not self.pod.available:
            LOG.info("Pod could not be resolved, archiving the dump without runtime information")
            self._finish(CoreEvent.no_correlation(job))

        pod_id = pod_identifier(self.pod.value)
        if pod_id is None:
            self._abort("Failed to get pod id")

        inspectp = self.collector.inspect_pod(pod_id)
        self._stage(job.get_inspect_pod_filename(), inspectp.artifact)

        images = self._collect_containers(pod_id)
        self._finish(CoreEvent.correlated_with(job, self.pod.value, images))
