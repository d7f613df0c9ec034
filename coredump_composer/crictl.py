################################################################################
# Copyright (c) 2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import json
import subprocess

from .common.constants import LOG
from .common.exception import CrictlError


class CrictlClient(object):
    """Thin wrapper around the crictl command line.

    Every call returns the decoded output of crictl or raises CrictlError.
    """

    def __init__(self, bin_path, config_path=None, image_command="img", timeout=None):
        self.bin_path = bin_path
        self.config_path = config_path
        self.image_command = image_command
        self.timeout = timeout

    @classmethod
    def from_conf(cls, conf):
        config_path = conf.crictl_config_path if conf.use_crio_config else None
        return cls(conf.bin_path, config_path=config_path,
                   image_command=conf.crio_image_cmd, timeout=conf.command_timeout)

    def _command(self, args):
        cmd = [self.bin_path]
        if self.config_path:
            cmd += ["--config", self.config_path]
        return cmd + list(args)

    def _run(self, args, merge_stderr=False):
        cmd = self._command(args)
        LOG.debug("Running command: %s" % cmd)
        try:
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
                timeout=self.timeout,
                check=True)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or e.stdout or b"").decode("utf-8", "replace").strip()
            raise CrictlError(command=args[0],
                              reason=f"exit code {e.returncode}: {stderr}")
        except subprocess.TimeoutExpired:
            raise CrictlError(command=args[0],
                              reason=f"no answer after {self.timeout} seconds")
        except OSError as e:
            raise CrictlError(command=args[0], reason=e)
        return result.stdout.decode("utf-8", "replace")

    def _run_json(self, args):
        output = self._run(args)
        try:
            return json.loads(output)
        except ValueError as e:
            raise CrictlError(command=args[0], reason=f"invalid JSON output: {e}")

    def pod(self, hostname):
        pods = self._run_json(["pods", "--name", hostname, "-o", "json"])
        items = pods.get("items") or [] if isinstance(pods, dict) else []
        if len(items) != 1:
            raise CrictlError(command="pods",
                              reason=f"expected one pod named {hostname}, found {len(items)}")
        return items[0]

    def inspect_pod(self, pod_id):
        return self._run_json(["inspectp", "-o", "json", pod_id])

    def pod_containers(self, pod_id):
        return self._run_json(["ps", "-a", "-o", "json", "-p", pod_id])

    def tail_logs(self, container_id, lines):
        return self._run(["logs", "--tail", str(lines), container_id], merge_stderr=True)

    def image(self, image_ref):
        return self._run_json([self.image_command, "-o", "json", image_ref])
