################################################################################
# Copyright (c) 2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import json
import os
import shutil

from .common.constants import LOG


class Workspace(object):
    """Private scratch directory where the artifacts of a run are staged."""

    def __init__(self, path):
        self.path = path

    @property
    def exists(self):
        return os.path.isdir(self.path)

    def create(self):
        os.makedirs(self.path, exist_ok=True)
        LOG.debug(f"Scratch directory {self.path} is ready")

    def path_for(self, name):
        return os.path.join(self.path, name)

    def write(self, name, data):
        """Function that stages one artifact.

        Parameters
        ----------
        name : str
            File name of the artifact inside the scratch directory
        data : bytes, str, dict or list
            Content of the artifact, dicts and lists are written as JSON

        Returns
        -------
        str
            Path of the staged artifact
        """
        if isinstance(data, (dict, list)):
            data = json.dumps(data)
        if isinstance(data, str):
            data = data.encode("utf-8")
        path = self.path_for(name)
        with open(path, "xb") as f:
            f.write(data)
        LOG.debug(f"Staged {name} ({len(data)} bytes)")
        return path

    def remove(self):
        try:
            shutil.rmtree(self.path)
            LOG.debug(f"Removed scratch directory {self.path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            LOG.error("Failed to remove scratch directory {}: {}".format(self.path, e))
