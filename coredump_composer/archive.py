################################################################################
# Copyright (c) 2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import errno
import fcntl
import os
import tarfile

from .common.constants import ARCHIVE_ROOT
from .common.constants import LOG
from .common.exception import ArchiveLockedError


class CoreArchive(object):
    """Destination tar file of a run.

    The file is locked from open() until seal(). A second run targeting
    the same path fails right away instead of waiting for the lock.
    """

    def __init__(self, path, arcname=ARCHIVE_ROOT):
        self.path = path
        self.arcname = arcname
        self._file = None
        self._tar = None
        self.sealed = False

    @property
    def is_open(self):
        return self._file is not None

    def open(self):
        # No O_TRUNC: the file may belong to a run that still holds the lock.
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT, 0o644)
        f = os.fdopen(fd, "wb")
        try:
            fcntl.flock(f, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as e:
            f.close()
            if e.errno in (errno.EAGAIN, errno.EACCES):
                raise ArchiveLockedError(path=self.path)
            raise
        f.truncate(0)
        self._file = f
        self._tar = tarfile.open(fileobj=f, mode="w")
        LOG.info(f"Created archive {self.path}")

    def seal(self, staging_dir):
        """Add the scratch directory to the archive, close it and unlock it.

        Can be called more than once, only the first call does anything.
        """
        if self.sealed or not self.is_open:
            return
        self.sealed = True
        try:
            try:
                if os.path.isdir(staging_dir):
                    self._tar.add(staging_dir, arcname=self.arcname)
            finally:
                self._tar.close()
            self._file.flush()
            os.fsync(self._file.fileno())
        finally:
            fcntl.flock(self._file, fcntl.LOCK_UN)
            self._file.close()
        LOG.info(f"Sealed archive {self.path}")

