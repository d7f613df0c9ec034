################################################################################
# Copyright (c) 2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################


class ComposerError(Exception):
    """Base exception for the core dump composer.

    Subclasses define a ``message`` that is formatted with the keyword
    arguments given to the constructor.
    """
    message = "An unknown error occurred"

    def __init__(self, message=None, **kwargs):
        self.kwargs = kwargs
        if not message:
            try:
                message = self.message % kwargs
            except (KeyError, TypeError):
                message = self.message
        self.msg = message
        super(ComposerError, self).__init__(message)

    def __str__(self):
        return self.msg


class ConfigError(ComposerError):
    message = "Invalid configuration: %(reason)s"


class CrictlError(ComposerError):
    message = "crictl %(command)s failed: %(reason)s"


class ArchiveLockedError(ComposerError):
    message = "Archive %(path)s is locked by another run"


class PipelineExit(Exception):
    """Raised inside the worker to stop the pipeline with an exit code."""

    def __init__(self, code, reason=None):
        self.code = code
        self.reason = reason
        super(PipelineExit, self).__init__(code, reason)
