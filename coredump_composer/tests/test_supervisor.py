################################################################################
# Copyright (c) 2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
import threading

from coredump_composer import supervisor
from coredump_composer.tests.base import BaseTestCase
import mock


class TestRunWithDeadline(BaseTestCase):

    def test_returns_worker_code(self):
        self.assertEqual(0, supervisor.run_with_deadline(lambda: 0, 5))
        self.assertEqual(1, supervisor.run_with_deadline(lambda: 1, 5))

    def test_worker_exception(self):
        def broken():
            raise RuntimeError("boom")

        self.assertEqual(1, supervisor.run_with_deadline(broken, 5))
        self.assertIn("Core dump processing failed", self.fake_log.get_error())

    def test_worker_runs_on_other_thread(self):
        threads = []

        def pipeline():
            threads.append(threading.current_thread())
            return 0

        supervisor.run_with_deadline(pipeline, 5)
        self.assertIsNot(threading.current_thread(), threads[0])

    def test_timeout(self):
        """Test for supervisor.run_with_deadline when the deadline expires

        The process is terminated with exit code 32 without waiting for the
        worker, which is still blocked.
        """
        release = threading.Event()
        self.addCleanup(release.set)

        def stuck():
            release.wait(10)
            return 0

        with mock.patch('coredump_composer.supervisor.os._exit') as mocked_exit:
            supervisor.run_with_deadline(stuck, 0.1)

        mocked_exit.assert_called_once_with(32)
        self.assertFalse(release.is_set())
        self.assertIn("Timeout error during coredump processing.", self.fake_log.get_error())
