################################################################################
# Copyright (c) 2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################
from coredump_composer import collector
from coredump_composer.common.exception import CrictlError
from coredump_composer.tests.base import BaseTestCase
from coredump_composer.tests.base import FakeCrictl
from coredump_composer.tests.test_data import make_container
from coredump_composer.tests.test_data import MOCKED_POD
from coredump_composer.tests.test_data import MOCKED_POD_ID
from coredump_composer.tests.test_data import MOCKED_PS


class TestPodHelpers(BaseTestCase):

    def test_pod_fields(self):
        self.assertEqual(MOCKED_POD_ID, collector.pod_identifier(MOCKED_POD))
        self.assertEqual("test-namespace", collector.pod_namespace(MOCKED_POD))
        self.assertEqual("test-pod-7d9f", collector.pod_name(MOCKED_POD))
        self.assertIn("app", collector.pod_labels(MOCKED_POD))

    def test_pod_fields_missing(self):
        for pod in [{}, {"metadata": None, "labels": []}, {"id": ""}, None]:
            self.assertIsNone(collector.pod_identifier(pod))
            self.assertIsNone(collector.pod_namespace(pod))
            self.assertIsNone(collector.pod_name(pod))
            self.assertEqual({}, collector.pod_labels(pod))

    def test_parse_containers(self):
        """Test for collector.parse_containers

        Containers keep the runtime order, a missing imageRef becomes None.
        """
        ps_object = {"containers": [make_container(0), make_container(1, image_ref=None)]}
        containers = collector.parse_containers(ps_object)

        self.assertEqual([0, 1], [container.index for container in containers])
        self.assertEqual("sha256:%064d" % 0, containers[0].image_ref)
        self.assertIsNone(containers[1].image_ref)
        self.assertEqual([], collector.parse_containers({}))


class TestMetadataCollector(BaseTestCase):

    def test_present(self):
        cli = FakeCrictl({'pod': MOCKED_POD, 'inspect_pod': {"status": {}}})
        metadata = collector.MetadataCollector(cli, 10)

        pod = metadata.resolve_pod("test-pod-7d9f")
        self.assertTrue(pod.available)
        self.assertEqual(MOCKED_POD, pod.artifact)
        self.assertEqual({"status": {}}, metadata.inspect_pod(MOCKED_POD_ID).value)

    def test_unavailable(self):
        """Test for the degraded MetadataCollector calls

        A crictl failure gives an unavailable result holding the error and the
        empty value that goes to the archive.
        """
        container = collector.ContainerRecord(index=0, id="c0", image_ref="sha256:0")
        metadata = collector.MetadataCollector(FakeCrictl({}), 10)

        results = [
            (metadata.resolve_pod("test-pod-7d9f"), {}),
            (metadata.inspect_pod(MOCKED_POD_ID), {}),
            (metadata.tail_log(container), ""),
            (metadata.inspect_image(container), {}),
        ]
        for result, empty in results:
            self.assertFalse(result.available)
            self.assertIsInstance(result.error, CrictlError)
            self.assertEqual(empty, result.artifact)
        self.assertEqual(4, len(self.fake_log.logs['error']))

    def test_list_containers(self):
        metadata = collector.MetadataCollector(FakeCrictl({'pod_containers': MOCKED_PS}), 10)
        ps_object, containers = metadata.list_containers(MOCKED_POD_ID)

        self.assertEqual(MOCKED_PS, ps_object)
        self.assertEqual(2, len(containers))

    def test_list_containers_failure(self):
        metadata = collector.MetadataCollector(FakeCrictl({}), 10)
        self.assertRaises(CrictlError, metadata.list_containers, MOCKED_POD_ID)
