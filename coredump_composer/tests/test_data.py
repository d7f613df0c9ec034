################################################################################
# Copyright (c) 2023,2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
################################################################################

MOCKED_POD_ID = "9f1c2a7b5e4d3c2b1a0f9e8d7c6b5a4f3e2d1c0b9a8f7e6d5c4b3a2f1e0d9c8b"
MOCKED_UID = "2284e2ba-cdaf-4558-907a-b9364b66f3e9"
SELECTOR_LABEL = "starlingx.io/core-dump"

# One item of `crictl pods --name test-pod-7d9f -o json`
MOCKED_POD = {
    "id": MOCKED_POD_ID,
    "metadata": {
        "name": "test-pod-7d9f",
        "uid": MOCKED_UID,
        "namespace": "test-namespace",
        "attempt": 0
    },
    "state": "SANDBOX_READY",
    "createdAt": "1671181100000000000",
    "labels": {
        "app": "crashing-app",
        SELECTOR_LABEL: "enabled"
    },
    "annotations": {},
    "runtimeHandler": ""
}

MOCKED_INSPECTP = {
    "status": {
        "id": MOCKED_POD_ID,
        "state": "SANDBOX_READY"
    },
    "info": {
        "pid": 1234
    }
}


def make_container(index, image_ref="sha256:%064d"):
    container = {
        "id": "c%063d" % index,
        "podSandboxId": MOCKED_POD_ID,
        "metadata": {"name": "container-%d" % index},
        "image": {"image": "registry.local:9001/app:%d" % index},
        "state": "CONTAINER_RUNNING",
    }
    if image_ref is not None:
        container["imageRef"] = image_ref % index if "%" in image_ref else image_ref
    return container


MOCKED_PS = {
    "containers": [make_container(0), make_container(1)]
}


def make_image(index):
    return {
        "images": [{
            "id": "sha256:%064d" % index,
            "repoTags": ["registry.local:9001/app:%d" % index],
            "size": "1024"
        }]
    }
