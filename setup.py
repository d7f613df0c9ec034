#!/usr/bin/env python
#
# Copyright (c) 2022,2025 Wind River Systems, Inc.
#
# SPDX-License-Identifier: Apache-2.0
#
import setuptools

setuptools.setup(
    name='coredump_composer',
    version='1.0.0',
    description='Container core dump capture and archive handler',
    license='Apache-2.0',
    install_requires=['lz4', 'oslo.config'],
    extras_require={
        'test': ['testtools', 'fixtures', 'mock', 'stestr'],
    },
    packages=['coredump_composer', 'coredump_composer.common'],
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'coredump-composer = coredump_composer.__main__:main',
        ],
    }
)
