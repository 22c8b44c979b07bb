#!/usr/bin/env python
"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import os

from setuptools import find_packages, setup

# read the version without importing the package, its dependencies may not be installed yet
_version: dict = {}
with open(os.path.join(os.path.dirname(__file__), 'objmarshal', 'version.py')) as fp:
    exec(fp.read(), _version)

setup(
    name='objmarshal',
    version=_version['__version__'],
    description='Encoder of object graphs into the compact marshal 4.8 binary format',
    author='Hathor Team',
    author_email='contact@hathor.network',
    url='https://hathor.network/',
    license='Apache-2.0',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'License :: OSI Approved :: Apache Software License',
    ],
    python_requires='>=3.10',
    packages=find_packages(include=('objmarshal', 'objmarshal.*')),
    install_requires=[
        'pydantic>=2',
        'PyYAML',
        'structlog',
        'typing_extensions',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
