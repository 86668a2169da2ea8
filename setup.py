#!/usr/bin/env python3

import sys
from importlib.util import module_from_spec, spec_from_file_location

from setuptools import find_packages, setup

with open("README.md", "r") as fh:
    long_description = fh.read()


def load_module(name, path):
    spec = spec_from_file_location(name, path)
    mod = module_from_spec(spec)
    sys.modules[name] = mod
    spec.loader.exec_module(mod)
    return mod


def read_dependencies(fname):
    dependencies = []
    with open(fname, 'r') as f:
        for line in f:
            stripped = line.strip()
            if stripped.startswith('#') or len(stripped) == 0:
                continue
            if stripped.startswith('-r'):
                dependencies.extend(read_dependencies(stripped[len('-r'):].strip()))
                continue
            dependencies.append(stripped)
    return dependencies


setup(
    name='storageiam',
    version=load_module('version', 'storageiam/version.py').__pip_version__,
    description="Manage IAM policies of Google Cloud Storage buckets.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages('.', include=['storageiam', 'storageiam.*']),
    package_data={"storageiam": ["py.typed"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
    ],
    python_requires=">=3.10",
    install_requires=read_dependencies('requirements.txt'),
    extras_require={'test': read_dependencies('requirements-test.txt')},
    entry_points={'console_scripts': ['storageiam = storageiam.cli.__main__:main']},
    include_package_data=True,
)
