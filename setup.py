#!/usr/bin/env python

# Copyright 2018-2023 Descartes Labs.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import ast
import re

from setuptools import find_packages, setup

# Parse the docstring out of typelens/__init__.py
_docstring_re = re.compile(r'"""((.|\n)*)\n"""', re.MULTILINE)
with open("typelens/__init__.py", "rb") as f:
    __doc__ = _docstring_re.search(f.read().decode("utf-8")).group(1)

DOCLINES = __doc__.split("\n")

# Parse version out of typelens/version.py
_version_re = re.compile(r"__version__\s+=\s+(.*)")
with open("typelens/version.py", "rb") as f:
    version = str(
        ast.literal_eval(_version_re.search(f.read().decode("utf-8")).group(1))
    )


def do_setup():
    tests_requires = [
        "pytest>=7.0.0",
    ]
    setup(
        name="typelens",
        description=DOCLINES[0],
        long_description="\n".join(DOCLINES[2:]),
        classifiers=[
            "Programming Language :: Python",
            "Programming Language :: Python :: 3",
            "Programming Language :: Python :: 3.11",
            "Programming Language :: Python :: 3.12",
            "Programming Language :: Python :: 3.13",
        ],
        license="Apache 2.0",
        version=version,
        packages=find_packages(include=["typelens", "typelens.*"]),
        package_data={
            "typelens": [
                "config/settings.toml",
            ]
        },
        include_package_data=True,
        python_requires=">=3.11",
        install_requires=[
            "dynaconf>=3.2.1",
            "strenum>=0.4.8",
        ],
        extras_require={
            "tests": tests_requires,
        },
    )


if __name__ == "__main__":
    do_setup()
