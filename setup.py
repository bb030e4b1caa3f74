#!/usr/bin/env python3
"""
Setup script for proxyctl for tools that still invoke setup.py directly.
Metadata lives in pyproject.toml.
"""

import sys

from setuptools import find_packages, setup

try:
    import tomllib

    with open("pyproject.toml", "rb") as f:
        pyproject_data = tomllib.load(f)

    project = pyproject_data["project"]

    setup(
        name=project["name"],
        version=project["version"],
        description=project["description"],
        author=project["authors"][0]["name"],
        license=project["license"],
        packages=find_packages(where="src"),
        package_dir={"": "src"},
        install_requires=project["dependencies"],
        extras_require=project.get("optional-dependencies", {}),
        entry_points={
            "console_scripts": [f"{k}={v}" for k, v in project.get("scripts", {}).items()]
        },
        python_requires=project["requires-python"],
        include_package_data=True,
        zip_safe=False,
    )

except Exception as e:
    print(f"Error reading pyproject.toml: {e}")
    sys.exit(1)
