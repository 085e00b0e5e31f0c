# SPDX-FileCopyrightText: 2026 Giovanni MARIANO
#
# SPDX-License-Identifier: MPL-2.0

from setuptools import setup, find_packages


setup(
    name="csgtrack",
    version="0.1.0",
    description="CSG cell rules, boolean minimization and line tracking",
    license="MPL-2.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
    ],
    extras_require={
        # plot_ray_path
        "plot": ["matplotlib"],
        "test": ["pytest", "matplotlib"],
    },
)
