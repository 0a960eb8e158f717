#!/usr/bin/python
# -*- coding: utf-8 -*-
"""Transparent method call caching for Python objects."""
__author__ = "bibow"

from setuptools import find_packages, setup

setup(
    name="FastForward",
    version="0.1.8",
    author="Idea Bosque",
    author_email="ideabosque@gmail.com",
    description="Wraps objects in a cache-aware proxy for faster method calls",
    long_description=__doc__,
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    zip_safe=False,
    platforms="Linux",
    python_requires=">=3.8",
    install_requires=[
        "orjson>=3.6",
        "pendulum>=2.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    classifiers=[
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
