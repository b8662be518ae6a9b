#!/usr/bin/env python3
"""
Setup configuration for the Image Checker
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="image-checker",
    version="1.0.0",
    author="Troy Davis",
    author_email="",
    description="Batch image URL validation with bounded concurrency, retries and a result cache",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["image_checker", "image_checker.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Internet :: WWW/HTTP",
        "Topic :: Utilities",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
        ],
    },
    entry_points={
        "console_scripts": [
            "image-checker=image_checker.cli:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
