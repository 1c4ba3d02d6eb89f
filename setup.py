#!/usr/bin/env python3
"""
Setup configuration for the GS1 Syntax Engine
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="gs1-syntax-engine",
    version="1.0.0",
    author="GS1 Parser Team",
    author_email="",
    description="Parse, validate and convert GS1 element strings, scan data and Digital Link URIs",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourrepo/gs1-syntax-engine",
    packages=find_packages(exclude=["tests", "tests.*", "docs", "examples", "scripts"]),
    python_requires=">=3.8",
    install_requires=[
        # No external dependencies for core functionality
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "gs1-parse=gs1_syntax.__main__:main",
        ],
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Intended Audience :: Healthcare Industry",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    keywords="gs1 barcode parser gtin digital-link datamatrix gs1-128 hri",
    project_urls={
        "Documentation": "https://github.com/yourrepo/gs1-syntax-engine/docs",
        "Source": "https://github.com/yourrepo/gs1-syntax-engine",
        "Tracker": "https://github.com/yourrepo/gs1-syntax-engine/issues",
    },
)
