#!/usr/bin/env python3
"""
Mixxx to Rekordbox - Setup Configuration
Exports a Mixxx DJ library (tracks, cues, loops, beat grids, playlists, crates) as Rekordbox XML
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core dependencies
core_requirements = [
    "protobuf>=4.25.0",     # Mixxx beat grid decoding
    "tqdm>=4.66.0",         # Progress bars
    "python-dotenv>=1.0.0", # Environment variables
]

# Test dependencies
test_requirements = [
    "pytest>=7.0.0",
]

# Development dependencies
dev_requirements = test_requirements + [
    "pytest-cov>=4.0.0",
    "black>=23.0.0",
    "flake8>=6.0.0",
    "mypy>=1.0.0",
]

setup(
    # Package information
    name="mixxx2rekordbox",
    version="1.0.0",
    description="Export a Mixxx library to a Rekordbox XML collection",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Package discovery
    packages=find_packages(exclude=["tests*", "test_*", "*.tests*"]),
    include_package_data=True,

    # Dependencies
    install_requires=core_requirements,
    extras_require={
        "test": test_requirements,
        "dev": dev_requirements,
    },

    # Console entry points
    entry_points={
        "console_scripts": [
            "mixxx2rekordbox=mixxx2rekordbox.cli.main:main",
        ],
    },

    # Python version and classifiers
    # sqlite3.Connection.deserialize needs 3.11
    python_requires=">=3.11",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Environment :: Console",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Utilities",
    ],

    keywords=[
        "dj", "mixxx", "rekordbox", "music-library", "cue-points",
        "beatgrid", "playlists", "xml", "export",
    ],

    zip_safe=False,
    platforms=["any"],
)
