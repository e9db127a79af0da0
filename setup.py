import os
from setuptools import setup


src_version = os.path.join(os.path.dirname(__file__), "aoc", "version.py")
with open(src_version) as f:
    version = f.read().strip().split()[-1][1:-1]


setup(
    name="advent-of-code-runner",
    version=version,
    description="Run your Advent of Code solvers against your personal inputs, in parallel",
    long_description=open("README.rst").read(),
    long_description_content_type="text/x-rst",
    packages=["aoc", "aoc.puzzles"],
    entry_points={
        "console_scripts": [
            "aoc=aoc.cli:main",
        ],
        # https://setuptools.readthedocs.io/en/latest/setuptools.html#dynamic-discovery-of-services-and-plugins
        "aoc.puzzles": [],
    },
    license="MIT",
    classifiers=[
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Topic :: Games/Entertainment :: Puzzle Games",
    ],
    python_requires=">=3.9",
    install_requires=[
        "urllib3",
        "beautifulsoup4",
        "pebble>=5.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-mock",
            "pytest-raisin",
            "pytest-freezer",
            "pook",
            "numpy",
        ],
    },
)
