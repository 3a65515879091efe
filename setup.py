"""
setup.py

Packaging metadata and CLI entry point for content-build.

Version: 1.0.0 — Validates and compiles educational content repositories
(subjects, teachers, system articles) into compiled documents, search
indexes and a manifest. Commands: validate, routes, build.
"""
from setuptools import setup, find_packages

setup(
    name="content-build",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "click",
        "pydantic[email]>=2.0",
        "pyyaml",
        "python-dotenv",
        "python-frontmatter",
        "markdown-it-py",
        "mdit-py-plugins",
        "pymdown-extensions",
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
        ],
    },
    entry_points={
        "console_scripts": [
            "content-build=cli:cli",
        ],
    },
    python_requires=">=3.9",
)
