"""
content-build

Validates and compiles a tree of subjects, teachers and system articles
into a deterministic build artifact consumed by the site renderer.
"""

__version__ = "1.0.0"
