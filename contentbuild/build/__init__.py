"""
Content build pipeline: loading, routes, relationships, search, manifest.
"""

from contentbuild.build.orchestrator import BuildOrchestrator, BuildResult
from contentbuild.build.reader import BuildOutput
from contentbuild.build.routes import RESERVED_SLUGS, RouteRegistration, RouteRegistry

__all__ = [
    "BuildOrchestrator",
    "BuildResult",
    "BuildOutput",
    "RESERVED_SLUGS",
    "RouteRegistration",
    "RouteRegistry",
]
