"""
MDX document handling: parsing, component contracts and compilation.
"""

from contentbuild.mdx.compiler import CompileResult, TocEntry, compile_document
from contentbuild.mdx.components import ComponentValidator, validate_components
from contentbuild.mdx.errors import DocumentSyntaxError
from contentbuild.mdx.frontmatter import FrontmatterError, SplitDocument, split_document
from contentbuild.mdx.parser import DocumentTree, ElementNode, MarkdownNode, parse_document
from contentbuild.mdx.registry import (
    DEFAULT_REGISTRY,
    ComponentContract,
    ComponentRegistry,
    PropContract,
    load_registry,
    registry_from_dict,
)

__all__ = [
    "CompileResult",
    "TocEntry",
    "compile_document",
    "ComponentValidator",
    "validate_components",
    "DocumentSyntaxError",
    "FrontmatterError",
    "SplitDocument",
    "split_document",
    "DocumentTree",
    "ElementNode",
    "MarkdownNode",
    "parse_document",
    "DEFAULT_REGISTRY",
    "ComponentContract",
    "ComponentRegistry",
    "PropContract",
    "load_registry",
    "registry_from_dict",
]
