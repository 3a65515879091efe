"""Front matter splitting for MDX documents."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict

import frontmatter
import yaml


logger = logging.getLogger(__name__)

_BOUNDARY = re.compile(r"^-{3,}[ \t]*\r?$", re.MULTILINE)


class FrontmatterError(ValueError):
    """Front matter is present but cannot be parsed."""
    pass


@dataclass
class SplitDocument:
    """A document split into metadata and body.

    Attributes:
        metadata: Parsed front matter mapping ({} when absent)
        body: Document body exactly as written after the closing '---'
        body_line_offset: Number of file lines before the body starts
    """
    metadata: Dict[str, Any]
    body: str
    body_line_offset: int


def split_document(source: str) -> SplitDocument:
    """Split YAML front matter from the document body.

    Metadata is parsed with python-frontmatter. The body is cut at the
    closing delimiter without stripping, so line numbers in the body can be
    mapped back to the file.

    Raises:
        FrontmatterError: If the front matter is not valid YAML or not a mapping.
    """
    text = source.lstrip("\ufeff")
    try:
        post = frontmatter.loads(text)
    except (yaml.YAMLError, ValueError, TypeError) as e:
        raise FrontmatterError(str(e)) from e

    if not isinstance(post.metadata, dict):
        raise FrontmatterError("front matter must be a mapping")
    metadata = dict(post.metadata)

    boundaries = list(_BOUNDARY.finditer(text)) if text.startswith("---") else []
    if len(boundaries) < 2 or boundaries[0].start() != 0:
        return SplitDocument(metadata, text, 0)

    end = boundaries[1].end()
    if end < len(text) and text[end] == "\n":
        end += 1
    offset = text.count("\n", 0, end)
    return SplitDocument(metadata, text[end:], offset)
