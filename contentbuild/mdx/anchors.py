"""Heading anchor ids."""

from typing import Dict

from pymdownx.slugs import slugify as _md_slugify

# Lower-cases, strips punctuation and keeps unicode letters, so Cyrillic
# headings get readable ids.
_slugify = _md_slugify(case="lower")

EMPTY_SLUG = "section"


class AnchorSlugger:
    """Hands out unique anchor ids within one document.

    The first heading with a given text gets the plain slug; repeats get
    '-1', '-2', ... appended ('overview', 'overview-1'). Create a new
    slugger per document.
    """

    def __init__(self):
        self._occurrences: Dict[str, int] = {}

    def slug(self, text: str) -> str:
        base = _slugify(text, sep="-") or EMPTY_SLUG
        result = base
        while result in self._occurrences:
            self._occurrences[base] += 1
            result = f"{base}-{self._occurrences[base]}"
        self._occurrences[result] = 0
        return result

    def reset(self) -> None:
        self._occurrences.clear()
