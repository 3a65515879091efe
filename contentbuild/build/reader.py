"""
Build Output Reader

Read side of a finished build, as used by the renderer: the manifest, the
route map, compiled documents and ToCs addressed by their '{locale}' path
templates, and the search indexes.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from contentbuild.errors import ContentSourceError
from contentbuild.schemas import LOCALES


class BuildOutput:
    """A build output directory.

    Example:
        >>> build = BuildOutput(".content-build")
        >>> entry = build.article("subjects", "algebra", "limits")
        >>> tree = build.load_compiled(entry["compiledPath"], "en")
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._manifest: Optional[Dict[str, Any]] = None

    def _read_json(self, relative: str) -> Any:
        file_path = self.path / relative
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise ContentSourceError(f"Build file not found: {file_path}", path=str(file_path)) from e
        except (OSError, ValueError) as e:
            raise ContentSourceError(f"Cannot read build file {file_path}: {e}", path=str(file_path)) from e

    @property
    def manifest(self) -> Dict[str, Any]:
        if self._manifest is None:
            self._manifest = self._read_json("manifest.json")
        return self._manifest

    @property
    def build_hash(self) -> str:
        return self.manifest["buildHash"]

    def route_map(self) -> Dict[str, Dict[str, str]]:
        return self._read_json("route-map.json")

    def route_type(self, slug: str) -> Optional[str]:
        entry = self.manifest["routeMap"].get(slug)
        return entry["type"] if entry else None

    def article(self, kind: str, entity_slug: str, article_slug: str) -> Optional[Dict[str, Any]]:
        """Manifest entry of an article; kind is 'subjects' or 'teachers'."""
        entity = self.manifest.get(kind, {}).get(entity_slug)
        if entity is None:
            return None
        return entity["articles"].get(article_slug)

    def system_article(self, slug: str) -> Optional[Dict[str, Any]]:
        return self.manifest["systemArticles"].get(slug)

    @staticmethod
    def resolve(template: str, locale: str) -> str:
        """Fill a '{locale}' path template.

        Raises:
            ValueError: If the locale is unsupported or the template has no placeholder.
        """
        if locale not in LOCALES:
            raise ValueError(f"Unsupported locale '{locale}'. Supported: {', '.join(LOCALES)}")
        if "{locale}" not in template:
            raise ValueError(f"Path template has no {{locale}} placeholder: {template}")
        return template.replace("{locale}", locale)

    def load_compiled(self, template: str, locale: str) -> Dict[str, Any]:
        """Render tree of a compiled document."""
        return self._read_json(self.resolve(template, locale))

    def load_toc(self, template: str, locale: str) -> List[Dict[str, Any]]:
        return self._read_json(self.resolve(template, locale))

    def search_index(self, locale: str) -> List[Dict[str, Any]]:
        if locale not in LOCALES:
            raise ValueError(f"Unsupported locale '{locale}'. Supported: {', '.join(LOCALES)}")
        return self._read_json(f"search-index-{locale}.json")

    def search_meta(self) -> Dict[str, Any]:
        return self._read_json("search-meta.json")
