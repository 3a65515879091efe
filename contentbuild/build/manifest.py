"""
Manifest Assembler

The manifest is the single entry point of a finished build: it describes
every entity, article and route and names the files the renderer loads.

buildHash is derived from the canonical JSON of the manifest without its
timestamp, so rebuilding unchanged content yields the same hash.
"""

import hashlib
import json
from typing import Any, Dict, List, Mapping, Optional

from contentbuild.build.records import ArticleRecord
from contentbuild.schemas import LOCALES


HASH_LENGTH = 12


def canonical_json(data: Any) -> str:
    """Sorted keys, compact separators, UTF-8 text."""
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def short_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def compute_build_hash(manifest: Mapping[str, Any]) -> str:
    """Hash of the manifest content, ignoring buildTime and buildHash."""
    content = {k: v for k, v in manifest.items() if k not in ("buildTime", "buildHash")}
    return short_hash(canonical_json(content))


def article_entry(record: ArticleRecord, group_field: Optional[str] = None) -> Dict[str, Any]:
    """Manifest entry of one subject or teacher article."""
    entry: Dict[str, Any] = {
        "frontmatter": record.frontmatter.to_json_dict() if record.frontmatter else None,
        "locales": record.locales,
        "compiledPath": record.compiled_path,
        "tocPath": record.toc_path,
        "contentHash": record.content_hashes(),
    }
    if group_field and record.group is not None:
        entry[group_field] = record.group
    return entry


def system_article_entry(record: ArticleRecord) -> Dict[str, Any]:
    return {
        "config": record.system_entry.to_json_dict() if record.system_entry else None,
        "locales": record.locales,
        "compiledPath": record.compiled_path,
        "tocPath": record.toc_path,
        "contentHash": record.content_hashes(),
    }


def entity_entry(
    entity,
    entity_type: str,
    resolved_key: str,
    resolved: List[Dict[str, Any]],
    articles: Mapping[str, ArticleRecord],
    group_field: str,
) -> Dict[str, Any]:
    return {
        "config": entity.config.to_json_dict(),
        "entityType": entity_type,
        resolved_key: resolved,
        "articles": {
            slug: article_entry(articles[slug], group_field) for slug in sorted(articles)
        },
    }


def assemble_manifest(
    build_time: str,
    route_map: Mapping[str, Dict[str, str]],
    subjects: Mapping[str, Dict[str, Any]],
    teachers: Mapping[str, Dict[str, Any]],
    system_articles: Mapping[str, Dict[str, Any]],
) -> Dict[str, Any]:
    """Put the manifest together and stamp it with buildHash.

    Args:
        build_time: ISO timestamp of the build
        route_map: slug -> {"type": kind}
        subjects: subject slug -> entity entry
        teachers: teacher slug -> entity entry
        system_articles: system article slug -> entry
    """
    manifest: Dict[str, Any] = {
        "buildHash": "",
        "buildTime": build_time,
        "locales": list(LOCALES),
        "routeMap": dict(route_map),
        "subjects": dict(subjects),
        "teachers": dict(teachers),
        "systemArticles": dict(system_articles),
    }
    manifest["buildHash"] = compute_build_hash(manifest)
    return manifest
