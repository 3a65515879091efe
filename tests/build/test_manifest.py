"""
Tests for manifest assembly and hashing.
"""

from contentbuild.build.manifest import (
    HASH_LENGTH,
    article_entry,
    assemble_manifest,
    canonical_json,
    compute_build_hash,
    short_hash,
)
from contentbuild.build.records import ArticleRecord, CompiledDocument
from contentbuild.schemas import ArticleFrontmatter


def record(content, locales=("en", "ru"), group=None):
    record = ArticleRecord(
        slug="limits",
        compiled_path="compiled/subjects/algebra/{locale}/limits.json",
        toc_path="toc/subjects/algebra/{locale}/limits.json",
        group=group,
    )
    for locale in locales:
        record.add(CompiledDocument(
            locale=locale,
            compiled='{"children":[],"type":"root"}',
            toc=[],
            content_hash=f"hash-{locale}",
            frontmatter=ArticleFrontmatter.model_validate(
                content.frontmatter("limits", title=f"Limits {locale}")
            ),
        ))
    return record


class TestHashing:
    def test_canonical_json(self):
        assert canonical_json({"b": 1, "a": ["ж", 2]}) == '{"a":["ж",2],"b":1}'

    def test_short_hash(self):
        value = short_hash("content")
        assert len(value) == HASH_LENGTH
        assert value == short_hash("content")
        assert value != short_hash("content ")

    def test_build_hash_ignores_time(self):
        first = {"buildHash": "", "buildTime": "2024-01-01T00:00:00.000Z", "subjects": {}}
        second = dict(first, buildTime="2025-06-01T12:00:00.000Z", buildHash="abc")
        assert compute_build_hash(first) == compute_build_hash(second)

    def test_build_hash_tracks_content(self):
        assert compute_build_hash({"subjects": {}}) != compute_build_hash({"subjects": {"a": {}}})


class TestArticleRecord:
    def test_locales_in_supported_order(self, content):
        assert record(content, locales=("cz", "en", "ru")).locales == ["ru", "en", "cz"]

    def test_frontmatter_from_first_locale(self, content):
        assert record(content, locales=("en", "ru")).frontmatter.title.en == "Limits ru"

    def test_path_for(self, content):
        r = record(content)
        assert r.path_for(r.compiled_path, "cz") == "compiled/subjects/algebra/cz/limits.json"


class TestManifest:
    def test_article_entry(self, content):
        entry = article_entry(record(content, group="basics"), "category")
        assert list(entry) == ["frontmatter", "locales", "compiledPath", "tocPath", "contentHash", "category"]
        assert entry["contentHash"] == {"ru": "hash-ru", "en": "hash-en"}
        assert entry["frontmatter"]["slug"] == "limits"

    def test_article_entry_without_group(self, content):
        assert "category" not in article_entry(record(content), "category")

    def test_assemble(self):
        manifest = assemble_manifest(
            build_time="2024-05-01T10:00:00.000Z",
            route_map={"algebra": {"type": "subject"}},
            subjects={"algebra": {}},
            teachers={},
            system_articles={},
        )
        assert list(manifest) == [
            "buildHash", "buildTime", "locales", "routeMap", "subjects", "teachers", "systemArticles",
        ]
        assert manifest["locales"] == ["ru", "en", "cz"]
        assert manifest["buildHash"] == compute_build_hash(manifest)
