"""
Tests for the per-locale search indexes.
"""

from contentbuild.build.records import ArticleRecord, CompiledDocument
from contentbuild.build.search import (
    SearchEntry,
    build_search_indexes,
    indexes_to_json,
    search_hash,
)
from contentbuild.build.sources import load_content
from contentbuild.schemas import ArticleFrontmatter


def compiled_record(content, slug, locales, **frontmatter):
    record = ArticleRecord(slug=slug, compiled_path="", toc_path="")
    for locale in locales:
        record.add(CompiledDocument(
            locale=locale, compiled="{}", toc=[], content_hash="x",
            frontmatter=ArticleFrontmatter.model_validate(content.frontmatter(slug, **frontmatter)),
        ))
    return record


def indexes_for(sample_content):
    tree = load_content(sample_content.root)
    c = sample_content
    articles = {
        "subjects": {"algebra": {
            "_front": compiled_record(c, "_front", ["ru", "en"]),
            "series": compiled_record(c, "series", ["en"], title="Series"),
            "limits": compiled_record(c, "limits", ["ru", "en"], title="Limits", difficulty="beginner"),
        }},
        "teachers": {"ivanov": {
            "office-hours": compiled_record(c, "office-hours", ["en"], title="Office hours"),
        }},
    }
    return build_search_indexes(tree.subjects, tree.teachers, tree.system, articles)


class TestSearchIndexes:
    def test_every_locale_present(self, sample_content):
        assert list(indexes_for(sample_content)) == ["ru", "en", "cz"]

    def test_entry_order(self, sample_content):
        ids = [e.id for e in indexes_for(sample_content)["en"]]
        assert ids == [
            "subject:algebra",
            "subject-article:algebra/limits",
            "subject-article:algebra/series",
            "teacher:ivanov",
            "teacher-article:ivanov/office-hours",
            "system:about",
            "system:rules",
        ]

    def test_articles_only_in_compiled_locales(self, sample_content):
        indexes = indexes_for(sample_content)
        assert "subject-article:algebra/series" not in [e.id for e in indexes["ru"]]
        assert [e.id for e in indexes["cz"]] == [
            "subject:algebra", "teacher:ivanov", "system:about", "system:rules",
        ]

    def test_subject_article_entry(self, sample_content):
        entry = next(e for e in indexes_for(sample_content)["ru"] if e.slug == "limits")
        assert entry.to_dict() == {
            "id": "subject-article:algebra/limits",
            "type": "subject-article",
            "slug": "limits",
            "parentSlug": "algebra",
            "title": "Limits (ru)",
            "description": "Algebra (ru) — Limits (ru)",
            "keywords": ["limits"],
            "route": "/algebra/limits",
            "extra": {"difficulty": "beginner"},
        }

    def test_subject_and_teacher_extra(self, sample_content):
        entries = {e.id: e.to_dict() for e in indexes_for(sample_content)["en"]}
        assert entries["subject:algebra"]["extra"] == {"difficulty": "medium", "semester": 1}
        assert entries["teacher:ivanov"]["extra"] == {"teacherRating": 4.5}
        assert "extra" not in entries["teacher-article:ivanov/office-hours"]
        assert "extra" not in entries["subject-article:algebra/series"]

    def test_system_entry(self, sample_content):
        entry = next(e for e in indexes_for(sample_content)["en"] if e.id == "system:rules").to_dict()
        assert entry["route"] == "/rules"
        assert entry["description"] == ""
        assert "parentSlug" not in entry

    def test_hash_is_stable(self, sample_content):
        assert search_hash(indexes_for(sample_content)) == search_hash(indexes_for(sample_content))
        assert len(search_hash(indexes_for(sample_content))) == 12


def test_indexes_to_json():
    entry = SearchEntry(id="teacher:x", type="teacher", slug="x", title="X", description="",
                        keywords=[], route="/x", extra={"teacherRating": None})
    assert indexes_to_json({"en": [entry]}) == {"en": [{
        "id": "teacher:x", "type": "teacher", "slug": "x", "title": "X",
        "description": "", "keywords": [], "route": "/x",
    }]}
