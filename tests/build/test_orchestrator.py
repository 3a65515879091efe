"""
Tests for the build orchestrator: output layout, manifest contents,
failure handling and reproducibility.
"""

import json
import os
from datetime import datetime, timezone

import pytest

from contentbuild.build.orchestrator import BuildOrchestrator, format_timestamp
from contentbuild.build.output import lock_path_for
from contentbuild.config.schema import BuildConfig
from contentbuild.errors import (
    BuildFailedError,
    BuildLockError,
    ContentSourceError,
    UnsafeOutputError,
)
from contentbuild.mdx.registry import registry_from_dict


def fixed_clock(hour=10):
    return lambda: datetime(2024, 5, 1, hour, 0, 0, tzinfo=timezone.utc)


def run_build(content, tmp_path, jobs=2, clock=None, **kwargs):
    config = BuildConfig(content_dir=str(content.root), output_dir=str(tmp_path / "out"), jobs=jobs)
    return BuildOrchestrator(config, clock=clock or fixed_clock(), **kwargs).run()


def read_json(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestSuccessfulBuild:
    def test_output_files(self, sample_content, tmp_path):
        result = run_build(sample_content, tmp_path)
        out = result.output_dir

        for relative in (
            "manifest.json",
            "route-map.json",
            "search-meta.json",
            "search-index-ru.json",
            "search-index-en.json",
            "search-index-cz.json",
            "compiled/subjects/algebra/ru/_front.json",
            "compiled/subjects/algebra/en/limits.json",
            "toc/subjects/algebra/en/limits.json",
            "compiled/teachers/ivanov/en/office-hours.json",
            "compiled/system/en/about.json",
            "toc/system/ru/about.json",
        ):
            assert (out / relative).is_file(), relative
        assert not (out / "compiled/subjects/algebra/ru/series.json").exists()
        assert not lock_path_for(out).exists()

    def test_manifest(self, sample_content, tmp_path):
        result = run_build(sample_content, tmp_path)
        manifest = read_json(result.output_dir / "manifest.json")

        assert manifest == result.manifest
        assert manifest["buildTime"] == "2024-05-01T10:00:00.000Z"
        assert manifest["routeMap"] == {
            "algebra": {"type": "subject"},
            "ivanov": {"type": "teacher"},
            "about": {"type": "system-article"},
            "rules": {"type": "system-article"},
        }

        algebra = manifest["subjects"]["algebra"]
        assert algebra["entityType"] == "subject"
        assert [t["slug"] for t in algebra["resolvedTeachers"]] == ["ivanov"]
        assert list(algebra["articles"]) == ["_front", "limits", "series"]
        limits = algebra["articles"]["limits"]
        assert limits["category"] == "basics"
        assert limits["locales"] == ["ru", "en"]
        assert limits["compiledPath"] == "compiled/subjects/algebra/{locale}/limits.json"
        assert limits["frontmatter"]["difficulty"] == "beginner"
        assert "category" not in algebra["articles"]["_front"]

        ivanov = manifest["teachers"]["ivanov"]
        assert ivanov["resolvedSubjects"] == [{"slug": "algebra", "name": algebra["config"]["name"]}]
        assert ivanov["articles"]["office-hours"]["section"] == "notes"

        assert manifest["systemArticles"]["about"]["locales"] == ["ru", "en"]
        assert manifest["systemArticles"]["rules"]["locales"] == []
        assert manifest["systemArticles"]["rules"]["config"]["route"] == "/rules"

    def test_compiled_document_and_toc(self, sample_content, tmp_path):
        result = run_build(sample_content, tmp_path)
        out = result.output_dir
        tree = read_json(out / "compiled/subjects/algebra/en/limits.json")
        assert tree["type"] == "root"
        assert any(c.get("name") == "Callout" for c in tree["children"])
        assert read_json(out / "toc/subjects/algebra/en/limits.json") == [
            {"id": "limits", "text": "Limits", "depth": 1},
            {"id": "definition", "text": "Definition", "depth": 2},
        ]

    def test_content_hash_matches_file(self, sample_content, tmp_path):
        from contentbuild.build.manifest import short_hash
        result = run_build(sample_content, tmp_path)
        entry = result.manifest["subjects"]["algebra"]["articles"]["limits"]
        text = (result.output_dir / "compiled/subjects/algebra/en/limits.json").read_text(encoding="utf-8")
        assert entry["contentHash"]["en"] == short_hash(text)

    def test_search_meta(self, sample_content, tmp_path):
        result = run_build(sample_content, tmp_path)
        meta = read_json(result.output_dir / "search-meta.json")
        assert meta["generatedAt"] == result.build_time
        assert len(meta["hash"]) == 12

    def test_stats(self, sample_content, tmp_path):
        result = run_build(sample_content, tmp_path)
        assert result.stats == {"subjects": 1, "teachers": 1, "system_articles": 2, "documents": 9}

    def test_stale_output_removed(self, sample_content, tmp_path):
        stale = tmp_path / "out" / "compiled" / "old.json"
        stale.parent.mkdir(parents=True)
        stale.write_text("{}", encoding="utf-8")
        run_build(sample_content, tmp_path)
        assert not stale.exists()

    def test_custom_registry(self, content, tmp_path):
        algebra = content.subject("algebra")
        content.article(algebra, "en", "_front", body="<Deck />\n")
        registry = registry_from_dict({"components": {"Deck": {}}})
        assert run_build(content, tmp_path, registry=registry).stats["documents"] == 1


class TestReproducibility:
    def test_rebuild_same_hash_new_time(self, sample_content, tmp_path):
        first = run_build(sample_content, tmp_path, clock=fixed_clock(10))
        first_manifest = dict(first.manifest)
        second = run_build(sample_content, tmp_path, clock=fixed_clock(11))

        assert second.build_hash == first_manifest["buildHash"]
        assert second.build_time != first_manifest["buildTime"]

    def test_worker_count_does_not_change_output(self, sample_content, tmp_path):
        one = run_build(sample_content, tmp_path, jobs=1)
        serial = (one.output_dir / "search-index-en.json").read_text(encoding="utf-8")
        many = run_build(sample_content, tmp_path, jobs=8)
        assert many.build_hash == one.build_hash
        assert (many.output_dir / "search-index-en.json").read_text(encoding="utf-8") == serial

    def test_content_change_changes_hash(self, sample_content, tmp_path):
        before = run_build(sample_content, tmp_path).build_hash
        algebra = sample_content.root / "subjects" / "algebra"
        sample_content.article(algebra, "en", "series", title="Series", body="# Changed\n")
        assert run_build(sample_content, tmp_path).build_hash != before


class TestWarnings:
    def test_ghost_teacher_omitted(self, sample_content, tmp_path):
        sample_content.subject(
            "algebra", teachers=["ivanov", "ghost"],
            categories=[sample_content.category("basics", "limits", "series")],
        )
        result = run_build(sample_content, tmp_path)

        resolved = result.manifest["subjects"]["algebra"]["resolvedTeachers"]
        assert [t["slug"] for t in resolved] == ["ivanov"]
        assert any("ghost" in w.message for w in result.warnings)

    def test_unknown_category_article(self, sample_content, tmp_path):
        sample_content.subject(
            "algebra", categories=[sample_content.category("basics", "limits", "derivatives")],
        )
        result = run_build(sample_content, tmp_path)
        assert [w.rule_id for w in result.warnings] == ["unknown-group-article"]


class TestFailures:
    def test_slug_mismatch_aborts(self, sample_content, tmp_path):
        algebra = sample_content.root / "subjects" / "algebra"
        sample_content.article(algebra, "en", "intro", text=sample_content.document("introduction"))

        with pytest.raises(BuildFailedError) as exc:
            run_build(sample_content, tmp_path)

        assert exc.value.stage == "compilation"
        [error] = exc.value.errors
        assert "frontmatter slug does not match filename" in error.message
        assert not (tmp_path / "out" / "manifest.json").exists()
        assert list((tmp_path / "out").iterdir()) == []

    def test_syntax_error_excerpt(self, sample_content, tmp_path):
        algebra = sample_content.root / "subjects" / "algebra"
        sample_content.article(algebra, "en", "broken", body="\n<Quiz>\nUnclosed\n")

        with pytest.raises(BuildFailedError) as exc:
            run_build(sample_content, tmp_path)

        [excerpt] = exc.value.excerpts
        assert "MDX COMPILATION ERROR" in excerpt
        assert "broken.mdx" in excerpt
        assert ">>>" in excerpt

    def test_route_collision_aborts(self, sample_content, tmp_path):
        sample_content.teacher("algebra-teacher", slug="algebra")
        with pytest.raises(BuildFailedError) as exc:
            run_build(sample_content, tmp_path)
        assert [e.rule_id for e in exc.value.errors] == ["slug-collision"]

    def test_all_errors_collected(self, sample_content, tmp_path):
        algebra = sample_content.root / "subjects" / "algebra"
        sample_content.article(algebra, "en", "one", text=sample_content.document("uno"))
        sample_content.article(algebra, "ru", "two", body="<Carousel />\n")
        with pytest.raises(BuildFailedError) as exc:
            run_build(sample_content, tmp_path)
        assert sorted(e.rule_id for e in exc.value.errors) == ["slug-mismatch", "unknown-component"]

    def test_config_error_aborts_at_loading(self, sample_content, tmp_path):
        sample_content.teacher("petrov", ratings={"overall": 7})
        with pytest.raises(BuildFailedError) as exc:
            run_build(sample_content, tmp_path)
        assert exc.value.stage == "loading"

    def test_missing_content_dir(self, tmp_path):
        config = BuildConfig(content_dir=str(tmp_path / "missing"), output_dir=str(tmp_path / "out"))
        with pytest.raises(ContentSourceError):
            BuildOrchestrator(config).run()

    def test_locked_output(self, sample_content, tmp_path):
        lock = lock_path_for(tmp_path / "out")
        lock.write_text(f"{os.getpid()}\n", encoding="utf-8")
        with pytest.raises(BuildLockError):
            run_build(sample_content, tmp_path)
        assert lock.exists()

    def test_output_parent_of_content_refused(self, sample_content, tmp_path):
        config = BuildConfig(content_dir=str(sample_content.root), output_dir=str(tmp_path))
        with pytest.raises(UnsafeOutputError):
            BuildOrchestrator(config).run()
        assert (sample_content.root / "subjects" / "algebra" / "config.json").is_file()
        assert not lock_path_for(tmp_path).exists()

    def test_output_equal_to_content_refused(self, sample_content):
        root = sample_content.root
        config = BuildConfig(content_dir=str(root), output_dir=str(root / "subjects" / ".."))
        with pytest.raises(UnsafeOutputError, match="must differ"):
            BuildOrchestrator(config).run()
        assert (root / "system" / "config.json").is_file()


def test_format_timestamp():
    moment = datetime(2024, 5, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
    assert format_timestamp(moment) == "2024-05-01T10:00:00.123Z"
