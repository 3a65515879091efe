"""
Tests for contentbuild.schemas and the schema validator.

Covers localized fields, strict scalar types, teacher ratings and contacts,
system article entries and front matter.
"""

import json

import pytest

from contentbuild.errors import ContentSourceError, SchemaWiringError
from contentbuild.schemas import (
    ArticleFrontmatter,
    SubjectConfig,
    SystemConfig,
    TeacherConfig,
)
from contentbuild.validation.report import CATEGORY_CONFIG, CATEGORY_FRONTMATTER
from contentbuild.validation.schema_validator import (
    load_json_config,
    validate_by_schema,
    validate_config,
)


class TestSubjectConfig:
    def test_valid_subject(self, content):
        result = validate_config(content.subject_config("algebra", teachers=["ivanov"]), SubjectConfig)
        assert result.is_valid
        assert result.value.slug == "algebra"
        assert result.value.name.get("en") == "Algebra"

    def test_missing_locale_reported_once_per_field(self, content):
        data = content.subject_config("algebra")
        data["name"] = {"ru": "Алгебра"}
        result = validate_config(data, SubjectConfig, file_path="subjects/algebra/config.json")

        assert not result.is_valid
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.field == "name"
        assert "en, cz" in issue.message
        assert issue.category == CATEGORY_CONFIG
        assert issue.file_path == "subjects/algebra/config.json"

    def test_slug_pattern(self, content):
        result = validate_config(content.subject_config("Linear Algebra"), SubjectConfig)
        assert not result.is_valid
        assert result.issues[0].field == "slug"

    def test_semester_must_be_number(self, content):
        data = content.subject_config("algebra", metadata={"semester": "1"})
        result = validate_config(data, SubjectConfig)
        assert not result.is_valid
        assert result.issues[0].field == "metadata.semester"

    def test_unknown_keys_dropped(self, content):
        data = content.subject_config("algebra", legacyField=True)
        result = validate_config(data, SubjectConfig)
        assert result.is_valid
        assert "legacyField" not in result.value.to_json_dict()

    def test_to_json_dict_omits_absent_optionals(self, content):
        result = validate_config(content.subject_config("algebra"), SubjectConfig)
        dumped = result.value.to_json_dict()
        assert "metadata" not in dumped
        assert list(dumped["name"]) == ["ru", "en", "cz"]


class TestTeacherConfig:
    def test_valid_teacher(self, content):
        result = validate_config(content.teacher_config("ivanov", subjects=["algebra"]), TeacherConfig)
        assert result.is_valid
        assert result.value.ratings.count == 12

    @pytest.mark.parametrize("overall", [-0.5, 5.5])
    def test_rating_out_of_range(self, content, overall):
        data = content.teacher_config("ivanov")
        data["ratings"]["overall"] = overall
        result = validate_config(data, TeacherConfig)
        assert not result.is_valid
        assert result.issues[0].field == "ratings.overall"

    def test_rating_count_is_integer(self, content):
        data = content.teacher_config("ivanov")
        data["ratings"]["count"] = 2.5
        assert not validate_config(data, TeacherConfig).is_valid

    def test_review_rating_lower_bound(self, content):
        data = content.teacher_config("ivanov", reviews=[{
            "text": content.localized("Great"), "rating": 0, "date": "2024-02-01",
        }])
        result = validate_config(data, TeacherConfig)
        assert not result.is_valid
        assert result.issues[0].field == "reviews.0.rating"

    def test_contacts(self, content):
        data = content.teacher_config("ivanov", contacts={
            "email": "ivanov@example.edu", "website": "https://example.edu/~ivanov",
        })
        assert validate_config(data, TeacherConfig).is_valid

    @pytest.mark.parametrize("contacts", [
        {"email": "not-an-email"},
        {"website": "example.edu"},
        {"website": "ftp://example.edu"},
    ])
    def test_invalid_contacts(self, content, contacts):
        data = content.teacher_config("ivanov", contacts=contacts)
        assert not validate_config(data, TeacherConfig).is_valid


class TestSystemConfig:
    def test_valid_system(self, content):
        data = {"articles": [content.system_entry("about"), content.system_entry("faq", pinned=True)]}
        result = validate_config(data, SystemConfig)
        assert result.is_valid
        assert [a.slug for a in result.value.articles] == ["about", "faq"]

    def test_route_must_start_with_slash(self, content):
        data = {"articles": [content.system_entry("about", route="about")]}
        result = validate_config(data, SystemConfig)
        assert not result.is_valid
        assert result.issues[0].field == "articles.0.route"

    def test_pinned_is_strict_bool(self, content):
        data = {"articles": [content.system_entry("about", pinned="yes")]}
        assert not validate_config(data, SystemConfig).is_valid


class TestArticleFrontmatter:
    def test_valid_frontmatter(self, content):
        result = validate_config(content.frontmatter("limits", estimatedReadTime=7), ArticleFrontmatter)
        assert result.is_valid
        assert result.value.estimated_read_time == 7
        assert result.value.to_json_dict()["estimatedReadTime"] == 7

    def test_date_objects_become_strings(self, content):
        import datetime
        data = content.frontmatter("limits", created=datetime.date(2024, 1, 15))
        result = validate_config(data, ArticleFrontmatter)
        assert result.value.created == "2024-01-15"

    def test_invalid_difficulty(self, content):
        data = content.frontmatter("limits", difficulty="expert")
        result = validate_config(data, ArticleFrontmatter, category=CATEGORY_FRONTMATTER)
        assert not result.is_valid
        assert result.issues[0].category == CATEGORY_FRONTMATTER

    def test_missing_title_locale_prefixed(self, content):
        data = content.frontmatter("limits")
        data["title"] = {"en": "Limits"}
        result = validate_config(data, ArticleFrontmatter, category=CATEGORY_FRONTMATTER)
        assert result.issues[0].message.startswith("Frontmatter: title: missing locale(s) ru, cz")

    def test_front_slug_allowed(self, content):
        assert validate_config(content.frontmatter("_front"), ArticleFrontmatter).is_valid


class TestSchemaValidator:
    def test_non_mapping_data(self):
        result = validate_config(["not", "a", "mapping"], SubjectConfig)
        assert not result.is_valid
        assert "Expected an object" in result.issues[0].message

    def test_not_a_schema_raises(self):
        with pytest.raises(SchemaWiringError):
            validate_config({}, dict)

    def test_validate_by_schema_unknown_type(self):
        with pytest.raises(SchemaWiringError, match="Unknown schema type"):
            validate_by_schema({}, "course")

    def test_validate_by_schema_article_uses_frontmatter_category(self):
        result = validate_by_schema({}, "article")
        assert result.issues
        assert all(i.category == CATEGORY_FRONTMATTER for i in result.issues)

    def test_load_json_config_missing_file(self, tmp_path):
        result = load_json_config(tmp_path / "config.json", SubjectConfig)
        assert not result.is_valid
        assert "not found" in result.issues[0].message

    def test_load_json_config_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"slug": "algebra",\n}', encoding="utf-8")
        result = load_json_config(path, SubjectConfig)
        issue = result.issues[0]
        assert "not valid JSON" in issue.message
        assert issue.line == 2

    def test_load_json_config_valid(self, tmp_path, content):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(content.subject_config("algebra")), encoding="utf-8")
        assert load_json_config(path, SubjectConfig).is_valid

    def test_load_json_config_undecodable(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_bytes(b"\xff\xfe\x00garbage")
        with pytest.raises(ContentSourceError):
            load_json_config(path, SubjectConfig)
