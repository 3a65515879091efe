"""
Pytest configuration and fixtures for test isolation and content trees.
"""
import json
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pytest
import yaml


def localized(text: str) -> Dict[str, str]:
    return {"ru": f"{text} (ru)", "en": text, "cz": f"{text} (cz)"}


def keywords(*words: str) -> Dict[str, List[str]]:
    return {"ru": list(words), "en": list(words), "cz": list(words)}


def subject_config(slug: str, teachers: Iterable[str] = (), categories=None, **extra) -> dict:
    config = {
        "slug": slug,
        "name": localized(slug.title()),
        "description": localized(f"About {slug}"),
        "teachers": list(teachers),
        "keywords": keywords(slug),
        "categories": categories if categories is not None else [],
    }
    config.update(extra)
    return config


def teacher_config(slug: str, subjects: Iterable[str] = (), sections=None, **extra) -> dict:
    config = {
        "slug": slug,
        "name": localized(slug.title()),
        "description": localized(f"Teacher {slug}"),
        "subjects": list(subjects),
        "ratings": {"overall": 4.5, "clarity": 4, "difficulty": 3, "usefulness": 5, "count": 12},
        "keywords": keywords(slug),
    }
    if sections is not None:
        config["sections"] = sections
    config.update(extra)
    return config


def category(slug: str, *articles: str) -> dict:
    return {"slug": slug, "name": localized(slug.title()), "articles": list(articles)}


def system_entry(slug: str, route: Optional[str] = None, **extra) -> dict:
    entry = {
        "slug": slug,
        "route": route or f"/{slug}",
        "name": localized(slug.title()),
        "keywords": keywords(slug),
    }
    entry.update(extra)
    return entry


def frontmatter(slug: str, title: str = "Intro", **extra) -> dict:
    data = {
        "title": localized(title),
        "slug": slug,
        "keywords": keywords(slug),
        "created": "2024-01-15",
    }
    data.update(extra)
    return data


def document(slug: str, body: str = "# Heading\n\nSome text.\n", title: str = "Intro", **extra) -> str:
    meta = yaml.safe_dump(frontmatter(slug, title, **extra), allow_unicode=True, sort_keys=False)
    return f"---\n{meta}---\n{body}"


class ContentTreeBuilder:
    """Writes a content tree (subjects/, teachers/, system/) under root."""

    localized = staticmethod(localized)
    keywords = staticmethod(keywords)
    category = staticmethod(category)
    system_entry = staticmethod(system_entry)
    subject_config = staticmethod(subject_config)
    teacher_config = staticmethod(teacher_config)
    frontmatter = staticmethod(frontmatter)
    document = staticmethod(document)

    def __init__(self, root: Path):
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _write_config(self, directory: Path, config: dict) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "config.json").write_text(
            json.dumps(config, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        return directory

    def subject(self, dir_name: str, slug: Optional[str] = None, **kwargs) -> Path:
        return self._write_config(
            self.root / "subjects" / dir_name, subject_config(slug or dir_name, **kwargs)
        )

    def teacher(self, dir_name: str, slug: Optional[str] = None, **kwargs) -> Path:
        return self._write_config(
            self.root / "teachers" / dir_name, teacher_config(slug or dir_name, **kwargs)
        )

    def system(self, *entries: dict) -> Path:
        return self._write_config(self.root / "system", {"articles": list(entries)})

    def article(self, entity_dir: Path, locale: str, name: str, text: Optional[str] = None,
                **kwargs) -> Path:
        path = Path(entity_dir) / "articles" / locale / f"{name}.mdx"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text if text is not None else document(name, **kwargs), encoding="utf-8")
        return path


@pytest.fixture
def content(tmp_path):
    """Empty content tree builder rooted at tmp_path/content."""
    return ContentTreeBuilder(tmp_path / "content")


@pytest.fixture
def sample_content(content):
    """A small valid tree: one subject, one teacher, one system article."""
    algebra = content.subject(
        "algebra", teachers=["ivanov"],
        categories=[category("basics", "limits", "series")],
        metadata={"semester": 1, "difficulty": "medium"},
    )
    content.article(algebra, "ru", "_front", body="# Алгебра\n")
    content.article(algebra, "en", "_front", body="# Algebra\n")
    content.article(algebra, "ru", "limits", title="Limits", difficulty="beginner",
                    body="# Предел\n\n## Определение\n\nТекст.\n")
    content.article(algebra, "en", "limits", title="Limits", difficulty="beginner",
                    body="# Limits\n\n## Definition\n\n<Callout type=\"info\">\n  Note.\n</Callout>\n")
    content.article(algebra, "en", "series", title="Series",
                    body="# Series\n\n<Quiz>\n  <Question text=\"Converges?\">\n"
                         "    <Option value=\"yes\" correct />\n  </Question>\n</Quiz>\n")

    ivanov = content.teacher("ivanov", subjects=["algebra"],
                             sections=[category("notes", "office-hours")])
    content.article(ivanov, "en", "_front", body="# Ivan Ivanov\n")
    content.article(ivanov, "en", "office-hours", title="Office hours", body="## When\n\nMondays.\n")

    system = content.system(system_entry("about"), system_entry("rules", "/rules"))
    content.article(system, "en", "about", title="About", body="# About\n")
    content.article(system, "ru", "about", title="About", body="# О проекте\n")
    return content


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers tests attach to the root logger."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture(autouse=True, scope="function")
def reset_environment():
    """Reset environment variables between tests."""
    original_env = os.environ.copy()
    yield
    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)
