"""
Search Index Builder

Produces one flat index per locale. Entry order is fixed: subjects by
directory name, each followed by its articles sorted by slug, then teachers
likewise, then system articles in config order.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

from contentbuild.build.manifest import canonical_json, short_hash
from contentbuild.build.records import ArticleRecord
from contentbuild.schemas import FRONT_SLUG, LOCALES


@dataclass
class SearchEntry:
    id: str
    type: str
    slug: str
    title: str
    description: str
    keywords: List[str]
    route: str
    parent_slug: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"id": self.id, "type": self.type, "slug": self.slug}
        if self.parent_slug is not None:
            d["parentSlug"] = self.parent_slug
        d.update({
            "title": self.title,
            "description": self.description,
            "keywords": list(self.keywords),
            "route": self.route,
        })
        extra = {k: v for k, v in (self.extra or {}).items() if v is not None}
        if extra:
            d["extra"] = extra
        return d


def _article_entries(
    locale: str,
    entity,
    articles: Mapping[str, ArticleRecord],
    entry_type: str,
    include_difficulty: bool,
) -> List[SearchEntry]:
    entries = []
    for slug in sorted(articles):
        record = articles[slug]
        if slug == FRONT_SLUG or locale not in record.documents or record.frontmatter is None:
            continue
        frontmatter = record.frontmatter
        title = frontmatter.title.get(locale)
        entries.append(SearchEntry(
            id=f"{entry_type}:{entity.slug}/{slug}",
            type=entry_type,
            slug=slug,
            parent_slug=entity.slug,
            title=title,
            description=f"{entity.config.name.get(locale)} — {title}",
            keywords=frontmatter.keywords.get(locale),
            route=f"/{entity.slug}/{slug}",
            extra={"difficulty": frontmatter.difficulty} if include_difficulty else None,
        ))
    return entries


def build_search_indexes(
    subjects: Sequence,
    teachers: Sequence,
    system,
    articles: Mapping[str, Mapping[str, Mapping[str, ArticleRecord]]],
) -> Dict[str, List[SearchEntry]]:
    """Build the per-locale search indexes.

    Args:
        subjects: Loaded subjects in directory name order
        teachers: Loaded teachers in directory name order
        system: Loaded system article set, or None
        articles: kind ('subjects'/'teachers') -> entity slug -> article slug -> record

    Returns:
        locale -> entries, for every supported locale.
    """
    subject_articles = articles.get("subjects", {})
    teacher_articles = articles.get("teachers", {})
    indexes: Dict[str, List[SearchEntry]] = {}

    for locale in LOCALES:
        entries: List[SearchEntry] = []

        for subject in subjects:
            config = subject.config
            metadata = config.metadata
            entries.append(SearchEntry(
                id=f"subject:{config.slug}",
                type="subject",
                slug=config.slug,
                title=config.name.get(locale),
                description=config.description.get(locale),
                keywords=config.keywords.get(locale),
                route=f"/{config.slug}",
                extra={
                    "difficulty": metadata.difficulty if metadata else None,
                    "semester": metadata.semester if metadata else None,
                },
            ))
            entries.extend(_article_entries(
                locale, subject, subject_articles.get(config.slug, {}), "subject-article", True
            ))

        for teacher in teachers:
            config = teacher.config
            entries.append(SearchEntry(
                id=f"teacher:{config.slug}",
                type="teacher",
                slug=config.slug,
                title=config.name.get(locale),
                description=config.description.get(locale),
                keywords=config.keywords.get(locale),
                route=f"/{config.slug}",
                extra={"teacherRating": config.ratings.overall},
            ))
            entries.extend(_article_entries(
                locale, teacher, teacher_articles.get(config.slug, {}), "teacher-article", False
            ))

        if system is not None:
            for entry in system.config.articles:
                entries.append(SearchEntry(
                    id=f"system:{entry.slug}",
                    type="system-article",
                    slug=entry.slug,
                    title=entry.name.get(locale),
                    description=entry.description.get(locale) if entry.description else "",
                    keywords=entry.keywords.get(locale),
                    route=entry.route,
                ))

        indexes[locale] = entries

    return indexes


def indexes_to_json(indexes: Mapping[str, Sequence[SearchEntry]]) -> Dict[str, List[Dict[str, Any]]]:
    return {locale: [entry.to_dict() for entry in entries] for locale, entries in indexes.items()}


def search_hash(indexes: Mapping[str, Sequence[SearchEntry]]) -> str:
    """First 12 hex chars of SHA-256 over the canonical JSON of all indexes."""
    return short_hash(canonical_json(indexes_to_json(indexes)))
