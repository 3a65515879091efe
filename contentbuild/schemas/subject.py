"""
Subject config.json Schema
"""

from typing import List, Literal, Optional

from contentbuild.schemas.shared import (
    ContentModel,
    EntitySlug,
    LocalizedKeywords,
    LocalizedString,
    Number,
)


class ArticleGroup(ContentModel):
    """A named, ordered list of article slugs (subject category or teacher section)."""
    slug: str
    name: LocalizedString
    articles: List[str]


class SubjectMetadata(ContentModel):
    semester: Optional[Number] = None
    credits: Optional[Number] = None
    difficulty: Optional[Literal["easy", "medium", "hard"]] = None
    department: Optional[LocalizedString] = None


class SubjectConfig(ContentModel):
    """Subject configuration.

    Attributes:
        slug: Public route segment of the subject
        name: Localized display name
        description: Localized description
        teachers: Slugs of teachers giving the subject
        keywords: Localized search keywords
        categories: Table of contents; each article belongs to one category
        metadata: Optional semester/credits/difficulty/department
    """
    slug: EntitySlug
    name: LocalizedString
    description: LocalizedString
    teachers: List[str]
    keywords: LocalizedKeywords
    categories: List[ArticleGroup]
    metadata: Optional[SubjectMetadata] = None
