"""
Article Frontmatter Schema

Validated for every document before it is compiled.
"""

from typing import List, Literal, Optional

from pydantic import Field

from contentbuild.schemas.shared import (
    ArticleSlug,
    ContentModel,
    DateString,
    LocalizedKeywords,
    LocalizedString,
    Number,
)


# Filename stem of an entity's landing document.
FRONT_SLUG = "_front"


class ArticleFrontmatter(ContentModel):
    """Front matter block at the top of every article.

    Attributes:
        title: Localized article title
        slug: Must equal the filename stem (except for _front documents)
        author: Optional author name
        keywords: Localized search keywords
        created: Creation date (ISO string)
        updated: Last update date (ISO string)
        difficulty: Optional difficulty label
        estimated_read_time: Minutes, serialized as estimatedReadTime
        prerequisites: Slugs of articles to read first
        tutors: Teacher slugs associated with the article
    """
    title: LocalizedString
    slug: ArticleSlug
    author: Optional[str] = None
    keywords: LocalizedKeywords
    created: DateString
    updated: Optional[DateString] = None
    difficulty: Optional[Literal["beginner", "intermediate", "advanced"]] = None
    estimated_read_time: Optional[Number] = Field(default=None, alias="estimatedReadTime")
    prerequisites: Optional[List[str]] = None
    tutors: Optional[List[str]] = None
