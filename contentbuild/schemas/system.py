"""
System Article Set Schema

System articles (about, rules, FAQ, ...) are declared in one config.json
with an explicit public route each.
"""

from typing import List, Optional

from pydantic import Field, StrictBool

from contentbuild.schemas.shared import (
    ContentModel,
    EntitySlug,
    LocalizedKeywords,
    LocalizedString,
    Number,
)


class SystemArticleEntry(ContentModel):
    slug: EntitySlug
    route: str = Field(pattern=r"^/")
    name: LocalizedString
    description: Optional[LocalizedString] = None
    keywords: LocalizedKeywords
    pinned: StrictBool = False
    order: Optional[Number] = None


class SystemConfig(ContentModel):
    articles: List[SystemArticleEntry]
