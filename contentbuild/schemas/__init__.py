"""
Content Schemas

Pydantic models for every configuration object: subject, teacher and system
config.json files and per-document front matter.
"""

from contentbuild.schemas.shared import (
    LOCALES,
    Locale,
    LocalizedKeywords,
    LocalizedString,
)
from contentbuild.schemas.article import FRONT_SLUG, ArticleFrontmatter
from contentbuild.schemas.subject import ArticleGroup, SubjectConfig
from contentbuild.schemas.teacher import TeacherConfig
from contentbuild.schemas.system import SystemArticleEntry, SystemConfig

__all__ = [
    "LOCALES",
    "Locale",
    "LocalizedString",
    "LocalizedKeywords",
    "FRONT_SLUG",
    "ArticleFrontmatter",
    "ArticleGroup",
    "SubjectConfig",
    "TeacherConfig",
    "SystemArticleEntry",
    "SystemConfig",
]
