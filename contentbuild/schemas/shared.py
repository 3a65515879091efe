"""
Shared Content Schemas

Types used by every content schema: the supported locales, localized
strings and keyword lists, and the number/slug field types.
"""

from datetime import date, datetime
from typing import Annotated, Any, List, Literal, Tuple, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


# Supported locales, in the order every per-locale output is produced.
LOCALES: Tuple[str, ...] = ("ru", "en", "cz")

Locale = Literal["ru", "en", "cz"]

ENTITY_SLUG_PATTERN = r"^[a-z0-9-]+$"
ARTICLE_SLUG_PATTERN = r"^[a-z0-9_-]+$"


def _require_number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("Input should be a number")
    return value


def _date_to_string(value: Any) -> Any:
    # YAML front matter turns unquoted dates into date objects.
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


Number = Annotated[Union[int, float], BeforeValidator(_require_number)]
DateString = Annotated[str, BeforeValidator(_date_to_string)]
EntitySlug = Annotated[str, Field(pattern=ENTITY_SLUG_PATTERN)]
ArticleSlug = Annotated[str, Field(pattern=ARTICLE_SLUG_PATTERN)]


class ContentModel(BaseModel):
    """Base for all content schemas.

    Fields use strict scalar types, so numbers are never parsed from
    strings. Unknown keys are dropped.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump with original key names, leaving out absent optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LocalizedString(ContentModel):
    """Localized string, required for all supported locales."""
    ru: str
    en: str
    cz: str

    def get(self, locale: str) -> str:
        return getattr(self, locale)


class LocalizedKeywords(ContentModel):
    """Localized keyword lists, required for all supported locales."""
    ru: List[str]
    en: List[str]
    cz: List[str]

    def get(self, locale: str) -> List[str]:
        return getattr(self, locale)
