"""
Teacher config.json Schema

Teachers are the instructors giving subjects; each has a profile page with
ratings, reviews and optional articles grouped into sections.
"""

from typing import Annotated, Any, Callable, List, Optional
from urllib.parse import urlparse

from pydantic import AfterValidator, EmailStr, Field, StrictBool, StrictInt, field_validator

from contentbuild.schemas.shared import (
    ContentModel,
    EntitySlug,
    LocalizedKeywords,
    LocalizedString,
    Number,
)
from contentbuild.schemas.subject import ArticleGroup


def _between(low: float, high: float) -> Callable[[Any], Any]:
    def check(value):
        if value < low or value > high:
            raise ValueError(f"Input should be between {low} and {high}")
        return value
    return check


Score = Annotated[Number, AfterValidator(_between(0, 5))]
ReviewRating = Annotated[Number, AfterValidator(_between(1, 5))]


class Ratings(ContentModel):
    overall: Score
    clarity: Score
    difficulty: Score
    usefulness: Score
    count: StrictInt = Field(ge=0)


class Contacts(ContentModel):
    email: Optional[EmailStr] = None
    office: Optional[LocalizedString] = None
    website: Optional[str] = None

    @field_validator("website")
    @classmethod
    def _check_website(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("Input should be a valid http(s) URL")
        return value


class Review(ContentModel):
    text: LocalizedString
    rating: ReviewRating
    date: str
    anonymous: StrictBool = True


class TeacherConfig(ContentModel):
    """Teacher configuration.

    Attributes:
        slug: Public route segment of the teacher
        name: Localized display name
        description: Localized description
        photo: Optional photo URL or path
        subjects: Slugs of subjects the teacher gives
        ratings: Aggregate ratings (0-5) and review count
        keywords: Localized search keywords
        contacts: Optional email/office/website
        reviews: Optional student reviews
        sections: Optional article groups on the teacher page
    """
    slug: EntitySlug
    name: LocalizedString
    description: LocalizedString
    photo: Optional[str] = None
    subjects: List[str]
    ratings: Ratings
    keywords: LocalizedKeywords
    contacts: Optional[Contacts] = None
    reviews: Optional[List[Review]] = None
    sections: Optional[List[ArticleGroup]] = None
