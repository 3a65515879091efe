"""
Route Registry

Subjects, teachers and system articles share one flat URL namespace
(/<slug>). The registry claims slugs in a fixed order and records every
reserved word use and collision as a structure diagnostic; the first
registrant keeps a contested slot.
"""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from contentbuild.schemas import ArticleGroup
from contentbuild.utils.error_messages import ErrorCategory, ErrorMessages
from contentbuild.validation.report import CATEGORY_STRUCTURE, Diagnostic


logger = logging.getLogger(__name__)

# Framework and application routes that content may never claim
RESERVED_SLUGS = ("api", "_next", "not-found", "search")

KIND_SUBJECT = "subject"
KIND_TEACHER = "teacher"
KIND_SYSTEM_ARTICLE = "system-article"

KIND_LABELS = {
    KIND_SUBJECT: "Subject",
    KIND_TEACHER: "Teacher",
    KIND_SYSTEM_ARTICLE: "System Article",
}


@dataclass(frozen=True)
class RouteRegistration:
    slug: str
    kind: str
    source: str


class RouteRegistry:
    """Claims slugs in the global namespace.

    Example:
        >>> routes = RouteRegistry()
        >>> routes.register("algebra", KIND_SUBJECT, "subjects/algebra/config.json")
        >>> routes.register("algebra", KIND_TEACHER, "teachers/x/config.json").rule_id
        'slug-collision'
    """

    def __init__(self, reserved: Iterable[str] = RESERVED_SLUGS):
        self.reserved = tuple(OrderedDict.fromkeys(reserved))
        self._routes: "OrderedDict[str, RouteRegistration]" = OrderedDict()
        self.violations: List[Diagnostic] = []

    def __contains__(self, slug: str) -> bool:
        return slug in self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def get(self, slug: str) -> Optional[RouteRegistration]:
        return self._routes.get(slug)

    @property
    def registrations(self) -> List[RouteRegistration]:
        return list(self._routes.values())

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def register(self, slug: str, kind: str, source: str) -> Optional[Diagnostic]:
        """Claim slug for kind. Returns the violation, or None on success."""
        label = KIND_LABELS.get(kind, kind)

        if slug in self.reserved:
            message, suggestion = ErrorMessages.format_message(
                ErrorCategory.STRUCTURE, "reserved_slug",
                kind=label, slug=slug, source=source, reserved=", ".join(self.reserved),
            )
            return self._violation(message, suggestion, source, "reserved-slug")

        existing = self._routes.get(slug)
        if existing is not None:
            message, suggestion = ErrorMessages.format_message(
                ErrorCategory.STRUCTURE, "slug_collision",
                slug=slug,
                first_kind=KIND_LABELS.get(existing.kind, existing.kind),
                first_source=existing.source,
                second_kind=label,
                second_source=source,
            )
            return self._violation(message, suggestion, source, "slug-collision")

        self._routes[slug] = RouteRegistration(slug=slug, kind=kind, source=source)
        return None

    def check_article_groups(
        self,
        owner_slug: str,
        groups: Optional[Sequence[ArticleGroup]],
        source: str,
        owner_kind: str = KIND_SUBJECT,
    ) -> List[Diagnostic]:
        """Check that no article is listed in two groups of one owner."""
        memberships: "OrderedDict[str, List[str]]" = OrderedDict()
        for group in groups or ():
            for article in group.articles:
                memberships.setdefault(article, []).append(group.slug)

        group_label = "categories" if owner_kind == KIND_SUBJECT else "sections"
        found = []
        for article, group_slugs in memberships.items():
            if len(group_slugs) < 2:
                continue
            message, suggestion = ErrorMessages.format_message(
                ErrorCategory.STRUCTURE, "article_duplicate",
                owner_kind=KIND_LABELS.get(owner_kind, owner_kind),
                owner=owner_slug,
                article=article,
                group_label=group_label,
                groups=", ".join(group_slugs),
            )
            found.append(self._violation(message, suggestion, source, "article-duplicate"))
        return found

    def route_map(self) -> Dict[str, Dict[str, str]]:
        """slug -> {"type": kind}, in registration order."""
        return {slug: {"type": reg.kind} for slug, reg in self._routes.items()}

    def _violation(self, message: str, suggestion: Optional[str], source: str, rule_id: str) -> Diagnostic:
        diagnostic = Diagnostic(
            level="error",
            category=CATEGORY_STRUCTURE,
            message=message,
            file_path=source,
            rule_id=rule_id,
            suggestion=suggestion,
        )
        self.violations.append(diagnostic)
        return diagnostic


def register_routes(tree, reserved_extra: Iterable[str] = ()) -> RouteRegistry:
    """Register every slug of a loaded ContentTree.

    Order: subjects, then teachers (both in directory name order), then
    system articles in config order.
    """
    routes = RouteRegistry(tuple(RESERVED_SLUGS) + tuple(reserved_extra))

    for subject in tree.subjects:
        routes.register(subject.slug, KIND_SUBJECT, subject.config_path)
    for teacher in tree.teachers:
        routes.register(teacher.slug, KIND_TEACHER, teacher.config_path)
    if tree.system is not None:
        for entry in tree.system.config.articles:
            routes.register(entry.slug, KIND_SYSTEM_ARTICLE, tree.system.config_path)

    for subject in tree.subjects:
        routes.check_article_groups(
            subject.slug, subject.config.categories, subject.config_path, KIND_SUBJECT
        )
    for teacher in tree.teachers:
        routes.check_article_groups(
            teacher.slug, teacher.config.sections, teacher.config_path, KIND_TEACHER
        )

    if routes.is_valid:
        logger.info(f"Route validation passed. {len(routes)} unique slugs.")
    else:
        logger.error(f"Route validation found {len(routes.violations)} problem(s)")
    return routes
