"""
Relationship Resolver

Subjects name their teachers and teachers name their subjects. These are
soft references: a slug that does not resolve is dropped from the build
output with a warning, never an error.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

from dataclasses import dataclass, field

from contentbuild.schemas import ArticleGroup, SubjectConfig, TeacherConfig
from contentbuild.utils.error_messages import ErrorCategory, ErrorMessages
from contentbuild.validation.report import CATEGORY_RELATIONSHIP, Diagnostic


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ResolvedReferences:
    """Projected targets in declaration order, plus the slugs that were dropped."""
    items: List[Dict[str, Any]] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


def project_teacher(teacher: TeacherConfig) -> Dict[str, Any]:
    """Teacher view embedded in a subject: slug, name, ratings, photo."""
    view = {
        "slug": teacher.slug,
        "name": teacher.name.to_json_dict(),
        "ratings": teacher.ratings.to_json_dict(),
    }
    if teacher.photo is not None:
        view["photo"] = teacher.photo
    return view


def project_subject(subject: SubjectConfig) -> Dict[str, Any]:
    """Subject view embedded in a teacher: slug and name."""
    return {"slug": subject.slug, "name": subject.name.to_json_dict()}


def resolve_references(
    owner: str,
    references: Sequence[str],
    targets: Mapping[str, T],
    project: Callable[[T], Dict[str, Any]],
    target_kind: str,
    owner_kind: str = "Subject",
    file_path: Optional[str] = None,
) -> ResolvedReferences:
    """Resolve slugs against targets, dropping the unknown ones.

    Args:
        owner: Slug of the entity holding the references
        references: Referenced slugs in declaration order
        targets: Known targets by slug
        project: Builds the lightweight view of a target
        target_kind: Name of the target kind in messages ('teacher')
        owner_kind: Name of the owner kind in messages ('Subject')
        file_path: Config file of the owner, for diagnostics

    Returns:
        ResolvedReferences; every dropped slug has one warning diagnostic.
    """
    resolved = ResolvedReferences()
    for slug in references:
        target = targets.get(slug)
        if target is not None:
            resolved.items.append(project(target))
            continue

        message, suggestion = ErrorMessages.format_message(
            ErrorCategory.RELATIONSHIP, "unknown_reference",
            owner_kind=owner_kind, owner=owner, target_kind=target_kind, target=slug,
        )
        logger.warning(message)
        resolved.missing.append(slug)
        resolved.diagnostics.append(Diagnostic(
            level="warning",
            category=CATEGORY_RELATIONSHIP,
            message=message,
            file_path=file_path,
            rule_id="unknown-reference",
            suggestion=suggestion,
        ))
    return resolved


def assign_groups(
    articles: Mapping[str, Any],
    groups: Optional[Sequence[ArticleGroup]],
    owner: str,
    owner_kind: str = "Subject",
    group_label: str = "category",
    file_path: Optional[str] = None,
) -> Tuple[Dict[str, str], List[Diagnostic]]:
    """Map each article slug to the group listing it.

    Group entries naming an article that has no document produce a
    warning. Duplicate membership is rejected earlier by the route registry,
    so each article has at most one group here.

    Returns:
        Tuple of (article slug -> group slug, diagnostics).
    """
    assignment: Dict[str, str] = {}
    diagnostics: List[Diagnostic] = []
    for group in groups or ():
        for slug in group.articles:
            if slug in articles:
                assignment.setdefault(slug, group.slug)
                continue
            message, suggestion = ErrorMessages.format_message(
                ErrorCategory.RELATIONSHIP, "unknown_group_article",
                owner_kind=owner_kind, owner=owner, article=slug,
                group_label=group_label, group=group.slug,
            )
            logger.warning(message)
            diagnostics.append(Diagnostic(
                level="warning",
                category=CATEGORY_RELATIONSHIP,
                message=message,
                file_path=file_path,
                rule_id="unknown-group-article",
                suggestion=suggestion,
            ))
    return assignment, diagnostics
