"""
Centralized Diagnostic Message Templates

This module provides consistent message text and fix suggestions for every
diagnostic category the build pipeline reports, so the validator, the
route registry and the orchestrator word the same problem the same way.
"""

import logging
from enum import Enum
from typing import Dict, Optional, Tuple


class ErrorCategory(Enum):
    """Categories of problems found in content."""
    CONFIG = "config"
    FRONTMATTER = "frontmatter"
    STRUCTURE = "structure"
    SYNTAX = "mdx-syntax"
    COMPONENT = "component"
    RELATIONSHIP = "relationship"


class ErrorMessages:
    """
    Message templates with actionable suggestions.

    Each template is a (message, suggestion) pair; both are formatted with
    the same keyword arguments.
    """

    CONFIG_TEMPLATES = {
        "file_missing": (
            "{label} not found at {path}",
            "Every content directory needs a config.json next to its articles/ folder.",
        ),
        "invalid_json": (
            "{label} is not valid JSON: {error}",
            "Check for trailing commas and unquoted keys.",
        ),
        "schema_field": (
            "{field}: {error}",
            "Check the '{field}' field in {label}.",
        ),
        "missing_locales": (
            "{field}: missing locale(s) {locales}",
            "Localized fields must provide every supported locale: {supported}.",
        ),
    }

    FRONTMATTER_TEMPLATES = {
        "unparseable": (
            "Failed to parse frontmatter: {error}",
            "Front matter must be a YAML mapping between two '---' lines.",
        ),
        "schema_field": (
            "Frontmatter: {field}: {error}",
            "Check the '{field}' field in the document front matter.",
        ),
    }

    STRUCTURE_TEMPLATES = {
        "slug_mismatch": (
            "frontmatter slug does not match filename: slug \"{slug}\", filename \"{stem}\"",
            "Rename the file to {slug}.mdx or set 'slug: {stem}' in the front matter.",
        ),
        "reserved_slug": (
            "RESERVED SLUG: {kind} \"{slug}\" uses a reserved slug (source: {source})",
            "Reserved slugs: {reserved}. Pick a different slug.",
        ),
        "slug_collision": (
            "SLUG COLLISION: \"{slug}\" claimed by both {first_kind} ({first_source}) "
            "and {second_kind} ({second_source})",
            "Rename one of them to use a different slug.",
        ),
        "article_duplicate": (
            "ARTICLE DUPLICATE: {owner_kind} \"{owner}\" lists article \"{article}\" "
            "in multiple {group_label}: {groups}",
            "Keep the article in exactly one of {groups}.",
        ),
        "front_missing": (
            "articles/{locale}/_front.mdx is missing",
            "Add a _front.mdx landing document for the '{locale}' locale.",
        ),
        "no_locales": (
            "No locale directories found in articles/",
            "Create at least one of articles/{supported}/.",
        ),
        "articles_dir_missing": (
            "Articles directory not found: {path}",
            "Expected layout: articles/<locale>/<slug>.mdx",
        ),
        "no_entities": (
            "No {kind} directories found (looking for dirs with config.json)",
            "Each {kind} lives in its own directory containing config.json.",
        ),
    }

    SYNTAX_TEMPLATES = {
        "compile_failed": (
            "MDX syntax error: {reason}",
            "Fix the markup near line {line}; see the source excerpt above.",
        ),
    }

    RELATIONSHIP_TEMPLATES = {
        "unknown_reference": (
            "{owner_kind} \"{owner}\" references unknown {target_kind} \"{target}\"",
            "The reference is left out of the build until \"{target}\" exists.",
        ),
        "unknown_group_article": (
            "{owner_kind} \"{owner}\" lists article \"{article}\" in {group_label} "
            "\"{group}\" but no document with that slug exists",
            "Add articles/<locale>/{article}.mdx or remove it from the list.",
        ),
    }

    @classmethod
    def _get_templates_for_category(cls, category: ErrorCategory) -> Dict[str, Tuple[str, str]]:
        """Get templates for a specific category."""
        template_map = {
            ErrorCategory.CONFIG: cls.CONFIG_TEMPLATES,
            ErrorCategory.FRONTMATTER: cls.FRONTMATTER_TEMPLATES,
            ErrorCategory.STRUCTURE: cls.STRUCTURE_TEMPLATES,
            ErrorCategory.SYNTAX: cls.SYNTAX_TEMPLATES,
            ErrorCategory.RELATIONSHIP: cls.RELATIONSHIP_TEMPLATES,
        }
        return template_map.get(category, {})

    @classmethod
    def format_message(
        cls,
        category: ErrorCategory,
        template_key: str,
        **kwargs
    ) -> Tuple[str, Optional[str]]:
        """
        Format a message and its suggestion using the specified template.

        Args:
            category: The diagnostic category
            template_key: The specific template within the category
            **kwargs: Template variables to substitute

        Returns:
            Tuple of (message, suggestion). The suggestion is None when the
            template cannot be filled.
        """
        templates = cls._get_templates_for_category(category)
        if template_key not in templates:
            raise KeyError(f"Unknown message template {category.value}.{template_key}")

        message_template, suggestion_template = templates[template_key]
        message = message_template.format(**kwargs)
        try:
            suggestion = suggestion_template.format(**kwargs)
        except KeyError as e:
            logging.getLogger(__name__).debug(
                "Missing template variable %s for %s.%s", e, category.value, template_key
            )
            suggestion = None
        return message, suggestion
