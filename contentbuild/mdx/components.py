"""
Component Contract Validator

Walks a parsed document and checks every custom element against the
component registry. Validation is a generic table lookup: adding or
changing a component means editing the registry, never this module.

Rules, in order, for each custom (PascalCase) element:
  1. Unknown component name                      -> error
  2. Missing required attribute                  -> error
  3. Attribute value outside the declared enum   -> error
  4. Attribute not declared for the component    -> warning
  5. Required direct parent violated             -> error
Then two non-blocking checks: declared type mismatch and missing children
for components that require children (both warnings).
"""

import logging
from typing import List, Optional, Sequence

from contentbuild.mdx.parser import (
    ATTR_EXPRESSION,
    Attribute,
    DocumentTree,
    ElementNode,
)
from contentbuild.mdx.registry import DEFAULT_REGISTRY, ComponentContract, ComponentRegistry
from contentbuild.validation.report import CATEGORY_COMPONENT, Diagnostic


logger = logging.getLogger(__name__)


def _type_matches(declared: str, attr: Attribute) -> bool:
    if attr.kind == ATTR_EXPRESSION and not attr.is_literal:
        # Computed values cannot be checked before runtime.
        return True
    value = attr.value
    if declared == "string":
        return isinstance(value, str)
    if declared == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if declared == "boolean":
        return isinstance(value, bool)
    return True


def _nearest_component(ancestors: Sequence[ElementNode]) -> Optional[ElementNode]:
    for node in reversed(ancestors):
        if node.is_component:
            return node
    return None


class ComponentValidator:
    """Checks custom element usage against a ComponentRegistry.

    Example:
        >>> validator = ComponentValidator()
        >>> diagnostics = validator.validate(parse_document(body), "intro.mdx")
    """

    def __init__(self, registry: Optional[ComponentRegistry] = None):
        self.registry = registry or DEFAULT_REGISTRY

    def validate(self, tree: DocumentTree, file_path: Optional[str] = None) -> List[Diagnostic]:
        """Return every diagnostic for the tree, in document order.

        The tree is not modified and the walk never stops early.
        """
        diagnostics: List[Diagnostic] = []

        # Depth-first walk with an explicit ancestor stack per node.
        for node, ancestors in tree.walk():
            if not isinstance(node, ElementNode) or not node.is_component:
                continue
            diagnostics.extend(self._check_element(node, ancestors, file_path))

        return diagnostics

    def _check_element(
        self,
        node: ElementNode,
        ancestors: Sequence[ElementNode],
        file_path: Optional[str],
    ) -> List[Diagnostic]:
        found: List[Diagnostic] = []

        def report(level: str, message: str, rule_id: str, field: Optional[str] = None):
            found.append(Diagnostic(
                level=level,
                category=CATEGORY_COMPONENT,
                message=message,
                file_path=file_path,
                line=node.line,
                column=node.column,
                field=field,
                rule_id=rule_id,
            ))

        name = node.name

        # 1. Unknown component
        contract: Optional[ComponentContract] = self.registry.get(name)
        if contract is None:
            report(
                "error",
                f"Unknown component <{name}>. Known components: "
                f"{', '.join(self.registry.known_names)}",
                "unknown-component",
            )
            return found

        provided = node.attribute_map()

        # 2. Required attributes
        for prop_name, prop in contract.props.items():
            if prop.required and prop_name not in provided:
                report(
                    "error",
                    f"<{name}> is missing required prop \"{prop_name}\"",
                    "missing-required-prop", prop_name,
                )

        # 3. Enum values
        for prop_name, prop in contract.props.items():
            attr = provided.get(prop_name)
            if prop.enum is None or attr is None:
                continue
            if isinstance(attr.value, str) and attr.value not in prop.enum:
                report(
                    "error",
                    f"<{name}> prop \"{prop_name}\" has invalid value \"{attr.value}\". "
                    f"Allowed: {', '.join(prop.enum)}",
                    "invalid-enum-value", prop_name,
                )

        # 4. Undeclared attributes
        for prop_name in provided:
            if prop_name not in contract.props:
                report(
                    "warning",
                    f"<{name}> has unknown prop \"{prop_name}\"",
                    "unknown-prop", prop_name,
                )

        # 5. Required parent
        if contract.parent is not None:
            parent = _nearest_component(ancestors)
            if parent is None or parent.name != contract.parent:
                found_in = f"<{parent.name}>" if parent is not None else "root"
                report(
                    "error",
                    f"<{name}> must be a child of <{contract.parent}>, but found inside {found_in}",
                    "invalid-nesting",
                )

        # Declared types
        for prop_name, prop in contract.props.items():
            attr = provided.get(prop_name)
            if prop.type is None or attr is None:
                continue
            if not _type_matches(prop.type, attr):
                report(
                    "warning",
                    f"<{name}> prop \"{prop_name}\" should be a {prop.type}",
                    "prop-type-mismatch", prop_name,
                )

        # Required children
        if contract.children_required and not node.has_content():
            report(
                "warning",
                f"<{name}> should have children",
                "missing-children",
            )

        return found


def validate_components(
    tree: DocumentTree,
    registry: Optional[ComponentRegistry] = None,
    file_path: Optional[str] = None,
) -> List[Diagnostic]:
    """Convenience wrapper around ComponentValidator.validate()."""
    return ComponentValidator(registry).validate(tree, file_path)
