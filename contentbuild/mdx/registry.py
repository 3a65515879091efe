"""
Component Registry

Defines the contract for every custom element a document may embed:
allowed attributes with their types and enum constraints, the direct parent
an element must sit in, and whether it needs children.

The renderer's component library must conform to these contracts. When a
new component is added, its contract goes here (or into a registry YAML
file) first, so content repositories can validate against it immediately.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Literal, Mapping, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from contentbuild.errors import SchemaWiringError


PropType = Literal["string", "number", "boolean"]


@dataclass(frozen=True)
class PropContract:
    """Contract of a single attribute."""
    required: bool = False
    type: Optional[str] = None
    enum: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class ComponentContract:
    """Contract of a custom element."""
    props: Mapping[str, PropContract] = field(default_factory=dict)
    parent: Optional[str] = None
    children_required: bool = False


class ComponentRegistry:
    """Lookup table of component contracts.

    Raises SchemaWiringError on construction if a contract names a parent
    that is not itself registered.
    """

    def __init__(self, contracts: Mapping[str, ComponentContract]):
        self._contracts: Dict[str, ComponentContract] = dict(contracts)
        for name, contract in self._contracts.items():
            if contract.parent is not None and contract.parent not in self._contracts:
                raise SchemaWiringError(
                    f"Component <{name}> requires unknown parent <{contract.parent}>"
                )

    def __contains__(self, name: str) -> bool:
        return name in self._contracts

    def __getitem__(self, name: str) -> ComponentContract:
        return self._contracts[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._contracts)

    def __len__(self) -> int:
        return len(self._contracts)

    def get(self, name: str) -> Optional[ComponentContract]:
        return self._contracts.get(name)

    @property
    def known_names(self) -> List[str]:
        return list(self._contracts)


class _PropSpec(BaseModel):
    model_config = ConfigDict(extra="forbid")

    required: bool = False
    type: Optional[PropType] = None
    enum: Optional[List[str]] = None


class _ComponentSpec(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    props: Dict[str, _PropSpec] = Field(default_factory=dict)
    parent: Optional[str] = None
    children_required: bool = Field(default=False, alias="childrenRequired")


class _RegistryFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    components: Dict[str, _ComponentSpec]


def registry_from_dict(data: Mapping) -> ComponentRegistry:
    """Build a registry from the mapping form used in registry files.

    Raises:
        SchemaWiringError: If the mapping does not describe a valid registry.
    """
    try:
        parsed = _RegistryFile.model_validate(data)
    except ValidationError as e:
        raise SchemaWiringError(f"Invalid component registry: {e}") from e

    contracts = {}
    for name, spec in parsed.components.items():
        props = {
            prop_name: PropContract(
                required=prop.required,
                type=prop.type,
                enum=tuple(prop.enum) if prop.enum is not None else None,
            )
            for prop_name, prop in spec.props.items()
        }
        contracts[name] = ComponentContract(
            props=props,
            parent=spec.parent,
            children_required=spec.children_required,
        )
    return ComponentRegistry(contracts)


def load_registry(path: Path) -> ComponentRegistry:
    """Load a component registry from a YAML file.

    Raises:
        SchemaWiringError: If the file cannot be read or is not a valid registry.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise SchemaWiringError(f"Cannot load component registry {path}: {e}") from e

    if not isinstance(data, dict):
        raise SchemaWiringError(f"Component registry {path} must be a mapping")
    return registry_from_dict(data)


def _props(**props: PropContract) -> Dict[str, PropContract]:
    return props


DEFAULT_CONTRACTS: Dict[str, ComponentContract] = {
    # Interactive quiz
    "Quiz": ComponentContract(children_required=True),
    "Question": ComponentContract(
        props=_props(text=PropContract(required=True, type="string")),
        parent="Quiz",
        children_required=True,
    ),
    "Option": ComponentContract(
        props=_props(
            value=PropContract(required=True, type="string"),
            correct=PropContract(type="boolean"),
        ),
        parent="Question",
    ),

    # Callout
    "Callout": ComponentContract(
        props=_props(type=PropContract(type="string", enum=("info", "warning", "error"))),
        children_required=True,
    ),

    # Tabs
    "Tabs": ComponentContract(children_required=True),
    "Tab": ComponentContract(
        props=_props(label=PropContract(required=True, type="string")),
        parent="Tabs",
        children_required=True,
    ),

    # Collapse
    "Collapse": ComponentContract(
        props=_props(title=PropContract(required=True, type="string")),
        children_required=True,
    ),

    # Code playground
    "CodePlayground": ComponentContract(
        props=_props(
            language=PropContract(type="string"),
            code=PropContract(type="string"),
        ),
    ),

    # Figure
    "Figure": ComponentContract(
        props=_props(
            src=PropContract(required=True, type="string"),
            alt=PropContract(required=True, type="string"),
            caption=PropContract(type="string"),
            width=PropContract(type="number"),
            height=PropContract(type="number"),
        ),
    ),

    # Math block
    "MathBlock": ComponentContract(children_required=True),
}

DEFAULT_REGISTRY = ComponentRegistry(DEFAULT_CONTRACTS)
