"""
Content Sources

Loads the content tree from disk:

    content/
      subjects/<dir>/config.json + articles/<locale>/<slug>.mdx
      teachers/<dir>/config.json + articles/<locale>/<slug>.mdx
      system/config.json + articles/<locale>/<slug>.mdx

Entity directories are visited in sorted name order so every later stage
sees the same order on every machine.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from contentbuild.errors import ContentSourceError
from contentbuild.schemas import LOCALES, SubjectConfig, SystemConfig, TeacherConfig
from contentbuild.validation.engine import SKIP_DIRS, list_documents
from contentbuild.validation.report import CATEGORY_CONFIG, Diagnostic, has_errors
from contentbuild.validation.schema_validator import load_json_config


logger = logging.getLogger(__name__)

KIND_SUBJECTS = "subjects"
KIND_TEACHERS = "teachers"
KIND_SYSTEM = "system"

CONFIG_FILE = "config.json"
ARTICLES_DIR = "articles"


@dataclass(frozen=True)
class DocumentSource:
    """One document file: articles/<locale>/<slug>.mdx"""
    slug: str
    locale: str
    path: Path


@dataclass
class LoadedEntity:
    """A subject or teacher with its validated config and document files.

    Attributes:
        kind: 'subjects' or 'teachers'
        dir_name: Name of the entity directory
        path: Entity directory
        config: Validated SubjectConfig or TeacherConfig
        documents: Document files in locale order, then file name order
    """
    kind: str
    dir_name: str
    path: Path
    config: Union[SubjectConfig, TeacherConfig]
    documents: List[DocumentSource] = field(default_factory=list)

    @property
    def slug(self) -> str:
        return self.config.slug

    @property
    def config_path(self) -> str:
        return str(self.path / CONFIG_FILE)


@dataclass
class LoadedSystem:
    """System article set; documents follow config declaration order."""
    path: Path
    config: SystemConfig
    documents: List[DocumentSource] = field(default_factory=list)

    @property
    def config_path(self) -> str:
        return str(self.path / CONFIG_FILE)


@dataclass
class ContentTree:
    """Everything loaded from the content directory.

    diagnostics holds config problems; entities whose config failed are
    left out of subjects/teachers.
    """
    root: Path
    subjects: List[LoadedEntity] = field(default_factory=list)
    teachers: List[LoadedEntity] = field(default_factory=list)
    system: Optional[LoadedSystem] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)


def entity_documents(articles_dir: Path) -> List[DocumentSource]:
    documents = []
    for locale in LOCALES:
        for path in list_documents(articles_dir / locale):
            documents.append(DocumentSource(slug=path.stem, locale=locale, path=path))
    return documents


def _load_entities(root: Path, kind: str, model) -> tuple:
    entities: List[LoadedEntity] = []
    diagnostics: List[Diagnostic] = []
    kind_dir = root / kind
    if not kind_dir.is_dir():
        logger.info(f"No {kind}/ directory in {root}")
        return entities, diagnostics

    for entry in sorted(kind_dir.iterdir(), key=lambda p: p.name):
        if not entry.is_dir() or entry.name in SKIP_DIRS or entry.name.startswith("."):
            continue
        config_path = entry / CONFIG_FILE
        if not config_path.is_file():
            logger.warning(f"Missing {CONFIG_FILE} for {kind[:-1]}: {entry.name}")
            diagnostics.append(Diagnostic(
                level="warning",
                category=CATEGORY_CONFIG,
                message=f"Missing {CONFIG_FILE} for {kind[:-1]} \"{entry.name}\"; directory skipped",
                file_path=str(config_path),
            ))
            continue

        result = load_json_config(config_path, model, label=f"{kind}/{entry.name}/{CONFIG_FILE}")
        if not result.is_valid:
            diagnostics.extend(result.issues)
            continue

        entities.append(LoadedEntity(
            kind=kind,
            dir_name=entry.name,
            path=entry,
            config=result.value,
            documents=entity_documents(entry / ARTICLES_DIR),
        ))
    return entities, diagnostics


def _load_system(root: Path) -> tuple:
    system_dir = root / KIND_SYSTEM
    config_path = system_dir / CONFIG_FILE
    if not config_path.is_file():
        logger.info("No system config found, skipping system articles")
        return None, []

    result = load_json_config(config_path, SystemConfig, label=f"{KIND_SYSTEM}/{CONFIG_FILE}")
    if not result.is_valid:
        return None, list(result.issues)

    documents = []
    for entry in result.value.articles:
        for locale in LOCALES:
            path = system_dir / ARTICLES_DIR / locale / f"{entry.slug}.mdx"
            if path.is_file():
                documents.append(DocumentSource(slug=entry.slug, locale=locale, path=path))
    return LoadedSystem(path=system_dir, config=result.value, documents=documents), []


def load_content(content_dir: Path) -> ContentTree:
    """Load and validate every configuration in the content tree.

    Raises:
        ContentSourceError: If content_dir does not exist.
    """
    root = Path(content_dir)
    if not root.is_dir():
        raise ContentSourceError(f"Content directory not found: {root}", path=str(root))

    tree = ContentTree(root=root)

    tree.subjects, diagnostics = _load_entities(root, KIND_SUBJECTS, SubjectConfig)
    tree.diagnostics.extend(diagnostics)

    tree.teachers, diagnostics = _load_entities(root, KIND_TEACHERS, TeacherConfig)
    tree.diagnostics.extend(diagnostics)

    tree.system, diagnostics = _load_system(root)
    tree.diagnostics.extend(diagnostics)

    logger.info(
        f"Loaded {len(tree.subjects)} subject(s), {len(tree.teachers)} teacher(s), "
        f"{len(tree.system.config.articles) if tree.system else 0} system article(s)"
    )
    return tree
