"""
Build Orchestrator

Runs the full content build:

1. Lock the output directory and recreate it empty
2. Load and validate every config.json (abort on any config error)
3. Register routes and check article groups
4. Validate and compile every document in parallel
5. Abort if steps 3-4 produced any error, before anything is written
6. Resolve relationships, build search indexes, assemble the manifest
7. Write compiled documents, ToCs, search indexes and the manifest
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from contentbuild.build.manifest import (
    assemble_manifest,
    entity_entry,
    short_hash,
    system_article_entry,
)
from contentbuild.build.output import output_lock, reset_directory, write_json, write_text
from contentbuild.build.records import ArticleRecord, CompiledDocument
from contentbuild.build.relationships import (
    assign_groups,
    project_subject,
    project_teacher,
    resolve_references,
)
from contentbuild.build.routes import RouteRegistry, register_routes
from contentbuild.build.search import build_search_indexes, indexes_to_json, search_hash
from contentbuild.build.sources import (
    KIND_SUBJECTS,
    KIND_SYSTEM,
    KIND_TEACHERS,
    ContentTree,
    DocumentSource,
    load_content,
)
from contentbuild.config.schema import BuildConfig, output_dir_conflict
from contentbuild.errors import BuildFailedError, UnsafeOutputError
from contentbuild.mdx.registry import ComponentRegistry, load_registry
from contentbuild.utils.logging_config import logging_config
from contentbuild.validation.engine import DocumentValidation, ValidationEngine, read_document
from contentbuild.validation.report import Diagnostic, has_errors, sort_diagnostics


logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO 8601 in UTC with milliseconds and a 'Z' suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class CompileJob:
    """One document to compile: (entity, article, locale)."""
    kind: str
    entity_slug: str
    source: DocumentSource

    @property
    def compiled_template(self) -> str:
        if self.kind == KIND_SYSTEM:
            return f"compiled/system/{{locale}}/{self.source.slug}.json"
        return f"compiled/{self.kind}/{self.entity_slug}/{{locale}}/{self.source.slug}.json"

    @property
    def toc_template(self) -> str:
        if self.kind == KIND_SYSTEM:
            return f"toc/system/{{locale}}/{self.source.slug}.json"
        return f"toc/{self.kind}/{self.entity_slug}/{{locale}}/{self.source.slug}.json"


@dataclass
class JobOutcome:
    job: CompileJob
    validation: DocumentValidation
    excerpt: Optional[str] = None


@dataclass
class BuildResult:
    """Summary of a successful build.

    Attributes:
        output_dir: Where the build was written
        manifest: The manifest as written
        diagnostics: Warnings collected during the build
        stats: Counts of subjects, teachers, system articles and documents
        duration: Wall time in seconds
    """
    output_dir: Path
    manifest: Dict[str, Any]
    diagnostics: List[Diagnostic] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)
    duration: float = 0.0

    @property
    def build_hash(self) -> str:
        return self.manifest["buildHash"]

    @property
    def build_time(self) -> str:
        return self.manifest["buildTime"]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.level == "warning"]


class BuildOrchestrator:
    """Runs a content build described by a BuildConfig.

    Example:
        >>> result = BuildOrchestrator(BuildConfig(content_dir="content")).run()
        >>> result.build_hash
        '3f1c9a0b2d4e'
    """

    def __init__(
        self,
        config: BuildConfig,
        registry: Optional[ComponentRegistry] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        if registry is None and config.registry_file:
            registry = load_registry(Path(config.registry_file))
        self.engine = ValidationEngine(strict=False, registry=registry)
        self.clock = clock
        self.output_dir = Path(config.output_dir)

    def run(self) -> BuildResult:
        """Run the build.

        Raises:
            BuildFailedError: If any configuration, route or document error was found.
            BuildLockError: If another build holds the output directory.
            UnsafeOutputError: If clearing the output directory would delete content.
            ContentSourceError: If content cannot be read or output cannot be written.
        """
        conflict = output_dir_conflict(self.config.content_dir, self.output_dir)
        if conflict:
            raise UnsafeOutputError(conflict, str(self.output_dir))

        start = time.time()
        with output_lock(self.output_dir):
            reset_directory(self.output_dir)

            tree = self._timed("Loading content configs", load_content, Path(self.config.content_dir))
            if tree.has_errors:
                self._log_diagnostics(tree.diagnostics)
                raise BuildFailedError("loading", sort_diagnostics(tree.diagnostics))

            routes = self._timed(
                "Validating routes", register_routes, tree, self.config.reserved_slugs
            )

            jobs = self.plan_jobs(tree)
            outcomes = self._timed("Compiling documents", self._compile_all, jobs)

            diagnostics = list(tree.diagnostics) + list(routes.violations)
            for outcome in outcomes:
                diagnostics.extend(outcome.validation.diagnostics)
            diagnostics = sort_diagnostics(diagnostics)
            self._log_diagnostics(diagnostics)

            if has_errors(diagnostics):
                raise BuildFailedError(
                    "compilation", diagnostics,
                    excerpts=[o.excerpt for o in outcomes if o.excerpt],
                )

            records = self._collect_records(outcomes)
            manifest, relationship_diagnostics = self._assemble(tree, routes, records)
            diagnostics.extend(relationship_diagnostics)

            self._timed("Writing output", self._write, tree, records, manifest)

        duration = time.time() - start
        logging_config.log_operation_timing("Build", duration)
        return BuildResult(
            output_dir=self.output_dir,
            manifest=manifest,
            diagnostics=diagnostics,
            stats={
                "subjects": len(tree.subjects),
                "teachers": len(tree.teachers),
                "system_articles": len(tree.system.config.articles) if tree.system else 0,
                "documents": len(outcomes),
            },
            duration=duration,
        )

    # -- stages ------------------------------------------------------------

    def plan_jobs(self, tree: ContentTree) -> List[CompileJob]:
        """Every (entity, article, locale) triple, in a fixed order."""
        jobs: List[CompileJob] = []
        for entity in tree.subjects + tree.teachers:
            for source in entity.documents:
                jobs.append(CompileJob(kind=entity.kind, entity_slug=entity.slug, source=source))
        if tree.system is not None:
            for source in tree.system.documents:
                jobs.append(CompileJob(kind=KIND_SYSTEM, entity_slug=KIND_SYSTEM, source=source))
        return jobs

    def _compile_one(self, job: CompileJob) -> JobOutcome:
        source_text = read_document(job.source.path)
        validation = self.engine.validate_document(source_text, str(job.source.path))
        excerpt = None
        if validation.syntax_error is not None:
            excerpt = validation.syntax_error.format(source_text)
        logger.debug(f"Compiled {job.source.path}")
        return JobOutcome(job=job, validation=validation, excerpt=excerpt)

    def _compile_all(self, jobs: List[CompileJob]) -> List[JobOutcome]:
        if not jobs:
            return []
        workers = max(1, min(self.config.jobs, len(jobs)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self._compile_one, job) for job in jobs]
            # Submission order, regardless of completion order
            return [future.result() for future in futures]

    def _collect_records(self, outcomes: List[JobOutcome]) -> Dict[str, Dict[str, Dict[str, ArticleRecord]]]:
        """kind -> entity slug -> article slug -> record"""
        records: Dict[str, Dict[str, Dict[str, ArticleRecord]]] = {
            KIND_SUBJECTS: {}, KIND_TEACHERS: {}, KIND_SYSTEM: {},
        }
        for outcome in outcomes:
            job = outcome.job
            compiled = outcome.validation.compiled
            entity_records = records[job.kind].setdefault(job.entity_slug, {})
            record = entity_records.get(job.source.slug)
            if record is None:
                record = ArticleRecord(
                    slug=job.source.slug,
                    compiled_path=job.compiled_template,
                    toc_path=job.toc_template,
                )
                entity_records[job.source.slug] = record
            record.add(CompiledDocument(
                locale=job.source.locale,
                compiled=compiled.compiled,
                toc=compiled.toc_dicts(),
                content_hash=short_hash(compiled.compiled),
                frontmatter=outcome.validation.frontmatter,
            ))
        return records

    def _assemble(self, tree: ContentTree, routes: RouteRegistry, records) -> tuple:
        diagnostics: List[Diagnostic] = []
        teachers_by_slug = {t.slug: t.config for t in tree.teachers}
        subjects_by_slug = {s.slug: s.config for s in tree.subjects}

        subjects = {}
        for subject in tree.subjects:
            articles = records[KIND_SUBJECTS].get(subject.slug, {})
            resolved = resolve_references(
                subject.slug, subject.config.teachers, teachers_by_slug, project_teacher,
                target_kind="teacher", owner_kind="Subject", file_path=subject.config_path,
            )
            groups, group_diagnostics = assign_groups(
                articles, subject.config.categories, subject.slug,
                owner_kind="Subject", group_label="category", file_path=subject.config_path,
            )
            for slug, group in groups.items():
                articles[slug].group = group
            diagnostics.extend(resolved.diagnostics + group_diagnostics)
            subjects[subject.slug] = entity_entry(
                subject, "subject", "resolvedTeachers", resolved.items, articles, "category"
            )

        teachers = {}
        for teacher in tree.teachers:
            articles = records[KIND_TEACHERS].get(teacher.slug, {})
            resolved = resolve_references(
                teacher.slug, teacher.config.subjects, subjects_by_slug, project_subject,
                target_kind="subject", owner_kind="Teacher", file_path=teacher.config_path,
            )
            groups, group_diagnostics = assign_groups(
                articles, teacher.config.sections, teacher.slug,
                owner_kind="Teacher", group_label="section", file_path=teacher.config_path,
            )
            for slug, group in groups.items():
                articles[slug].group = group
            diagnostics.extend(resolved.diagnostics + group_diagnostics)
            teachers[teacher.slug] = entity_entry(
                teacher, "teacher", "resolvedSubjects", resolved.items, articles, "section"
            )

        system_articles = {}
        if tree.system is not None:
            system_records = records[KIND_SYSTEM].get(KIND_SYSTEM, {})
            for entry in tree.system.config.articles:
                record = system_records.get(entry.slug) or ArticleRecord(
                    slug=entry.slug,
                    compiled_path=f"compiled/system/{{locale}}/{entry.slug}.json",
                    toc_path=f"toc/system/{{locale}}/{entry.slug}.json",
                )
                record.system_entry = entry
                system_records[entry.slug] = record
                system_articles[entry.slug] = system_article_entry(record)
            records[KIND_SYSTEM][KIND_SYSTEM] = system_records

        manifest = assemble_manifest(
            build_time=format_timestamp(self.clock()),
            route_map=routes.route_map(),
            subjects=subjects,
            teachers=teachers,
            system_articles=system_articles,
        )
        logger.info(f"Manifest assembled. Build hash: {manifest['buildHash']}")
        return manifest, diagnostics

    def _write(self, tree: ContentTree, records, manifest: Dict[str, Any]) -> None:
        out = self.output_dir

        for kind_records in records.values():
            for entity_records in kind_records.values():
                for record in entity_records.values():
                    for locale, document in record.documents.items():
                        write_text(out / record.path_for(record.compiled_path, locale), document.compiled)
                        write_json(out / record.path_for(record.toc_path, locale), document.toc)

        indexes = build_search_indexes(tree.subjects, tree.teachers, tree.system, records)
        for locale, entries in indexes_to_json(indexes).items():
            write_json(out / f"search-index-{locale}.json", entries)
            logger.info(f"{locale}: {len(entries)} entries -> search-index-{locale}.json")
        write_json(out / "search-meta.json", {
            "hash": search_hash(indexes),
            "generatedAt": manifest["buildTime"],
        })

        write_json(out / "manifest.json", manifest)
        write_json(out / "route-map.json", manifest["routeMap"])

    # -- helpers -----------------------------------------------------------

    def _timed(self, operation: str, func, *args):
        logger.info(f"{operation}...")
        start = time.time()
        result = func(*args)
        logging_config.log_operation_timing(operation, time.time() - start)
        return result

    def _log_diagnostics(self, diagnostics: List[Diagnostic]) -> None:
        """Log warnings and infos; errors travel in BuildFailedError."""
        for diagnostic in diagnostics:
            if diagnostic.level == "warning":
                logger.warning(diagnostic.format_human())
            elif diagnostic.level == "info":
                logger.info(diagnostic.format_human())
