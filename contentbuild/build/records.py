"""
Compiled article records shared by the manifest and search stages.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from contentbuild.schemas import LOCALES, ArticleFrontmatter
from contentbuild.schemas.system import SystemArticleEntry


@dataclass
class CompiledDocument:
    """One compiled (article, locale) pair.

    Attributes:
        compiled: Serialized render tree
        toc: ToC entries as dictionaries
        content_hash: Short SHA-256 of compiled
        frontmatter: Validated front matter of this file
    """
    locale: str
    compiled: str
    toc: List[Dict[str, Any]]
    content_hash: str
    frontmatter: Optional[ArticleFrontmatter] = None


@dataclass
class ArticleRecord:
    """An article with every locale it was compiled in.

    Attributes:
        slug: Article slug (file name stem)
        compiled_path: Output path template containing '{locale}'
        toc_path: ToC path template containing '{locale}'
        documents: locale -> compiled document
        group: Category (subjects) or section (teachers) slug, once assigned
        system_entry: Config entry, for system articles
    """
    slug: str
    compiled_path: str
    toc_path: str
    documents: Dict[str, CompiledDocument] = field(default_factory=dict)
    group: Optional[str] = None
    system_entry: Optional[SystemArticleEntry] = None

    @property
    def locales(self) -> List[str]:
        return [locale for locale in LOCALES if locale in self.documents]

    @property
    def frontmatter(self) -> Optional[ArticleFrontmatter]:
        """Front matter of the first available locale in locale order."""
        for locale in self.locales:
            if self.documents[locale].frontmatter is not None:
                return self.documents[locale].frontmatter
        return None

    def add(self, document: CompiledDocument) -> None:
        self.documents[document.locale] = document

    def content_hashes(self) -> Dict[str, str]:
        return {locale: self.documents[locale].content_hash for locale in self.locales}

    def path_for(self, template: str, locale: str) -> str:
        return template.replace("{locale}", locale)
