"""
Content graph for one build.

Collects the markdown documents and images of the content store (minus
the generator's own working area) and answers the lookups needed to
resolve [[wiki-links]] and ![[image]] embeds.
"""

import logging
import posixpath
from dataclasses import dataclass, field

from .frontmatter import extract_frontmatter
from .paths import MARKDOWN_EXTENSION, document_stem, is_index_name
from .store import ContentStore

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp"}


@dataclass(frozen=True)
class DocumentNode:
    path: str
    body: str
    front_matter: dict = field(default_factory=dict)
    mtime: float = 0.0

    @property
    def basename(self) -> str:
        return document_stem(self.path)

    @property
    def parent(self) -> str:
        """Containing folder path, "" for the content root."""
        return posixpath.dirname(self.path)

    @property
    def parent_name(self) -> str:
        return posixpath.basename(self.parent)

    @property
    def is_index(self) -> bool:
        return is_index_name(self.basename)

    @property
    def depth(self) -> int:
        """1 for documents at the content root."""
        return len(self.path.split("/"))


@dataclass(frozen=True)
class ImageNode:
    path: str

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def basename(self) -> str:
        return posixpath.splitext(self.name)[0]


def is_in_work_area(path: str, work_root: str) -> bool:
    work_root = work_root.strip("/")
    return path == work_root or path.startswith(work_root + "/")


def is_image_path(path: str) -> bool:
    return posixpath.splitext(path)[1].lower() in IMAGE_EXTENSIONS


def load_document(store: ContentStore, path: str, mtime: float = 0.0) -> DocumentNode:
    text = store.read_text(path)
    front_matter, body = extract_frontmatter(text, source=path)
    return DocumentNode(path=path, body=body, front_matter=front_matter, mtime=mtime)


class ContentGraphIndex:
    """Documents and images of one build, in store listing order."""

    def __init__(self, documents=None, images=None):
        self.documents: list[DocumentNode] = list(documents or [])
        self.images: list[ImageNode] = list(images or [])

    @classmethod
    def build(cls, store: ContentStore, work_root: str) -> "ContentGraphIndex":
        documents, images = [], []
        for stored in store.list_files():
            if is_in_work_area(stored.path, work_root):
                continue
            if stored.path.endswith(MARKDOWN_EXTENSION):
                try:
                    documents.append(load_document(store, stored.path, stored.mtime))
                except (OSError, UnicodeDecodeError) as exc:
                    logger.error("Could not read %s: %s", stored.path, exc)
            elif is_image_path(stored.path):
                images.append(ImageNode(stored.path))

        logger.debug("Indexed %d document(s) and %d image(s)", len(documents), len(images))
        return cls(documents, images)

    def find_document(self, reference: str) -> DocumentNode | None:
        """Resolve a wiki-link target to a document.

        Tries:
          1. Exact source path, with or without the .md suffix
          2. First document (in index order) whose base name matches

        Duplicate base names in different folders resolve to whichever
        comes first; use a path-style link to pick a specific one.
        """
        clean = reference[: -len(MARKDOWN_EXTENSION)] if reference.endswith(MARKDOWN_EXTENSION) else reference

        for document in self.documents:
            if document.path in (clean + MARKDOWN_EXTENSION, clean):
                return document

        for document in self.documents:
            if document.basename == clean:
                return document
        return None

    def find_image(self, reference: str) -> ImageNode | None:
        """Resolve an embed target by path, then filename, then base name."""
        for image in self.images:
            if image.path == reference:
                return image
        for image in self.images:
            if image.name == reference:
                return image
        for image in self.images:
            if image.basename == reference:
                return image
        return None
