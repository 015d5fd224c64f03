"""
Configuration for a site build.

  Settings      persisted user preferences (<work>/settings.yaml)
  SiteConfig    per-run site identity and directory layout
  BuildContext  per-run caches, cleared when the run ends
"""

import logging
import posixpath
import threading
from dataclasses import asdict, dataclass, field
from typing import Any

import yaml

from .frontmatter import extract_frontmatter
from .paths import MARKDOWN_EXTENSION, document_stem, is_index_name
from .store import ContentStore

logger = logging.getLogger(__name__)

# Working area inside the content root; never treated as content.
FOURSG_OUTPUT_DIR = "foursg"
SETTINGS_FILE = "settings.yaml"

DEFAULT_SITE_NAME = "My Site"
DEFAULT_SITE_URL = "https://example.com"


# ---------------------------------------------------------------------------
# Persisted settings
# ---------------------------------------------------------------------------

@dataclass
class Settings:
    debug_logging: bool = False


def settings_path(work_root: str = FOURSG_OUTPUT_DIR) -> str:
    return posixpath.join(work_root, SETTINGS_FILE)


def load_settings(store: ContentStore, work_root: str = FOURSG_OUTPUT_DIR) -> Settings:
    path = settings_path(work_root)
    if not store.exists(path):
        return Settings()
    data = yaml.safe_load(store.read_text(path))
    if not isinstance(data, dict):
        return Settings()
    return Settings(debug_logging=bool(data.get("debug_logging", False)))


def save_settings(store: ContentStore, settings: Settings, work_root: str = FOURSG_OUTPUT_DIR) -> None:
    store.mkdir(work_root)
    text = yaml.dump(asdict(settings), default_flow_style=False, allow_unicode=True, sort_keys=False)
    store.write_text(settings_path(work_root), text)


# ---------------------------------------------------------------------------
# Site configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SiteConfig:
    site_name: str = DEFAULT_SITE_NAME
    site_url: str = DEFAULT_SITE_URL
    work_root: str = FOURSG_OUTPUT_DIR

    @property
    def output_root(self) -> str:
        return posixpath.join(self.work_root, "site")

    @property
    def template_root(self) -> str:
        return posixpath.join(self.work_root, "templates")

    @property
    def css_root(self) -> str:
        return posixpath.join(self.work_root, "css")


def find_root_index(store: ContentStore) -> str | None:
    """Path of the index document at the content root, if any."""
    files, _ = store.list_dir("")
    for path in files:
        if path.endswith(MARKDOWN_EXTENSION) and is_index_name(document_stem(path)):
            return path
    return None


def load_site_config(store: ContentStore, work_root: str = FOURSG_OUTPUT_DIR) -> SiteConfig:
    """Read site_name / site_url from the root index document."""
    index_path = find_root_index(store)
    if index_path is None:
        logger.warning("No index.md found at content root. Site URL defaulting to: %s", DEFAULT_SITE_URL)
        return SiteConfig(work_root=work_root)

    front_matter, _ = extract_frontmatter(store.read_text(index_path), source=index_path)
    site_name = str(front_matter.get("site_name") or DEFAULT_SITE_NAME)
    logger.debug("Site name loaded from %s: %s", index_path, site_name)

    site_url = front_matter.get("site_url")
    if site_url:
        site_url = str(site_url).rstrip("/")
        logger.debug("Site URL loaded from %s: %s", index_path, site_url)
    else:
        logger.warning(
            "site_url not defined in %s front matter. Using default placeholder: %s",
            index_path, DEFAULT_SITE_URL,
        )
        site_url = DEFAULT_SITE_URL

    return SiteConfig(site_name=site_name, site_url=site_url, work_root=work_root)


# ---------------------------------------------------------------------------
# Per-run context
# ---------------------------------------------------------------------------

@dataclass
class BuildContext:
    """Everything cached for the duration of one build."""
    template_cache: dict[str, Any] = field(default_factory=dict)
    processed: set[str] = field(default_factory=set)
    index: Any = None
    navigation: list = field(default_factory=list)
    sitemap: Any = None
    lock: threading.Lock = field(default_factory=threading.Lock)

    def mark_processed(self, path: str) -> bool:
        """Record *path*; False if it was already processed this run."""
        with self.lock:
            if path in self.processed:
                return False
            self.processed.add(path)
            return True

    def clear(self) -> None:
        self.template_cache.clear()
        self.processed.clear()
        self.index = None
        self.navigation = []
        if self.sitemap is not None:
            self.sitemap.clear()
        self.sitemap = None
