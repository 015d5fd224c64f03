"""
Build pipeline for content store → static site conversion.

Orchestrates:
  1. Initialization: reset the output directory, seed templates/css
  2. Site config: site name and URL from the root index.md
  3. Pages: render every document, in batches of BATCH_SIZE
  4. Images: copy every image into the mirrored output tree
  5. sitemap.xml and robots.txt

Layout of the working area (inside the content root):
    foursg/site/         ← generated site, wiped on every build
    foursg/templates/    ← page templates (default.html seeded)
    foursg/css/          ← stylesheets (default.css seeded)
    foursg/robots.txt    ← optional robots.txt override
"""

import enum
import logging
import posixpath
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from importlib import resources

from .config import BuildContext, Settings, SiteConfig, FOURSG_OUTPUT_DIR, load_site_config
from .graph import ContentGraphIndex, DocumentNode
from .navigation import build_navigation_tree, render_nav_tree
from .paths import PathResolver
from .renderer import DEFAULT_STYLESHEET, DEFAULT_TEMPLATE, PageRenderer, page_title
from .resolver import LinkRewriter
from .seo import build_seo_block
from .sitemap import SitemapAccumulator, entry_for
from .store import ContentStore

logger = logging.getLogger(__name__)

BATCH_SIZE = 5


class PipelineState(enum.Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    NAME_LOADED = "name-loaded"
    PROCESSING = "processing"
    ASSETS_COPIED = "assets-copied"
    SITEMAP_WRITTEN = "sitemap-written"
    ROBOTS_WRITTEN = "robots-written"
    DONE = "done"
    FAILED = "failed"


@dataclass
class BuildReport:
    state: PipelineState = PipelineState.IDLE
    pages_written: int = 0
    pages_failed: int = 0
    images_copied: int = 0
    sitemap_urls: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.state is PipelineState.DONE


def _default_resource(name: str) -> str:
    return resources.files("foursg").joinpath("defaults").joinpath(name).read_text(encoding="utf-8")


def _batches(items: list, size: int):
    for start in range(0, len(items), size):
        yield items[start:start + size]


class SiteOrchestrator:
    """Runs a full build against a content store.

    *notify* receives the short user-facing messages (start, success,
    failure); everything else goes to the log.
    """

    def __init__(self, store: ContentStore, settings: Settings | None = None,
                 notify=None, work_root: str = FOURSG_OUTPUT_DIR):
        self.store = store
        self.settings = settings or Settings()
        self.notify = notify or (lambda message: logger.info("%s", message))
        self.work_root = work_root
        self.state = PipelineState.IDLE
        self.context = BuildContext()
        # Layout is known before the site name; name/url are filled in later
        self.site = SiteConfig(work_root=work_root)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate_site(self) -> BuildReport:
        report = BuildReport()
        try:
            logger.info("=== FourSG Site Generator Start ===")
            logger.debug("Settings: output=%s debug=%s", self.site.output_root, self.settings.debug_logging)
            self.notify("Starting FourSG site generation")

            self._enter(PipelineState.INITIALIZING)
            self.initialize_site()

            self.site = load_site_config(self.store, self.work_root)
            self._enter(PipelineState.NAME_LOADED)

            self.context.clear()
            self._enter(PipelineState.PROCESSING)
            written, failed = self.process_documents()
            report.pages_written, report.pages_failed = written, failed

            logger.debug("Copying images")
            report.images_copied = self.copy_images()
            self._enter(PipelineState.ASSETS_COPIED)

            logger.debug("Generating sitemap.xml")
            report.sitemap_urls = self.generate_sitemap()
            self._enter(PipelineState.SITEMAP_WRITTEN)

            logger.debug("Generating robots.txt")
            self.generate_robots_txt()
            self._enter(PipelineState.ROBOTS_WRITTEN)

            self._enter(PipelineState.DONE)
            logger.info("=== FourSG Site Generation Complete ===")
            self.notify("FourSG site generated successfully!")
        except Exception as exc:
            self._enter(PipelineState.FAILED)
            report.error = str(exc) or exc.__class__.__name__
            logger.exception("=== Site Generation Error ===")
            self.notify(f"FourSG error generating site: {report.error}")
        finally:
            self.context.clear()

        report.state = self.state
        return report

    def clear_output_directory(self) -> None:
        logger.debug("Clearing generated site directory: %s", self.site.output_root)
        self.remove_directory_recursive(self.site.output_root)

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def initialize_site(self) -> None:
        logger.debug("Initializing FourSG working directory")
        site = self.site

        self.clear_output_directory()
        self.store.mkdir(site.output_root)

        self.store.mkdir(site.template_root)
        self.copy_unless_exists(DEFAULT_TEMPLATE, posixpath.join(site.template_root, DEFAULT_TEMPLATE))

        self.store.mkdir(site.css_root)
        self.copy_css()

        self.copy_unless_exists("README.md", posixpath.join(self.work_root, "README.md"))

    def copy_unless_exists(self, resource_name: str, destination: str) -> None:
        """Seed *destination* from the packaged defaults; never overwrite."""
        if self.store.exists(destination):
            return
        self.store.write_text(destination, _default_resource(resource_name))
        logger.debug("Seeded %s", destination)

    def copy_css(self) -> int:
        site = self.site
        output_dir = posixpath.join(site.output_root, "css")
        self.store.mkdir(output_dir)
        self.copy_unless_exists(DEFAULT_STYLESHEET, posixpath.join(site.css_root, DEFAULT_STYLESHEET))

        files, _ = self.store.list_dir(site.css_root)
        css_files = [f for f in files if f.endswith(".css")]
        for css_file in css_files:
            name = posixpath.basename(css_file)
            self.store.write_text(posixpath.join(output_dir, name), self.store.read_text(css_file))
            logger.debug("Copied %s", name)

        logger.debug("Total CSS files copied: %d", len(css_files))
        return len(css_files)

    def remove_directory_recursive(self, dir_path: str) -> None:
        """Delete *dir_path* and its contents.

        Falls back to a single non-recursive removal when the structured
        delete fails; if that fails too the original error propagates.
        """
        if not self.store.exists(dir_path):
            return
        try:
            files, folders = self.store.list_dir(dir_path)
            for path in files:
                self.store.remove(path)
            for folder in folders:
                self.remove_directory_recursive(folder)
            self.store.rmdir(dir_path)
        except OSError as error:
            logger.warning("Recursive removal of %s failed: %s", dir_path, error)
            try:
                self.store.remove(dir_path)
            except OSError:
                raise error

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def process_documents(self) -> tuple[int, int]:
        """Render every document; returns (written, failed)."""
        index = ContentGraphIndex.build(self.store, self.work_root)
        paths = PathResolver(self.site.output_root)

        self.context.index = index
        self.context.sitemap = SitemapAccumulator(self.site.site_url)
        self.context.navigation = build_navigation_tree(index.documents, paths)

        rewriter = LinkRewriter(index, paths)
        renderer = PageRenderer(self.store, self.site, self.context, paths)

        documents = index.documents
        logger.info("Found %d markdown files to process.", len(documents))
        for document in documents:
            logger.debug("  - %s", document.path)

        def task(document):
            return self.process_document(document, rewriter, renderer, paths)

        results = []
        with ThreadPoolExecutor(max_workers=BATCH_SIZE) as executor:
            for batch in _batches(documents, BATCH_SIZE):
                # map() joins the whole batch before the next one starts
                results.extend(executor.map(task, batch))

        written = sum(1 for r in results if r is True)
        failed = sum(1 for r in results if r is False)
        return written, failed

    def process_document(self, document: DocumentNode, rewriter: LinkRewriter,
                         renderer: PageRenderer, paths: PathResolver) -> bool | None:
        """Render and write one page.

        Returns True when written, False on failure, None when skipped as a
        duplicate.  Failures are logged and never abort the build.
        """
        if not self.context.mark_processed(document.path):
            logger.debug("Skipping (already processed): %s", document.path)
            return None

        try:
            logger.debug("Processing markdown: %s", document.path)
            if document.front_matter:
                logger.debug("Frontmatter: %s", document.front_matter)

            output_path = paths.output_path_for(document.path)
            page_url = paths.page_url(output_path)
            root_path = paths.relative_path_to_site_root(output_path)

            body = rewriter.rewrite(document)
            navigation = render_nav_tree(self.context.navigation, output_path, paths)
            seo = build_seo_block(
                page_title(document), document.front_matter, document,
                self.site.site_name, self.site.site_url, page_url, root_path,
            )
            full_html = renderer.render(document, body, navigation, seo)
            logger.debug("Converted to HTML %s (%d characters)", output_path, len(full_html))

            self.store.mkdir(posixpath.dirname(output_path))
            self.store.write_text(output_path, full_html)
        except Exception:
            logger.exception("Error processing %s", document.path)
            return False

        self.context.sitemap.add_url(entry_for(document, page_url))
        return True

    # ------------------------------------------------------------------
    # Assets, sitemap, robots
    # ------------------------------------------------------------------

    def copy_images(self) -> int:
        images = self.context.index.images
        paths = PathResolver(self.site.output_root)
        logger.debug("Scanning %d image files.", len(images))

        copied = 0
        for image in images:
            try:
                logger.debug("Copying image: %s", image.path)
                output_path = paths.image_output_path_for(image.path)
                self.store.mkdir(posixpath.dirname(output_path))
                self.store.write_binary(output_path, self.store.read_binary(image.path))
                copied += 1
            except OSError as exc:
                logger.error("Error copying image %s: %s", image.path, exc)

        logger.debug("Total images copied: %d", copied)
        return copied

    def generate_sitemap(self) -> int:
        sitemap = self.context.sitemap
        self.store.write_text(posixpath.join(self.site.output_root, "sitemap.xml"), sitemap.to_xml())
        logger.info("Generated sitemap.xml with %d URLs", sitemap.url_count())
        return sitemap.url_count()

    def generate_robots_txt(self) -> None:
        custom_path = posixpath.join(self.work_root, "robots.txt")
        output_path = posixpath.join(self.site.output_root, "robots.txt")

        if self.store.exists(custom_path):
            self.store.write_text(output_path, self.store.read_text(custom_path))
            logger.debug("Used custom robots.txt")
        else:
            robots = f"User-agent: *\nAllow: /\n\nSitemap: {self.site.site_url}/sitemap.xml"
            self.store.write_text(output_path, robots)
            logger.debug("Generated default robots.txt")

    def _enter(self, state: PipelineState) -> None:
        logger.debug("Pipeline state: %s → %s", self.state.value, state.value)
        self.state = state
