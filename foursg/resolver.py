"""
Resolution of Obsidian-style references in a document body.

Rewrites, before markdown rendering:
  [[page]]         → [page](../page.html)
  [[page|text]]    → [text](../page.html)
  ![[image.png]]   → ![](graphics/image.png)

Unresolved targets degrade to #broken-link / #broken-image instead of
failing the build.
"""

import logging
import re

from .graph import ContentGraphIndex, DocumentNode
from .paths import PathResolver

logger = logging.getLogger(__name__)

BROKEN_LINK = "#broken-link"
BROKEN_IMAGE = "#broken-image"

# ![[...]] is a superset of [[...]], so the lookbehind keeps embeds out of
# the link pass.
WIKI_LINK_PATTERN = re.compile(r"(?<!!)\[\[([^\]]+)\]\]")
WIKI_EMBED_PATTERN = re.compile(r"!\[\[([^\]]+)\]\]")
_WHITESPACE_RE = re.compile(r"\s")


def _destination(path: str) -> str:
    """Wrap a link destination in <...> when it would otherwise be cut at a space."""
    if _WHITESPACE_RE.search(path):
        return f"<{path}>"
    return path


class LinkRewriter:
    def __init__(self, index: ContentGraphIndex, paths: PathResolver):
        self.index = index
        self.paths = paths

    def rewrite(self, document: DocumentNode) -> str:
        """Return *document*'s body with wiki-links and embeds rewritten."""
        content = self.convert_wiki_links(document.body, document)
        return self.convert_image_embeds(content, document)

    def convert_wiki_links(self, content: str, document: DocumentNode) -> str:
        current_output = self.paths.output_path_for(document.path)

        def replace(m):
            # Handle pipe syntax: [[target|display]]
            parts = m.group(1).split("|")
            target = parts[0].strip()
            display = parts[1].strip() if len(parts) > 1 else target

            found = self.index.find_document(target)
            if found is None:
                logger.debug("Broken link in %s: [[%s]]", document.path, target)
                return f"[{display}]({BROKEN_LINK})"

            target_output = self.paths.output_path_for(found.path)
            href = self.paths.relative_path(current_output, target_output)
            return f"[{display}]({_destination(href)})"

        return WIKI_LINK_PATTERN.sub(replace, content)

    def convert_image_embeds(self, content: str, document: DocumentNode) -> str:
        current_output = self.paths.output_path_for(document.path)

        def replace(m):
            image_ref = m.group(1)
            # Strip Obsidian size suffix (e.g. "img.png|350" → "img.png")
            target = image_ref.split("|", 1)[0].strip()

            image = self.index.find_image(target)
            if image is None:
                logger.debug("Broken image in %s: ![[%s]]", document.path, image_ref)
                return f"![{target}]({BROKEN_IMAGE})"

            image_output = self.paths.image_output_path_for(image.path)
            src = self.paths.relative_path(current_output, image_output)
            return f"![]({_destination(src)})"

        return WIKI_EMBED_PATTERN.sub(replace, content)
