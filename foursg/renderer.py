"""
Page rendering.

Configures Mistune for GFM-style markdown (tables, strikethrough,
autolinks, task lists, hard line breaks) and wraps the resulting HTML in
a page template together with navigation and SEO output.

Page templates are logic-less mustache-style text:

  {{name}}     HTML-escaped value
  {{{name}}}   raw value (also {{&name}})

Everything else, including Jinja ``{% %}`` syntax, is copied verbatim.
Templates are translated once into a Jinja2 template that only looks
variables up, so unknown names render empty.

Template variables:
  title, siteName, rootPath, content, navigation, styleSheet,
  seoMetaTags, seoStructuredData, canonicalUrl
"""

import logging
import posixpath
import re

import jinja2
import mistune

from .config import BuildContext, SiteConfig
from .graph import DocumentNode
from .paths import PathResolver
from .seo import SeoBlock
from .store import ContentStore

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "default.html"
DEFAULT_STYLESHEET = "default.css"

_TAG_RE = re.compile(r"\{\{\{\s*(\w+)\s*\}\}\}|\{\{&\s*(\w+)\s*\}\}|\{\{\s*(\w+)\s*\}\}")
_ENDRAW_RE = re.compile(r"\{%[-+]?\s*endraw\s*[-+]?%\}")


def create_markdown() -> mistune.Markdown:
    """Create a mistune parser matching commonmark + GFM with line breaks."""
    return mistune.create_markdown(
        escape=False,
        hard_wrap=True,
        plugins=["strikethrough", "table", "url", "task_lists", "footnotes"],
    )


def _verbatim(text: str) -> str:
    if not text:
        return ""
    parts, pos = [], 0
    # an endraw marker inside literal text would close the raw block early
    for match in _ENDRAW_RE.finditer(text):
        parts.append("{% raw %}" + text[pos:match.start()] + "{% endraw %}")
        parts.append("{{ '" + match.group(0) + "' }}")
        pos = match.end()
    parts.append("{% raw %}" + text[pos:] + "{% endraw %}")
    return "".join(parts)


def mustache_to_jinja(text: str) -> str:
    """Translate a mustache-style page template into Jinja2 source.

    Every tag becomes a ``var(name)`` call, so names that are Jinja
    keywords still resolve as plain variables and unknown names are empty.
    """
    out, pos = [], 0
    for match in _TAG_RE.finditer(text):
        out.append(_verbatim(text[pos:match.start()]))
        raw_name = match.group(1) or match.group(2)
        if raw_name:
            out.append("{{ var('%s')|safe }}" % raw_name)
        else:
            out.append("{{ var('%s') }}" % match.group(3))
        pos = match.end()
    out.append(_verbatim(text[pos:]))
    return "".join(out)


def page_title(document: DocumentNode) -> str:
    return str(document.front_matter.get("title") or document.basename)


class PageRenderer:
    def __init__(self, store: ContentStore, site: SiteConfig, context: BuildContext,
                 paths: PathResolver, markdown: mistune.Markdown | None = None):
        self.store = store
        self.site = site
        self.context = context
        self.paths = paths
        self.markdown = markdown or create_markdown()
        self.env = jinja2.Environment(autoescape=True, keep_trailing_newline=True)

    def load_template(self, name: str) -> jinja2.Template:
        """Load and compile a template, caching it for the rest of the run."""
        path = posixpath.join(self.site.template_root, name)
        template = self.context.template_cache.get(path)
        if template is None:
            template = self.env.from_string(mustache_to_jinja(self.store.read_text(path)))
            # Two pages racing here compile the same text, either result is fine
            self.context.template_cache[path] = template
            logger.debug("Loaded template %s", path)
        return template

    def render_markdown(self, text: str) -> str:
        return self.markdown(text)

    def render(self, document: DocumentNode, rewritten_body: str, nav_html: str,
               seo: SeoBlock, template_name: str | None = None) -> str:
        front_matter = document.front_matter
        template = self.load_template(template_name or front_matter.get("page_template") or DEFAULT_TEMPLATE)
        output_path = self.paths.output_path_for(document.path)

        values = dict(
            title=page_title(document),
            siteName=self.site.site_name,
            rootPath=self.paths.relative_path_to_site_root(output_path),
            content=self.render_markdown(rewritten_body),
            navigation=nav_html,
            styleSheet=front_matter.get("page_css") or DEFAULT_STYLESHEET,
            seoMetaTags=seo.meta_tags,
            seoStructuredData=seo.structured_data,
            canonicalUrl=seo.canonical_url,
        )
        return template.render(var=lambda name: values.get(name, ""))
