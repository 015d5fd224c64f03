"""
SEO metadata for generated pages.

Derives a SeoConfig from a document's front matter and renders:
  - basic meta tags (description, keywords, author, generator)
  - Open Graph tags (og:*, article:*)
  - Twitter Card tags
  - a JSON-LD structured data block (Article or WebPage)

Defaults:
  type          'article' below the content root, 'website' at the root
  section       name of the containing folder
  modifiedTime  falls back to publishedTime; never invented otherwise
  canonical     the page's own absolute URL
"""

import html
import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone

from .graph import DocumentNode

logger = logging.getLogger(__name__)

GENERATOR_NAME = "FourSG"


@dataclass
class SeoConfig:
    title: str
    description: str | None = None
    keywords: str | None = None
    author: str | None = None
    og_image: str | None = None
    site_name: str | None = None
    url: str | None = None
    canonical_url: str | None = None
    type: str = "website"
    published_time: str | None = None
    modified_time: str | None = None
    section: str | None = None


@dataclass(frozen=True)
class MetaTag:
    content: str
    name: str | None = None
    property: str | None = None


@dataclass(frozen=True)
class SeoBlock:
    """Rendered SEO output handed to the page template."""
    meta_tags: str
    structured_data: str
    canonical_url: str


def to_iso_instant(value) -> str | None:
    """Convert a front matter date to an ISO-8601 UTC instant.

    Naive values are taken as UTC.  Returns None for anything unparseable.

    '2024-01-15'           → '2024-01-15T00:00:00.000Z'
    '2024-01-15T10:30:00'  → '2024-01-15T10:30:00.000Z'
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _text(value) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _front_matter_date(front_matter: dict, key: str, source: str) -> str | None:
    raw = front_matter.get(key)
    if raw in (None, ""):
        return None
    instant = to_iso_instant(raw)
    if instant is None:
        logger.warning("Ignoring unparseable %s %r in %s", key, raw, source)
    return instant


def derive_seo_config(title: str, front_matter: dict, document: DocumentNode,
                      site_name: str, site_url: str, page_url: str, root_path: str) -> SeoConfig:
    """Build the SeoConfig for one page.

    *page_url* is site-relative (e.g. 'blog/post.html'); *root_path* is the
    relative path from the page back to the site root (e.g. '../').
    """
    absolute_url = f"{site_url}/{page_url}"

    og_image = _text(front_matter.get("og_image"))
    if og_image and not og_image.startswith("http"):
        og_image = f"{site_url}/{root_path}{og_image}"

    keywords = front_matter.get("keywords")
    if isinstance(keywords, list):
        keywords = ", ".join(str(k) for k in keywords)

    published = _front_matter_date(front_matter, "published_date", document.path)
    modified = _front_matter_date(front_matter, "last_modified_date", document.path) or published

    return SeoConfig(
        title=_text(front_matter.get("title")) or title,
        description=_text(front_matter.get("description")),
        keywords=_text(keywords),
        author=_text(front_matter.get("author")),
        og_image=og_image,
        site_name=site_name,
        url=absolute_url,
        canonical_url=_text(front_matter.get("canonical")) or absolute_url,
        type=_text(front_matter.get("type")) or ("article" if document.parent else "website"),
        published_time=published,
        modified_time=modified,
        section=_text(front_matter.get("section")) or _text(document.parent_name),
    )


class SeoManager:
    """Turns a SeoConfig into meta tags and a JSON-LD block."""

    def __init__(self, config: SeoConfig):
        self.config = config

    def generate_meta_tags(self) -> list[MetaTag]:
        """Standard name= tags; empty fields are left out, generator is always present."""
        c = self.config
        tags = []
        if c.description:
            tags.append(MetaTag(c.description, name="description"))
        if c.keywords:
            tags.append(MetaTag(c.keywords, name="keywords"))
        if c.author:
            tags.append(MetaTag(c.author, name="author"))
        tags.append(MetaTag(GENERATOR_NAME, name="generator"))
        return tags

    def generate_open_graph_tags(self) -> list[MetaTag]:
        """og:* and article:* property tags."""
        c = self.config
        tags = [MetaTag(c.title, property="og:title")]
        if c.description:
            tags.append(MetaTag(c.description, property="og:description"))
        if c.site_name:
            tags.append(MetaTag(c.site_name, property="og:site_name"))
        if c.url:
            tags.append(MetaTag(c.url, property="og:url"))
        tags.append(MetaTag(c.type or "website", property="og:type"))
        if c.og_image:
            tags.append(MetaTag(c.og_image, property="og:image"))
        if c.published_time:
            tags.append(MetaTag(c.published_time, property="article:published_time"))
        if c.modified_time:
            tags.append(MetaTag(c.modified_time, property="article:modified_time"))
        if c.author:
            tags.append(MetaTag(c.author, property="article:author"))
        if c.section:
            tags.append(MetaTag(c.section, property="article:section"))
        return tags

    def generate_twitter_card_tags(self) -> list[MetaTag]:
        """Twitter card tags, always the large-image summary card."""
        c = self.config
        tags = [
            MetaTag("summary_large_image", name="twitter:card"),
            MetaTag(c.title, name="twitter:title"),
        ]
        if c.description:
            tags.append(MetaTag(c.description, name="twitter:description"))
        if c.og_image:
            tags.append(MetaTag(c.og_image, name="twitter:image"))
        return tags

    def generate_all_tags(self) -> list[MetaTag]:
        return (
            self.generate_meta_tags()
            + self.generate_open_graph_tags()
            + self.generate_twitter_card_tags()
        )

    def to_html_string(self) -> str:
        """All tags as escaped <meta> lines, indented for the document head."""
        lines = []
        for tag in self.generate_all_tags():
            content = html.escape(tag.content)
            if tag.property:
                lines.append(f'    <meta property="{html.escape(tag.property)}" content="{content}">')
            else:
                lines.append(f'    <meta name="{html.escape(tag.name)}" content="{content}">')
        return "\n".join(lines)

    def generate_structured_data(self) -> dict:
        """schema.org Article (for article pages) or WebPage mapping."""
        c = self.config
        data = {
            "@context": "https://schema.org",
            "@type": "Article" if c.type == "article" else "WebPage",
            "headline": c.title,
        }
        if c.description:
            data["description"] = c.description
        if c.author:
            data["author"] = {"@type": "Person", "name": c.author}
        if c.published_time:
            data["datePublished"] = c.published_time
        if c.modified_time:
            data["dateModified"] = c.modified_time
        if c.og_image:
            data["image"] = c.og_image
        if c.url:
            data["url"] = c.url
        return data

    def generate_structured_data_script(self) -> str:
        """Structured data wrapped in an application/ld+json script element."""
        payload = json.dumps(self.generate_structured_data(), indent=2, ensure_ascii=False)
        # "</script>" inside a string value must not close the block
        payload = payload.replace("</", "<\\/")
        body = "\n".join("    " + line for line in payload.split("\n"))
        return f'    <script type="application/ld+json">\n{body}\n    </script>'


def build_seo_block(title: str, front_matter: dict, document: DocumentNode,
                    site_name: str, site_url: str, page_url: str, root_path: str) -> SeoBlock:
    """Everything the page template needs for SEO, in one call."""
    config = derive_seo_config(title, front_matter, document, site_name, site_url, page_url, root_path)
    manager = SeoManager(config)
    return SeoBlock(
        meta_tags=manager.to_html_string(),
        structured_data=manager.generate_structured_data_script(),
        canonical_url=config.canonical_url,
    )
