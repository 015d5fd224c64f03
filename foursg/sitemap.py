"""
sitemap.xml generation.

Entries are collected while pages render and serialized once at the end
of the build.  Pages rendered in the same batch may be appended in any
order; only the order between batches is stable.
"""

import logging
import threading
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from datetime import datetime, timezone

from .graph import DocumentNode

logger = logging.getLogger(__name__)

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
CHANGE_FREQUENCIES = ("always", "hourly", "daily", "weekly", "monthly", "yearly", "never")


@dataclass(frozen=True)
class SitemapEntry:
    loc: str
    lastmod: str | None = None
    changefreq: str | None = None
    priority: float | None = None


def default_changefreq(document: DocumentNode) -> str:
    """Folder landing pages change weekly, other pages monthly."""
    return "weekly" if document.is_index else "monthly"


def default_priority(document: DocumentNode) -> float:
    """Root index 1.0, nested index 0.8, any other page 0.6."""
    if document.is_index:
        return 1.0 if document.depth == 1 else 0.8
    return 0.6


def lastmod_from_mtime(mtime: float) -> str | None:
    """UTC calendar date of a modification time, or None when unknown."""
    if not mtime:
        return None
    return datetime.fromtimestamp(mtime, tz=timezone.utc).strftime("%Y-%m-%d")


def entry_for(document: DocumentNode, page_url: str) -> SitemapEntry:
    """Sitemap entry for a rendered page, honouring changefreq/priority overrides."""
    front_matter = document.front_matter

    changefreq = front_matter.get("changefreq")
    if changefreq is None:
        changefreq = default_changefreq(document)
    elif str(changefreq).lower() not in CHANGE_FREQUENCIES:
        logger.warning("Invalid changefreq %r in %s, using default", changefreq, document.path)
        changefreq = default_changefreq(document)
    else:
        changefreq = str(changefreq).lower()

    priority = front_matter.get("priority")
    if priority is None:
        priority = default_priority(document)
    else:
        try:
            priority = float(priority)
        except (TypeError, ValueError):
            priority = -1.0
        if not 0.0 <= priority <= 1.0:
            logger.warning("Invalid priority %r in %s, using default",
                           front_matter.get("priority"), document.path)
            priority = default_priority(document)

    return SitemapEntry(
        loc=page_url,
        lastmod=lastmod_from_mtime(document.mtime),
        changefreq=changefreq,
        priority=priority,
    )


class SitemapAccumulator:
    """Collects sitemap entries from concurrent page renders."""

    def __init__(self, hostname: str):
        self.hostname = hostname.rstrip("/")
        self._urls: list[SitemapEntry] = []
        self._lock = threading.Lock()

    def add_url(self, entry: SitemapEntry) -> None:
        """Append *entry*; safe to call from several threads."""
        with self._lock:
            self._urls.append(entry)

    def clear(self) -> None:
        with self._lock:
            self._urls = []

    @property
    def entries(self) -> list[SitemapEntry]:
        return list(self._urls)

    def url_count(self) -> int:
        return len(self._urls)

    def _absolute(self, loc: str) -> str:
        return self.hostname + ("" if loc.startswith("/") else "/") + loc

    def to_xml(self) -> str:
        """Serialize every entry as a sitemaps.org urlset document."""
        urlset = ET.Element("urlset", xmlns=SITEMAP_NS)
        for entry in self.entries:
            url_el = ET.SubElement(urlset, "url")
            ET.SubElement(url_el, "loc").text = self._absolute(entry.loc)
            if entry.lastmod:
                ET.SubElement(url_el, "lastmod").text = entry.lastmod
            if entry.changefreq:
                ET.SubElement(url_el, "changefreq").text = entry.changefreq
            if entry.priority is not None:
                ET.SubElement(url_el, "priority").text = f"{entry.priority:.1f}"

        ET.indent(urlset, space="  ")
        body = ET.tostring(urlset, encoding="unicode")
        return '<?xml version="1.0" encoding="UTF-8"?>\n' + body + "\n"
