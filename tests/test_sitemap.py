"""Tests for foursg.sitemap."""

import xml.etree.ElementTree as ET
from datetime import datetime, timezone

from foursg.graph import DocumentNode
from foursg.sitemap import SITEMAP_NS, SitemapAccumulator, SitemapEntry, entry_for, lastmod_from_mtime


def _doc(path, front_matter=None, mtime=0.0):
    return DocumentNode(path=path, body="", front_matter=front_matter or {}, mtime=mtime)


class TestEntryDefaults:
    def test_root_index(self):
        entry = entry_for(_doc("index.md"), "index.html")
        assert (entry.priority, entry.changefreq) == (1.0, "weekly")

    def test_nested_index(self):
        entry = entry_for(_doc("blog/Index.md"), "blog/index.html")
        assert (entry.priority, entry.changefreq) == (0.8, "weekly")

    def test_regular_page(self):
        entry = entry_for(_doc("blog/post.md"), "blog/post.html")
        assert (entry.priority, entry.changefreq) == (0.6, "monthly")

    def test_front_matter_overrides(self):
        entry = entry_for(_doc("blog/post.md", {"priority": 0.3, "changefreq": "Daily"}), "blog/post.html")
        assert (entry.priority, entry.changefreq) == (0.3, "daily")

    def test_invalid_overrides_fall_back(self, caplog):
        entry = entry_for(_doc("blog/post.md", {"priority": 5, "changefreq": "sometimes"}), "blog/post.html")
        assert (entry.priority, entry.changefreq) == (0.6, "monthly")
        assert "Invalid priority" in caplog.text
        assert "Invalid changefreq" in caplog.text

    def test_lastmod_from_mtime(self):
        mtime = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc).timestamp()
        assert entry_for(_doc("a.md", mtime=mtime), "a.html").lastmod == "2024-03-01"
        assert lastmod_from_mtime(0) is None


class TestSitemapAccumulator:
    def test_to_xml(self):
        sitemap = SitemapAccumulator("https://demo.test/")
        sitemap.add_url(SitemapEntry("index.html", lastmod="2024-03-01", changefreq="weekly", priority=1.0))
        sitemap.add_url(SitemapEntry("/blog/a&b.html", priority=0.6))
        sitemap.add_url(SitemapEntry("bare.html"))

        xml = sitemap.to_xml()
        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">')
        assert "<loc>https://demo.test/index.html</loc>" in xml
        assert "<loc>https://demo.test/blog/a&amp;b.html</loc>" in xml
        assert "<lastmod>2024-03-01</lastmod>" in xml
        assert "<priority>1.0</priority>" in xml
        assert "<priority>0.6</priority>" in xml

        root = ET.fromstring(xml.encode("utf-8"))
        locs = [el.text for el in root.iter(f"{{{SITEMAP_NS}}}loc")]
        assert locs == [
            "https://demo.test/index.html",
            "https://demo.test/blog/a&b.html",
            "https://demo.test/bare.html",
        ]

    def test_count_and_clear(self):
        sitemap = SitemapAccumulator("https://demo.test")
        sitemap.add_url(SitemapEntry("a.html"))
        assert sitemap.url_count() == 1
        sitemap.clear()
        assert sitemap.url_count() == 0
        assert "<url>" not in sitemap.to_xml()
