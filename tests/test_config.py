"""Tests for foursg.config."""

from conftest import write_files

from foursg.config import (
    BuildContext, Settings, SiteConfig, find_root_index, load_settings, load_site_config, save_settings,
)
from foursg.sitemap import SitemapAccumulator
from foursg.store import LocalContentStore


class TestLoadSiteConfig:
    def test_from_root_index(self, store):
        site = load_site_config(store)
        assert site.site_name == "Demo"
        assert site.site_url == "https://demo.test"
        assert site.output_root == "foursg/site"
        assert site.template_root == "foursg/templates"
        assert site.css_root == "foursg/css"

    def test_no_root_index(self, tmp_path, caplog):
        write_files(tmp_path, {"notes/a.md": "A"})
        site = load_site_config(LocalContentStore(tmp_path))
        assert site == SiteConfig()
        assert site.site_name == "My Site"
        assert site.site_url == "https://example.com"
        assert "No index.md found" in caplog.text

    def test_missing_url_warns(self, tmp_path, caplog):
        write_files(tmp_path, {"Index.md": "---\nsite_name: Notes\n---\nHi"})
        site = load_site_config(LocalContentStore(tmp_path))
        assert site.site_name == "Notes"
        assert site.site_url == "https://example.com"
        assert "site_url not defined" in caplog.text

    def test_trailing_slash_stripped(self, tmp_path):
        write_files(tmp_path, {"index.md": "---\nsite_url: https://demo.test/\n---\n"})
        assert load_site_config(LocalContentStore(tmp_path)).site_url == "https://demo.test"

    def test_find_root_index_ignores_nested(self, tmp_path):
        write_files(tmp_path, {"blog/index.md": "x", "about.md": "y"})
        assert find_root_index(LocalContentStore(tmp_path)) is None


class TestSettings:
    def test_defaults_when_missing(self, store):
        assert load_settings(store) == Settings()

    def test_round_trip(self, store, vault):
        save_settings(store, Settings(debug_logging=True))
        assert (vault / "foursg" / "settings.yaml").read_text() == "debug_logging: true\n"
        assert load_settings(store).debug_logging is True


class TestBuildContext:
    def test_mark_processed(self):
        context = BuildContext()
        assert context.mark_processed("a.md") is True
        assert context.mark_processed("a.md") is False

    def test_clear(self):
        context = BuildContext()
        context.template_cache["t"] = object()
        context.mark_processed("a.md")
        context.navigation = ["node"]
        context.sitemap = SitemapAccumulator("https://demo.test")

        context.clear()

        assert context.template_cache == {}
        assert context.processed == set()
        assert context.navigation == []
        assert context.index is None
        assert context.sitemap is None
