"""Tests for foursg.paths."""

import posixpath

import pytest

from foursg.paths import PathResolver, document_stem, sanitize_directory, sanitize_segment


class TestSanitizeSegment:
    @pytest.mark.parametrize("raw, expected", [
        ("My Page", "my-page"),
        ("Café Notes", "cafe-notes"),
        ("What's New!", "whats-new"),
        ("Tom & Jerry", "tom-and-jerry"),
        ("a -- b", "a-b"),
        ("  padded  ", "padded"),
        ("v1.2 (draft)", "v12-draft"),
        ("snake_case", "snakecase"),
    ])
    def test_slugs(self, raw, expected):
        assert sanitize_segment(raw) == expected

    @pytest.mark.parametrize("raw", ["My Page", "Café Notes", "a -- b", "x/y", "!!!"])
    def test_idempotent(self, raw):
        once = sanitize_segment(raw)
        assert sanitize_segment(once) == once

    def test_distinct_inputs_can_collide(self):
        assert sanitize_segment("My Page") == sanitize_segment("my-page")

    def test_empty_result_falls_back(self):
        assert sanitize_segment("!!!") == "untitled"


class TestSanitizeDirectory:
    def test_each_segment_sanitized(self):
        assert sanitize_directory("My Notes/Sub Folder") == "my-notes/sub-folder"

    def test_root(self):
        assert sanitize_directory("") == ""


def test_document_stem():
    assert document_stem("a/b/My Note.md") == "My Note"
    assert document_stem("plain") == "plain"


class TestPathResolver:
    def setup_method(self):
        self.paths = PathResolver("foursg/site")

    def test_document_output_path(self):
        assert self.paths.output_path_for("Notes/My Page.md") == "foursg/site/notes/my-page.html"

    def test_index_keeps_literal_name(self):
        assert self.paths.output_path_for("Notes/Index.md") == "foursg/site/notes/index.html"
        assert self.paths.output_path_for("index.md") == "foursg/site/index.html"

    def test_image_keeps_filename(self):
        assert self.paths.image_output_path_for("Art Work/Pic 1.png") == "foursg/site/art-work/Pic 1.png"
        assert self.paths.image_output_path_for("pic.png") == "foursg/site/pic.png"

    def test_relative_path_up(self):
        assert self.paths.relative_path("foursg/site/blog/post1.html", "foursg/site/index.html") == "../index.html"

    def test_relative_path_same_dir(self):
        assert self.paths.relative_path("foursg/site/a.html", "foursg/site/b.html") == "b.html"

    def test_relative_path_down(self):
        assert self.paths.relative_path("foursg/site/index.html", "foursg/site/x/y/z.html") == "x/y/z.html"

    def test_relative_path_resolves_back(self):
        src = "foursg/site/a/b/page.html"
        dst = "foursg/site/c/other.html"
        rel = self.paths.relative_path(src, dst)
        assert posixpath.normpath(posixpath.join(posixpath.dirname(src), rel)) == dst

    def test_relative_path_to_site_root(self):
        assert self.paths.relative_path_to_site_root("foursg/site/index.html") == "./"
        assert self.paths.relative_path_to_site_root("foursg/site/a/b/c.html") == "../../"

    def test_page_url(self):
        assert self.paths.page_url("foursg/site/blog/post1.html") == "blog/post1.html"
