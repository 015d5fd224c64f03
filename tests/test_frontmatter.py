"""Tests for foursg.frontmatter.extract_frontmatter."""

from foursg.frontmatter import extract_frontmatter


class TestExtractFrontmatter:
    def test_splits_metadata_and_body(self):
        text = "---\ntitle: Hello\ntags: [a, b]\n---\n\nBody text\n"
        meta, body = extract_frontmatter(text)
        assert meta == {"title": "Hello", "tags": ["a", "b"]}
        assert body == "Body text"

    def test_dates_become_iso_strings(self):
        text = "---\npublished_date: 2024-01-15\nupdated: 2024-01-16 10:30:00\n---\nx"
        meta, _ = extract_frontmatter(text)
        assert meta["published_date"] == "2024-01-15"
        assert meta["updated"] == "2024-01-16T10:30:00"

    def test_no_frontmatter_returns_text_unchanged(self):
        text = "# Title\n\nNo metadata here."
        assert extract_frontmatter(text) == ({}, text)

    def test_malformed_yaml_is_ignored(self):
        text = "---\ntitle: [unclosed\n---\nBody"
        assert extract_frontmatter(text) == ({}, text)

    def test_empty_block(self):
        meta, body = extract_frontmatter("---\n---\nBody")
        assert meta == {}
        assert body == "Body"

    def test_horizontal_rule_in_body_is_kept(self):
        text = "---\ntitle: T\n---\nabove\n\n---\n\nbelow"
        meta, body = extract_frontmatter(text)
        assert meta == {"title": "T"}
        assert "---" in body
