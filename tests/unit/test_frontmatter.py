"""Unit tests for YAML frontmatter parsing utilities."""

from notes_site.utils.frontmatter import related_identifiers
from notes_site.utils.frontmatter import split_frontmatter


class TestFrontmatterMetadata:
    def test_parse_valid_frontmatter(self):
        content = """---
title: Generics
related:
  - typescript/narrowing
  - nestjs/controllers
---

# Generics

Type parameters."""

        metadata, body, _ = split_frontmatter(content)

        assert metadata["title"] == "Generics"
        assert metadata["related"] == ["typescript/narrowing", "nestjs/controllers"]
        assert body.strip().startswith("# Generics")

    def test_parse_no_frontmatter(self):
        content = "# Heading\n\nJust content."

        metadata, body, _ = split_frontmatter(content)

        assert metadata == {}
        assert body == content

    def test_parse_empty_frontmatter(self):
        metadata, body, _ = split_frontmatter("---\n---\n# Heading")

        assert metadata == {}
        assert body == "# Heading"

    def test_parse_invalid_yaml(self):
        content = "---\nrelated: [unclosed\n---\n\n# Heading"

        metadata, body, _ = split_frontmatter(content)

        assert metadata == {}
        assert body == content

    def test_non_mapping_block_is_left_alone(self):
        content = "---\njust a sentence\n---\nBody"

        metadata, body, _ = split_frontmatter(content)

        assert metadata == {}
        assert body == content

    def test_parse_empty_content(self):
        assert split_frontmatter("") == ({}, "", 0)


class TestSplitFrontmatter:
    def test_counts_consumed_lines(self):
        _, body, consumed = split_frontmatter("---\ntitle: A\nrelated: b\n---\n# A\n")

        assert consumed == 4
        assert body == "# A\n"

    def test_no_frontmatter_consumes_nothing(self):
        assert split_frontmatter("# A")[2] == 0

    def test_thematic_break_is_not_frontmatter(self):
        content = "---\nparagraph without closing"

        assert split_frontmatter(content) == ({}, content, 0)

    def test_frontmatter_at_end_of_file(self):
        metadata, body, consumed = split_frontmatter("---\ntitle: A\n---")

        assert metadata == {"title": "A"}
        assert body == ""
        assert consumed == 3


class TestRelatedIdentifiers:
    def test_list_value(self):
        assert related_identifiers({"related": ["a", " b ", None, ""]}) == ["a", "b"]

    def test_comma_separated_string(self):
        assert related_identifiers({"related": "a, b ,,c"}) == ["a", "b", "c"]

    def test_missing_key(self):
        assert related_identifiers({"title": "x"}) == []

    def test_custom_key(self):
        assert related_identifiers({"see_also": ["x"]}, key="see_also") == ["x"]
