"""Unit tests for section parsing."""

from notes_site.loader import load_document
from notes_site.models import BlockKind
from notes_site.parser import SectionOutline
from notes_site.parser import build_tree
from notes_site.parser import iter_sections
from notes_site.parser import parse_document

NARROWING_NOTE = """# Type Narrowing

Narrowing refines a union with `typeof` checks.

## typeof guards

```ts
function pad(value: string | number) {
    if (typeof value === "number") {
        return " ".repeat(value);
    }
    return value;
}
```

## Truthiness

- empty strings
- `0` and `NaN`
  continuation line

### Nested detail

> Quoted remark

---

# Appendix
"""


def parse(text: str, identifier: str = "typescript/narrowing"):
    return parse_document(load_document(identifier, text))


class TestHeadings:
    def test_levels_titles_and_order(self):
        sections = parse(NARROWING_NOTE).sections

        assert [(s.level, s.title) for s in sections] == [
            (1, "Type Narrowing"),
            (2, "typeof guards"),
            (2, "Truthiness"),
            (3, "Nested detail"),
            (1, "Appendix"),
        ]
        assert [s.index for s in sections] == [0, 1, 2, 3, 4]
        assert all(s.document_id == "typescript/narrowing" for s in sections)

    def test_equal_levels_are_siblings(self):
        sections = parse("# A\n## B\n## C\n### D\n## E\n# F\n").sections

        parents = {s.title: s.parent for s in sections}
        assert parents == {"A": None, "B": 0, "C": 0, "D": 2, "E": 0, "F": None}

    def test_seven_hashes_is_paragraph(self):
        sections = parse("# Top\n####### not a heading\n").sections

        assert len(sections) == 1
        assert sections[0].blocks[0].kind is BlockKind.PARAGRAPH

    def test_hash_without_space_is_paragraph(self):
        sections = parse("#hashtag\n").sections

        assert sections[0].implicit
        assert sections[0].blocks[0].text == "#hashtag"

    def test_closing_hashes_are_stripped(self):
        assert parse("## Title ##\n").sections[0].title == "Title"

    def test_duplicate_titles_get_unique_anchors(self):
        anchors = [s.anchor for s in parse("# Usage\n# Usage\n# Usage\n").sections]

        assert anchors == ["usage", "usage-1", "usage-2"]

    def test_line_numbers_account_for_frontmatter(self):
        sections = parse("---\ntitle: T\n---\n# First\n").sections

        assert sections[0].line_number == 4


class TestPreamble:
    def test_content_before_first_heading(self):
        sections = parse("---\ntitle: Controllers\n---\nIntro text.\n\n# Routing\n").sections

        assert sections[0].implicit
        assert sections[0].level == 1
        assert sections[0].title == "Controllers"
        assert sections[1].title == "Routing"

    def test_empty_preamble_is_dropped(self):
        sections = parse("\n\n# Only\n").sections

        assert [s.title for s in sections] == ["Only"]

    def test_empty_document(self):
        parsed = parse("")

        assert parsed.sections == []
        assert parsed.issues == []


class TestBlocks:
    def test_block_kinds(self):
        sections = parse(NARROWING_NOTE).sections

        assert [b.kind for b in sections[0].blocks] == [BlockKind.PARAGRAPH]
        assert [b.kind for b in sections[1].blocks] == [BlockKind.CODE]
        assert [b.kind for b in sections[2].blocks] == [BlockKind.LIST]
        assert [b.kind for b in sections[3].blocks] == [BlockKind.QUOTE, BlockKind.RULE]

    def test_list_keeps_continuation_lines(self):
        block = parse(NARROWING_NOTE).sections[2].blocks[0]

        assert block.lines == ("- empty strings", "- `0` and `NaN`", "  continuation line")

    def test_loose_list_stays_one_block(self):
        blocks = parse("# L\n- one\n\n- two\n\nAfter.\n").sections[0].blocks

        assert [b.kind for b in blocks] == [BlockKind.LIST, BlockKind.PARAGRAPH]
        assert blocks[0].lines == ("- one", "", "- two")

    def test_paragraphs_split_on_blank_lines(self):
        blocks = parse("# P\nfirst\nstill first\n\nsecond\n").sections[0].blocks

        assert [b.text for b in blocks] == ["first\nstill first", "second"]


class TestCodeBlocks:
    def test_code_is_verbatim(self):
        block = parse(NARROWING_NOTE).sections[1].blocks[0]

        assert block.language == "ts"
        assert block.fence == "```"
        assert block.terminated
        assert block.lines[1] == '    if (typeof value === "number") {'
        assert block.lines[2] == '        return " ".repeat(value);'

    def test_headings_inside_code_are_content(self):
        sections = parse("# Real\n```md\n# Not a heading\n```\n").sections

        assert len(sections) == 1
        assert sections[0].blocks[0].lines == ("# Not a heading",)

    def test_tilde_fence_needs_matching_closer(self):
        block = parse("# T\n~~~~\n```\ninside\n~~~\n~~~~\n").sections[0].blocks[0]

        assert block.lines == ("```", "inside", "~~~")
        assert block.language is None

    def test_blank_lines_inside_code_are_kept(self):
        block = parse("# T\n```\na\n\n\nb\n```\n").sections[0].blocks[0]

        assert block.lines == ("a", "", "", "b")

    def test_unknown_language_is_kept(self):
        assert parse("```made-up-lang\nx\n```\n").sections[0].blocks[0].language == "made-up-lang"

    def test_unterminated_fence_is_reported_not_raised(self):
        parsed = parse("# Start\n```ts\nconst a = 1;\n# inside\n", identifier="angular/binding")

        assert len(parsed.issues) == 1
        issue = parsed.issues[0]
        assert issue.error_code == "MALFORMED_CODE_BLOCK"
        assert issue.details["line_number"] == 2
        assert issue.details["language"] == "ts"
        block = parsed.sections[0].blocks[0]
        assert block.terminated is False
        assert block.lines == ("const a = 1;", "# inside")

    def test_content_after_closed_fence_continues(self):
        parsed = parse("# A\n```\nx\n```\n# B\ntext\n")

        assert [s.title for s in parsed.sections] == ["A", "B"]
        assert parsed.issues == []


class TestSectionOutline:
    def test_is_lazy_and_restartable(self):
        outline = SectionOutline(load_document("n", NARROWING_NOTE))

        iterator = iter(outline)
        assert next(iterator).title == "Type Narrowing"
        assert [s.title for s in outline] == [s.title for s in outline]
        assert len(list(outline)) == 5

    def test_issues_reset_per_iteration(self):
        outline = SectionOutline(load_document("n", "```\nopen\n"))

        list(outline)
        list(outline)

        assert len(outline.issues) == 1

    def test_iter_sections(self):
        assert [s.title for s in iter_sections(load_document("n", "# a\n# b\n"))] == ["a", "b"]


class TestBuildTree:
    def test_nesting(self):
        sections = parse(NARROWING_NOTE).sections

        tree = build_tree(sections)

        assert [node.section.title for node in tree] == ["Type Narrowing", "Appendix"]
        assert [child.section.title for child in tree[0].children] == ["typeof guards", "Truthiness"]
        assert tree[0].children[1].children[0].section.title == "Nested detail"
