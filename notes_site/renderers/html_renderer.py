"""HTML renderer.

Produces one standalone page per note with a nested table of contents,
one ``<section>`` per parsed Section and a list of related notes. Code
blocks are emitted inside ``<pre><code>`` with only HTML escaping applied.
"""

from __future__ import annotations

import html
import re
from collections.abc import Sequence
from urllib.parse import quote

from ..models import Block
from ..models import BlockKind
from ..models import CrossReference
from ..models import Document
from ..models import OutlineNode
from ..models import Section
from ..parser import build_tree
from .base import Renderer

CODE_SPAN_PATTERN = re.compile(r"(`+)(.+?)\1")
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
STRONG_PATTERN = re.compile(r"\*\*(?!\s)(.+?)(?<!\s)\*\*")
EMPHASIS_PATTERN = re.compile(r"(?<![*\w])\*(?![\s*])(.+?)(?<![\s*])\*(?![*\w])")
LIST_MARKER_PATTERN = re.compile(r"^([ \t]*)([-*+]|\d{1,9}[.)])(?:[ \t]+(.*))?$")
QUOTE_MARKER_PATTERN = re.compile(r"^ {0,3}> ?")


def _indent_width(text: str) -> int:
    return len(text.expandtabs(4))


def _href(path: str) -> str:
    return html.escape(quote(path))


class HtmlRenderer(Renderer):
    name = "html"
    extension = "html"

    # --- Inline content ---

    def _link_target(self, url: str) -> str:
        if "://" not in url and not url.startswith(("#", "mailto:")):
            path, _, fragment = url.partition("#")
            if path.lower().endswith(".md"):
                url = f"{path[:-3]}.{self.extension}" + (f"#{fragment}" if fragment else "")
        return url

    def render_inline(self, text: str) -> str:
        """Render code spans, links, strong and emphasis; escape everything else."""
        parts = []
        position = 0
        for match in CODE_SPAN_PATTERN.finditer(text):
            parts.append(self._render_plain(text[position : match.start()]))
            parts.append(f"<code>{html.escape(match.group(2).strip(), quote=False)}</code>")
            position = match.end()
        parts.append(self._render_plain(text[position:]))
        return "".join(parts)

    def _render_plain(self, text: str) -> str:
        escaped = html.escape(text)
        escaped = LINK_PATTERN.sub(
            lambda m: f'<a href="{html.escape(self._link_target(html.unescape(m.group(2))))}">{m.group(1)}</a>',
            escaped,
        )
        escaped = STRONG_PATTERN.sub(r"<strong>\1</strong>", escaped)
        return EMPHASIS_PATTERN.sub(r"<em>\1</em>", escaped)

    # --- Blocks ---

    def render_code(self, block: Block) -> str:
        attributes = ""
        if block.language:
            attributes = f' class="language-{html.escape(block.language)}"'
        marker = "" if block.terminated else ' data-unterminated="true"'
        return f"<pre{marker}><code{attributes}>{html.escape(block.text, quote=False)}</code></pre>"

    def render_list(self, block: Block) -> str:
        items: list[tuple[int, bool, list[str]]] = []
        for line in block.lines:
            match = LIST_MARKER_PATTERN.match(line)
            if match:
                ordered = match.group(2)[0].isdigit()
                items.append((_indent_width(match.group(1)), ordered, [match.group(3) or ""]))
            elif items and line.strip():
                items[-1][2].append(line.strip())

        out: list[str] = []
        stack: list[tuple[int, str]] = []  # (indent, tag) of open lists
        for indent, ordered, text_lines in items:
            tag = "ol" if ordered else "ul"
            while stack and indent < stack[-1][0]:
                out.append(f"</li>\n</{stack.pop()[1]}>")
            if not stack or indent > stack[-1][0]:
                out.append(f"<{tag}>")
                stack.append((indent, tag))
            else:
                out.append("</li>")
            out.append(f"<li>{self.render_inline(' '.join(text_lines))}")
        while stack:
            out.append(f"</li>\n</{stack.pop()[1]}>")
        return "\n".join(out)

    def render_quote(self, block: Block) -> str:
        inner = " ".join(QUOTE_MARKER_PATTERN.sub("", line).strip() for line in block.lines)
        return f"<blockquote><p>{self.render_inline(inner.strip())}</p></blockquote>"

    def render_block(self, block: Block) -> str:
        if block.kind is BlockKind.CODE:
            return self.render_code(block)
        if block.kind is BlockKind.LIST:
            return self.render_list(block)
        if block.kind is BlockKind.QUOTE:
            return self.render_quote(block)
        if block.kind is BlockKind.RULE:
            return "<hr>"
        return f"<p>{self.render_inline(block.text.strip())}</p>"

    # --- Sections and pages ---

    def render_section(self, section: Section) -> str:
        out = []
        if section.implicit:
            out.append(f'<section id="{html.escape(section.anchor)}" class="preamble">')
        else:
            out.append(f'<section id="{html.escape(section.anchor)}" class="level-{section.level}">')
            out.append(f"<h{section.level}>{self.render_inline(section.title)}</h{section.level}>")
        out.extend(self.render_block(block) for block in section.blocks)
        out.append("</section>")
        return "\n".join(out)

    def _render_toc(self, nodes: list[OutlineNode]) -> list[str]:
        out = ["<ul>"]
        for node in nodes:
            if node.section.implicit:
                if node.children:
                    out.extend(self._render_toc(node.children))
                continue
            entry = f'<li><a href="#{html.escape(node.section.anchor)}">{self.render_inline(node.section.title)}</a>'
            if node.children:
                out.append(entry)
                out.extend(self._render_toc(node.children))
                out.append("</li>")
            else:
                out.append(f"{entry}</li>")
        out.append("</ul>")
        return out

    def _page(self, title: str, body: list[str]) -> str:
        head = [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '<meta charset="utf-8">',
            f"<title>{html.escape(title)}</title>",
            "</head>",
            "<body>",
        ]
        return "\n".join(head + body + ["</body>", "</html>"]) + "\n"

    def render(
        self,
        document: Document,
        sections: Sequence[Section],
        related: Sequence[str] | None = None,
    ) -> str:
        related_ids = list(document.related if related is None else related)
        body = []

        if any(not section.implicit for section in sections):
            body.append('<nav class="toc">')
            body.extend(self._render_toc(build_tree(list(sections))))
            body.append("</nav>")

        body.append(f'<main data-document="{html.escape(document.identifier)}">')
        body.extend(self.render_section(section) for section in sections)
        body.append("</main>")

        if related_ids:
            body.append('<aside class="related">')
            body.append("<h2>Related</h2>")
            body.append("<ul>")
            for identifier in related_ids:
                href = _href(self.link(document.identifier, identifier))
                body.append(f'<li><a href="{href}">{html.escape(identifier)}</a></li>')
            body.append("</ul>")
            body.append("</aside>")

        return self._page(document.title, body)

    def render_index(
        self,
        title: str,
        documents: Sequence[Document],
        edges: Sequence[CrossReference] = (),
    ) -> str:
        body = [f"<h1>{html.escape(title)}</h1>", "<ul>"]
        for document in sorted(documents, key=lambda d: d.identifier):
            href = _href(self.output_path(document.identifier))
            body.append(
                f'<li><a href="{href}">{html.escape(document.title)}</a> '
                f"<small>{html.escape(document.identifier)}</small></li>"
            )
        body.append("</ul>")
        if edges:
            body.append('<section class="cross-references">')
            body.append("<h2>Cross-references</h2>")
            body.append("<ul>")
            for edge in edges:
                body.append(f"<li>{html.escape(edge.source)} &harr; {html.escape(edge.target)}</li>")
            body.append("</ul>")
            body.append("</section>")
        return self._page(title, body)
