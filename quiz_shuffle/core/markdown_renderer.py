"""Markdown + LaTeX rendering for question payloads sent to participants.

Math is left as ``$...$`` source; the participant page typesets it with
MathJax, so the server only has to produce HTML fragments.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt


@dataclass(slots=True)
class MarkdownRenderer:
    """Converts markdown-with-math into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into a block-level HTML fragment."""
        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render short text such as an option without wrapping paragraphs."""
        return self._markdown.renderInline(markdown_text.strip())

    def render_options(self, options: dict[str, str]) -> dict[str, str]:
        return {label: self.render_inline(text) for label, text in options.items()}


renderer = MarkdownRenderer()
# MarkdownIt is safe for concurrent read-only renders, so the API threads share it.
