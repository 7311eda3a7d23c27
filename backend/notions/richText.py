"""Inline HTML formatting for Notion rich-text runs."""

from __future__ import annotations

from html import escape as _html_escape
from typing import List, Optional, Sequence

from .notionBlocks import TextRun

# 클래스 이름은 스타일시트의 유틸리티 클래스와 1:1로 대응한다.
_FLAG_CLASSES = ("bold", "code", "italic", "strikethrough", "underline")


def escape(text: str) -> str:
    """HTML-escape user content."""
    return _html_escape(str(text), quote=True)


def _color_style(color: str) -> str:
    if color.endswith("_background"):
        return f"background-color: {color[: -len('_background')]}"
    return f"color: {color}"


def format_text_run(run: TextRun) -> str:
    """Wrap a single run into a `<span>` carrying its annotations."""

    annotations = run.annotations
    classes = [name for name in _FLAG_CLASSES if getattr(annotations, name)]

    attrs = ""
    if classes:
        attrs += f' class="{" ".join(classes)}"'
    if annotations.color and annotations.color != "default":
        attrs += f' style="{escape(_color_style(annotations.color))}"'

    content = escape(run.content)
    if run.link:
        content = f'<a href="{escape(run.link)}">{content}</a>'
    return f"<span{attrs}>{content}</span>"


def format_text_runs(runs: Optional[Sequence[TextRun]]) -> List[str]:
    """Return one inline node per run, in input order."""

    if not runs:
        return []
    return [format_text_run(run) for run in runs]


def render_text(runs: Optional[Sequence[TextRun]]) -> str:
    return "".join(format_text_runs(runs))


def plain_text(runs: Optional[Sequence[TextRun]]) -> str:
    return "".join(run.content for run in runs or ())


def first_plain_text(runs: Optional[Sequence[TextRun]]) -> str:
    if not runs:
        return ""
    return runs[0].content
