"""Utilities for rendering Notion block trees into HTML fragments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Sequence, Tuple

from .notionBlocks import (
    KNOWN_BLOCK_TYPES,
    Block,
    BookmarkContent,
    ChildPageContent,
    CodeContent,
    DividerContent,
    MediaContent,
    RichTextContent,
    ToDoContent,
)
from .richText import escape, first_plain_text, plain_text, render_text

_LIST_TAGS: Dict[str, str] = {
    "bulleted_list_item": "ul",
    "numbered_list_item": "ol",
}

_HEADING_TAGS: Dict[str, str] = {
    "heading_1": "h1",
    "heading_2": "h2",
    "heading_3": "h3",
}

UNSUPPORTED_PREFIX = "❌ Unsupported block"


@dataclass(frozen=True)
class RenderOptions:
    """Rendering policies that are not fixed by the block payload.

    ``rich_text_runs`` controls quote and code blocks: ``"first"`` keeps only
    the first run's plain text, ``"all"`` keeps every run.
    """

    rich_text_runs: Literal["first", "all"] = "first"


DEFAULT_OPTIONS = RenderOptions()


def _caption_text(block: Block) -> str:
    content = block.content
    caption = getattr(content, "caption", ())
    return first_plain_text(caption)


def _figcaption(caption: str) -> str:
    return f"<figcaption>{escape(caption)}</figcaption>" if caption else ""


def _file_label(url: str) -> str:
    """Filename part of the URL without its query string."""

    return url.split("/")[-1].split("?")[0]


def _code_language_class(language: str) -> str:
    normalized = "-".join(language.strip().lower().split())
    return f"language-{normalized or 'plaintext'} line-numbers"


def render_unsupported(block_type: str) -> str:
    """Readable fallback for blocks the renderer cannot display."""

    if block_type == "unsupported":
        reason = "unsupported by Notion API"
    else:
        reason = block_type or "unknown"
    return f"{UNSUPPORTED_PREFIX} ({escape(reason)})"


def _render_list_item(block: Block, content: RichTextContent, options: RenderOptions) -> str:
    nested = render_blocks(block.children, options) if block.children else []
    return f"<li>{render_text(content.rich_text)}{''.join(nested)}</li>"


def _render_to_do(block: Block, content: ToDoContent) -> str:
    block_id = escape(block.id)
    checked = " checked" if content.checked else ""
    return (
        f'<div><label for="{block_id}">'
        f'<input type="checkbox" id="{block_id}"{checked} disabled> '
        f"{render_text(content.rich_text)}</label></div>"
    )


def _render_toggle(block: Block, content: RichTextContent, options: RenderOptions) -> str:
    body = render_blocks(block.children, options) if block.children else []
    return f"<details><summary>{render_text(content.rich_text)}</summary>{''.join(body)}</details>"


def _render_image(block: Block, content: MediaContent) -> str:
    src = content.source.url if content.source else ""
    caption = _caption_text(block)
    return f'<figure><img src="{escape(src)}" alt="{escape(caption)}">{_figcaption(caption)}</figure>'


def _render_file(block: Block, content: MediaContent) -> str:
    url = content.source.url if content.source else ""
    caption = _caption_text(block)
    return (
        f'<figure><div class="file">📎 <a href="{escape(url)}">{escape(_file_label(url))}</a></div>'
        f"{_figcaption(caption)}</figure>"
    )


def _render_quote(content: RichTextContent, options: RenderOptions) -> str:
    if options.rich_text_runs == "all":
        inner = render_text(content.rich_text)
    else:
        inner = escape(first_plain_text(content.rich_text))
    return f"<blockquote>{inner}</blockquote>"


def _render_code(content: CodeContent, options: RenderOptions) -> str:
    if options.rich_text_runs == "all":
        text = plain_text(content.rich_text)
    else:
        text = first_plain_text(content.rich_text)
    return f'<pre><code class="{escape(_code_language_class(content.language))}">{escape(text)}</code></pre>'


def render_block(block: Block, options: RenderOptions = DEFAULT_OPTIONS) -> str:
    """Render one block, with its resolved children, into an HTML fragment.

    Unknown and service-unsupported types produce a readable fallback
    message. A known type whose payload is missing renders as an empty
    string so partially loaded trees still render.
    """

    block_type = block.type
    if block_type not in KNOWN_BLOCK_TYPES:
        return render_unsupported(block_type)

    content = block.content
    if content is None:
        return ""

    if block_type == "paragraph" and isinstance(content, RichTextContent):
        return f"<p>{render_text(content.rich_text)}</p>"
    if block_type in _HEADING_TAGS and isinstance(content, RichTextContent):
        tag = _HEADING_TAGS[block_type]
        return f"<{tag}>{render_text(content.rich_text)}</{tag}>"
    if block_type in _LIST_TAGS and isinstance(content, RichTextContent):
        return _render_list_item(block, content, options)
    if block_type == "to_do" and isinstance(content, ToDoContent):
        return _render_to_do(block, content)
    if block_type == "toggle" and isinstance(content, RichTextContent):
        return _render_toggle(block, content, options)
    if block_type == "child_page" and isinstance(content, ChildPageContent):
        return f"<p>{escape(content.title)}</p>"
    if block_type == "image" and isinstance(content, MediaContent):
        return _render_image(block, content)
    if block_type == "divider" and isinstance(content, DividerContent):
        return "<hr>"
    if block_type == "quote" and isinstance(content, RichTextContent):
        return _render_quote(content, options)
    if block_type == "code" and isinstance(content, CodeContent):
        return _render_code(content, options)
    if block_type == "file" and isinstance(content, MediaContent):
        return _render_file(block, content)
    if block_type == "bookmark" and isinstance(content, BookmarkContent):
        href = escape(content.url)
        return f'<a href="{href}" target="_blank" rel="noopener" class="bookmark">{href}</a>'

    # 타입과 페이로드가 어긋난 블록은 비어 있는 것으로 취급한다.
    return ""


def group_blocks(blocks: Optional[Sequence[Block]]) -> List[Tuple[Optional[str], List[Block]]]:
    """Partition siblings into maximal runs of same-type list items.

    Each entry is ``(tag, blocks)`` where ``tag`` is ``"ul"``/``"ol"`` for a
    list run and ``None`` for a block passed through on its own. The key is
    decided by each block's own type, so bulleted and numbered items that
    touch still start separate groups.
    """

    groups: List[Tuple[Optional[str], List[Block]]] = []
    for block in blocks or []:
        tag = _LIST_TAGS.get(block.type)
        if tag is not None and groups and groups[-1][0] == tag:
            groups[-1][1].append(block)
        else:
            groups.append((tag, [block]))
    return groups


def render_blocks(blocks: Optional[Sequence[Block]], options: RenderOptions = DEFAULT_OPTIONS) -> List[str]:
    """Render a sibling sequence, folding list-item runs into `<ul>`/`<ol>`."""

    fragments: List[str] = []
    for tag, members in group_blocks(blocks):
        if tag is None:
            fragments.append(render_block(members[0], options))
        else:
            items = "".join(render_block(member, options) for member in members)
            fragments.append(f"<{tag}>{items}</{tag}>")
    return fragments
