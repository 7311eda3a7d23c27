"""Notion 블록 트리 조립과 HTML 렌더링 헬퍼를 노출합니다."""

from .notionBlocks import (
    Annotations,
    Block,
    FileSource,
    PageMeta,
    PageSummary,
    TextRun,
    parse_block,
)
from .notionSource import (
    ContentServiceError,
    ContentSource,
    NotionContentSource,
    PageNotFoundError,
)
from .notionTree import BlockTree, FetchWarning, assemble_block_tree, attach_children
from .renderer import RenderOptions, group_blocks, render_block, render_blocks
from .richText import format_text_runs
from .notionPage import PageRenderer, RenderedPage, render_index, share_links

__all__ = [
    "Annotations",
    "Block",
    "FileSource",
    "PageMeta",
    "PageSummary",
    "TextRun",
    "parse_block",
    "ContentServiceError",
    "ContentSource",
    "NotionContentSource",
    "PageNotFoundError",
    "BlockTree",
    "FetchWarning",
    "assemble_block_tree",
    "attach_children",
    "RenderOptions",
    "group_blocks",
    "render_block",
    "render_blocks",
    "format_text_runs",
    "PageRenderer",
    "RenderedPage",
    "render_index",
    "share_links",
]
