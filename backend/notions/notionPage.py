"""Page-level rendering: title, cover, body and the post index."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional, Sequence, Tuple
from urllib.parse import quote

from .notionBlocks import FileSource, PageSummary
from .notionSource import ContentSource
from .notionTree import (
    DEFAULT_CONCURRENCY,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    FetchWarning,
    assemble_block_tree,
)
from .renderer import DEFAULT_OPTIONS, RenderOptions, render_blocks
from .richText import escape, plain_text, render_text

logger = logging.getLogger("blockpress")


@dataclass(frozen=True, slots=True)
class RenderedPage:
    """Result of one page render, plus metadata for head/meta tags."""

    page_id: str
    title: str
    cover_url: str
    title_html: str
    body: Tuple[str, ...]
    html: str
    warnings: Tuple[FetchWarning, ...] = ()


def resolve_cover_url(cover: Optional[FileSource]) -> str:
    return cover.url if cover else ""


def format_post_date(timestamp: Optional[str]) -> str:
    """Format an ISO timestamp like ``Oct 05, 2021``; unparsable input gives ``""``."""

    if not timestamp:
        return ""
    try:
        moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError:
        return ""
    return moment.strftime("%b %d, %Y")


def share_links(base_url: str, path: str) -> Dict[str, str]:
    """Facebook/Twitter share URLs for the canonical page URL."""

    current_url = f"{base_url.rstrip('/')}{path}" if base_url else path
    encoded = quote(current_url, safe="")
    return {
        "facebook": f"https://www.facebook.com/sharer.php?u={encoded}",
        "twitter": f"https://twitter.com/intent/tweet?url={encoded}",
    }


def render_index(pages: Sequence[PageSummary]) -> str:
    """Render the post listing as an ordered list."""

    items = []
    for page in pages:
        href = f"/pages/{escape(page.id)}"
        items.append(
            '<li class="post">'
            f'<h3 class="postTitle"><a href="{href}">{render_text(page.title)}</a></h3>'
            f'<p class="postDescription">{escape(format_post_date(page.last_edited_time))}</p>'
            f'<a class="postLinkText" href="{href}"> READ NOW →</a>'
            "</li>"
        )
    return f'<ol class="posts">{"".join(items)}</ol>'


class PageRenderer:
    """Render Notion pages fetched through a `ContentSource`.

    A renderer keeps no state between calls; every ``render`` assembles a
    fresh block tree.
    """

    def __init__(
        self,
        source: ContentSource,
        *,
        options: RenderOptions = DEFAULT_OPTIONS,
        retries: int = DEFAULT_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        concurrency: int = DEFAULT_CONCURRENCY,
        timeout: Optional[float] = None,
        on_rendered: Optional[Callable[[RenderedPage], None]] = None,
    ) -> None:
        self._source = source
        self._options = options
        self._retries = retries
        self._retry_delay = retry_delay
        self._concurrency = concurrency
        self._timeout = timeout
        self._on_rendered = on_rendered

    async def render(self, page_id: str) -> RenderedPage:
        page = await self._source.get_page(page_id)
        tree = await assemble_block_tree(
            self._source,
            page_id,
            retries=self._retries,
            retry_delay=self._retry_delay,
            concurrency=self._concurrency,
            timeout=self._timeout,
        )

        body = tuple(render_blocks(tree.blocks, self._options))
        title_html = render_text(page.title)
        cover_url = resolve_cover_url(page.cover)

        parts = [f'<header><h1 class="name">{title_html}</h1></header>']
        if cover_url:
            src = escape(cover_url)
            parts.append(f'<a href="{src}" target="_blank"><img class="cover" src="{src}"></a>')
        parts.append(f"<section>{''.join(body)}</section>")

        rendered = RenderedPage(
            page_id=page_id,
            title=plain_text(page.title),
            cover_url=cover_url,
            title_html=title_html,
            body=body,
            html=f"<article>{''.join(parts)}</article>",
            warnings=tree.warnings,
        )
        logger.debug("페이지 렌더링 완료: %s (fragments=%d)", page_id, len(body))

        if self._on_rendered is not None:
            self._on_rendered(rendered)
        return rendered

    async def render_index(self) -> str:
        return render_index(await self._source.list_pages())
