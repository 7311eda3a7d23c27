"""
Builders for raw Notion API payloads and an in-memory content source.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

from notions import PageNotFoundError, parse_block
from notions.notionBlocks import parse_page_meta, parse_page_summary


def rich(content: str, *, link: Optional[str] = None, color: str = "default", **flags: bool) -> Dict[str, Any]:
    """One rich-text item as returned by the Notion API."""
    annotations = {
        "bold": False,
        "italic": False,
        "strikethrough": False,
        "underline": False,
        "code": False,
        "color": color,
    }
    annotations.update(flags)
    return {
        "type": "text",
        "text": {"content": content, "link": {"url": link} if link else None},
        "annotations": annotations,
        "plain_text": content,
        "href": link,
    }


def raw_block(block_id: str, block_type: str, *texts: str, has_children: bool = False, **payload: Any) -> Dict[str, Any]:
    """A raw block object; positional texts become plain rich-text runs."""
    body: Dict[str, Any] = dict(payload)
    if texts:
        body["rich_text"] = [rich(text) for text in texts]
    return {
        "object": "block",
        "id": block_id,
        "type": block_type,
        "has_children": has_children,
        block_type: body,
    }


def raw_page(page_id: str, title: str, *, cover_url: Optional[str] = None, edited: str = "2021-10-05T08:30:00.000Z") -> Dict[str, Any]:
    page: Dict[str, Any] = {
        "object": "page",
        "id": page_id,
        "last_edited_time": edited,
        "url": f"https://www.notion.so/{page_id.replace('-', '')}",
        "cover": None,
        "properties": {
            "Tags": {"type": "multi_select", "multi_select": []},
            "Name": {"id": "title", "type": "title", "title": [rich(title)]},
        },
    }
    if cover_url:
        page["cover"] = {"type": "external", "external": {"url": cover_url}}
    return page


class FakeContentSource:
    """
    In-memory ContentSource.

    children: block id -> raw child listing.
    failures: block id -> exceptions raised by successive calls before succeeding.
    delays:   block id -> seconds to wait before answering.
    """

    def __init__(
        self,
        children: Dict[str, List[Dict[str, Any]]],
        *,
        pages: Optional[List[Dict[str, Any]]] = None,
        failures: Optional[Dict[str, List[Exception]]] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        self.children = children
        self.pages = pages or []
        self.failures = {key: list(value) for key, value in (failures or {}).items()}
        self.delays = delays or {}
        self.calls: List[str] = []
        self.completed: List[str] = []

    async def list_pages(self):
        return [parse_page_summary(page) for page in self.pages]

    async def get_page(self, page_id: str):
        for page in self.pages:
            if page["id"] == page_id:
                return parse_page_meta(page)
        raise PageNotFoundError(f"Notion object not found: {page_id}")

    async def get_block_children(self, block_id: str):
        self.calls.append(block_id)
        if self.delays.get(block_id):
            await asyncio.sleep(self.delays[block_id])
        pending = self.failures.get(block_id)
        if pending:
            raise pending.pop(0)
        if block_id not in self.children:
            raise PageNotFoundError(f"Notion object not found: {block_id}")
        self.completed.append(block_id)
        return [parse_block(raw) for raw in self.children[block_id]]
