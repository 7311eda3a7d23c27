"""Notion content service access: page listing, page metadata and block children."""

from __future__ import annotations

from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Protocol

import httpx
from notion_client import AsyncClient
from notion_client.errors import (
    APIErrorCode,
    APIResponseError,
    HTTPResponseError,
    RequestTimeoutError,
)

from .notionBlocks import (
    Block,
    PageMeta,
    PageSummary,
    parse_block,
    parse_page_meta,
    parse_page_summary,
)

# Notion API requires an explicit version header for consistent payload shapes.
DEFAULT_NOTION_VERSION = "2022-06-28"

_PAGE_SIZE = 100


class ContentServiceError(Exception):
    """노션 API 호출이 실패했을 때 사용하는 예외."""


class PageNotFoundError(ContentServiceError):
    """요청한 페이지나 블록이 존재하지 않거나 공유되지 않았을 때 사용하는 예외."""


class ContentSource(Protocol):
    """Interface of the content service consumed by the render pipeline."""

    async def list_pages(self) -> List[PageSummary]:
        ...

    async def get_page(self, page_id: str) -> PageMeta:
        ...

    async def get_block_children(self, block_id: str) -> List[Block]:
        ...


def _translate_error(exc: Exception, object_id: str) -> ContentServiceError:
    if isinstance(exc, APIResponseError) and exc.code == APIErrorCode.ObjectNotFound:
        return PageNotFoundError(f"Notion object not found: {object_id}")
    if isinstance(exc, HTTPResponseError) and exc.status == 404:
        return PageNotFoundError(f"Notion object not found: {object_id}")
    return ContentServiceError(f"Notion request for {object_id} failed: {exc}")


async def _call(object_id: str, request: Callable[[], Awaitable[Dict[str, Any]]]) -> Dict[str, Any]:
    try:
        return await request()
    except (HTTPResponseError, RequestTimeoutError, httpx.HTTPError) as exc:
        raise _translate_error(exc, object_id) from exc


class NotionContentSource:
    """`ContentSource` backed by the official ``notion_client`` SDK."""

    def __init__(self, client: AsyncClient, *, database_id: Optional[str] = None) -> None:
        self._client = client
        self._database_id = database_id

    async def _collect_children(self, block_id: str) -> List[Dict[str, Any]]:
        """Iterate through children blocks handling pagination."""

        start_cursor: Optional[str] = None
        results: List[Dict[str, Any]] = []
        seen: set[str] = set()

        while True:
            response = await _call(
                block_id,
                lambda: self._client.blocks.children.list(
                    block_id=block_id,
                    start_cursor=start_cursor,
                    page_size=_PAGE_SIZE,
                ),
            )
            for item in response.get("results", []):
                item_id = str(item.get("id"))
                # 재시도된 커서가 같은 블록을 다시 돌려줘도 한 번만 담는다.
                if item_id in seen:
                    continue
                seen.add(item_id)
                results.append(item)
            if not response.get("has_more") or not response.get("next_cursor"):
                break
            start_cursor = response.get("next_cursor")

        return results

    async def get_block_children(self, block_id: str) -> List[Block]:
        return [parse_block(item) for item in await self._collect_children(block_id)]

    async def get_page(self, page_id: str) -> PageMeta:
        page = await _call(page_id, lambda: self._client.pages.retrieve(page_id=page_id))
        return parse_page_meta(page)

    async def _query_database(self, database_id: str) -> AsyncIterator[Dict[str, Any]]:
        start_cursor: Optional[str] = None

        while True:
            body: Dict[str, Any] = {
                "page_size": _PAGE_SIZE,
                "sorts": [{"timestamp": "last_edited_time", "direction": "descending"}],
            }
            if start_cursor:
                body["start_cursor"] = start_cursor
            response = await _call(
                database_id,
                lambda: self._client.request(
                    path=f"databases/{database_id}/query",
                    method="POST",
                    body=body,
                ),
            )
            for item in response.get("results", []):
                if item.get("object") == "page":
                    yield item

            if not response.get("has_more") or not response.get("next_cursor"):
                break
            start_cursor = response.get("next_cursor")

    async def _iter_shared_pages(self) -> AsyncIterator[Dict[str, Any]]:
        """Yield every Notion page shared with the integration."""

        start_cursor: Optional[str] = None

        while True:
            response = await _call(
                "search",
                lambda: self._client.search(
                    filter={"property": "object", "value": "page"},
                    sort={"direction": "descending", "timestamp": "last_edited_time"},
                    start_cursor=start_cursor,
                    page_size=_PAGE_SIZE,
                ),
            )
            for item in response.get("results", []):
                if item.get("object") == "page":
                    yield item

            if not response.get("has_more") or not response.get("next_cursor"):
                break
            start_cursor = response.get("next_cursor")

    async def list_pages(self) -> List[PageSummary]:
        if self._database_id:
            pages = self._query_database(self._database_id)
        else:
            pages = self._iter_shared_pages()
        return [parse_page_summary(page) async for page in pages]
