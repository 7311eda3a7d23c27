"""
Tests for routers/pages.py through the ASGI app.
"""

from __future__ import annotations

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_health(async_client: AsyncClient):
    response = await async_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_list_pages(async_client: AsyncClient):
    response = await async_client.get("/pages")
    assert response.status_code == 200
    assert response.json() == [
        {
            "id": "page-1",
            "title": "Hello Notion",
            "last_edited_time": "2021-10-05T08:30:00.000Z",
            "url": "https://www.notion.so/page1",
        }
    ]


async def test_index_html(async_client: AsyncClient):
    response = await async_client.get("/")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "All Posts" in response.text
    assert 'href="/pages/page-1"' in response.text


async def test_page_document(async_client: AsyncClient):
    response = await async_client.get("/pages/page-1")
    assert response.status_code == 200
    html = response.text
    assert "<title>Hello Notion</title>" in html
    assert '<meta property="og:image" content="https://img.example.com/cover.png">' in html
    assert "<ul><li><span>a</span>" in html
    assert "https://twitter.com/intent/tweet?url=https%3A%2F%2Fblog.example.com%2Fpages%2Fpage-1" in html
    assert "Prism.highlightAll()" in html


async def test_page_render_json(async_client: AsyncClient):
    response = await async_client.get("/pages/page-1/render")
    assert response.status_code == 200
    payload = response.json()
    assert payload["page_id"] == "page-1"
    assert payload["title"] == "Hello Notion"
    assert payload["cover_url"] == "https://img.example.com/cover.png"
    assert len(payload["fragments"]) == 4
    assert payload["warnings"] == []


async def test_missing_page_is_404(async_client: AsyncClient):
    response = await async_client.get("/pages/unknown")
    assert response.status_code == 404

    response = await async_client.get("/pages/unknown/render")
    assert response.status_code == 404


async def test_service_failure_is_502(async_client: AsyncClient, blog_source):
    from notions import ContentServiceError

    async def broken():
        raise ContentServiceError("Notion request for search failed")

    blog_source.list_pages = broken
    response = await async_client.get("/pages")
    assert response.status_code == 502
