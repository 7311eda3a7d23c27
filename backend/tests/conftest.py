"""
Pytest configuration and fixtures for Blockpress tests.
"""

from __future__ import annotations

import os

import httpx
import pytest
import pytest_asyncio

from tests.notion_payloads import FakeContentSource, raw_block, raw_page

# Keep the real Notion client out of tests even if a .env is present
os.environ["NOTION_TOKEN"] = "test-token"
os.environ.setdefault("BLOCKPRESS_BASE_URL", "https://blog.example.com")


@pytest.fixture
def blog_source():
    """A page with a heading, a bullet list with a nested numbered list, a toggle and a paragraph."""
    return FakeContentSource(
        {
            "page-1": [
                raw_block("h1", "heading_1", "Intro"),
                raw_block("b1", "bulleted_list_item", "a", has_children=True),
                raw_block("b2", "bulleted_list_item", "b"),
                raw_block("t1", "toggle", "More", has_children=True),
                raw_block("p1", "paragraph", "done"),
            ],
            "b1": [
                raw_block("n1", "numbered_list_item", "a.1"),
                raw_block("n2", "numbered_list_item", "a.2"),
            ],
            "t1": [
                raw_block("tp1", "paragraph", "hidden one"),
                raw_block("tp2", "paragraph", "hidden two"),
            ],
        },
        pages=[raw_page("page-1", "Hello Notion", cover_url="https://img.example.com/cover.png")],
    )


@pytest_asyncio.fixture
async def async_client(blog_source):
    """Async HTTP client against the ASGI app with the Notion source replaced."""
    from dependencies import get_content_source
    from main import app

    async def _fake_source():
        yield blog_source

    app.dependency_overrides[get_content_source] = _fake_source
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
