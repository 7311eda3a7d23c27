"""
Tests for notions/notionPage.py -- page chrome, index and share links.
"""

from __future__ import annotations

import pytest

from notions import PageNotFoundError, PageRenderer, render_index, share_links
from notions.notionBlocks import parse_page_summary
from notions.notionPage import format_post_date
from tests.notion_payloads import FakeContentSource, raw_block, raw_page


class TestRenderPage:
    @pytest.mark.asyncio
    async def test_scenario_heading_list_paragraph(self):
        source = FakeContentSource(
            {
                "pg": [
                    raw_block("h", "heading_1", "Intro"),
                    raw_block("a", "bulleted_list_item", "a"),
                    raw_block("b", "bulleted_list_item", "b"),
                    raw_block("p", "paragraph", "done"),
                ]
            },
            pages=[raw_page("pg", "Post")],
        )
        rendered = await PageRenderer(source).render("pg")

        assert rendered.body == (
            "<h1><span>Intro</span></h1>",
            "<ul><li><span>a</span></li><li><span>b</span></li></ul>",
            "<p><span>done</span></p>",
        )

    @pytest.mark.asyncio
    async def test_title_and_cover(self, blog_source):
        rendered = await PageRenderer(blog_source).render("page-1")

        assert rendered.title == "Hello Notion"
        assert rendered.cover_url == "https://img.example.com/cover.png"
        assert '<h1 class="name"><span>Hello Notion</span></h1>' in rendered.html
        assert '<img class="cover" src="https://img.example.com/cover.png">' in rendered.html
        assert rendered.html.startswith("<article>")

    @pytest.mark.asyncio
    async def test_nested_tree_rendered(self, blog_source):
        rendered = await PageRenderer(blog_source).render("page-1")

        assert len(rendered.body) == 4
        assert rendered.body[1] == (
            "<ul><li><span>a</span><ol><li><span>a.1</span></li><li><span>a.2</span></li></ol></li>"
            "<li><span>b</span></li></ul>"
        )
        assert rendered.body[2] == (
            "<details><summary><span>More</span></summary>"
            "<p><span>hidden one</span></p><p><span>hidden two</span></p></details>"
        )

    @pytest.mark.asyncio
    async def test_no_cover(self):
        source = FakeContentSource({"pg": []}, pages=[raw_page("pg", "Bare")])
        rendered = await PageRenderer(source).render("pg")

        assert rendered.cover_url == ""
        assert "<img" not in rendered.html
        assert rendered.body == ()

    @pytest.mark.asyncio
    async def test_missing_page(self):
        with pytest.raises(PageNotFoundError):
            await PageRenderer(FakeContentSource({})).render("missing")

    @pytest.mark.asyncio
    async def test_on_rendered_hook(self, blog_source):
        seen = []
        rendered = await PageRenderer(blog_source, on_rendered=seen.append).render("page-1")
        assert seen == [rendered]

    @pytest.mark.asyncio
    async def test_degraded_subtree_reported(self, blog_source):
        del blog_source.children["t1"]
        rendered = await PageRenderer(blog_source, retry_delay=0).render("page-1")

        assert [warning.block_id for warning in rendered.warnings] == ["t1"]
        assert "<details><summary><span>More</span></summary></details>" in rendered.body


class TestIndex:
    def test_format_post_date(self):
        assert format_post_date("2021-10-05T08:30:00.000Z") == "Oct 05, 2021"
        assert format_post_date(None) == ""
        assert format_post_date("yesterday") == ""

    def test_render_index(self):
        pages = [parse_page_summary(raw_page("p1", "First")), parse_page_summary(raw_page("p2", "Second"))]
        html = render_index(pages)

        assert html.startswith('<ol class="posts">')
        assert html.index("First") < html.index("Second")
        assert '<a href="/pages/p1"><span>First</span></a>' in html
        assert "Oct 05, 2021" in html
        assert html.count("READ NOW →") == 2

    @pytest.mark.asyncio
    async def test_renderer_index_uses_listing(self, blog_source):
        html = await PageRenderer(blog_source).render_index()
        assert "Hello Notion" in html


class TestShareLinks:
    def test_links_encode_canonical_url(self):
        links = share_links("https://blog.example.com/", "/pages/abc")
        assert links["facebook"] == "https://www.facebook.com/sharer.php?u=https%3A%2F%2Fblog.example.com%2Fpages%2Fabc"
        assert links["twitter"] == "https://twitter.com/intent/tweet?url=https%3A%2F%2Fblog.example.com%2Fpages%2Fabc"

    def test_without_base_url(self):
        assert share_links("", "/pages/abc")["twitter"].endswith("url=%2Fpages%2Fabc")
