"""노션 페이지 목록/렌더링 FastAPI 라우터."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse

from dependencies import get_content_source, get_page_renderer, get_settings
from notions import (
    ContentServiceError,
    ContentSource,
    PageNotFoundError,
    PageRenderer,
    render_index,
    share_links,
)
from notions.richText import escape
from schema.pages import PageSummaryResponse, RenderedPageResponse
from utils.settings import Settings

import logging
logger = logging.getLogger("blockpress")

router = APIRouter(prefix="/pages", tags=["pages"])
site_router = APIRouter(tags=["site"])

SITE_NAME = "SvenIT Blog"
_PRISM_CDN = "https://cdnjs.cloudflare.com/ajax/libs/prism/1.29.0"


def _service_error(exc: ContentServiceError) -> HTTPException:
    if isinstance(exc, PageNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    logger.error("노션 API 호출 실패: %s", exc)
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"노션 API 호출 실패: {exc}",
    )


def _document(title: str, body: str, *, cover_url: str = "") -> str:
    """렌더링된 본문을 head/meta 태그가 포함된 HTML 문서로 감싼다."""

    return (
        "<!DOCTYPE html>"
        '<html lang="vi"><head><meta charset="utf-8">'
        f"<title>{escape(title)}</title>"
        '<meta property="og:locale" content="vi_VN">'
        '<meta property="og:locale:alternate" content="en_US">'
        f'<meta name="og:site_name" content="{SITE_NAME}">'
        f'<meta property="og:image" content="{escape(cover_url)}">'
        '<meta name="twitter:card" content="summary">'
        f'<meta name="twitter:site" content="{SITE_NAME}">'
        f'<link rel="stylesheet" href="{_PRISM_CDN}/themes/prism-tomorrow.min.css">'
        f'<link rel="stylesheet" href="{_PRISM_CDN}/plugins/line-numbers/prism-line-numbers.min.css">'
        "</head><body>"
        f"{body}"
        f'<script src="{_PRISM_CDN}/prism.min.js"></script>'
        f'<script src="{_PRISM_CDN}/plugins/autoloader/prism-autoloader.min.js"></script>'
        f'<script src="{_PRISM_CDN}/plugins/line-numbers/prism-line-numbers.min.js"></script>'
        "<script>window.Prism && window.Prism.highlightAll();</script>"
        "</body></html>"
    )


def _share_block(base_url: str, path: str) -> str:
    links = share_links(base_url, path)
    return (
        '<div class="share u-hover-wrapper">'
        f'<a class="share-item share-facebook u-hover-item" href="{escape(links["facebook"])}" '
        'target="_blank" rel="noopener">Facebook</a>'
        f'<a class="share-item share-twitter u-hover-item" href="{escape(links["twitter"])}" '
        'target="_blank" rel="noopener">Twitter</a>'
        "</div>"
    )


@site_router.get(
    "/",
    response_class=HTMLResponse,
    summary="게시글 목록",
)
async def index_page(
    *,
    source: ContentSource = Depends(get_content_source),
):
    """공유된 노션 페이지 목록을 HTML로 렌더링한다."""

    try:
        pages = await source.list_pages()
    except ContentServiceError as exc:
        raise _service_error(exc) from exc

    body = f'<main><header><h1>{SITE_NAME}</h1></header><h2 class="heading">All Posts</h2>{render_index(pages)}</main>'
    return HTMLResponse(_document(SITE_NAME, body))


@router.get(
    "",
    response_model=List[PageSummaryResponse],
    summary="노션 페이지 목록 조회",
)
async def list_pages(
    *,
    source: ContentSource = Depends(get_content_source),
):
    """노션 데이터베이스(또는 공유된 전체 페이지)의 목록을 반환한다."""

    try:
        pages = await source.list_pages()
    except ContentServiceError as exc:
        raise _service_error(exc) from exc

    return [PageSummaryResponse.from_summary(page) for page in pages]


@router.get(
    "/{page_id}",
    response_class=HTMLResponse,
    summary="노션 페이지 HTML 렌더링",
)
async def page_document(
    page_id: str,
    request: Request,
    *,
    renderer: PageRenderer = Depends(get_page_renderer),
    settings: Settings = Depends(get_settings),
):
    """노션 페이지 하나를 HTML 문서로 렌더링한다."""

    try:
        rendered = await renderer.render(page_id)
    except ContentServiceError as exc:
        raise _service_error(exc) from exc

    if rendered.warnings:
        logger.warning("페이지 %s 에서 %d개 하위 트리를 비운 채 렌더링했습니다.", page_id, len(rendered.warnings))

    body = rendered.html + _share_block(settings.base_url, request.url.path)
    return HTMLResponse(_document(rendered.title, body, cover_url=rendered.cover_url))


@router.get(
    "/{page_id}/render",
    response_model=RenderedPageResponse,
    summary="노션 페이지 렌더링 결과 조회",
)
async def page_render_result(
    page_id: str,
    *,
    renderer: PageRenderer = Depends(get_page_renderer),
):
    """렌더링된 HTML 조각과 메타데이터를 JSON으로 반환한다."""

    try:
        rendered = await renderer.render(page_id)
    except ContentServiceError as exc:
        raise _service_error(exc) from exc

    return RenderedPageResponse.from_rendered(rendered)
