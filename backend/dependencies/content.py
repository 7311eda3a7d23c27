"""노션 콘텐츠 소스와 페이지 렌더러 의존성을 정의합니다."""

from __future__ import annotations

from typing import AsyncIterator

from fastapi import Depends, HTTPException, status
from notion_client import AsyncClient

from notions import ContentSource, NotionContentSource, PageRenderer, RenderOptions
from utils.settings import Settings, load_settings


def get_settings() -> Settings:
    """요청마다 환경 변수에서 설정을 읽어 온다."""

    try:
        return load_settings()
    except RuntimeError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc


async def get_content_source(
    settings: Settings = Depends(get_settings),
) -> AsyncIterator[ContentSource]:
    """요청 범위 동안 사용할 노션 클라이언트를 열고 닫는다."""

    if not settings.notion_token:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="NOTION_TOKEN 환경 변수를 설정하세요.",
        )

    async with AsyncClient(auth=settings.notion_token, notion_version=settings.notion_version) as client:
        yield NotionContentSource(client, database_id=settings.notion_database_id)


def get_page_renderer(
    *,
    source: ContentSource = Depends(get_content_source),
    settings: Settings = Depends(get_settings),
) -> PageRenderer:
    """설정 값을 반영한 페이지 렌더러를 만든다."""

    return PageRenderer(
        source,
        options=RenderOptions(rich_text_runs=settings.quote_code_runs),
        retries=settings.fetch_retries,
        concurrency=settings.fetch_concurrency,
        timeout=settings.assembly_timeout,
    )
