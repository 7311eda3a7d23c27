"""페이지 조회/렌더링 응답 스키마."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from notions import PageSummary, RenderedPage
from notions.richText import plain_text


class PageSummaryResponse(BaseModel):
    """페이지 목록의 한 항목."""

    id: str
    title: str
    last_edited_time: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def from_summary(cls, summary: PageSummary) -> "PageSummaryResponse":
        return cls(
            id=summary.id,
            title=plain_text(summary.title),
            last_edited_time=summary.last_edited_time,
            url=summary.url,
        )


class FetchWarningResponse(BaseModel):
    block_id: str
    reason: str


class RenderedPageResponse(BaseModel):
    """렌더링 결과와 head/meta 태그용 메타데이터."""

    page_id: str
    title: str
    cover_url: str
    html: str
    fragments: List[str]
    warnings: List[FetchWarningResponse]

    @classmethod
    def from_rendered(cls, rendered: RenderedPage) -> "RenderedPageResponse":
        return cls(
            page_id=rendered.page_id,
            title=rendered.title,
            cover_url=rendered.cover_url,
            html=rendered.html,
            fragments=list(rendered.body),
            warnings=[
                FetchWarningResponse(block_id=warning.block_id, reason=warning.reason)
                for warning in rendered.warnings
            ],
        )
