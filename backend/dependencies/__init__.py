"""FastAPI 의존성 헬퍼 모음."""

from .content import get_content_source, get_page_renderer, get_settings

__all__ = ["get_content_source", "get_page_renderer", "get_settings"]
