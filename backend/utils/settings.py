"""환경 변수 기반 설정."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from notions.notionSource import DEFAULT_NOTION_VERSION
from notions.notionTree import DEFAULT_CONCURRENCY, DEFAULT_RETRIES

load_dotenv()


@dataclass(frozen=True, slots=True)
class Settings:
    """렌더링 서버 설정 값 묶음."""

    notion_token: Optional[str]
    notion_database_id: Optional[str]
    notion_version: str
    base_url: str
    fetch_retries: int
    fetch_concurrency: int
    assembly_timeout: Optional[float]
    quote_code_runs: str
    log_level: str


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} 환경 변수는 정수여야 합니다: {raw!r}") from exc


def _float_env(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} 환경 변수는 숫자여야 합니다: {raw!r}") from exc


def load_settings() -> Settings:
    """환경 변수에서 설정을 불러온다."""

    quote_code_runs = (os.getenv("BLOCKPRESS_QUOTE_CODE_RUNS") or "first").strip().lower()
    if quote_code_runs not in ("first", "all"):
        raise RuntimeError(
            f"BLOCKPRESS_QUOTE_CODE_RUNS 는 first 또는 all 이어야 합니다: {quote_code_runs!r}"
        )

    return Settings(
        notion_token=os.getenv("NOTION_TOKEN") or None,
        notion_database_id=os.getenv("NOTION_DATABASE_ID") or None,
        notion_version=os.getenv("NOTION_VERSION") or DEFAULT_NOTION_VERSION,
        base_url=os.getenv("BLOCKPRESS_BASE_URL", ""),
        fetch_retries=_int_env("BLOCKPRESS_FETCH_RETRIES", DEFAULT_RETRIES),
        fetch_concurrency=_int_env("BLOCKPRESS_FETCH_CONCURRENCY", DEFAULT_CONCURRENCY),
        assembly_timeout=_float_env("BLOCKPRESS_ASSEMBLY_TIMEOUT"),
        quote_code_runs=quote_code_runs,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
