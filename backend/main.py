import logging
import os

from fastapi import FastAPI

from routers import pages

from fastapi.middleware.cors import CORSMiddleware


logging.basicConfig(
    level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    force=True,           # uvicorn 핸들러 삭제
)

logger = logging.getLogger("blockpress")

logging.getLogger("httpx").setLevel(logging.WARNING)
# logging.getLogger("uvicorn.access").setLevel(logging.INFO)

# swagger 페이지 소개
SWAGGER_HEADERS = {
    "version": "1.0.0",
    "description": "## 노션 블로그 렌더러 \n - 노션 페이지를 HTML로 렌더링합니다. \n - 페이지 목록과 렌더링 결과를 JSON으로도 제공합니다.",
    "contact": {
        "name": "Blockpress",
        "url": "https://blockpress.example.com",
    },
}

# FastAPI 초기화
app = FastAPI(
    title="Blockpress API",
    **SWAGGER_HEADERS,
)

app.include_router(pages.site_router)
app.include_router(pages.router)

#api설정값
app.add_middleware(
    CORSMiddleware,
    # 렌더링 결과는 공개 데이터라 일단 열어둠
    allow_origins=["*"],
    # 허용 메소드
    allow_methods=["GET"],
    # 허용 헤더
    allow_headers=["*"],
)


# 헬스 체크
@app.get("/health")
def health():
    return {"status": "ok"}
