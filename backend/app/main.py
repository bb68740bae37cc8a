from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
from loguru import logger

from app.core.config import settings
from app.core.errors import ERROR_MESSAGES, SummaryErrorCode, ValidationError
from app.core.logging import setup_logging
from app.core.tracing import init_tracing
from app.api.v1 import summarize


# FastAPI 자체 요청 검증에서 위치 접두어로 쓰이는 이름
REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    FastAPI 요청 검증 실패(422)를 {"error": ...} 형식의 400 응답으로 변환합니다.

    본문 누락, 문자열이 아닌 필드, 업로드 파일 누락 등이 해당됩니다.
    """
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in REQUEST_LOCATIONS]
    field = ".".join(loc) or "body"

    if first.get("type") == "missing":
        message = ERROR_MESSAGES[SummaryErrorCode.INVALID_REQUEST]
    else:
        message = f"Invalid value for {field}: {first.get('msg', 'validation failed')}."

    error = ValidationError(message, field=field)
    logger.warning(f"요청 검증 실패: {request.method} {request.url.path}, field={field}, {message}")
    return JSONResponse(status_code=error.http_status, content=error.to_dict())


def get_application() -> FastAPI:
    setup_logging()

    # Phoenix LLMOps 트레이싱 초기화
    init_tracing()

    _app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="""
## SciSummary API

과학 논문(텍스트 또는 PDF)을 사용자의 배경 지식과 원하는 길이에 맞춰 요약하는 백엔드 API입니다.

### 주요 기능

- **📝 Summarize**: 사용자 맞춤형 논문 요약 (Gemini)
- **📎 Upload**: .txt / .pdf 파일 업로드 후 요약 (PDF 5MB 미만)

### 인증

현재 버전은 인증 없이 사용 가능합니다.
        """,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {
                "name": "summarize",
                "description": "AI 기반 논문 요약 API (Gemini)",
            },
        ],
    )

    # CORS origins 설정 (trailing slash 제거)
    cors_origins = [str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS]

    if cors_origins:
        _app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
        logger.info(f"CORS 미들웨어 활성화됨 (origins: {cors_origins})")
    else:
        logger.warning("CORS origins가 설정되지 않음 - CORS 미들웨어 비활성화")

    _app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

    # API v1 라우터 등록
    _app.include_router(summarize.router, prefix=settings.API_V1_STR)

    return _app


app = get_application()


# Health Check
@app.get("/")
async def root():
    return {
        "message": "Welcome to SciSummary API",
        "version": settings.VERSION,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    return {"status": "ok"}


# 디버깅 용: python app/main.py로 실행 시
if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
