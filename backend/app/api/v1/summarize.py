"""
Summarize API Endpoint

논문 요약 API를 제공합니다.

Endpoints:
- POST /api/v1/summarize: JSON 요청 (articleText 또는 pdfDocument)
- POST /api/v1/summarize/upload: 파일 업로드 (multipart/form-data)

응답은 {"summary": ...} 또는 {"error": ...} 중 하나입니다.

에러 코드:
- INVALID_REQUEST (400): 아티클 누락, 빈 컨텍스트, 잘못된 요약 길이, 지원하지 않는 파일
- COMPLETION_FAILED (502): LLM 응답 실패, 빈 요약, 타임아웃
- UNEXPECTED (500): 그 외 오류
"""

import time

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.errors import SummaryError
from app.services.file_intake import read_article_file
from app.services.summary import get_summary_service

router = APIRouter(prefix="/summarize", tags=["summarize"])


# ============================================================================
# Request/Response Schemas
# ============================================================================


class SummarizeRequest(BaseModel):
    """요약 요청 스키마 (세부 검증은 SummaryService에서 수행)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    article_text: str | None = Field(
        None,
        description="요약할 논문 텍스트",
    )
    pdf_document: str | None = Field(
        None,
        description="논문 PDF data URI ('data:application/pdf;base64,<encoded_data>')",
    )
    pdf_data_uri: str | None = Field(
        None,
        description="pdfDocument의 이전 이름 (호환용)",
    )
    user_context: str | None = Field(
        None,
        description="사용자 배경/전문 분야 (10~500자)",
    )
    summary_length: str | None = Field(
        None,
        description="short | medium | large",
    )

    def to_payload(self) -> dict:
        payload = self.model_dump(by_alias=False, exclude={"pdf_data_uri"})
        if payload["pdf_document"] is None and self.pdf_data_uri is not None:
            payload["pdf_document"] = self.pdf_data_uri
        return payload


class SummarizeResponse(BaseModel):
    """요약 응답 스키마 (summary와 error 중 하나만 채워짐)"""

    summary: str | None = Field(
        None,
        description="요약 결과",
    )
    error: str | None = Field(
        None,
        description="사용자에게 표시할 에러 메시지",
    )


# 에러 응답도 SummarizeResponse 형식 ({"error": ...})
ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": SummarizeResponse},
    500: {"model": SummarizeResponse},
    502: {"model": SummarizeResponse},
}


# ============================================================================
# Helper Functions
# ============================================================================


async def _run_summary(payload: dict) -> JSONResponse:
    """
    요약 파이프라인을 실행하고 summary 또는 error 응답을 만듭니다.

    SummaryService가 모든 예외를 SummaryError로 변환하므로
    여기서는 SummaryError만 처리합니다.
    """
    start_time = time.time()

    try:
        service = get_summary_service()
        result = await service.summarize(payload)
    except SummaryError as e:
        return JSONResponse(status_code=e.http_status, content=e.to_dict())

    processing_time_ms = int((time.time() - start_time) * 1000)
    logger.info(f"요약 API 완료: 처리시간={processing_time_ms}ms")

    return JSONResponse(
        status_code=200,
        content=SummarizeResponse(summary=result.summary).model_dump(exclude_none=True),
    )


# ============================================================================
# API Endpoints
# ============================================================================


@router.post(
    "",
    response_model=SummarizeResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def summarize_article(request: SummarizeRequest) -> JSONResponse:
    """
    논문을 사용자 배경에 맞춰 요약합니다.

    - **articleText**: 논문 텍스트 (pdfDocument와 둘 중 하나)
    - **pdfDocument**: 논문 PDF data URI (articleText와 둘 중 하나)
    - **userContext**: 사용자 배경/전문 분야
    - **summaryLength**: short | medium | large

    Returns:
        {"summary": ...} 또는 {"error": ...}
    """
    return await _run_summary(request.to_payload())


@router.post(
    "/upload",
    response_model=SummarizeResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def summarize_upload(
    file: UploadFile = File(..., description="논문 파일 (.txt, .pdf)"),
    user_context: str = Form("", description="사용자 배경/전문 분야 (10~500자)"),
    summary_length: str = Form("", description="short | medium | large"),
) -> JSONResponse:
    """
    업로드한 논문 파일을 요약합니다.

    ## 파일 제한
    - .txt, .pdf만 요약 가능 (.doc/.docx는 아직 미지원)
    - PDF는 5MB 미만

    Returns:
        {"summary": ...} 또는 {"error": ...}
    """
    try:
        data = await file.read()
        article = read_article_file(
            data,
            filename=file.filename,
            content_type=file.content_type,
        )
    except SummaryError as e:
        logger.warning(f"업로드 파일 거부: name={file.filename}, {e.message}")
        return JSONResponse(status_code=e.http_status, content=e.to_dict())
    finally:
        await file.close()

    payload = {
        **article.as_payload(),
        "user_context": user_context,
        "summary_length": summary_length,
    }
    return await _run_summary(payload)
