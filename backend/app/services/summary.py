"""
Summary Service

논문 요약 파이프라인 (검증 → 프롬프트 생성 → LLM 1회 호출) 서비스입니다.

에러 처리:
- ValidationError: 외부 호출 전에 그대로 전파
- CompletionError: 응답 디코딩 실패, 빈 요약, 타임아웃
- 그 외 모든 예외: 로그에 상세를 남기고 UnexpectedError로 변환

재시도는 하지 않습니다. 타임아웃(SUMMARY_TIMEOUT_SECONDS)만 호출 1회를 감쌉니다.
"""

import asyncio
from collections.abc import Mapping
from typing import Any

from loguru import logger

from app.core.config import settings
from app.core.errors import CompletionError, SummaryError, UnexpectedError
from app.services.completion import CompletionInvoker
from app.services.prompt_composer import PromptComposer
from app.services.validator import SummaryRequest, validate_request
from output_schemas.summary import SummaryResult


class SummaryService:
    """논문 요약 서비스"""

    def __init__(
        self,
        invoker: CompletionInvoker | None = None,
        prompt_version: str | None = None,
        timeout_seconds: float | None = None,
        min_context_length: int | None = None,
        max_context_length: int | None = None,
    ):
        """
        Args:
            invoker: LLM 호출기. None이면 settings 기반 Gemini 호출기 생성
            prompt_version: 사용할 프롬프트 버전. None이면 settings에서 로드
            timeout_seconds: LLM 호출 타임아웃 (초). None이면 settings에서 로드
            min_context_length: user_context 최소 길이. None이면 settings에서 로드
            max_context_length: user_context 최대 길이. None이면 settings에서 로드
        """
        self.prompt_version = prompt_version or settings.SUMMARY_PROMPT_VERSION
        self.timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else settings.SUMMARY_TIMEOUT_SECONDS
        )
        self.min_context_length = (
            min_context_length
            if min_context_length is not None
            else settings.USER_CONTEXT_MIN_LENGTH
        )
        self.max_context_length = (
            max_context_length
            if max_context_length is not None
            else settings.USER_CONTEXT_MAX_LENGTH
        )

        # 프롬프트 템플릿은 서비스 생성 시 1회 로드
        self.composer = PromptComposer(self.prompt_version)
        self.invoker = invoker or CompletionInvoker()

        logger.info(
            f"SummaryService 초기화 완료: model={self.model_name}, "
            f"prompt_version={self.prompt_version}, timeout={self.timeout_seconds}"
        )

    @property
    def model_name(self) -> str:
        return self.invoker.model_name

    async def _invoke_with_timeout(self, request: SummaryRequest, prompt: str) -> SummaryResult:
        call = self.invoker.invoke(prompt, request.attachment)
        if self.timeout_seconds is None:
            return await call

        try:
            return await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise CompletionError(
                f"LLM 호출 타임아웃 ({self.timeout_seconds}초 초과)"
            ) from e

    async def summarize(self, payload: Mapping[str, Any] | SummaryRequest) -> SummaryResult:
        """
        아티클을 요약합니다.

        Args:
            payload: 요약 요청 (article_text 또는 pdf_document, user_context, summary_length)

        Returns:
            SummaryResult: 요약 결과 (summary)

        Raises:
            ValidationError: 요청이 잘못된 경우 (LLM 호출 없음)
            CompletionError: LLM 응답 실패 또는 빈 요약
            UnexpectedError: 그 외 모든 오류
        """
        try:
            request = validate_request(
                payload,
                min_context_length=self.min_context_length,
                max_context_length=self.max_context_length,
            )

            prompt = self.composer.compose(request)

            logger.debug(
                f"요약 요청: 길이={request.summary_length}, "
                f"컨텍스트 길이={len(request.user_context)}자, "
                + (
                    f"아티클 길이={len(request.article_text)}자"
                    if request.article_text is not None
                    else f"PDF data URI 길이={len(request.pdf_document or '')}자"
                )
            )

            result = await self._invoke_with_timeout(request, prompt)
            logger.info(
                f"요약 완료: 길이={request.summary_length}, "
                f"summary={len(result.summary)}자"
            )
            return result

        except SummaryError as e:
            log = logger.warning if e.http_status < 500 else logger.error
            log(f"요약 실패 [{e.code.value}]: {e.message} ({e.detail})")
            raise
        except Exception as e:
            logger.exception(f"요약 처리 중 예상하지 못한 오류: {type(e).__name__}: {e}")
            raise UnexpectedError(f"{type(e).__name__}: {e}") from e


# 싱글톤 인스턴스 (지연 초기화)
_summary_service: SummaryService | None = None


def get_summary_service() -> SummaryService:
    """
    SummaryService 싱글톤 인스턴스를 가져옵니다.

    Returns:
        SummaryService 인스턴스
    """
    global _summary_service
    if _summary_service is None:
        _summary_service = SummaryService()
    return _summary_service
