"""
Summary Error Definitions

요약 파이프라인의 커스텀 에러 타입 및 사용자 친화적 메시지 시스템을 정의합니다.

에러 타입별 HTTP 상태 코드:
- 400: 잘못된 요청 (아티클 누락, 빈 사용자 컨텍스트, 잘못된 요약 길이)
- 502: LLM 응답 실패 (스키마 불일치, 빈 요약, 타임아웃)
- 500: 그 외 예상하지 못한 오류
"""

from enum import Enum
from typing import Optional


class SummaryErrorCode(str, Enum):
    """요약 에러 코드"""

    INVALID_REQUEST = "INVALID_REQUEST"
    COMPLETION_FAILED = "COMPLETION_FAILED"
    UNEXPECTED = "UNEXPECTED"


# 에러 코드별 사용자 친화적 메시지 (화면 노출용, 영어)
ERROR_MESSAGES: dict[SummaryErrorCode, str] = {
    SummaryErrorCode.INVALID_REQUEST: "Missing required fields for summarization.",
    SummaryErrorCode.COMPLETION_FAILED: (
        "The AI failed to generate a summary. The article may be too short "
        "or the context too ambiguous. Please try again."
    ),
    SummaryErrorCode.UNEXPECTED: (
        "An unexpected server error occurred while generating the summary. "
        "Please try again later."
    ),
}

# 에러 코드별 HTTP 상태 코드 매핑
ERROR_HTTP_STATUS: dict[SummaryErrorCode, int] = {
    SummaryErrorCode.INVALID_REQUEST: 400,
    SummaryErrorCode.COMPLETION_FAILED: 502,
    SummaryErrorCode.UNEXPECTED: 500,
}


class SummaryError(Exception):
    """
    요약 에러 기본 클래스

    Attributes:
        code: 에러 코드 (SummaryErrorCode)
        message: 사용자에게 표시할 메시지
        detail: 개발자용 상세 정보 (선택, 로그 전용)
        http_status: HTTP 상태 코드
    """

    def __init__(
        self,
        code: SummaryErrorCode,
        message: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES.get(
            code, ERROR_MESSAGES[SummaryErrorCode.UNEXPECTED]
        )
        self.detail = detail
        self.http_status = ERROR_HTTP_STATUS.get(code, 500)

        super().__init__(self.message)

    def to_dict(self) -> dict:
        """API 응답용 딕셔너리 변환 (detail은 노출하지 않음)"""
        return {"error": self.message}


class ValidationError(SummaryError):
    """요청 검증 에러 (외부 호출 전에 발생)"""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            code=SummaryErrorCode.INVALID_REQUEST,
            message=message,
            detail=f"잘못된 필드: {field}" if field else None,
        )
        self.field = field


class CompletionError(SummaryError):
    """LLM 응답이 기대한 형태가 아니거나 요약이 비어있는 경우"""

    def __init__(self, reason: Optional[str] = None):
        super().__init__(
            code=SummaryErrorCode.COMPLETION_FAILED,
            detail=reason,
        )


class UnexpectedError(SummaryError):
    """파이프라인 최외곽에서 변환되는 예상하지 못한 오류"""

    def __init__(self, reason: Optional[str] = None):
        super().__init__(
            code=SummaryErrorCode.UNEXPECTED,
            detail=reason,
        )
