"""
Completion Invoker

LangChain과 Google Generative AI를 사용해 프롬프트를 1회 호출하고
Structured Output(SummaryResult)으로 결과를 받습니다.

백엔드 자동 선택 규칙 (langchain-google-genai):
- credentials 파라미터 제공 → Vertex AI 사용
- project 파라미터 제공 → Vertex AI 사용
- GOOGLE_GENAI_USE_VERTEXAI=true → Vertex AI 사용
- 그 외 → Gemini Developer API 사용

재시도는 하지 않습니다. 응답 디코딩 실패 및 빈 요약은 CompletionError로,
전송 계층 오류는 그대로 호출자에게 전파됩니다.
"""

import os
from pathlib import Path

from google.oauth2 import service_account
from langchain_core.exceptions import OutputParserException
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI
from loguru import logger
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.core.config import settings
from app.core.errors import CompletionError
from app.services.validator import DocumentAttachment
from output_schemas.summary import SummaryResult


def _get_credentials() -> service_account.Credentials | None:
    """
    서비스 계정 자격 증명을 가져옵니다.

    settings.GOOGLE_APPLICATION_CREDENTIALS 또는 같은 이름의 환경변수가
    가리키는 키 파일이 있으면 해당 파일에서 자격 증명을 로드합니다.

    Returns:
        service_account.Credentials 또는 None (ADC 사용 시)
    """
    credentials_path = settings.GOOGLE_APPLICATION_CREDENTIALS or os.environ.get(
        "GOOGLE_APPLICATION_CREDENTIALS"
    )

    if credentials_path and Path(credentials_path).exists():
        return service_account.Credentials.from_service_account_file(
            credentials_path,
            scopes=["https://www.googleapis.com/auth/cloud-platform"],
        )

    logger.warning(
        "서비스 계정 키 파일을 찾을 수 없습니다. ADC 자동 감지를 시도합니다."
    )
    return None


def build_chat_model(
    model_name: str | None = None,
    temperature: float | None = None,
) -> ChatGoogleGenerativeAI:
    """
    settings 기반으로 Gemini 채팅 모델을 생성합니다.

    Args:
        model_name: 사용할 Gemini 모델 이름 (None이면 settings.SUMMARY_MODEL)
        temperature: 샘플링 온도 (None이면 settings.SUMMARY_TEMPERATURE)
    """
    credentials = _get_credentials()
    project_id = settings.GOOGLE_CLOUD_PROJECT or os.environ.get("GOOGLE_CLOUD_PROJECT")

    return ChatGoogleGenerativeAI(
        model=model_name or settings.SUMMARY_MODEL,
        credentials=credentials,
        project=project_id,
        temperature=(
            settings.SUMMARY_TEMPERATURE if temperature is None else temperature
        ),
    )


def build_message(prompt: str, attachment: DocumentAttachment | None = None) -> HumanMessage:
    """
    프롬프트와 (선택) 첨부 문서로 HumanMessage를 구성합니다.

    첨부 문서는 텍스트로 펼치지 않고 media 블록으로 전달합니다.
    """
    if attachment is None:
        return HumanMessage(content=prompt)

    return HumanMessage(
        content=[
            {"type": "text", "text": prompt},
            {
                "type": "media",
                "mime_type": attachment.mime_type,
                "data": attachment.data,
            },
        ]
    )


class CompletionInvoker:
    """LLM 호출기 (요청당 1회 호출, 상태 없음)"""

    def __init__(
        self,
        llm: BaseChatModel | None = None,
        output_schema: type[BaseModel] = SummaryResult,
    ):
        """
        Args:
            llm: 사용할 채팅 모델. None이면 settings 기반 Gemini 모델 생성
            output_schema: Structured Output 스키마 (필수 문자열 필드 summary)
        """
        self.llm = llm or build_chat_model()
        self.output_schema = output_schema

        # Structured Output 적용
        self.llm_structured = self.llm.with_structured_output(output_schema)

    @property
    def model_name(self) -> str:
        return getattr(self.llm, "model", None) or type(self.llm).__name__

    def _decode(self, raw: object) -> SummaryResult:
        if raw is None:
            raise CompletionError("LLM 응답이 비어있거나 스키마로 디코딩되지 않았습니다.")

        if isinstance(raw, dict):
            raw = self.output_schema.model_validate(raw)

        if not isinstance(raw, self.output_schema):
            raise CompletionError(f"예상하지 못한 응답 타입: {type(raw).__name__}")

        summary = getattr(raw, "summary", None)
        if not isinstance(summary, str) or not summary.strip():
            raise CompletionError("LLM 응답의 summary 필드가 비어있습니다.")

        return raw

    async def invoke(
        self,
        prompt: str,
        attachment: DocumentAttachment | None = None,
    ) -> SummaryResult:
        """
        프롬프트를 LLM에 1회 전달하고 SummaryResult를 반환합니다.

        Args:
            prompt: 요약 프롬프트
            attachment: PDF 등 첨부 문서 (선택)

        Returns:
            SummaryResult: 비어있지 않은 summary를 가진 결과

        Raises:
            CompletionError: 응답을 스키마로 디코딩할 수 없거나 summary가 빈 경우
            Exception: 전송 계층 오류는 그대로 전파
        """
        logger.debug(
            f"LLM 호출: model={self.model_name}, 프롬프트 길이={len(prompt)}자"
            + (f", 첨부={attachment.mime_type}" if attachment else "")
        )

        try:
            raw = await self.llm_structured.ainvoke([build_message(prompt, attachment)])
            result = self._decode(raw)
        except (OutputParserException, PydanticValidationError) as e:
            logger.error(f"LLM 응답 디코딩 실패: {type(e).__name__}: {e}")
            raise CompletionError(f"{type(e).__name__}: {e}") from e

        logger.info(f"LLM 응답 수신: summary 길이={len(result.summary)}자")
        return result
