"""
Input Validator

요약 요청 페이로드를 검증하여 SummaryRequest로 변환합니다.

검증 규칙:
- article_text / pdf_document 중 정확히 하나만 있어야 함
- pdf_document는 base64 PDF data URI (data:application/pdf;base64,...)
- user_context는 비어있지 않은 문자열
- summary_length는 short | medium | large 중 하나

외부 호출이 없는 순수 함수이며, 실패 시 app.core.errors.ValidationError를 발생시킵니다.
"""

import base64
import binascii
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.core.errors import ValidationError

SummaryLength = Literal["short", "medium", "large"]
SUMMARY_LENGTHS: tuple[str, ...] = ("short", "medium", "large")

PDF_MIME_TYPE = "application/pdf"

# data:<mimetype>[;param=value...];base64,<encoded_data>
DATA_URI_PATTERN = re.compile(
    r"^data:(?P<mime_type>[\w.+-]+/[\w.+-]+)(?P<params>(?:;[\w.+-]+=[^;,]*)*);base64,(?P<data>.*)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class DocumentAttachment:
    """data URI에서 분리한 문서 첨부 (LLM media 블록용)"""

    mime_type: str
    data: str  # base64 인코딩 문자열


class SummaryRequest(BaseModel):
    """검증된 요약 요청"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    article_text: str | None = Field(
        None,
        description="The text content of the scientific article to summarize.",
    )
    pdf_document: str | None = Field(
        None,
        description=(
            "A PDF of a scientific article, as a data URI that must include a MIME type "
            "and use Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'."
        ),
    )
    user_context: str = Field(
        ...,
        description="The user's background or field of expertise to tailor the summary.",
    )
    summary_length: SummaryLength = Field(
        ...,
        description="The desired length of the summary (short, medium, large).",
    )

    @model_validator(mode="before")
    @classmethod
    def accept_legacy_pdf_key(cls, data: Any) -> Any:
        return _rename_legacy_keys(data)

    @property
    def attachment(self) -> DocumentAttachment | None:
        """pdf_document가 있으면 DocumentAttachment로 변환합니다."""
        if self.pdf_document is None:
            return None
        return parse_data_uri(self.pdf_document)


def parse_data_uri(data_uri: str) -> DocumentAttachment:
    """
    data URI를 파싱하여 MIME 타입과 base64 페이로드를 분리합니다.

    Args:
        data_uri: 'data:<mimetype>;base64,<encoded_data>' 형식 문자열

    Returns:
        DocumentAttachment

    Raises:
        ValidationError: 형식이 잘못되었거나 base64 디코딩이 불가능한 경우
    """
    match = DATA_URI_PATTERN.match(data_uri.strip())
    if not match:
        raise ValidationError(
            "The PDF document must be a base64 data URI "
            "('data:application/pdf;base64,<encoded_data>').",
            field="pdf_document",
        )

    data = match.group("data").strip()
    if not data:
        raise ValidationError("The PDF document is empty.", field="pdf_document")

    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(
            "The PDF document is not valid base64 data.", field="pdf_document"
        ) from e

    return DocumentAttachment(mime_type=match.group("mime_type").lower(), data=data)


def _rename_legacy_keys(data: Any) -> Any:
    # 이전 클라이언트의 pdfDataUri 키 호환
    if isinstance(data, Mapping) and "pdfDataUri" in data:
        data = dict(data)
        legacy = data.pop("pdfDataUri")
        if data.get("pdfDocument") is None and data.get("pdf_document") is None:
            data["pdfDocument"] = legacy
    return data


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _get(payload: Mapping[str, Any], name: str) -> Any:
    """snake_case / camelCase 키 모두에서 값을 찾습니다."""
    if name in payload:
        return payload[name]
    return payload.get(to_camel(name))


def validate_request(
    payload: Mapping[str, Any] | SummaryRequest,
    *,
    min_context_length: int = 1,
    max_context_length: int | None = None,
) -> SummaryRequest:
    """
    요약 요청 페이로드를 검증합니다.

    Args:
        payload: 요청 딕셔너리 (snake_case 또는 camelCase 키) 또는 SummaryRequest
        min_context_length: user_context 최소 길이 (공백 제외 기준)
        max_context_length: user_context 최대 길이 (None이면 제한 없음)

    Returns:
        SummaryRequest: 검증된 요청

    Raises:
        ValidationError: 검증 실패 시 (field 속성에 문제 필드 이름)
    """
    if isinstance(payload, SummaryRequest):
        payload = payload.model_dump()

    payload = _rename_legacy_keys(payload)

    article_text = _get(payload, "article_text")
    pdf_document = _get(payload, "pdf_document")
    has_text = not _is_blank(article_text)
    has_pdf = not _is_blank(pdf_document)

    if not has_text and not has_pdf:
        raise ValidationError(
            "Either articleText or pdfDocument must be provided.",
            field="article_text",
        )
    if has_text and has_pdf:
        raise ValidationError(
            "Provide either articleText or pdfDocument, not both.",
            field="article_text",
        )
    if has_text and not isinstance(article_text, str):
        raise ValidationError("articleText must be a string.", field="article_text")
    if has_pdf and not isinstance(pdf_document, str):
        raise ValidationError("pdfDocument must be a data URI string.", field="pdf_document")

    user_context = _get(payload, "user_context")
    if _is_blank(user_context) or not isinstance(user_context, str):
        raise ValidationError(
            "Please describe your background so the summary can be tailored.",
            field="user_context",
        )
    context_length = len(user_context.strip())
    if context_length < min_context_length:
        raise ValidationError(
            f"Context must be at least {min_context_length} characters.",
            field="user_context",
        )
    if max_context_length is not None and context_length > max_context_length:
        raise ValidationError(
            f"Context must not be longer than {max_context_length} characters.",
            field="user_context",
        )

    summary_length = _get(payload, "summary_length")
    if summary_length not in SUMMARY_LENGTHS:
        raise ValidationError(
            f"Summary length must be one of: {', '.join(SUMMARY_LENGTHS)}.",
            field="summary_length",
        )

    try:
        request = SummaryRequest(
            article_text=article_text if has_text else None,
            pdf_document=pdf_document.strip() if has_pdf else None,
            user_context=user_context,
            summary_length=summary_length,
        )
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(
            f"Invalid request: {first.get('msg', 'validation failed')}", field=field
        ) from e

    if has_pdf:
        attachment = parse_data_uri(request.pdf_document)
        if attachment.mime_type != PDF_MIME_TYPE:
            raise ValidationError(
                f"Unsupported document type: {attachment.mime_type}. Only PDF documents are supported.",
                field="pdf_document",
            )

    return request
