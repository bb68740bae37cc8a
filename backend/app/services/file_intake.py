"""
File Intake

업로드된 파일을 요약 요청의 아티클 형식으로 변환합니다.

- text/plain → article_text (UTF-8 디코딩)
- application/pdf → pdf_document (base64 data URI, 최대 5MB)
- .doc / .docx → 선택은 허용하지만 아직 요약 불가
- 그 외 → 거부
"""

import base64
import mimetypes
from dataclasses import dataclass

from loguru import logger

from app.core.config import settings
from app.core.errors import ValidationError
from app.services.validator import PDF_MIME_TYPE

TEXT_MIME_TYPE = "text/plain"
WORD_MIME_TYPES = frozenset(
    {
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    }
)
ALLOWED_MIME_TYPES = frozenset({TEXT_MIME_TYPE, PDF_MIME_TYPE}) | WORD_MIME_TYPES

# 브라우저가 타입을 지정하지 않았을 때 사용되는 값
GENERIC_MIME_TYPES = frozenset({"", "application/octet-stream"})


@dataclass(frozen=True)
class ArticleInput:
    """업로드 파일에서 추출한 아티클 (둘 중 하나만 채워짐)"""

    article_text: str | None = None
    pdf_document: str | None = None

    def as_payload(self) -> dict[str, str]:
        if self.article_text is not None:
            return {"article_text": self.article_text}
        return {"pdf_document": self.pdf_document}


def resolve_mime_type(filename: str | None, content_type: str | None) -> str:
    """
    업로드 파일의 MIME 타입을 결정합니다.

    content_type이 비어있거나 octet-stream이면 파일 확장자로 추정합니다.
    """
    mime_type = (content_type or "").split(";")[0].strip().lower()
    if mime_type in GENERIC_MIME_TYPES and filename:
        guessed, _ = mimetypes.guess_type(filename)
        mime_type = (guessed or mime_type).lower()
    return mime_type


def to_data_uri(data: bytes, mime_type: str = PDF_MIME_TYPE) -> str:
    """바이트를 base64 data URI로 인코딩합니다."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def read_article_file(
    data: bytes,
    filename: str | None = None,
    content_type: str | None = None,
    max_pdf_bytes: int | None = None,
) -> ArticleInput:
    """
    업로드 파일 내용을 ArticleInput으로 변환합니다.

    Args:
        data: 파일 바이트
        filename: 원본 파일 이름 (MIME 타입 추정용)
        content_type: 업로드 시 선언된 Content-Type
        max_pdf_bytes: PDF 최대 크기. None이면 settings.MAX_PDF_BYTES

    Returns:
        ArticleInput

    Raises:
        ValidationError: 지원하지 않는 파일, 크기 초과, 빈 파일, 디코딩 불가
    """
    mime_type = resolve_mime_type(filename, content_type)
    limit = settings.MAX_PDF_BYTES if max_pdf_bytes is None else max_pdf_bytes

    if mime_type == PDF_MIME_TYPE and len(data) > limit:
        raise ValidationError(
            f"PDF files must be smaller than {limit // (1024 * 1024)}MB.", field="file"
        )

    if mime_type not in ALLOWED_MIME_TYPES:
        raise ValidationError(
            "Please upload a .txt, .pdf, or .doc/.docx file.", field="file"
        )

    if mime_type in WORD_MIME_TYPES:
        raise ValidationError(
            "Only .txt and .pdf files can be summarized at this time. "
            "Support for other file types is coming soon!",
            field="file",
        )

    if not data:
        raise ValidationError("The uploaded file is empty.", field="file")

    logger.debug(f"업로드 파일 수신: name={filename}, type={mime_type}, size={len(data)}B")

    if mime_type == PDF_MIME_TYPE:
        return ArticleInput(pdf_document=to_data_uri(data))

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError(
            "There was an issue reading your file. Please upload a UTF-8 text file.",
            field="file",
        ) from e

    if not text.strip():
        raise ValidationError("The uploaded file is empty.", field="file")

    return ArticleInput(article_text=text)
