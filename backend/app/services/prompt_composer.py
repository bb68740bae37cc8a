"""
Prompt Composer

검증된 SummaryRequest로부터 요약 프롬프트를 생성합니다.

- 텍스트 아티클: "Article Text" 섹션에 원문을 그대로 삽입
- PDF 아티클: "Article PDF" 섹션에 첨부 문서 참조 플레이스홀더만 삽입
  (문서 데이터는 CompletionInvoker가 media 블록으로 별도 전달)

user_context / summary_length는 이스케이프 없이 그대로 삽입됩니다.
"""

from app.services.prompt_loader import PromptTemplate, get_prompt
from app.services.validator import PDF_MIME_TYPE, SummaryRequest

# 요약 길이별 목표 단어 수 (최소, 최대)
LENGTH_BANDS: dict[str, tuple[int, int]] = {
    "short": (200, 400),
    "medium": (400, 800),
    "large": (800, 1200),
}

MEDIA_PLACEHOLDER = "[Attached document: {mime_type}]"


def target_word_band(summary_length: str) -> str:
    """요약 길이에 해당하는 단어 수 구간 문자열 (예: 'approximately 200-400 words')"""
    low, high = LENGTH_BANDS[summary_length]
    return f"approximately {low}-{high} words"


class PromptComposer:
    """요약 프롬프트 생성기"""

    def __init__(self, prompt_version: str = "v1"):
        """
        Args:
            prompt_version: 사용할 프롬프트 버전 (backend/prompts/<version>/)

        Raises:
            FileNotFoundError: 프롬프트 파일이 없을 경우
        """
        self.prompt_version = prompt_version
        self.summary_template: PromptTemplate = get_prompt(prompt_version, "summary")
        self.text_template: PromptTemplate = get_prompt(prompt_version, "article_text")
        self.pdf_template: PromptTemplate = get_prompt(prompt_version, "article_pdf")

    def _article_section(self, request: SummaryRequest) -> str:
        if request.article_text is not None:
            return self.text_template.render(article_text=request.article_text)
        return self.pdf_template.render(
            media=MEDIA_PLACEHOLDER.format(mime_type=PDF_MIME_TYPE)
        )

    def compose(self, request: SummaryRequest) -> str:
        """
        요약 프롬프트를 생성합니다.

        Args:
            request: 검증된 요약 요청

        Returns:
            LLM에 전달할 프롬프트 문자열 (동일 입력 → 동일 출력)
        """
        return self.summary_template.render(
            user_context=request.user_context,
            article_section=self._article_section(request),
            summary_length=request.summary_length,
            target_word_band=target_word_band(request.summary_length),
        )


def compose_prompt(request: SummaryRequest, prompt_version: str = "v1") -> str:
    """기본 PromptComposer로 프롬프트를 생성합니다."""
    return PromptComposer(prompt_version).compose(request)
