"""
Summary Output Schema

논문 요약 결과를 위한 Pydantic 스키마를 정의합니다.
LangChain의 with_structured_output()에서 사용됩니다.
"""

from pydantic import BaseModel, Field


class SummaryResult(BaseModel):
    """요약 결과 스키마 - LLM Structured Output용"""

    summary: str = Field(
        ...,
        description="The summarized article text.",
    )
