"""End-to-end tests for the validate -> compose -> invoke pipeline."""

import pytest

from app.core.errors import (
    ERROR_MESSAGES,
    CompletionError,
    SummaryErrorCode,
    UnexpectedError,
    ValidationError,
)
from app.services.completion import CompletionInvoker
from app.services.summary import SummaryService
from output_schemas.summary import SummaryResult

from conftest import FakeChatModel


@pytest.mark.asyncio
async def test_text_article_summary_end_to_end(summary_service, fake_llm, text_request) -> None:
    result = await summary_service.summarize(text_request)

    assert result == SummaryResult(summary="Plants turn sunlight into food...")

    [message] = fake_llm.calls[0]
    prompt = message.content
    assert "Photosynthesis converts light into chemical energy..." in prompt
    assert "high school student" in prompt
    assert "approximately 200-400 words" in prompt


@pytest.mark.asyncio
async def test_pdf_article_summary_sends_document(summary_service, fake_llm, pdf_data_uri) -> None:
    result = await summary_service.summarize(
        {"pdfDocument": pdf_data_uri, "userContext": "software engineer", "summaryLength": "medium"}
    )

    assert result.summary == "Plants turn sunlight into food..."
    [message] = fake_llm.calls[0]
    text_block, media_block = message.content
    assert "[Attached document: application/pdf]" in text_block["text"]
    assert media_block["data"] == pdf_data_uri.split(",", 1)[1]


@pytest.mark.asyncio
async def test_empty_context_fails_before_llm_call(summary_service, fake_llm, text_request) -> None:
    with pytest.raises(ValidationError) as exc_info:
        await summary_service.summarize({**text_request, "userContext": ""})

    assert exc_info.value.field == "user_context"
    assert fake_llm.calls == []


@pytest.mark.asyncio
async def test_form_context_bounds_come_from_settings(summary_service, fake_llm, text_request) -> None:
    with pytest.raises(ValidationError, match="at least 10 characters"):
        await summary_service.summarize({**text_request, "userContext": "student"})

    assert fake_llm.calls == []


@pytest.mark.asyncio
async def test_transport_error_becomes_generic_unexpected_error(text_request) -> None:
    llm = FakeChatModel(response=ConnectionError("upstream 10.0.0.3:443 refused connection"))
    service = SummaryService(invoker=CompletionInvoker(llm=llm), timeout_seconds=5)

    with pytest.raises(UnexpectedError) as exc_info:
        await service.summarize(text_request)

    error = exc_info.value
    assert error.message == ERROR_MESSAGES[SummaryErrorCode.UNEXPECTED]
    assert "refused" not in error.message
    assert "Traceback" not in error.message
    assert error.to_dict() == {"error": ERROR_MESSAGES[SummaryErrorCode.UNEXPECTED]}
    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_empty_summary_is_completion_error_not_success(text_request) -> None:
    llm = FakeChatModel(response=SummaryResult(summary=""))
    service = SummaryService(invoker=CompletionInvoker(llm=llm), timeout_seconds=5)

    with pytest.raises(CompletionError):
        await service.summarize(text_request)


@pytest.mark.asyncio
async def test_timeout_is_completion_error_without_retry(text_request) -> None:
    llm = FakeChatModel(response=SummaryResult(summary="too late"), delay=1)
    service = SummaryService(invoker=CompletionInvoker(llm=llm), timeout_seconds=0.01)

    with pytest.raises(CompletionError) as exc_info:
        await service.summarize(text_request)

    assert "타임아웃" in exc_info.value.detail
    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_each_request_makes_exactly_one_call(summary_service, fake_llm, text_request) -> None:
    await summary_service.summarize(text_request)
    await summary_service.summarize({**text_request, "summaryLength": "large"})

    assert len(fake_llm.calls) == 2
    assert "approximately 800-1200 words" in fake_llm.calls[1][0].content
