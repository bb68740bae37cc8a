"""Tests for the structured-output LLM call."""

import pytest
from langchain_core.exceptions import OutputParserException
from langchain_core.messages import HumanMessage

from app.core.errors import CompletionError
from app.services.completion import CompletionInvoker, build_message
from app.services.validator import DocumentAttachment
from output_schemas.summary import SummaryResult

from conftest import FakeChatModel


@pytest.mark.asyncio
async def test_invoke_returns_structured_result(fake_llm) -> None:
    invoker = CompletionInvoker(llm=fake_llm)

    result = await invoker.invoke("Summarize this")

    assert result == SummaryResult(summary="Plants turn sunlight into food...")
    assert fake_llm.schemas == [SummaryResult]
    assert len(fake_llm.calls) == 1
    [message] = fake_llm.calls[0]
    assert isinstance(message, HumanMessage)
    assert message.content == "Summarize this"


@pytest.mark.asyncio
async def test_invoke_decodes_dict_response() -> None:
    invoker = CompletionInvoker(llm=FakeChatModel(response={"summary": "A dict summary"}))

    result = await invoker.invoke("Summarize this")

    assert result.summary == "A dict summary"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        None,
        SummaryResult(summary=""),
        SummaryResult(summary="   \n"),
        {"summary": ""},
        {"title": "no summary field"},
        "plain text instead of structured output",
    ],
)
async def test_empty_or_malformed_response_raises_completion_error(response) -> None:
    invoker = CompletionInvoker(llm=FakeChatModel(response=response))

    with pytest.raises(CompletionError) as exc_info:
        await invoker.invoke("Summarize this")

    assert exc_info.value.http_status == 502


@pytest.mark.asyncio
async def test_parser_failure_raises_completion_error() -> None:
    invoker = CompletionInvoker(
        llm=FakeChatModel(response=OutputParserException("Failed to parse SummaryResult"))
    )

    with pytest.raises(CompletionError, match="The AI failed to generate a summary"):
        await invoker.invoke("Summarize this")


@pytest.mark.asyncio
async def test_transport_errors_propagate_unchanged() -> None:
    llm = FakeChatModel(response=ConnectionError("connection reset by peer"))
    invoker = CompletionInvoker(llm=llm)

    with pytest.raises(ConnectionError):
        await invoker.invoke("Summarize this")

    assert len(llm.calls) == 1


@pytest.mark.asyncio
async def test_attachment_is_sent_as_media_block(fake_llm) -> None:
    invoker = CompletionInvoker(llm=fake_llm)
    attachment = DocumentAttachment(mime_type="application/pdf", data="JVBERi0xLjQ=")

    await invoker.invoke("Summarize the attached paper", attachment)

    [message] = fake_llm.calls[0]
    assert message.content == [
        {"type": "text", "text": "Summarize the attached paper"},
        {"type": "media", "mime_type": "application/pdf", "data": "JVBERi0xLjQ="},
    ]


def test_build_message_without_attachment_is_plain_text() -> None:
    assert build_message("hello").content == "hello"


def test_model_name_comes_from_llm(fake_llm) -> None:
    assert CompletionInvoker(llm=fake_llm).model_name == "fake-gemini"
