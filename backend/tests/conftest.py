"""공용 테스트 픽스처: LLM 대신 사용하는 가짜 채팅 모델"""

import asyncio
import base64

import pytest
from fastapi.testclient import TestClient

from app.api.v1 import summarize as summarize_api
from app.services.completion import CompletionInvoker
from app.services.summary import SummaryService
from output_schemas.summary import SummaryResult

PDF_BYTES = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n1 0 obj\n<< /Type /Catalog >>\nendobj\n"
PDF_DATA_URI = "data:application/pdf;base64," + base64.b64encode(PDF_BYTES).decode("ascii")


class FakeStructuredRunnable:
    """with_structured_output()이 반환하는 Runnable 대역"""

    def __init__(self, model: "FakeChatModel"):
        self.model = model

    async def ainvoke(self, messages):
        self.model.calls.append(messages)
        if self.model.delay:
            await asyncio.sleep(self.model.delay)
        if isinstance(self.model.response, Exception):
            raise self.model.response
        return self.model.response


class FakeChatModel:
    """ChatGoogleGenerativeAI 대역 (네트워크 호출 없음)"""

    model = "fake-gemini"

    def __init__(self, response=None, delay: float = 0):
        self.response = response
        self.delay = delay
        self.calls: list = []
        self.schemas: list = []

    def with_structured_output(self, schema):
        self.schemas.append(schema)
        return FakeStructuredRunnable(self)


@pytest.fixture
def fake_llm() -> FakeChatModel:
    return FakeChatModel(response=SummaryResult(summary="Plants turn sunlight into food..."))


@pytest.fixture
def summary_service(fake_llm) -> SummaryService:
    return SummaryService(invoker=CompletionInvoker(llm=fake_llm), timeout_seconds=5)


@pytest.fixture
def client(monkeypatch, summary_service) -> TestClient:
    from app.main import app

    monkeypatch.setattr(summarize_api, "get_summary_service", lambda: summary_service)
    return TestClient(app)


@pytest.fixture
def pdf_data_uri() -> str:
    return PDF_DATA_URI


@pytest.fixture
def text_request() -> dict:
    return {
        "articleText": "Photosynthesis converts light into chemical energy...",
        "userContext": "high school student",
        "summaryLength": "short",
    }
