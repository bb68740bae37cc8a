"""
Phoenix LLMOps Tracing

요약 LLM 호출(ChatGoogleGenerativeAI.with_structured_output)을 Phoenix로 트레이싱합니다.
get_application()이 여러 번 호출되어도 계측은 프로세스당 1회만 수행합니다.
"""

from loguru import logger

from app.core.config import Settings, settings

# 계측 완료 여부 (LangChainInstrumentor는 중복 계측 시 경고를 남김)
_instrumented = False


def summary_trace_attributes(config: Settings) -> dict[str, str]:
    """요약 트레이스에 붙일 리소스 속성"""
    return {
        "service.name": config.PROJECT_NAME,
        "service.version": config.VERSION,
        "scisummary.model": config.SUMMARY_MODEL,
        "scisummary.prompt_version": config.SUMMARY_PROMPT_VERSION,
    }


def init_tracing(config: Settings | None = None) -> bool:
    """
    Phoenix 트레이싱을 초기화합니다.

    Args:
        config: 사용할 설정. None이면 모듈 settings 사용

    Returns:
        bool: 트레이싱 활성 여부
    """
    global _instrumented
    config = config or settings

    if not config.PHOENIX_ENABLED:
        logger.debug("Phoenix 트레이싱 비활성화 (PHOENIX_ENABLED=False)")
        return False

    if _instrumented:
        return True

    try:
        from openinference.instrumentation.langchain import LangChainInstrumentor
        from opentelemetry.sdk.resources import Resource
        from phoenix.otel import register
    except ImportError as e:
        logger.warning(
            f"Phoenix 트레이싱 의존성 누락: {e}. "
            "pip install 'scisummary[tracing]' 후 다시 시도하세요."
        )
        return False

    try:
        tracer_provider = register(
            project_name=config.PHOENIX_PROJECT_NAME,
            endpoint=config.PHOENIX_COLLECTOR_ENDPOINT,
            resource=Resource.create(summary_trace_attributes(config)),
        )
        LangChainInstrumentor().instrument(tracer_provider=tracer_provider)
    except Exception as e:
        logger.warning(f"Phoenix 트레이싱 초기화 실패: {e}. 트레이싱 없이 요약을 계속합니다.")
        return False

    _instrumented = True
    logger.info(
        f"요약 트레이싱 활성화: model={config.SUMMARY_MODEL}, "
        f"prompt_version={config.SUMMARY_PROMPT_VERSION}, "
        f"project={config.PHOENIX_PROJECT_NAME}"
    )
    return True
