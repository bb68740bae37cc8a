import json

from pydantic import AnyHttpUrl, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "SciSummary"
    VERSION: str = "0.1.0"
    API_V1_STR: str = "/api/v1"

    # CORS 설정: 콤마로 구분된 문자열이나 리스트 모두 처리 가능하도록 검증
    BACKEND_CORS_ORIGINS: list[AnyHttpUrl] = []

    # 로그 레벨 (loguru sink 레벨)
    LOG_LEVEL: str = "INFO"

    # ===== SummaryService (논문 요약) 설정 =====
    SUMMARY_MODEL: str = "gemini-2.5-flash"
    SUMMARY_TEMPERATURE: float = 0.3  # 요약은 창의성보다 정확성
    SUMMARY_PROMPT_VERSION: str = "v1"
    # LLM 호출 1회를 감싸는 타임아웃 (초). None이면 타임아웃 없음
    SUMMARY_TIMEOUT_SECONDS: float | None = 120.0

    # ===== 입력 제한 (업로드 폼 기준) =====
    USER_CONTEXT_MIN_LENGTH: int = 10
    USER_CONTEXT_MAX_LENGTH: int = 500
    MAX_PDF_BYTES: int = 5 * 1024 * 1024  # 5MB

    # ===== Google Cloud 설정 =====
    GOOGLE_CLOUD_PROJECT: str | None = None
    GOOGLE_CLOUD_LOCATION: str = "us-central1"
    # 서비스 계정 키 파일 경로 (없으면 ADC 자동 감지)
    GOOGLE_APPLICATION_CREDENTIALS: str | None = None

    # ===== Phoenix LLMOps 설정 =====
    PHOENIX_COLLECTOR_ENDPOINT: str = "http://localhost:6006/v1/traces"
    PHOENIX_PROJECT_NAME: str = "scisummary"
    PHOENIX_ENABLED: bool = False

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v: str | list[str]) -> list[str] | str:
        if isinstance(v, str):
            # JSON 배열 형태인 경우 파싱
            if v.startswith("["):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # 콤마로 구분된 문자열인 경우
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, list):
            return v
        raise ValueError(v)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True
    )


settings = Settings()
