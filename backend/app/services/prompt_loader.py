"""
Prompt Loader

마크다운 파일에서 프롬프트 템플릿을 로드하는 유틸리티입니다.
버전 관리가 용이하도록 프롬프트를 파일로 분리하고,
로드된 템플릿은 변경 불가능한 PromptTemplate으로 캐싱합니다.
"""

import string
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from loguru import logger

# 프롬프트 디렉토리 기본 경로 (backend/prompts/)
PROMPTS_DIR = Path(__file__).parent.parent.parent / "prompts"


@dataclass(frozen=True)
class PromptTemplate:
    """버전이 지정된 불변 프롬프트 템플릿"""

    version: str
    name: str
    text: str

    @property
    def placeholders(self) -> frozenset[str]:
        """템플릿에 포함된 플레이스홀더 이름 목록"""
        return frozenset(
            field_name
            for _, field_name, _, _ in string.Formatter().parse(self.text)
            if field_name
        )

    def render(self, **kwargs: str) -> str:
        """
        플레이스홀더에 값을 대입합니다.

        대입된 값은 다시 해석되지 않으므로 값 안의 중괄호는 그대로 유지됩니다.

        Raises:
            KeyError: 필요한 플레이스홀더 값이 누락된 경우
        """
        missing = self.placeholders - kwargs.keys()
        if missing:
            raise KeyError(
                f"프롬프트 {self.version}/{self.name} 변수 누락: {', '.join(sorted(missing))}"
            )
        return self.text.format(**kwargs)


class PromptLoader:
    """프롬프트 파일 로더"""

    def __init__(self, base_dir: Path | None = None):
        """
        Args:
            base_dir: 프롬프트 파일이 위치한 기본 디렉토리.
                      None이면 기본값 (backend/prompts/) 사용.
        """
        self.base_dir = base_dir or PROMPTS_DIR

    def load(self, version: str, name: str) -> PromptTemplate:
        """
        프롬프트 파일을 로드합니다.

        Args:
            version: 프롬프트 버전 (예: "v1")
            name: 프롬프트 이름 (예: "summary", "article_text")

        Returns:
            PromptTemplate

        Raises:
            FileNotFoundError: 프롬프트 파일이 없을 경우
        """
        file_path = self.base_dir / version / f"{name}.md"

        if not file_path.exists():
            raise FileNotFoundError(f"프롬프트 파일을 찾을 수 없습니다: {file_path}")

        content = file_path.read_text(encoding="utf-8").strip()
        logger.debug(f"프롬프트 로드 완료: {file_path}")
        return PromptTemplate(version=version, name=name, text=content)


@lru_cache(maxsize=32)
def get_prompt(version: str, name: str) -> PromptTemplate:
    """
    캐싱된 프롬프트를 가져옵니다.

    Args:
        version: 프롬프트 버전 (예: "v1")
        name: 프롬프트 이름 (예: "summary")

    Returns:
        PromptTemplate
    """
    loader = PromptLoader()
    return loader.load(version, name)


def format_prompt(version: str, name: str, **kwargs) -> str:
    """
    프롬프트를 로드하고 변수를 대입합니다.

    Args:
        version: 프롬프트 버전
        name: 프롬프트 이름
        **kwargs: 프롬프트에 대입할 변수들

    Returns:
        변수가 대입된 프롬프트 문자열
    """
    return get_prompt(version, name).render(**kwargs)
