"""
Logging 초기화 모듈

loguru 기본 sink를 제거하고 설정된 레벨로 stderr sink를 다시 등록합니다.
"""

import sys

from loguru import logger

from app.core.config import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logging(level: str | None = None) -> None:
    """
    loguru sink를 구성합니다.

    Args:
        level: 로그 레벨. None이면 settings.LOG_LEVEL 사용
    """
    logger.remove()
    logger.add(sys.stderr, level=(level or settings.LOG_LEVEL).upper(), format=LOG_FORMAT)
