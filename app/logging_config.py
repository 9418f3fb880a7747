# app/logging_config.py
import logging

from app.config import settings


def configure_logging(level: str | None = None) -> None:
    """app.* 로거에 콘솔 핸들러 하나만 붙인다 (여러 번 호출해도 중복 X)"""
    logger = logging.getLogger("app")
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s:%(name)s:%(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel((level or settings.log_level).upper())
