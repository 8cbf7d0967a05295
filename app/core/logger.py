"""
로깅 설정 및 관리 모듈

애플리케이션 전체의 로깅을 중앙에서 관리합니다.
"""

import logging
import logging.handlers
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from app.core.error_handling import sanitize_parameters
from config.settings import LoggingConfig, get_logging_config


class TourLogger:
    """관광 API 클라이언트용 로거 클래스"""

    def __init__(
        self,
        log_dir: Optional[str] = "logs",
        config: Optional[LoggingConfig] = None,
    ):
        self.config = config or get_logging_config()
        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        self._setup_logging()

    def _setup_logging(self) -> None:
        """로깅 설정"""
        level = getattr(logging, self.config.level, logging.INFO)
        formatter = logging.Formatter(self.config.format)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        # 콘솔 핸들러
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        if not self.log_dir:
            return

        today = datetime.now().strftime("%Y%m%d")

        # 파일 핸들러 (일반 로그)
        file_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{self.config.file_prefix}_{today}.log",
            maxBytes=self.config.max_bytes,
            backupCount=self.config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        # 에러 로그 파일 핸들러
        error_handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{self.config.file_prefix}_error_{today}.log",
            maxBytes=self.config.max_bytes,
            backupCount=self.config.backup_count,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    def get_logger(self, name: str) -> logging.Logger:
        """특정 이름의 로거 반환"""
        return logging.getLogger(name)


def log_api_call(
    logger: logging.Logger,
    endpoint: str,
    params: Optional[Dict[str, Any]] = None,
    status_code: Optional[int] = None,
    duration: Optional[float] = None,
    attempt: Optional[int] = None,
) -> None:
    """API 호출 로그 (서비스 키는 마스킹)"""
    message = f"API 호출 - {endpoint}"
    if params:
        message += f", 파라미터: {sanitize_parameters(params)}"
    if status_code is not None:
        message += f", 상태코드: {status_code}"
    if duration is not None:
        message += f", 응답시간: {duration:.3f}초"
    if attempt is not None:
        message += f", 시도: {attempt}"
    logger.debug(message)


# 전역 로거 인스턴스
_logger_instance = None


def setup_logging(
    log_dir: Optional[str] = "logs", config: Optional[LoggingConfig] = None
) -> TourLogger:
    """전역 로깅 설정 (재호출 시 다시 구성)"""
    global _logger_instance
    _logger_instance = TourLogger(log_dir=log_dir, config=config)
    return _logger_instance


def get_logger(name: str) -> logging.Logger:
    """특정 이름의 로거 반환 (편의 함수)"""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = TourLogger()
    return _logger_instance.get_logger(name)
