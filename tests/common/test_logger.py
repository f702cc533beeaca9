# tests/common/test_logger.py
"""
Unit тесты для модуля логирования (geo_relay/common/logger.py).
"""

import json
import logging
import sys
from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest

from geo_relay.common import logger as logger_module
from geo_relay.common.constants import TypeMsg
from geo_relay.common.logger import (
    ColoredFormatter,
    DateBasedRotatingFileHandler,
    JsonFormatter,
    _get_caller_info,
    _loggers,
    get_logger,
    log_debug,
    log_error,
    log_info,
    log_warning,
    setup_logging,
)


def _record(level: int = logging.INFO, msg: str = "Test message") -> logging.LogRecord:
    record = logging.LogRecord(
        name="test_logger",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


class TestJsonFormatter:
    """Тесты для JsonFormatter."""

    def test_format_basic_record(self) -> None:
        """Тест форматирования базовой записи."""
        data = json.loads(JsonFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["message"] == "Test message"
        assert data["module"] == "test_module"
        assert data["function"] == "test_function"
        assert data["line"] == 10
        assert data["timestamp"].endswith("Z")

    def test_format_with_extra_data(self) -> None:
        """Тест форматирования записи с дополнительными данными."""
        record = _record(logging.WARNING)
        record.extra_data = {"connection_id": "abc", "action": "send-location"}

        data = json.loads(JsonFormatter().format(record))

        assert data["extra"] == {"connection_id": "abc", "action": "send-location"}

    def test_format_with_exception(self) -> None:
        """Тест форматирования записи с исключением."""
        try:
            raise ValueError("Test exception")
        except ValueError:
            exc_info = sys.exc_info()

        record = _record(logging.ERROR, "Error occurred")
        record.exc_info = exc_info

        result = JsonFormatter().format(record)

        assert "ValueError" in result
        assert "Test exception" in result


class TestColoredFormatter:
    """Тесты для ColoredFormatter."""

    def test_format_basic_record(self) -> None:
        result = ColoredFormatter().format(_record())

        assert "INFO" in result
        assert "Test message" in result
        assert "\033[" in result

    def test_format_with_caller_info(self) -> None:
        """Тест форматирования с информацией о вызывающей функции."""
        record = _record(logging.DEBUG, "Debug message")
        record.extra_data = {
            "caller_function": "on_connect",
            "caller_module": "lifecycle",
            "caller_file": "lifecycle.py",
            "caller_line": 42,
        }

        result = ColoredFormatter().format(record)

        assert "lifecycle.on_connect()" in result
        assert "lifecycle.py:42" in result


class TestRotatingHandler:
    """Тесты для DateBasedRotatingFileHandler."""

    def test_rollover_archives_file(self, tmp_path: Path) -> None:
        handler = DateBasedRotatingFileHandler(str(tmp_path), max_bytes=10, logger_name="relay")
        handler.setFormatter(logging.Formatter("%(message)s"))
        try:
            handler.emit(_record(msg="x" * 50))
            handler.emit(_record(msg="y" * 50))
        finally:
            handler.close()

        assert (tmp_path / "relay.log").exists()
        assert list(tmp_path.glob("relay_*.log"))


class TestGetLogger:
    """Тесты для get_logger."""

    def setup_method(self) -> None:
        """Очистка кэша логгеров перед каждым тестом."""
        _loggers.clear()
        for name in ("test_logger", "test_with_settings", "test_no_settings", "test_file_logger"):
            logging.getLogger(name).handlers.clear()

    def test_get_logger_creates_new_logger(self) -> None:
        logger = get_logger("test_logger")

        assert logger.name == "test_logger"
        assert len(logger.handlers) >= 1
        assert logger.propagate is False

    def test_get_logger_returns_cached_logger(self) -> None:
        assert get_logger("test_logger") is get_logger("test_logger")

    @patch("geo_relay.config.settings")
    def test_get_logger_uses_settings(self, mock_settings: Mock) -> None:
        """Тест использования настроек из конфига."""
        mock_settings.logging.LOG_LEVEL = "WARNING"
        mock_settings.logging.LOG_FORMAT = "json"
        mock_settings.logging.LOG_TO_FILE = False
        mock_settings.logging.LOG_FILE_PATH = "logs/test.log"
        mock_settings.logging.LOG_MAX_BYTES = 10485760

        logger = get_logger("test_with_settings")

        assert logger.level == logging.WARNING
        assert isinstance(logger.handlers[0].formatter, JsonFormatter)

    @patch("geo_relay.config.settings")
    def test_get_logger_writes_files(
        self, mock_settings: Mock, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """С LOG_TO_FILE добавляются основной файл и файл ошибок."""
        monkeypatch.setattr(logger_module, "_GLOBAL_FILE_HANDLER", None)
        monkeypatch.setattr(logger_module, "_GLOBAL_ERROR_HANDLER", None)
        mock_settings.logging.LOG_LEVEL = "INFO"
        mock_settings.logging.LOG_FORMAT = "colored"
        mock_settings.logging.LOG_TO_FILE = True
        mock_settings.logging.LOG_FILE_PATH = str(tmp_path / "relay.log")
        mock_settings.logging.LOG_MAX_BYTES = 1024

        logger = get_logger("test_file_logger")
        try:
            assert len(logger.handlers) == 3
            assert (tmp_path / "relay.log").exists()
            assert (tmp_path / "error.log").exists()
        finally:
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()

    def test_get_logger_handles_missing_settings(self) -> None:
        """Тест работы при отсутствии настроек."""
        with patch.dict("sys.modules", {"geo_relay.config": None}):
            logger = get_logger("test_no_settings")

            assert logger.level == logging.DEBUG


class TestSetupLogging:
    """Тесты для setup_logging."""

    def test_setup_logging_initializes_system(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(logger_module, "_LOGGING_INITIALIZED", False)
        _loggers.clear()

        setup_logging()

        assert "geo_relay" in _loggers
        assert logging.getLogger("uvicorn.access").level == logging.WARNING

    def test_setup_logging_is_idempotent(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(logger_module, "_LOGGING_INITIALIZED", True)
        _loggers.clear()

        setup_logging()

        assert "geo_relay" not in _loggers


class TestGetCallerInfo:
    """Тесты для _get_caller_info."""

    def test_reports_caller_of_log_function(self) -> None:
        """Информация указывает на код, вызвавший функцию логирования."""
        def fake_log_function():
            return _get_caller_info()

        def some_handler():
            return fake_log_function()

        info = some_handler()

        assert info["caller_function"] == "some_handler"
        assert info["caller_file"] == "test_logger.py"


class TestLogFunctions:
    """Тесты для асинхронных функций логирования."""

    def setup_method(self) -> None:
        _loggers.clear()

    @pytest.mark.asyncio
    async def test_log_info_basic(self) -> None:
        with patch.object(logging.Logger, "info") as mock_info:
            await log_info("Test message")

            mock_info.assert_called_once()
            assert "Test message" in mock_info.call_args[0]

    @pytest.mark.asyncio
    async def test_log_info_with_type_msg(self) -> None:
        """Тест логирования с разными типами сообщений."""
        with patch.object(logging.Logger, "debug") as mock_debug:
            await log_info("Debug message", type_msg=TypeMsg.DEBUG)
            mock_debug.assert_called_once()

        with patch.object(logging.Logger, "warning") as mock_warning:
            await log_info("Warning message", type_msg=TypeMsg.WARNING)
            mock_warning.assert_called_once()

        with patch.object(logging.Logger, "critical") as mock_critical:
            await log_info("Critical message", type_msg=TypeMsg.CRITICAL)
            mock_critical.assert_called_once()

    @pytest.mark.asyncio
    async def test_log_info_with_extra(self) -> None:
        with patch.object(logging.Logger, "info") as mock_info:
            await log_info("Test message", extra={"connection_id": "abc"})

            extra = mock_info.call_args[1]["extra"]["extra_data"]
            assert extra["connection_id"] == "abc"
            assert extra["caller_function"] == "test_log_info_with_extra"

    @pytest.mark.asyncio
    async def test_log_debug(self) -> None:
        with patch.object(logging.Logger, "debug") as mock_debug:
            await log_debug("Debug message")
            mock_debug.assert_called_once()

    @pytest.mark.asyncio
    async def test_log_warning(self) -> None:
        with patch.object(logging.Logger, "warning") as mock_warning:
            await log_warning("Warning message")
            mock_warning.assert_called_once()

    @pytest.mark.asyncio
    async def test_log_error_with_exc_info(self) -> None:
        """Тест логирования ошибки с трейсбеком."""
        with patch.object(logging.Logger, "error") as mock_error:
            await log_error("Error message", exc_info=True)

            mock_error.assert_called_once()
            assert mock_error.call_args[1].get("exc_info") is True

    @pytest.mark.asyncio
    async def test_log_info_with_custom_logger_name(self) -> None:
        with patch("geo_relay.common.logger.get_logger") as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            await log_info("Test message", logger_name="custom_logger")

            mock_get_logger.assert_called_once_with("custom_logger")
            mock_logger.info.assert_called_once()
