"""
Unit tests for event logger utility.
"""
import importlib
import logging
from unittest.mock import Mock

import pytest

from account_platform.account_platform.account_service.config import settings
from account_platform.account_platform.account_service.utils import event_logger
from account_platform.account_platform.account_service.utils.event_logger import client_ip, log_account_event

LOGGER_NAME = "account_platform.account_platform.account_service.utils.event_logger"


@pytest.fixture
def mock_request():
    """Create a mock FastAPI Request object."""
    request = Mock()
    request.client = Mock()
    request.client.host = "192.168.1.1"
    request.headers = {"user-agent": "Mozilla/5.0 Test Browser"}
    return request


def test_log_account_event_writes_record(caplog, mock_request):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)

    log_account_event("login_success", "testuser", mock_request)

    records = [r for r in caplog.records if r.name == LOGGER_NAME]
    assert len(records) == 1
    message = records[0].getMessage()
    assert "ACCOUNT login_success" in message
    assert "username=testuser" in message
    assert "ip=192.168.1.1" in message
    assert "Mozilla/5.0 Test Browser" in message
    assert records[0].levelno == logging.INFO


def test_failure_events_log_as_warning(caplog, mock_request):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)

    log_account_event("login_failure", "testuser", mock_request, {"status": 400})

    record = [r for r in caplog.records if r.name == LOGGER_NAME][0]
    assert record.levelno == logging.WARNING
    assert "'status': 400" in record.getMessage()


def test_log_account_event_rejects_unknown_type(mock_request):
    with pytest.raises(ValueError, match="Invalid event_type"):
        log_account_event("password_reset", "testuser", mock_request)


def test_client_ip_falls_back_to_forwarded_for():
    request = Mock()
    request.client = None
    request.headers = {"x-forwarded-for": "10.0.0.1, 10.0.0.2"}

    assert client_ip(request) == "10.0.0.1"


def test_client_ip_missing():
    request = Mock()
    request.client = None
    request.headers = {}

    assert client_ip(request) is None


def test_log_dir_adds_file_handler(tmp_path, monkeypatch, caplog, mock_request):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "logs"))
    importlib.reload(event_logger)
    file_handlers = [h for h in event_logger.logger.handlers if isinstance(h, logging.FileHandler)]
    try:
        assert len(file_handlers) == 1

        event_logger.log_account_event("login_failure", "testuser", mock_request)
        file_handlers[0].flush()

        content = (tmp_path / "logs" / "account_events.log").read_text()
        assert "ACCOUNT login_failure username=testuser" in content
    finally:
        for handler in file_handlers:
            event_logger.logger.removeHandler(handler)
            handler.close()
