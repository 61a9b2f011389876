from unittest.mock import patch

import structlog

from src.config import settings
from src.core.logging import mask_key, setup_logging


class TestMaskKey:
    def test_long_key_keeps_suffix(self) -> None:
        assert mask_key("AIzaSyExampleKey1234") == "...1234"

    def test_short_key_fully_masked(self) -> None:
        assert mask_key("abc") == "***"


class TestSetupLogging:
    def test_configures_structlog(self) -> None:
        with patch.object(settings, "log_level", "debug"):
            setup_logging()
        assert structlog.is_configured()
        structlog.reset_defaults()

    def test_unknown_level_defaults_to_info(self) -> None:
        with patch.object(settings, "log_level", "chatty"):
            setup_logging()
        assert structlog.is_configured()
        structlog.reset_defaults()
