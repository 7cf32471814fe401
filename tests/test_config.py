"""Tests for chart options, settings and logging levels."""

import logging

import pytest
from pydantic import ValidationError

from account_explorer.config import CREDIT_PALETTE, ChartOptions, get_settings
from account_explorer.logging_setup import PACKAGE, configure_logging, get_logger, level_number


class TestChartOptions:
    """Tests for ChartOptions validation."""

    def test_defaults(self):
        options = ChartOptions()
        assert options.width == 1200
        assert options.credit_palette == CREDIT_PALETTE
        assert options.default_query == ""
        assert options.inner_width == 1160
        assert options.inner_height == 650

    def test_unknown_option_is_rejected(self):
        with pytest.raises(ValidationError):
            ChartOptions(bar_colour="red")

    def test_margins_must_fit(self):
        with pytest.raises(ValidationError):
            ChartOptions(width=30)

    def test_overlay_band_must_increase(self):
        with pytest.raises(ValidationError):
            ChartOptions(overlay_band=(0.9, 0.5))

    def test_palette_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            ChartOptions(credit_palette=[])

    def test_fraction_range(self):
        with pytest.raises(ValidationError):
            ChartOptions(chart_fraction=1.5)

    def test_options_are_frozen(self):
        options = ChartOptions()
        with pytest.raises(ValidationError):
            options.width = 10


class TestSettings:
    @pytest.fixture(autouse=True)
    def _fresh_settings(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("ACCOUNT_EXPLORER_DATASET", "2021.csv")
        monkeypatch.setenv("ACCOUNT_EXPLORER_DATA_DIR", "/tmp/statements")
        monkeypatch.setenv("S3_BUCKET", "my-bucket")
        settings = get_settings()
        assert settings.dataset == "2021.csv"
        assert settings.data_dir == "/tmp/statements"
        assert settings.s3_bucket == "my-bucket"

    def test_defaults(self, monkeypatch):
        for name in ["ACCOUNT_EXPLORER_DATASET", "ACCOUNT_EXPLORER_DATA_DIR", "S3_BUCKET"]:
            monkeypatch.delenv(name, raising=False)
        settings = get_settings()
        assert settings.dataset == "bankhistory.csv"
        assert settings.s3_bucket is None


class TestLogLevels:
    @pytest.mark.parametrize("level,expected", [
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("15", 15),
        (logging.ERROR, logging.ERROR),
        ("nonsense", logging.INFO),
    ])
    def test_level_number(self, level, expected):
        assert level_number(level) == expected

    def test_level_from_environment(self, monkeypatch):
        get_settings.cache_clear()
        monkeypatch.setenv("ACCOUNT_EXPLORER_LOG_LEVEL", "ERROR")
        try:
            assert level_number(get_settings().log_level) == logging.ERROR
        finally:
            get_settings.cache_clear()

    def test_get_logger_is_namespaced(self):
        assert get_logger("account_explorer.search").name == "account_explorer.search"


class TestConfigureLogging:
    """configure_logging runs on every streamlit rerun."""

    @pytest.fixture
    def package_logger(self):
        logger = logging.getLogger(PACKAGE)
        handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
        yield logger
        logger.handlers[:] = handlers
        logger.setLevel(level)
        logger.propagate = propagate

    def test_repeated_calls_attach_one_handler(self, package_logger):
        configure_logging("debug")
        configure_logging("debug")
        consoles = [h for h in package_logger.handlers if type(h) is logging.StreamHandler]
        assert len(consoles) == 1
        assert package_logger.propagate is False

    def test_later_call_changes_level(self, package_logger):
        configure_logging("debug")
        configure_logging("warning")
        assert package_logger.level == logging.WARNING
