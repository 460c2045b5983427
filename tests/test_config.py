"""
Tests for StubTap Configuration

Tests StubConfig defaults, dictionary and YAML loading.
"""

import logging
from textwrap import dedent

from stubtap.common.config import StubConfig
from stubtap.stubs.errors import DEFAULT_UNMATCHED_MESSAGE


class TestStubConfig:
    """Test StubConfig dataclass."""

    def test_default_config(self):
        """Test default configuration values."""
        config = StubConfig()

        assert config.chunk_delay_ms == 10
        assert config.chunk_delay_seconds == 0.01
        assert config.auto_activate is True
        assert config.unmatched_message == DEFAULT_UNMATCHED_MESSAGE
        assert config.log_level == 'warning'

    def test_negative_delay_clamped(self):
        """Test a negative delay never produces a negative sleep."""
        assert StubConfig(chunk_delay_ms=-5).chunk_delay_seconds == 0.0

    def test_from_dict_ignores_unknown_keys(self):
        """Test unknown keys are dropped."""
        config = StubConfig.from_dict({'chunk_delay_ms': 0, 'colour': 'blue'})

        assert config.chunk_delay_ms == 0
        assert not hasattr(config, 'colour')

    def test_from_yaml(self, tmp_path):
        """Test loading config from a YAML file."""
        path = tmp_path / 'stubtap.yaml'
        path.write_text(dedent("""
            chunk_delay_ms: 25
            auto_activate: false
            unmatched_message: "Unexpected request"
            log_level: debug
        """))

        config = StubConfig.from_yaml(str(path))

        assert config.chunk_delay_ms == 25
        assert config.auto_activate is False
        assert config.unmatched_message == 'Unexpected request'
        assert config.log_level == 'debug'

    def test_from_empty_yaml(self, tmp_path):
        """Test an empty YAML file gives defaults."""
        path = tmp_path / 'empty.yaml'
        path.write_text('')

        assert StubConfig.from_yaml(str(path)) == StubConfig()

    def test_apply_logging(self):
        """Test log_level is applied to the package logger."""
        logger = logging.getLogger('stubtap')
        previous = logger.level
        try:
            StubConfig(log_level='debug').apply_logging()
            assert logger.level == logging.DEBUG
        finally:
            logger.setLevel(previous)
