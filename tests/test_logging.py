import json
import logging
import os
import sys
from unittest.mock import patch

from feedrelay.utils.logging import JsonFormatter, configure_logging
from feedrelay.utils.pipeline_config import PipelineConfig


class TestJsonFormatter:
    def test_message_with_quotes_stays_valid_json(self):
        record = logging.LogRecord("feedrelay.test", logging.INFO, "relay.py", 12, 'said "hi"', None, None)

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == 'said "hi"'
        assert payload["level"] == "INFO"
        assert payload["file"] == "relay.py:12"


class TestConfigureLogging:
    def teardown_method(self):
        logging.getLogger().handlers.clear()

    def test_stderr_output(self):
        configure_logging(level="DEBUG", output="stderr", log_format="text")

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr
        assert logging.getLogger().level == logging.DEBUG

    def test_file_output_creates_directory(self, tmp_path):
        log_file = tmp_path / "logs" / "feedrelay.log"

        configure_logging(level="INFO", output="both", file_path=str(log_file), log_format="json")

        assert log_file.parent.is_dir()
        assert len(logging.getLogger().handlers) == 2
        assert isinstance(logging.getLogger().handlers[0].formatter, JsonFormatter)


class TestPipelineConfig:
    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = PipelineConfig()

        assert settings.relay_timeout == 10.0
        assert settings.min_paragraphs == 3
        assert settings.min_link_ratio == 0.3
        assert settings.no_cache_bust_domains == ["theverge.com"]

    def test_environment_read_at_construction(self):
        env = {"EXTRACT_MIN_LINK_RATIO": "off", "NO_CACHE_BUST_DOMAINS": "A.com, b.org,", "FEED_STALE_SECONDS": "60"}
        with patch.dict(os.environ, env, clear=True):
            settings = PipelineConfig()

        assert settings.min_link_ratio is None
        assert settings.no_cache_bust_domains == ["a.com", "b.org"]
        assert settings.stale_after_seconds == 60.0
