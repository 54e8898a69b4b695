#!/usr/bin/env python3

import json
import logging
import os
from unittest.mock import patch

from pythonjsonlogger import jsonlogger

from thesaurus_api.core.logging import setup_logging


class TestSetupLogging:
    """Test suite for JSON logging configuration."""

    def teardown_method(self):
        logging.getLogger("thesaurus_api").setLevel(logging.NOTSET)

    @patch.dict(os.environ, {"LOG_LEVEL": "debug"})
    def test_level_from_environment(self):
        setup_logging()

        assert logging.getLogger("thesaurus_api").level == logging.DEBUG
        assert logging.getLogger().level == logging.INFO

    def test_records_rendered_as_json(self):
        setup_logging()
        handler = logging.getLogger().handlers[0]

        assert isinstance(handler.formatter, jsonlogger.JsonFormatter)

        record = logging.LogRecord(
            "thesaurus_api.services", logging.INFO, __file__, 1, "Built hierarchy", None, None
        )
        record.vocabulary_type = "platforms"
        output = json.loads(handler.formatter.format(record))

        assert output["message"] == "Built hierarchy"
        assert output["level"] == "INFO"
        assert output["logger"] == "thesaurus_api.services"
        assert output["vocabulary_type"] == "platforms"
