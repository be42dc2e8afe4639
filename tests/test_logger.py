#!/usr/bin/env python3
# Copyright 2025 AstroLab Software
# Author: Farid MAMAN and improved by IA
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for the structured logger."""

import json
import logging
from dataclasses import replace

from kafka_to_bwhc.logger import BridgeLogger, JsonFormatter, TextFormatter


def make_record(message, **extra_fields):
    record = logging.LogRecord("kafka_to_bwhc", logging.INFO, "", 0, message, (), None)
    record.extra_fields = extra_fields
    return record


class TestFormatters:
    """Tests for the JSON and text formatters."""

    def test_json_formatter(self):
        line = JsonFormatter("bridge-1").format(make_record("Response sent", offset=42))

        entry = json.loads(line)
        assert entry["message"] == "Response sent"
        assert entry["bridge"] == "bridge-1"
        assert entry["level"] == "INFO"
        assert entry["offset"] == 42
        assert entry["timestamp"].endswith("Z")

    def test_text_formatter_appends_fields(self):
        line = TextFormatter("bridge-1").format(make_record("Response sent", offset=42))

        assert "[bridge-1] INFO" in line
        assert line.endswith("Response sent offset=42")


class TestBridgeLogger:
    """Tests for BridgeLogger setup and counters."""

    def test_json_format_selected(self, config):
        logger = BridgeLogger(replace(config, log_format="json"))

        (handler,) = logger.logger.handlers
        assert isinstance(handler.formatter, JsonFormatter)

    def test_log_file(self, config, tmp_path):
        log_file = tmp_path / "bridge.log"
        logger = BridgeLogger(replace(config, log_file=str(log_file)))

        logger.info("Bridge running", input_topic="requests")
        for handler in logger.logger.handlers:
            handler.flush()

        assert "Bridge running input_topic=requests" in log_file.read_text()
        logger.logger.handlers[-1].close()

    def test_counters(self, logger):
        logger.record_consumed()
        logger.record_backend_call(reachable=True)
        logger.record_backend_call(reachable=False)
        logger.record_produced()
        logger.record_publish_failure()

        metrics = logger.get_metrics()
        assert metrics["records_consumed"] == 1
        assert metrics["backend_calls"] == 2
        assert metrics["transport_failures"] == 1
        assert metrics["responses_produced"] == 1
        assert metrics["publish_failures"] == 1
        assert "current_time" in metrics
