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

"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))
from kafka_to_bwhc.config import BridgeConfig  # noqa: E402
from kafka_to_bwhc.logger import BridgeLogger  # noqa: E402

CONFIG_ENV_VARS = [
    "APP_REST_URI",
    "APP_REST_TIMEOUT",
    "APP_KAFKA_TOPIC",
    "APP_KAFKA_RESPONSE_TOPIC",
    "APP_KAFKA_GROUP_ID",
    "KAFKA_BOOTSTRAP_SERVERS",
    "KAFKA_SECURITY_PROTOCOL",
    "KAFKA_SASL_MECHANISM",
    "KAFKA_SASL_USERNAME",
    "KAFKA_SASL_PASSWORD",
    "KAFKA_POLL_TIMEOUT",
    "KAFKA_PRODUCER_TIMEOUT",
    "AUTO_OFFSET_RESET",
    "LOG_LEVEL",
    "LOG_FILE",
    "LOG_FORMAT",
    "BRIDGE_NAME",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all bridge variables from the environment."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def config(clean_env):
    """A valid, resolved configuration."""
    return BridgeConfig(
        rest_uri="http://bwhc:8080/bwhc/etl/api",
        kafka_bootstrap_servers="kafka:9092",
        input_topic="requests",
        log_format="text",
    ).resolved()


@pytest.fixture
def logger(config):
    """Bridge logger writing text lines to stdout."""
    return BridgeLogger(config)


@pytest.fixture
def make_message():
    """Factory for confluent-kafka message doubles."""

    def _make(key=b"case-1", value=b"{}", topic="requests", partition=0, offset=42, error=None):
        message = MagicMock()
        message.key.return_value = key
        message.value.return_value = value
        message.topic.return_value = topic
        message.partition.return_value = partition
        message.offset.return_value = offset
        message.error.return_value = error
        return message

    return _make


@pytest.fixture
def mtb_file_active():
    """MTB-File with active consent."""
    return (
        b'{"consent": {"id": "TESTID1234", "patient": "TESTPATIENT1234", "status": "active"},'
        b' "episode": {"id": "EP1"}}'
    )


@pytest.fixture
def mtb_file_rejected():
    """MTB-File with rejected consent."""
    return b'{"consent": {"id": "TESTID1234", "patient": "TESTPATIENT1234", "status": "rejected"}}'
