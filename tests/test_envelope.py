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

"""Tests for the response envelope builder."""

import json

import pytest

from kafka_to_bwhc.envelope import TRANSPORT_FAILURE_STATUS, build_response
from kafka_to_bwhc.models import BackendSuccess, TransportFailure


class TestBuildResponse:
    """Tests for build_response."""

    def test_success_body_passed_verbatim(self):
        response = build_response(b"case-1", BackendSuccess(200, b'{"status":"ok"}'))

        assert response.key == b"case-1"
        assert response.value == b'{"status":"ok"}'
        assert response.headers == [("status_code", b"200")]

    @pytest.mark.parametrize("status_code", [201, 400, 422, 500, 503])
    def test_backend_status_not_interpreted(self, status_code):
        body = b'{"issues": [{"severity": "error", "message": "invalid"}]}'

        response = build_response(b"case-1", BackendSuccess(status_code, body))

        assert response.value == body
        assert response.headers == [("status_code", str(status_code).encode())]

    def test_empty_body_stays_empty(self):
        assert build_response(b"k", BackendSuccess(204, b"")).value == b""

    def test_transport_failure(self):
        response = build_response(b"case-2", TransportFailure("connection refused"))

        assert response.key == b"case-2"
        assert json.loads(response.value) == {"status": 900, "reason": "connection refused"}
        assert response.headers == [("status_code", b"900")]

    def test_transport_failure_reason_never_empty(self):
        response = build_response(b"case-2", TransportFailure(""))

        document = json.loads(response.value)
        assert document["status"] == TRANSPORT_FAILURE_STATUS
        assert document["reason"]

    @pytest.mark.parametrize("key", [None, b"", b"\x00\xffbinary", "fall-1".encode()])
    def test_key_copied_verbatim(self, key):
        assert build_response(key, BackendSuccess(200, b"{}")).key == key
        assert build_response(key, TransportFailure("timeout after 5.0s")).key == key

    def test_is_deterministic(self):
        outcome = TransportFailure("connection refused")
        assert build_response(b"k", outcome) == build_response(b"k", outcome)
