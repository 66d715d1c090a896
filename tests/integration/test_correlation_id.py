from __future__ import annotations

import uuid

import pytest

pytestmark = pytest.mark.integration


class TestCorrelationId:
    def test_incoming_request_id_is_echoed(self, client):
        response = client.get("/health", HTTP_X_REQUEST_ID="req-2410-abc")
        assert response["X-Request-ID"] == "req-2410-abc"

    def test_request_id_is_generated(self, client):
        response = client.get("/health")
        assert uuid.UUID(response["X-Request-ID"]).version == 4

    def test_api_responses_carry_the_id(self, api_client_with_correlation):
        client, request_id = api_client_with_correlation
        response = client.get("/api/v1/me")
        assert response["X-Request-ID"] == request_id

    def test_oversized_request_id_is_replaced(self, client):
        response = client.get("/health", HTTP_X_REQUEST_ID="x" * 500)
        assert uuid.UUID(response["X-Request-ID"]).version == 4
