"""
Integration tests for OpenAPI documentation.

Verifies OpenAPI schema is correctly generated for all endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client for the application."""
    return TestClient(app)


@pytest.fixture
def schema(client: TestClient) -> dict:
    response = client.get("/openapi.json")
    assert response.status_code == 200
    return response.json()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_openapi_schema_structure(self, schema: dict) -> None:
        assert "openapi" in schema
        assert "info" in schema
        assert "paths" in schema

    def test_openapi_title_and_description(self, schema: dict) -> None:
        assert schema["info"]["title"] == "username-registry"
        assert "Username Registry" in schema["info"]["description"]
        assert schema["info"]["version"] == "0.1.0"

    @pytest.mark.parametrize(
        ("path", "method"),
        [
            ("/v1/username/validate", "get"),
            ("/v1/username/store", "post"),
            ("/v1/username/update", "post"),
            ("/v1/username/check-availability", "get"),
            ("/v1/username/check-account", "get"),
            ("/health", "get"),
        ],
    )
    def test_endpoint_documented(self, schema: dict, path: str, method: str) -> None:
        assert path in schema["paths"]
        assert method in schema["paths"][path]

    def test_store_summary(self, schema: dict) -> None:
        store = schema["paths"]["/v1/username/store"]["post"]
        assert store["summary"] == "Store a username for a new account"
        assert "409" in store["responses"]

    def test_user_account_request_schema(self, schema: dict) -> None:
        components = schema["components"]["schemas"]
        assert "UserAccountRequest" in components
        props = components["UserAccountRequest"]["properties"]
        assert "account_id" in props
        assert "username" in props

    def test_user_account_response_schema(self, schema: dict) -> None:
        props = schema["components"]["schemas"]["UserAccountResponse"]["properties"]
        assert set(props) == {"success", "message", "account_id", "username", "errors"}

    def test_v1_tag_metadata(self, schema: dict) -> None:
        tags = {tag["name"] for tag in schema.get("tags", [])}
        assert "v1" in tags
