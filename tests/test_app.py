from fastapi.testclient import TestClient

from storefront.core.config import settings
from storefront.main import create_app


def test_root_lists_endpoints(client):
    response = client.get("/")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["endpoints"]["products"]["stats"] == f"GET {settings.API_PREFIX}/products/stats (Admin)"


def test_unknown_route_uses_error_envelope(client):
    response = client.get(f"{settings.API_PREFIX}/orders")

    assert response.status_code == 404
    assert response.json() == {"success": False, "message": "Route not found"}


def test_requests_fail_with_server_error_when_database_is_down():
    # no repository overrides and no lifespan: app.state has no database
    client = TestClient(create_app())

    response = client.get(f"{settings.API_PREFIX}/products")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Database is not available"}


def test_health_check_reports_database_unavailable():
    client = TestClient(create_app())

    response = client.get(f"{settings.API_PREFIX}/health")

    assert response.status_code == 500
    assert response.json()["success"] is False


def test_openapi_documents_the_error_envelope(client):
    schema = client.get("/openapi.json").json()

    delete_responses = schema["paths"][f"{settings.API_PREFIX}/products/{{product_id}}"]["delete"]["responses"]
    for code in ("400", "401", "403", "404", "500"):
        assert delete_responses[code]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/ErrorResponse"
        }
    assert set(schema["components"]["schemas"]["ErrorResponse"]["properties"]) == {"success", "message"}
