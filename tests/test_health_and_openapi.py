from __future__ import annotations


def test_health_needs_no_key(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_openapi_declares_api_key_and_exempts_health(client):
    schema = client.get("/openapi.json").json()

    assert schema["info"]["title"] == "Rento API"
    assert schema["components"]["securitySchemes"]["ApiKeyAuth"]["name"] == "X-API-Key"
    assert schema["security"] == [{"ApiKeyAuth": []}]
    assert schema["paths"]["/health"]["get"]["security"] == []

    tag_names = {tag["name"] for tag in schema["tags"]}
    assert {"Applications", "Tours", "Messages", "Favorites", "Health"} <= tag_names


def test_routes_are_mounted_under_api(client):
    paths = set(client.get("/openapi.json").json()["paths"])

    assert {
        "/api/applications",
        "/api/applications/{application_id}",
        "/api/applications/{application_id}/status",
        "/api/tours",
        "/api/tours/{tour_id}/actions",
        "/api/tours/update",
        "/api/messages",
        "/api/favorites",
    } <= paths
