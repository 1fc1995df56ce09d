"""Smoke client run against the in-process app."""

from fastapi.testclient import TestClient

import client as smoke_client


def test_smoke_client_walks_every_endpoint(client: TestClient) -> None:
    responses = smoke_client.run_all(http=client, api="/api/v1")

    assert [r.status_code for r in responses] == [200, 201, 200, 200, 200, 200, 204]
    created = responses[1].json()
    assert created["title"] == "Finish FastAPI client"
    assert responses[3].json()["description"] is None
    assert responses[4].json()["completed"] is True
    assert responses[5].json()["total"] == 1
