import json

import pytest
from fastapi.testclient import TestClient

import main
from tests.conftest import ARCHIVE_ID, CURRENT_ID, SERVICE_ACCOUNT, FakeSlidesClient


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("CURRENT_SLIDES_ID", CURRENT_ID)
    monkeypatch.setenv("ARCHIVE_SLIDES_ID", ARCHIVE_ID)
    monkeypatch.setenv("GOOGLE_SERVICE_ACCOUNT_KEY", json.dumps(SERVICE_ACCOUNT))
    monkeypatch.delenv("PRESENT_URL", raising=False)
    monkeypatch.delenv("REPO_URL", raising=False)


@pytest.fixture
def fake_client(monkeypatch):
    created = []

    def _install(**kwargs):
        client = FakeSlidesClient(**kwargs)

        def _factory(service_account_info):
            created.append(service_account_info)
            return client

        monkeypatch.setattr(main, "create_slides_client", _factory)
        return client

    _install.created = created
    return _install


@pytest.fixture
def http():
    return TestClient(main.app)


def test_post_archives_three_slide_deck(env, fake_client, http):
    client = fake_client(current=["p", "g1", "g2"], archive=["a", "b", "c"])

    response = http.post("/api/archive")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Weekly slides archived successfully",
        "data": {
            "copiedSlides": 3,
            "deletedSlides": 2,
            "archiveId": ARCHIVE_ID,
            "currentId": CURRENT_ID,
        },
    }
    assert client.decks[CURRENT_ID] == ["p"]
    assert fake_client.created[0].client_email == SERVICE_ACCOUNT["client_email"]


@pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE", "TRACE"])
def test_other_methods_are_rejected_without_remote_calls(env, fake_client, http, method):
    client = fake_client(current=["p", "g1"])

    response = http.request(method, "/api/archive")

    assert response.status_code == 405
    assert response.json() == {"success": False, "message": "Method not allowed. Use POST."}
    assert client.calls == []
    assert fake_client.created == []


def test_missing_credentials_returns_500_without_remote_calls(env, fake_client, http, monkeypatch):
    monkeypatch.delenv("GOOGLE_SERVICE_ACCOUNT_KEY")
    client = fake_client(current=["p"])

    response = http.post("/api/archive")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Failed to archive weekly slides"
    assert body["error"].startswith("Missing required environment variables")
    assert client.calls == []
    assert fake_client.created == []


def test_access_failure_returns_500_with_message(env, fake_client, http):
    fake_client(current=["p"], denied=[ARCHIVE_ID])

    response = http.post("/api/archive")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert "Access validation failed" in body["error"]
    assert "data" not in body


def test_unexpected_error_is_still_json(env, http, monkeypatch):
    def _boom(service_account_info):
        raise RuntimeError("discovery document unavailable")

    monkeypatch.setattr(main, "create_slides_client", _boom)

    response = http.post("/api/archive")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "message": "Internal server error",
        "error": "discovery document unavailable",
    }


def test_home_page_links_to_current_deck(env, http):
    response = http.get("/")

    assert response.status_code == 200
    assert "text/html" in response.headers["content-type"]
    assert f"https://docs.google.com/presentation/d/{CURRENT_ID}/edit" in response.text
    assert "add slides" in response.text
    assert "present" in response.text


def test_health(http):
    assert http.get("/health").json() == {"status": "ok"}


def test_unrouted_verb_gets_json_405_body(env, fake_client, http):
    client = fake_client(current=["p"])

    response = http.request("TRACE", "/api/archive")

    assert response.status_code == 405
    assert response.json() == {"success": False, "message": "Method not allowed. Use POST."}
    assert client.calls == []


def test_other_http_errors_keep_default_shape(http):
    response = http.get("/no-such-page")

    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}
