"""Tests for the user directory endpoints."""

from fastapi.testclient import TestClient


def _create(client: TestClient, headers: dict[str, str], name: str = "Taro", email: str = "taro@example.com"):
    return client.post("/api/users", json={"name": name, "email": email}, headers=headers)


class TestCreateUser:
    def test_create_returns_201_with_envelope(self, client: TestClient, owner_headers) -> None:
        resp = _create(client, owner_headers)

        assert resp.status_code == 201
        assert resp.json() == {
            "ok": True,
            "data": {"id": 1, "name": "Taro", "email": "taro@example.com"},
        }

    def test_name_is_trimmed_and_escaped(self, client: TestClient, owner_headers) -> None:
        resp = _create(client, owner_headers, name="  <b>Hanako</b> ")

        assert resp.status_code == 201
        assert resp.json()["data"]["name"] == "&lt;b&gt;Hanako&lt;/b&gt;"

    def test_blank_name_is_rejected(self, client: TestClient, owner_headers) -> None:
        resp = _create(client, owner_headers, name="   ")

        assert resp.status_code == 400
        body = resp.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "bad_request"
        assert body["error"]["details"]["fields"][0]["field"] == "name"

    def test_invalid_email_is_rejected(self, client: TestClient, owner_headers) -> None:
        resp = _create(client, owner_headers, email="not-an-email")

        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "bad_request"

    def test_owner_header_is_required(self, client: TestClient) -> None:
        resp = _create(client, {})

        assert resp.status_code == 403
        assert resp.json()["error"] == {
            "code": "forbidden",
            "message": "No ownerId",
            "request_id": resp.headers["X-Request-ID"],
            "details": {"hint": "Provide a positive integer X-User-Id and an X-User-Role header"},
        }

    def test_user_id_without_role_is_rejected(self, client: TestClient) -> None:
        resp = _create(client, {"X-User-Id": "1"})

        assert resp.status_code == 403
        assert resp.json()["error"]["message"] == "No ownerId"

    def test_non_positive_owner_is_rejected(self, client: TestClient) -> None:
        resp = _create(client, {"X-User-Id": "-4"})

        assert resp.status_code == 403

    def test_duplicate_email_conflicts(self, client: TestClient, owner_headers) -> None:
        _create(client, owner_headers)
        resp = _create(client, owner_headers, name="Other")

        assert resp.status_code == 409
        assert resp.json()["error"]["code"] == "conflict"

    def test_non_json_body_is_unsupported(self, client: TestClient, owner_headers) -> None:
        resp = client.post(
            "/api/users",
            content="name=Taro",
            headers={**owner_headers, "Content-Type": "text/plain"},
        )

        assert resp.status_code == 415
        assert resp.json()["error"] == {
            "code": "unsupported_media_type",
            "message": "Use application/json",
            "request_id": resp.headers["X-Request-ID"],
        }


class TestReadUsers:
    def test_list_is_ordered_by_id(self, client: TestClient, owner_headers) -> None:
        _create(client, owner_headers, name="A", email="a@example.com")
        _create(client, owner_headers, name="B", email="b@example.com")

        resp = client.get("/api/users")

        assert resp.status_code == 200
        assert [u["id"] for u in resp.json()["data"]] == [1, 2]

    def test_empty_list(self, client: TestClient) -> None:
        assert client.get("/api/users").json() == {"ok": True, "data": []}

    def test_get_user(self, client: TestClient, owner_headers) -> None:
        _create(client, owner_headers)

        resp = client.get("/api/users/1")

        assert resp.status_code == 200
        assert resp.json()["data"]["email"] == "taro@example.com"

    def test_get_missing_user_is_404(self, client: TestClient) -> None:
        resp = client.get("/api/users/99")

        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "not_found"
        assert resp.json()["error"]["message"] == "User not found."

    def test_invalid_id_is_400(self, client: TestClient) -> None:
        assert client.get("/api/users/abc").status_code == 400
        assert client.get("/api/users/0").status_code == 400


class TestUpdateUser:
    def test_owner_can_update_name(self, client: TestClient, owner_headers) -> None:
        _create(client, owner_headers)

        resp = client.put("/api/users/1", json={"name": "Hanako Yamada"}, headers=owner_headers)

        assert resp.status_code == 200
        assert resp.json()["data"] == {"id": 1, "name": "Hanako Yamada", "email": "taro@example.com"}

    def test_empty_update_is_rejected(self, client: TestClient, owner_headers) -> None:
        _create(client, owner_headers)

        resp = client.put("/api/users/1", json={}, headers=owner_headers)

        assert resp.status_code == 400
        assert "No fields to update" in resp.json()["error"]["message"]

    def test_other_user_cannot_update(self, client: TestClient, owner_headers) -> None:
        _create(client, owner_headers)

        resp = client.put("/api/users/1", json={"name": "X"}, headers={"X-User-Id": "2", "X-User-Role": "USER"})

        assert resp.status_code == 403

    def test_admin_can_update(self, client: TestClient, owner_headers) -> None:
        _create(client, owner_headers)

        resp = client.put(
            "/api/users/1",
            json={"email": "new@example.com"},
            headers={"X-User-Id": "9", "X-User-Role": "admin"},
        )

        assert resp.status_code == 200
        assert resp.json()["data"]["email"] == "new@example.com"

    def test_update_to_taken_email_conflicts(self, client: TestClient, owner_headers) -> None:
        _create(client, owner_headers, name="A", email="a@example.com")
        _create(client, owner_headers, name="B", email="b@example.com")

        resp = client.put("/api/users/2", json={"email": "a@example.com"}, headers=owner_headers)

        assert resp.status_code == 409

    def test_update_missing_user_is_404(self, client: TestClient, owner_headers) -> None:
        resp = client.put("/api/users/5", json={"name": "X"}, headers=owner_headers)

        assert resp.status_code == 404


class TestDeleteUser:
    def test_delete_returns_204_and_removes(self, client: TestClient, owner_headers) -> None:
        _create(client, owner_headers)

        resp = client.delete("/api/users/1", headers=owner_headers)

        assert resp.status_code == 204
        assert resp.content == b""
        assert client.get("/api/users/1").status_code == 404

    def test_delete_missing_user_is_404(self, client: TestClient, owner_headers) -> None:
        assert client.delete("/api/users/3", headers=owner_headers).status_code == 404

    def test_delete_requires_principal(self, client: TestClient, owner_headers) -> None:
        _create(client, owner_headers)

        assert client.delete("/api/users/1").status_code == 403


def test_wrong_method_is_405_with_allow(client: TestClient) -> None:
    resp = client.patch("/api/users/1", json={})

    assert resp.status_code == 405
    assert resp.json()["error"]["code"] == "method_not_allowed"
    assert "GET" in resp.headers["Allow"]
