from jose import jwt

from app.services.user import user_service


def test_register_login_verify_refresh_flow(client, register, login):
    response = client.post("/api/users", json={"email": "alice@example.com", "password": "secret123"})
    assert response.status_code == 201
    assert response.json() == {"message": "User created successfully"}

    tokens = login("alice@example.com")
    assert set(tokens) == {"token", "refresh_token"}

    verify = client.post("/api/token/verify", json={"token": tokens["token"]})
    assert verify.status_code == 200
    assert verify.json() == {"valid": True, "email": "alice@example.com"}

    refreshed = client.post("/api/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200
    new_tokens = refreshed.json()
    assert new_tokens["token"] != tokens["token"]
    assert new_tokens["refresh_token"] != tokens["refresh_token"]

    items = client.get("/api/items", headers={"Authorization": f"Bearer {new_tokens['token']}"})
    assert items.status_code == 200
    assert items.json() == {"items": []}


def test_register_duplicate_is_conflict(client, register):
    register("alice@example.com")

    response = client.post("/api/users", json={"email": "alice@example.com", "password": "another1"})

    assert response.status_code == 409
    assert response.json() == {"error": "User already exists"}


def test_register_validates_input(client):
    bad_email = client.post("/api/users", json={"email": "not-an-email", "password": "secret123"})
    short_password = client.post("/api/users", json={"email": "alice@example.com", "password": "12345"})
    missing = client.post("/api/users", json={"email": "alice@example.com"})

    for response in (bad_email, short_password, missing):
        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid input")


def test_malformed_json_is_bad_request(client):
    response = client.post(
        "/api/token",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid input")


def test_login_failure_is_identical_for_unknown_user_and_wrong_password(client, register):
    register("alice@example.com")

    wrong_password = client.post("/api/token", json={"email": "alice@example.com", "password": "wrong-pass"})
    unknown_user = client.post("/api/token", json={"email": "bob@example.com", "password": "secret123"})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {"error": "Invalid credentials"}


def test_refresh_token_cannot_be_used_as_access_token(client, register, login):
    register("alice@example.com")
    tokens = login("alice@example.com")

    verify = client.post("/api/token/verify", json={"token": tokens["refresh_token"]})
    protected = client.get("/api/items", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})

    assert verify.status_code == 401
    assert verify.json() == {"error": "Invalid token"}
    assert protected.status_code == 401
    assert protected.json() == {"error": "Invalid token"}


def test_access_token_cannot_be_used_to_refresh(client, register, login):
    register("alice@example.com")
    tokens = login("alice@example.com")

    response = client.post("/api/refresh", json={"refresh_token": tokens["token"]})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid refresh token"}


def test_refresh_fails_after_user_is_deleted(client, register, login, session_factory):
    register("alice@example.com")
    tokens = login("alice@example.com")
    with session_factory() as session:
        user_service.delete_user(session, "alice@example.com")

    response = client.post("/api/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 401
    assert response.json() == {"error": "User not found"}


def test_request_gate_rejections(client):
    missing = client.get("/api/items")
    wrong_scheme = client.get("/api/items", headers={"Authorization": "Token abc"})
    garbage = client.get("/api/items", headers={"Authorization": "Bearer abc.def.ghi"})

    assert missing.status_code == wrong_scheme.status_code == garbage.status_code == 401
    assert missing.json() == {"error": "Authorization header required"}
    assert wrong_scheme.json() == {"error": "Invalid authorization header format"}
    assert garbage.json() == {"error": "Invalid token"}
    assert missing.headers["WWW-Authenticate"] == "Bearer"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert "error" in response.json()


def test_out_of_range_expiry_is_rejected_not_crashing(client, auth_headers):
    auth_headers("alice@example.com")
    for exp in (10**20, -10**15):
        token = jwt.encode({"email": "alice@example.com", "exp": exp}, "some-other-key", algorithm="HS256")

        verify = client.post("/api/token/verify", json={"token": token})
        protected = client.get("/api/items", headers={"Authorization": f"Bearer {token}"})

        assert verify.status_code == protected.status_code == 401
        assert protected.json() == {"error": "Invalid token"}
