from fastapi import status


def register(client, email="user@example.com", username="user", password="secret123"):
    return client.post(
        "/users/register",
        json={"username": username, "email": email, "password": password},
    )


def test_register_login_and_me(client):
    register_resp = register(client)
    assert register_resp.status_code == status.HTTP_201_CREATED
    created = register_resp.json()
    assert set(created) == {"id", "username", "email", "created_at"}

    login_resp = client.post(
        "/users/login", json={"email": "user@example.com", "password": "secret123"}
    )
    assert login_resp.status_code == status.HTTP_200_OK
    data = login_resp.json()
    assert data["user"]["id"] == created["id"]

    me_resp = client.get(
        "/users/me", headers={"Authorization": f"Bearer {data['token']}"}
    )
    assert me_resp.status_code == status.HTTP_200_OK
    assert me_resp.json()["email"] == "user@example.com"


def test_register_validation_lists_all_violations(client):
    resp = register(client, email="bad", username="ab", password="1")
    assert resp.status_code == 422
    assert len(resp.json()["detail"]) == 3


def test_register_duplicate_email_conflicts(client):
    assert register(client).status_code == status.HTTP_201_CREATED
    resp = register(client, username="another", password="otherpass")
    assert resp.status_code == status.HTTP_409_CONFLICT
    assert resp.json()["detail"] == "email already exists"


def test_failed_logins_look_identical(client):
    register(client)
    wrong_password = client.post(
        "/users/login", json={"email": "user@example.com", "password": "nope123"}
    )
    unknown_email = client.post(
        "/users/login", json={"email": "ghost@example.com", "password": "secret123"}
    )
    assert wrong_password.status_code == status.HTTP_401_UNAUTHORIZED
    assert wrong_password.json() == unknown_email.json()
    assert unknown_email.status_code == status.HTTP_401_UNAUTHORIZED


def test_missing_and_invalid_tokens_are_rejected(client):
    missing = client.get("/users/me")
    garbage = client.get("/users/me", headers={"Authorization": "Bearer garbage"})
    assert missing.status_code == status.HTTP_401_UNAUTHORIZED
    assert garbage.status_code == status.HTTP_401_UNAUTHORIZED
    assert missing.json() == garbage.json()
    assert garbage.headers["www-authenticate"] == "Bearer"


def test_nul_password_login_looks_like_any_failed_login(client):
    register(client)
    known_email = client.post(
        "/users/login", json={"email": "user@example.com", "password": "abc\u0000def"}
    )
    unknown_email = client.post(
        "/users/login", json={"email": "ghost@example.com", "password": "abc\u0000def"}
    )
    assert known_email.status_code == status.HTTP_401_UNAUTHORIZED
    assert unknown_email.status_code == status.HTTP_401_UNAUTHORIZED
    assert known_email.json() == unknown_email.json()


def test_register_with_nul_password_is_a_validation_error(client):
    resp = register(client, password="abc\u0000defgh")
    assert resp.status_code == 422
    assert resp.json()["detail"] == ["password: must not contain NUL characters"]
