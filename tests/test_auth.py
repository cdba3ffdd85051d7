from datetime import datetime, timedelta, timezone

import jwt

from postboard.config import JWT_SECRET, JWT_ALGORITHM


def register(client, email="carol@example.com", password="s3cret!"):
    return client.post(
        "/api/users/register",
        json={"name": "Carol", "email": email, "password": password},
    )


def test_register_and_login(client):
    response = register(client)
    assert response.status_code == 200
    user = response.json()
    assert user["email"] == "carol@example.com"
    assert "passwordHash" not in user

    response = client.post(
        "/api/users/login", json={"email": "carol@example.com", "password": "s3cret!"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["id"] == user["id"]

    response = client.get(
        "/api/users/current", headers={"Authorization": f"Bearer {body['access_token']}"}
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Carol"


def test_register_duplicate_email(client):
    register(client)

    response = register(client)

    assert response.status_code == 400
    assert response.json() == {"email": "Email already exists"}


def test_login_wrong_password(client):
    register(client)

    response = client.post(
        "/api/users/login", json={"email": "carol@example.com", "password": "wrong"}
    )

    assert response.status_code == 401


def test_login_unknown_email(client):
    response = client.post(
        "/api/users/login", json={"email": "nobody@example.com", "password": "x"}
    )

    assert response.status_code == 401


def test_current_requires_token(client):
    assert client.get("/api/users/current").status_code == 401


def test_expired_token_rejected(client, alice):
    token = jwt.encode(
        {"sub": str(alice["_id"]), "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )

    response = client.get("/api/users/current", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_token_for_unknown_user_rejected(client):
    token = jwt.encode(
        {"sub": "64b0000000000000000000ff", "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        JWT_SECRET,
        algorithm=JWT_ALGORITHM,
    )

    response = client.get("/api/users/current", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_ping(client):
    response = client.get("/api/ping")

    assert response.status_code == 200
    assert response.json()["pingResult"] == "Ping is successful!"
    assert datetime.fromisoformat(response.json()["serverTime"])


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
