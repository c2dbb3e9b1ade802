async def _login(client, user) -> dict:
    response = await client.post("/auth/token", data={
        "username": user.email,
        "password": "TestPassword123!"
    })
    return response.json()["data"]


async def test_refresh_token_success(client, user):
    tokens = await _login(client, user)

    response = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 200
    new_tokens = response.json()["data"]
    assert new_tokens["refresh_token"] != tokens["refresh_token"]
    assert new_tokens["token_type"] == "bearer"


async def test_refresh_token_rotation(client, user):
    """The old refresh token is revoked once it has been exchanged."""
    tokens = await _login(client, user)
    await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

    response = await client.post("/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert response.status_code == 401
    assert response.json()["message"] == "Token not found or revoked"


async def test_refresh_with_garbage(client):
    response = await client.post("/auth/refresh", json={"refresh_token": "not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["success"] is False


async def test_refresh_with_empty_token(client):
    response = await client.post("/auth/refresh", json={"refresh_token": "   "})

    assert response.status_code == 400
