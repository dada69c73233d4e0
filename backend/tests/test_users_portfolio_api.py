import pytest


@pytest.mark.asyncio
async def test_profile_defaults(client, auth_headers):
    r = await client.get("/api/users/profile", headers=auth_headers)
    assert r.status_code == 200
    user = r.json()["data"]["user"]
    assert user["investmentExperience"] == "beginner"
    assert user["riskTolerance"] == "moderate"
    assert user["investmentGoals"] == []
    assert user["isEmailVerified"] is False


@pytest.mark.asyncio
async def test_profile_update_persists(client, auth_headers):
    update = {
        "firstName": "Janet",
        "riskTolerance": "aggressive",
        "investmentGoals": ["retirement", "education"],
        "monthlyIncome": 150000,
        "dateOfBirth": "1990-05-17",
    }
    r = await client.put("/api/users/profile", json=update, headers=auth_headers)
    assert r.status_code == 200

    user = (await client.get("/api/users/profile", headers=auth_headers)).json()["data"]["user"]
    assert user["firstName"] == "Janet"
    assert user["lastName"] == "Doe"
    assert user["riskTolerance"] == "aggressive"
    assert user["investmentGoals"] == ["retirement", "education"]
    assert user["monthlyIncome"] == 150000
    assert user["dateOfBirth"] == "1990-05-17"


@pytest.mark.asyncio
async def test_profile_update_accepts_snake_case(client, auth_headers):
    r = await client.put("/api/users/profile", json={"phone_number": "+254700000000"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["data"]["user"]["phoneNumber"] == "+254700000000"


@pytest.mark.asyncio
async def test_profile_update_rejects_blank_names(client, auth_headers):
    for update in ({"firstName": "   "}, {"last_name": " "}):
        r = await client.put("/api/users/profile", json=update, headers=auth_headers)
        assert r.status_code == 422

    user = (await client.get("/api/users/profile", headers=auth_headers)).json()["data"]["user"]
    assert (user["firstName"], user["lastName"]) == ("Jane", "Doe")

    trimmed = await client.put("/api/users/profile", json={"firstName": " Janet "}, headers=auth_headers)
    assert trimmed.json()["data"]["user"]["firstName"] == "Janet"


@pytest.mark.asyncio
async def test_profile_update_rejects_unknown_enum(client, auth_headers):
    r = await client.put("/api/users/profile", json={"riskTolerance": "reckless"}, headers=auth_headers)
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_profile_requires_auth(client):
    assert (await client.get("/api/users/profile")).status_code == 401


@pytest.mark.asyncio
async def test_empty_portfolio(client, auth_headers):
    r = await client.get("/api/portfolio", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["data"] == {"totalValue": 0, "totalGain": 0, "totalGainPercent": 0.0, "holdings": []}


@pytest.mark.asyncio
async def test_portfolio_values_holdings(client, auth_headers):
    first = {"symbol": "scom", "quantity": 100, "averagePrice": 15.0, "currentPrice": 16.5}
    second = {"symbol": "EQTY", "quantity": 10, "average_price": 45.0}
    r = await client.post("/api/portfolio/holdings", json=first, headers=auth_headers)
    assert r.status_code == 201
    assert r.json()["data"]["symbol"] == "SCOM"
    assert r.json()["data"]["averagePrice"] == 15.0
    await client.post("/api/portfolio/holdings", json=second, headers=auth_headers)

    data = (await client.get("/api/portfolio", headers=auth_headers)).json()["data"]
    # cost 1500 + 450, value 1650 + 450
    assert data["totalValue"] == pytest.approx(2100.0)
    assert data["totalGain"] == pytest.approx(150.0)
    assert data["totalGainPercent"] == pytest.approx(150.0 / 1950.0 * 100)
    assert {h["symbol"] for h in data["holdings"]} == {"SCOM", "EQTY"}
    assert {"averagePrice", "currentPrice"} <= set(data["holdings"][0])


@pytest.mark.asyncio
async def test_portfolio_is_per_user(client, auth_headers, register):
    await client.post(
        "/api/portfolio/holdings",
        json={"symbol": "KCB", "quantity": 5, "averagePrice": 38.0},
        headers=auth_headers,
    )
    other = await register(client, email="other@example.com")
    r = await client.get("/api/portfolio", headers={"Authorization": f"Bearer {other['token']}"})
    assert r.json()["data"]["holdings"] == []


@pytest.mark.asyncio
async def test_holding_rejects_non_positive_quantity(client, auth_headers):
    r = await client.post(
        "/api/portfolio/holdings",
        json={"symbol": "KCB", "quantity": 0, "averagePrice": 38.0},
        headers=auth_headers,
    )
    assert r.status_code == 422
