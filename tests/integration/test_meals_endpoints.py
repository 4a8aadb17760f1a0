"""
Integration tests for the /api/meals/* endpoints against in-memory SQLite.

Covered:
- POST /meals: success, camelCase response, invalid bodies (400), no token (401)
- GET /meals, GET /meals/by-date
- GET/PUT/PATCH/DELETE /meals/{id}, including someone else's meal (404)
- DailyProgress follows every write
"""

import pytest

from tests.conftest import register

pytestmark = pytest.mark.integration

OATMEAL = {
    "name": "Oatmeal",
    "calories": 300,
    "protein": 10,
    "carbs": 50,
    "fat": 5,
    "date": "2024-01-01",
    "mealType": "breakfast",
}


def totals(progress: dict):
    return (progress["totalCalories"], progress["totalProtein"], progress["totalCarbs"], progress["totalFat"])


async def create_meal(client, headers, **overrides) -> dict:
    body = dict(OATMEAL, **overrides)
    response = await client.post("/api/meals", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


# ---------------------------------------------------------------------------
# POST /meals
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_meal_returns_meal_and_updates_progress(db_client):
    headers = await register(db_client)

    meal = await create_meal(db_client, headers)

    assert meal["name"] == "Oatmeal"
    assert meal["mealType"] == "breakfast"
    assert meal["date"] == "2024-01-01"
    assert meal["isVegetarian"] is False
    assert "userId" in meal

    progress = (await db_client.get("/api/progress/date/2024-01-01", headers=headers)).json()
    assert totals(progress) == (300, 10, 50, 5)
    assert [m["id"] for m in progress["meals"]] == [meal["id"]]


@pytest.mark.asyncio
async def test_create_meal_with_trailing_slash(db_client):
    headers = await register(db_client)
    response = await db_client.post("/api/meals/", json=OATMEAL, headers=headers)
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_create_meal_datetime_is_truncated_to_day(db_client):
    headers = await register(db_client)
    meal = await create_meal(db_client, headers, date="2024-01-01T19:45:00")
    assert meal["date"] == "2024-01-01"


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"calories": -1},
    {"fat": "lots"},
    {"mealType": "brunch"},
    {"date": "someday"},
    {"name": "   "},
])
async def test_create_meal_invalid_body_returns_400(db_client, overrides):
    headers = await register(db_client)

    response = await db_client.post("/api/meals", json=dict(OATMEAL, **overrides), headers=headers)

    assert response.status_code == 400
    listed = (await db_client.get("/api/meals", headers=headers)).json()
    assert listed == []


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["name", "calories", "protein", "carbs", "fat", "date"])
async def test_create_meal_missing_field_returns_400(db_client, missing):
    headers = await register(db_client)
    body = {k: v for k, v in OATMEAL.items() if k != missing}

    response = await db_client.post("/api/meals", json=body, headers=headers)

    assert response.status_code == 400
    assert missing in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_meal_without_token_returns_401(db_client):
    response = await db_client.post("/api/meals", json=OATMEAL)
    assert response.status_code == 401


# ---------------------------------------------------------------------------
# GET /meals, /meals/by-date, /meals/meal-types
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_meals_newest_day_first_and_only_own(db_client):
    headers = await register(db_client)
    other = await register(db_client, email="other@example.com")
    first = await create_meal(db_client, headers, date="2024-01-01")
    second = await create_meal(db_client, headers, date="2024-01-03")
    await create_meal(db_client, other, date="2024-01-02")

    response = await db_client.get("/api/meals", headers=headers)

    assert response.status_code == 200
    assert [m["id"] for m in response.json()] == [second["id"], first["id"]]


@pytest.mark.asyncio
async def test_list_meals_by_date(db_client):
    headers = await register(db_client)
    breakfast = await create_meal(db_client, headers)
    lunch = await create_meal(db_client, headers, name="Soup", mealType="lunch")
    await create_meal(db_client, headers, date="2024-01-02")

    response = await db_client.get("/api/meals/by-date", params={"date": "2024-01-01"}, headers=headers)

    assert response.status_code == 200
    assert [m["id"] for m in response.json()] == [breakfast["id"], lunch["id"]]


@pytest.mark.asyncio
async def test_list_meals_by_date_invalid_or_missing_date_returns_400(db_client):
    headers = await register(db_client)

    bad = await db_client.get("/api/meals/by-date", params={"date": "2024-02-30"}, headers=headers)
    missing = await db_client.get("/api/meals/by-date", headers=headers)

    assert bad.status_code == 400
    assert missing.status_code == 400


@pytest.mark.asyncio
async def test_meal_types(db_client):
    response = await db_client.get("/api/meals/meal-types")
    assert response.json() == ["breakfast", "lunch", "dinner", "snack"]


# ---------------------------------------------------------------------------
# /meals/{id}
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_own_meal(db_client):
    headers = await register(db_client)
    meal = await create_meal(db_client, headers)

    response = await db_client.get(f"/api/meals/{meal['id']}", headers=headers)

    assert response.status_code == 200
    assert response.json()["name"] == "Oatmeal"


@pytest.mark.asyncio
async def test_someone_elses_meal_is_not_found(db_client):
    owner = await register(db_client)
    intruder = await register(db_client, email="intruder@example.com")
    meal = await create_meal(db_client, owner)
    url = f"/api/meals/{meal['id']}"

    assert (await db_client.get(url, headers=intruder)).status_code == 404
    assert (await db_client.put(url, json={"calories": 1}, headers=intruder)).status_code == 404
    assert (await db_client.delete(url, headers=intruder)).status_code == 404

    progress = (await db_client.get("/api/progress/date/2024-01-01", headers=owner)).json()
    assert totals(progress) == (300, 10, 50, 5)
    assert (await db_client.get(url, headers=owner)).json()["calories"] == 300


@pytest.mark.asyncio
async def test_missing_meal_is_not_found(db_client):
    headers = await register(db_client)
    response = await db_client.get("/api/meals/999", headers=headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "Meal not found"


@pytest.mark.asyncio
async def test_update_meal_moves_progress_by_difference(db_client):
    headers = await register(db_client)
    meal = await create_meal(db_client, headers)
    await create_meal(db_client, headers, name="Salad", calories=200, protein=5, carbs=20, fat=8)

    response = await db_client.put(
        f"/api/meals/{meal['id']}", json={"calories": 250, "fat": 7}, headers=headers
    )

    assert response.status_code == 200
    assert response.json()["calories"] == 250
    assert response.json()["name"] == "Oatmeal"
    progress = (await db_client.get("/api/progress/date/2024-01-01", headers=headers)).json()
    assert totals(progress) == (450, 15, 70, 15)


@pytest.mark.asyncio
async def test_patch_meal_type_only(db_client):
    headers = await register(db_client)
    meal = await create_meal(db_client, headers)

    response = await db_client.patch(
        f"/api/meals/{meal['id']}", json={"mealType": "dinner"}, headers=headers
    )

    assert response.status_code == 200
    assert response.json()["mealType"] == "dinner"
    progress = (await db_client.get("/api/progress/date/2024-01-01", headers=headers)).json()
    assert totals(progress) == (300, 10, 50, 5)


@pytest.mark.asyncio
async def test_update_meal_date_moves_it_between_days(db_client):
    headers = await register(db_client)
    meal = await create_meal(db_client, headers)

    response = await db_client.put(
        f"/api/meals/{meal['id']}", json={"date": "2024-01-05"}, headers=headers
    )

    assert response.status_code == 200
    old_day = (await db_client.get("/api/progress/date/2024-01-01", headers=headers)).json()
    new_day = (await db_client.get("/api/progress/date/2024-01-05", headers=headers)).json()
    assert totals(old_day) == (0, 0, 0, 0)
    assert old_day["meals"] == []
    assert totals(new_day) == (300, 10, 50, 5)
    assert [m["id"] for m in new_day["meals"]] == [meal["id"]]


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"calories": -5}, {"calories": None}, {"date": "not-a-date"}])
async def test_update_meal_invalid_body_returns_400(db_client, body):
    headers = await register(db_client)
    meal = await create_meal(db_client, headers)

    response = await db_client.put(f"/api/meals/{meal['id']}", json=body, headers=headers)

    assert response.status_code == 400
    progress = (await db_client.get("/api/progress/date/2024-01-01", headers=headers)).json()
    assert totals(progress) == (300, 10, 50, 5)


@pytest.mark.asyncio
async def test_delete_meal(db_client):
    headers = await register(db_client)
    meal = await create_meal(db_client, headers)

    response = await db_client.delete(f"/api/meals/{meal['id']}", headers=headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Meal deleted successfully"
    assert (await db_client.get(f"/api/meals/{meal['id']}", headers=headers)).status_code == 404
    progress = (await db_client.get("/api/progress/date/2024-01-01", headers=headers)).json()
    assert totals(progress) == (0, 0, 0, 0)
    assert progress["meals"] == []


# ---------------------------------------------------------------------------
# Non-finite and fractional macros
# ---------------------------------------------------------------------------

RAW_INFINITE_MEAL = (
    '{"name": "Oatmeal", "calories": 1e999, "protein": 10, "carbs": 50, "fat": 5,'
    ' "date": "2024-01-01", "mealType": "breakfast"}'
)


@pytest.mark.asyncio
async def test_create_meal_with_overflowing_number_returns_400(db_client):
    headers = await register(db_client)

    response = await db_client.post(
        "/api/meals",
        content=RAW_INFINITE_MEAL,
        headers={**headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert "calories" in response.json()["detail"]
    assert (await db_client.get("/api/meals", headers=headers)).json() == []
    progress = (await db_client.get("/api/progress/date/2024-01-01", headers=headers)).json()
    assert progress["id"] is None


@pytest.mark.asyncio
async def test_update_meal_with_overflowing_number_returns_400(db_client):
    headers = await register(db_client)
    meal = await create_meal(db_client, headers)

    response = await db_client.put(
        f"/api/meals/{meal['id']}",
        content='{"fat": 1e999}',
        headers={**headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    progress = (await db_client.get("/api/progress/date/2024-01-01", headers=headers)).json()
    assert totals(progress) == (300, 10, 50, 5)
    assert (await db_client.delete(f"/api/meals/{meal['id']}", headers=headers)).status_code == 200


@pytest.mark.asyncio
async def test_fractional_macros_keep_totals_equal_to_remaining_meals(db_client):
    headers = await register(db_client)
    first = await create_meal(db_client, headers, calories=0.1, protein=0.1, carbs=0.1, fat=0.1)
    second = await create_meal(db_client, headers, calories=0.2, protein=0.7, carbs=1.1, fat=2.2)

    await db_client.delete(f"/api/meals/{first['id']}", headers=headers)

    progress = (await db_client.get("/api/progress/date/2024-01-01", headers=headers)).json()
    assert totals(progress) == (0.2, 0.7, 1.1, 2.2)
    assert [m["id"] for m in progress["meals"]] == [second["id"]]
