"""
API tests for /api/v1/users/{user_id}/nutrition-logs (in-memory SQLite, see conftest).
"""

PROFILE_ANSWERS = dict(
    gender="male",
    age=30,
    height_cm=180,
    weight_kg=80,
    activity_level="active",
    goal="fat_loss",
    preferred_diet="non_veg",
    workout_days_per_week=4,
)

DAY = "2026-10-19"

CHICKEN = dict(
    date=DAY,
    meal_type="lunch",
    time="12:30",
    food=dict(
        name="Chicken breast",
        calories_per_100g=165,
        protein_per_100g=31,
        carbs_per_100g=0,
        fat_per_100g=3.6,
        grams=150,
    ),
)

OATS = dict(
    date=DAY,
    meal_type="breakfast",
    time="08:00",
    food_name="Oats with milk",
    calories=300,
    protein=10.4,
    carbs=54.5,
    fat=5,
)


def _url(uid: str, suffix: str = "") -> str:
    return f"/api/v1/users/{uid}/nutrition-logs{suffix}"


def test_food_portion_is_scaled_on_insert(client):
    r = client.post(_url("u-1"), json=CHICKEN)
    assert r.status_code == 201, r.text
    body = r.json()
    assert (body["calories"], body["protein"], body["carbs"], body["fat"]) == (248, 47, 0, 5)
    assert body["portion"] == "150g"
    assert body["food_name"] == "Chicken breast"


def test_manual_entry_rounds_macros(client):
    r = client.post(_url("u-1"), json=OATS)
    assert r.status_code == 201, r.text
    body = r.json()
    assert (body["calories"], body["protein"], body["carbs"], body["fat"]) == (300, 10, 55, 5)
    assert body["portion"] == "1 serving"


def test_manual_entry_needs_calories(client):
    r = client.post(_url("u-1"), json={k: v for k, v in OATS.items() if k != "calories"})
    assert r.status_code == 422


def test_bad_time_is_rejected(client):
    assert client.post(_url("u-1"), json={**OATS, "time": "8am"}).status_code == 422


def test_list_is_one_day_ordered_by_time(client):
    client.post(_url("u-2"), json=CHICKEN)
    client.post(_url("u-2"), json=OATS)
    client.post(_url("u-2"), json={**OATS, "date": "2026-10-20"})
    client.post(_url("someone-else"), json=OATS)

    r = client.get(_url("u-2"), params={"date": DAY})
    assert r.status_code == 200
    assert [e["food_name"] for e in r.json()] == ["Oats with milk", "Chicken breast"]


def test_progress_against_profile_targets(client):
    assert client.post("/api/v1/users/u-3/profile", json=PROFILE_ANSWERS).status_code == 201
    client.post(_url("u-3"), json=CHICKEN)
    client.post(_url("u-3"), json=OATS)

    r = client.get(_url("u-3", "/progress"), params={"date": DAY})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["totals"] == {"calories": 548, "protein": 57, "carbs": 55, "fat": 10}
    assert body["targets"] == {"calories": 2259, "protein": 226, "carbs": 169, "fat": 75}
    assert body["percent"] == {"calories": 24, "protein": 25, "carbs": 33, "fat": 13}


def test_progress_of_empty_day_is_zero(client):
    client.post("/api/v1/users/u-4/profile", json=PROFILE_ANSWERS)
    body = client.get(_url("u-4", "/progress"), params={"date": DAY}).json()
    assert body["totals"]["calories"] == 0
    assert body["percent"]["calories"] == 0


def test_progress_without_profile_is_404(client):
    client.post(_url("u-5"), json=OATS)
    assert client.get(_url("u-5", "/progress"), params={"date": DAY}).status_code == 404


def test_delete_log(client):
    log_id = client.post(_url("u-6"), json=OATS).json()["id"]
    # another user cannot delete it
    assert client.delete(_url("intruder", f"/{log_id}")).status_code == 404
    assert client.delete(_url("u-6", f"/{log_id}")).status_code == 204
    assert client.get(_url("u-6"), params={"date": DAY}).json() == []
    assert client.delete(_url("u-6", f"/{log_id}")).status_code == 404
