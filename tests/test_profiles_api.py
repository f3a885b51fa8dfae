"""
API tests for /api/v1/users/{user_id}/profile (in-memory SQLite, see conftest).
"""

ANSWERS = dict(
    gender="male",
    age=30,
    height_cm=180,
    weight_kg=80,
    activity_level="active",
    goal="fat_loss",
    preferred_diet="non_veg",
    health_notes="old knee injury",
    workout_days_per_week=4,
)


def _url(uid: str, suffix: str = "") -> str:
    return f"/api/v1/users/{uid}/profile{suffix}"


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_create_profile_stores_computed_targets(client):
    r = client.post(_url("u-1"), json=ANSWERS)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["user_id"] == "u-1"
    assert (body["bmr"], body["tdee"], body["calorie_goal"]) == (1780, 2759, 2259)
    assert (body["protein_grams"], body["carbs_grams"], body["fat_grams"]) == (226, 169, 75)
    assert body["health_notes"] == "old knee injury"
    assert body["created_at"] is not None

    fetched = client.get(_url("u-1"))
    assert fetched.status_code == 200
    assert fetched.json()["calorie_goal"] == 2259


def test_targets_endpoint_returns_only_budget(client):
    client.post(_url("u-2"), json=ANSWERS)
    r = client.get(_url("u-2", "/targets"))
    assert r.status_code == 200
    assert r.json() == {
        "calorie_goal": 2259,
        "protein_grams": 226,
        "carbs_grams": 169,
        "fat_grams": 75,
    }


def test_second_submission_conflicts(client):
    assert client.post(_url("u-3"), json=ANSWERS).status_code == 201
    r = client.post(_url("u-3"), json={**ANSWERS, "goal": "maintenance"})
    assert r.status_code == 409
    assert client.get(_url("u-3")).json()["goal"] == "fat_loss"


def test_missing_answer_is_rejected(client):
    answers = {k: v for k, v in ANSWERS.items() if k != "goal"}
    r = client.post(_url("u-4"), json=answers)
    assert r.status_code == 422
    detail = r.json()["detail"]
    assert detail["message"] == "Missing required onboarding data"
    assert detail["missing"] == ["goal"]
    assert client.get(_url("u-4")).status_code == 404


def test_out_of_range_answer_is_rejected(client):
    r = client.post(_url("u-5"), json={**ANSWERS, "age": 12, "workout_days_per_week": 0})
    assert r.status_code == 422
    assert r.json()["detail"]["fields"] == ["age", "workout_days_per_week"]


def test_unknown_enum_value_is_rejected(client):
    r = client.post(_url("u-6"), json={**ANSWERS, "activity_level": "extreme"})
    assert r.status_code == 422


def test_unknown_user_is_404(client):
    assert client.get(_url("nobody")).status_code == 404
    assert client.get(_url("nobody", "/targets")).status_code == 404
    assert client.delete(_url("nobody")).status_code == 404


def test_delete_profile(client):
    client.post(_url("u-7"), json=ANSWERS)
    assert client.delete(_url("u-7")).status_code == 204
    assert client.get(_url("u-7")).status_code == 404
    # onboarding can run again once the profile is gone
    assert client.post(_url("u-7"), json=ANSWERS).status_code == 201


def test_cors_allows_browser_origin(client):
    r = client.get("/health", headers={"Origin": "https://app.example"})
    assert r.headers["access-control-allow-origin"] == "*"
