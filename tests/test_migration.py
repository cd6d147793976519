"""Guest data migration and login sync: dedup by (user, date, mealType), per-record status."""

import pytest

MIGRATE = "/api/v1/migration/guest-data"
SYNC = "/api/v1/meals/sync"


def local_meal(local_id, date="2025-12-16", meal_type="lunch", dish="親子丼", category="japanese"):
    return {
        "id": local_id,
        "date": date,
        "mealType": meal_type,
        "dishName": dish,
        "category": category,
        "createdAt": "2025-12-16T03:00:00.000Z",
    }


@pytest.mark.parametrize("path", [MIGRATE, SYNC])
class TestBothPaths:
    """Both endpoints share one policy."""

    @staticmethod
    def post(client, path, headers, meals):
        body = {"meals": meals} if path == MIGRATE else meals
        return client.post(path, json=body, headers=headers)

    def test_inserts_new_records(self, client, alice, alice_headers, fake_db, path):
        result = self.post(client, path, alice_headers, [
            local_meal("1"),
            local_meal("2", meal_type="dinner", dish="カレー", category="western"),
        ]).json()

        assert result["migratedCount"] == 2
        assert result["skippedCount"] == 0
        assert [r["status"] for r in result["results"]] == ["inserted", "inserted"]
        assert [r["localId"] for r in result["results"]] == ["1", "2"]
        assert all(r["user_id"] == alice["id"] for r in fake_db.rows("meal_records"))

    def test_skips_existing_date_and_meal_type(self, client, alice, alice_headers, fake_db, path):
        client.post(
            "/api/v1/meals",
            json={"date": "2025-12-16", "mealType": "lunch", "dishName": "うどん", "category": "japanese"},
            headers=alice_headers,
        )

        result = self.post(client, path, alice_headers, [local_meal("1")]).json()

        assert result["skippedCount"] == 1
        assert result["results"][0]["status"] == "skipped"
        assert result["results"][0]["success"] is True
        assert [r["dish_name"] for r in fake_db.rows("meal_records")] == ["うどん"]

    def test_duplicates_within_batch_are_skipped(self, client, alice, alice_headers, fake_db, path):
        result = self.post(client, path, alice_headers, [local_meal("1"), local_meal("2", dish="カツ丼")]).json()

        assert [r["status"] for r in result["results"]] == ["inserted", "skipped"]
        assert len(fake_db.rows("meal_records")) == 1

    def test_rerun_is_idempotent(self, client, alice, alice_headers, fake_db, path):
        meals = [local_meal("1"), local_meal("2", date="2025-12-17")]
        self.post(client, path, alice_headers, meals)

        second = self.post(client, path, alice_headers, meals).json()

        assert second["migratedCount"] == 0
        assert second["skippedCount"] == 2
        assert len(fake_db.rows("meal_records")) == 2

    def test_store_failure_marks_failed_without_aborting(self, client, alice, alice_headers, fake_db, path):
        fake_db.fail("meal_records", "insert")

        result = self.post(client, path, alice_headers, [local_meal("1"), local_meal("2", date="2025-12-17")]).json()

        assert result["failedCount"] == 2
        assert all(r["success"] is False and r["error"] for r in result["results"])

    def test_empty_batch(self, client, alice, alice_headers, path):
        result = self.post(client, path, alice_headers, []).json()
        assert result == {"migratedCount": 0, "skippedCount": 0, "failedCount": 0, "results": []}

    def test_invalid_record_rejected(self, client, alice, alice_headers, fake_db, path):
        response = self.post(client, path, alice_headers, [local_meal("1", date="16-12-2025")])

        assert response.status_code == 422
        assert fake_db.rows("meal_records") == []


def test_no_database_is_503(client, without_database):
    response = client.post(MIGRATE, json={"meals": [local_meal("1")]})
    assert response.status_code == 503
