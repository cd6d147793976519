"""Favorite meals: create, list by usage, use as a meal record, delete."""

import pytest

from lunchlog.modules.favorites.service import FavoriteService

FAVORITES = "/api/v1/favorites"


def create_favorite(client, headers, dish="肉じゃが", category="japanese", **extra):
    body = {"dishName": dish, "category": category}
    body.update(extra)
    return client.post(FAVORITES, json=body, headers=headers)


@pytest.fixture
def favorite_id(client, alice, alice_headers):
    response = create_favorite(client, alice_headers, note="母の味", imageUrl="https://cdn.example.test/a.jpg")
    assert response.status_code == 201
    return response.json()["id"]


def use(client, headers, favorite_id, date="2025-12-16", meal_type="dinner"):
    return client.post(f"{FAVORITES}/{favorite_id}/use", json={"date": date, "mealType": meal_type}, headers=headers)


class TestFavorites:
    def test_list_orders_by_usage(self, client, alice_headers, favorite_id):
        other_id = create_favorite(client, alice_headers, dish="カレー", category="western").json()["id"]
        use(client, alice_headers, other_id)

        favorites = client.get(FAVORITES, headers=alice_headers).json()

        assert [f["id"] for f in favorites] == [other_id, favorite_id]
        assert favorites[0]["usageCount"] == 1

    def test_list_ties_newest_first(self, client, alice_headers, favorite_id):
        other_id = create_favorite(client, alice_headers, dish="カレー", category="western").json()["id"]

        favorites = client.get(FAVORITES, headers=alice_headers).json()

        assert [f["id"] for f in favorites] == [other_id, favorite_id]

    def test_use_creates_meal_and_counts(self, client, alice, alice_headers, favorite_id, fake_db):
        result = use(client, alice_headers, favorite_id).json()

        assert result["usageCount"] == 1
        meal = next(r for r in fake_db.rows("meal_records") if r["id"] == result["mealId"])
        assert meal["dish_name"] == "肉じゃが"
        assert meal["note"] == "母の味"
        assert meal["image_url"] == "https://cdn.example.test/a.jpg"
        assert meal["meal_type"] == "dinner"
        assert meal["user_id"] == alice["id"]
        favorite = fake_db.rows("favorite_meals")[0]
        assert favorite["usage_count"] == 1
        assert favorite["last_used_at"] is not None

        assert use(client, alice_headers, favorite_id, date="2025-12-17").json()["usageCount"] == 2

    def test_use_rolls_back_meal_when_count_fails(self, client, alice_headers, favorite_id, fake_db):
        fake_db.fail("favorite_meals", "update")

        response = use(client, alice_headers, favorite_id)

        assert response.status_code == 500
        assert fake_db.rows("meal_records") == []

    def test_concurrent_use_keeps_both_increments(self, client, alice_headers, favorite_id, fake_db, monkeypatch):
        original = FavoriteService.get_favorite
        reads = []

        def read_then_race(service, fav_id, user_id):
            favorite = original(service, fav_id, user_id)
            if not reads:
                # another use lands between the read and the write
                fake_db.rows("favorite_meals")[0]["usage_count"] += 1
            reads.append(fav_id)
            return favorite

        monkeypatch.setattr(FavoriteService, "get_favorite", read_then_race)

        result = use(client, alice_headers, favorite_id).json()

        assert result["usageCount"] == 2
        assert fake_db.rows("favorite_meals")[0]["usage_count"] == 2

    def test_use_gives_up_after_repeated_conflicts(self, client, alice_headers, favorite_id, fake_db, monkeypatch):
        original = FavoriteService.get_favorite

        def always_race(service, fav_id, user_id):
            favorite = original(service, fav_id, user_id)
            fake_db.rows("favorite_meals")[0]["usage_count"] += 1
            return favorite

        monkeypatch.setattr(FavoriteService, "get_favorite", always_race)

        response = use(client, alice_headers, favorite_id)

        assert response.status_code == 500
        assert fake_db.rows("meal_records") == []

    def test_use_unknown_or_foreign_is_404(self, client, bob, bob_headers, alice_headers, favorite_id, fake_db):
        assert use(client, alice_headers, 999).status_code == 404
        assert use(client, bob_headers, favorite_id).status_code == 404
        assert fake_db.rows("meal_records") == []

    def test_delete_is_owner_scoped(self, client, bob, alice_headers, bob_headers, favorite_id, fake_db):
        assert client.delete(f"{FAVORITES}/{favorite_id}", headers=bob_headers).json() == {"success": True}
        assert len(fake_db.rows("favorite_meals")) == 1

        assert client.delete(f"{FAVORITES}/{favorite_id}", headers=alice_headers).json() == {"success": True}
        assert fake_db.rows("favorite_meals") == []

    def test_validation(self, client, alice_headers):
        assert create_favorite(client, alice_headers, dish="").status_code == 422
        assert create_favorite(client, alice_headers, category="fusion").status_code == 422
        assert create_favorite(client, alice_headers, note="x" * 501).status_code == 422
