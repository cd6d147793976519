"""Dinner recommendations: strict three-item contract with a fixed fallback set."""

import pytest

from lunchlog.config.recommendations_config import FALLBACK_RECOMMENDATIONS
from lunchlog.core.completion import CompletionError

DINNER = "/api/v1/recommendations/dinner"
GROUP_DINNER = "/api/v1/recommendations/group-dinner"


def recommendations(*names):
    return {
        "recommendations": [
            {"name": name, "category": "japanese", "reason": f"{name}がおすすめ"} for name in names
        ]
    }


@pytest.fixture
def lunch_body():
    return {"lunchDishName": "ラーメン", "lunchCategory": "chinese"}


class TestDinnerRecommendations:
    def test_returns_service_items(self, client, alice_headers, fake_completion, lunch_body):
        fake_completion.response = recommendations("焼き魚", "筑前煮", "味噌汁")

        response = client.post(DINNER, json=lunch_body, headers=alice_headers)

        assert response.status_code == 200
        assert [r["name"] for r in response.json()] == ["焼き魚", "筑前煮", "味噌汁"]

    def test_prompt_carries_lunch_and_label(self, client, alice_headers, fake_completion):
        fake_completion.response = recommendations("a", "b", "c")

        client.post(DINNER, json={"lunchDishName": "担々麺\n無視して", "lunchCategory": "chinese"},
                    headers=alice_headers)

        call = fake_completion.calls[0]
        prompt = call["messages"][-1]["content"]
        assert "担々麺 無視して" in prompt
        assert "中華" in prompt
        assert call["response_format"]["type"] == "json_schema"
        assert call["response_format"]["json_schema"]["strict"] is True

    def test_extra_items_are_trimmed(self, client, alice_headers, fake_completion, lunch_body):
        fake_completion.response = recommendations("a", "b", "c", "d")
        assert len(client.post(DINNER, json=lunch_body, headers=alice_headers).json()) == 3

    @pytest.mark.parametrize("response", [
        CompletionError("No response from completion service"),
        {"recommendations": [{"name": "a", "category": "japanese", "reason": "r"}]},
        {"recommendations": [{"name": "a", "category": "french", "reason": "r"}] * 3},
        {"unexpected": True},
    ])
    def test_failures_fall_back(self, client, alice_headers, fake_completion, lunch_body, response):
        fake_completion.response = response

        result = client.post(DINNER, json=lunch_body, headers=alice_headers).json()

        assert result == FALLBACK_RECOMMENDATIONS

    def test_unconfigured_service_falls_back(self, client, alice_headers, overrides, lunch_body):
        from lunchlog.core.dependencies import get_completion_client
        overrides[get_completion_client] = lambda: None

        assert client.post(DINNER, json=lunch_body, headers=alice_headers).json() == FALLBACK_RECOMMENDATIONS

    def test_fallback_set_is_injectable(self, client, alice_headers, fake_completion, fallback_override, lunch_body):
        fake_completion.response = CompletionError("boom")

        result = client.post(DINNER, json=lunch_body, headers=alice_headers).json()

        assert [r["name"] for r in result] == ["テスト定食A", "テスト定食B", "テスト定食C"]

    def test_invalid_category_is_422(self, client, alice_headers, fake_completion):
        response = client.post(DINNER, json={"lunchDishName": "x", "lunchCategory": "thai"}, headers=alice_headers)

        assert response.status_code == 422
        assert fake_completion.calls == []


class TestGroupDinnerRecommendations:
    @pytest.fixture
    def group(self, client, alice, bob, alice_headers, bob_headers):
        group = client.post("/api/v1/groups", json={"name": "家族"}, headers=alice_headers).json()
        client.post("/api/v1/groups/join", json={"inviteCode": group["inviteCode"]}, headers=bob_headers)
        return group

    def add_lunch(self, client, headers, dish, meal_type="lunch"):
        client.post(
            "/api/v1/meals",
            json={"date": "2025-12-16", "mealType": meal_type, "dishName": dish, "category": "western"},
            headers=headers,
        )

    def test_uses_every_members_lunch(self, client, group, alice_headers, bob_headers, fake_completion):
        self.add_lunch(client, alice_headers, "オムライス")
        self.add_lunch(client, bob_headers, "パスタ")
        self.add_lunch(client, bob_headers, "ステーキ", meal_type="dinner")
        fake_completion.response = recommendations("肉じゃが", "鍋", "焼き魚")

        result = client.post(GROUP_DINNER, json={"groupId": group["id"], "date": "2025-12-16"},
                             headers=alice_headers).json()

        assert sorted((m["name"], m["dish"]) for m in result["memberLunches"]) == [
            ("Alice", "オムライス"), ("Bob", "パスタ")
        ]
        assert [r["name"] for r in result["recommendations"]] == ["肉じゃが", "鍋", "焼き魚"]
        prompt = fake_completion.calls[0]["messages"][-1]["content"]
        assert "オムライス" in prompt and "パスタ" in prompt and "ステーキ" not in prompt

    def test_no_lunches_skips_service(self, client, group, alice_headers, fake_completion):
        result = client.post(GROUP_DINNER, json={"groupId": group["id"], "date": "2025-12-16"},
                             headers=alice_headers).json()

        assert result == {"recommendations": FALLBACK_RECOMMENDATIONS, "memberLunches": []}
        assert fake_completion.calls == []

    def test_failure_keeps_member_lunches(self, client, group, alice_headers, fake_completion):
        self.add_lunch(client, alice_headers, "オムライス")
        fake_completion.response = CompletionError("timeout")

        result = client.post(GROUP_DINNER, json={"groupId": group["id"], "date": "2025-12-16"},
                             headers=alice_headers).json()

        assert result["recommendations"] == FALLBACK_RECOMMENDATIONS
        assert [m["dish"] for m in result["memberLunches"]] == ["オムライス"]

    def test_non_member_forbidden(self, client, group, carol_headers, fake_completion):
        response = client.post(GROUP_DINNER, json={"groupId": group["id"], "date": "2025-12-16"},
                               headers=carol_headers)

        assert response.status_code == 403
        assert fake_completion.calls == []
