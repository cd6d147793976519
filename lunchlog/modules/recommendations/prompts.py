from typing import List

from lunchlog.core.enums import MealCategory, category_label
from lunchlog.core.prompts import CATEGORY_ENUM, clean_text, describe_dish
from lunchlog.modules.groups.schemas import GroupMealResponse

SYSTEM_PROMPT = "あなたは日本の家庭料理に詳しい栄養アドバイザーです。必ずJSON形式で回答してください。"

RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "recommendations": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "category": {"type": "string", "enum": CATEGORY_ENUM},
                    "reason": {"type": "string"},
                },
                "required": ["name", "category", "reason"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["recommendations"],
    "additionalProperties": False,
}

_ANSWER_FORMAT = """必ず以下のJSON形式で回答してください:
{
  "recommendations": [
    {
      "name": "料理名",
      "category": "japanese/western/chinese/other",
      "reason": "おすすめの理由（50文字以内）"
    }
  ]
}"""


def dinner_prompt(lunch_dish_name: str, lunch_category: MealCategory, count: int) -> str:
    return f"""あなたは栄養バランスを考慮した食事アドバイザーです。
ユーザーの今日のランチ情報に基づいて、夜ご飯のおすすめメニューを{count}つ提案してください。

今日のランチ:
- 料理名: {clean_text(lunch_dish_name)}
- カテゴリ: {category_label(lunch_category)}

以下の点を考慮してください:
1. 栄養バランス（ランチで不足している栄養素を補う）
2. 味のバリエーション（ランチと異なる味付けや調理法）
3. カテゴリのバランス（できればランチと異なるカテゴリ）
4. 日本の家庭で作りやすい料理

{_ANSWER_FORMAT}"""


def group_dinner_prompt(lunches: List[GroupMealResponse], count: int) -> str:
    summary = "\n".join(
        f"- {clean_text(lunch.user_name or 'メンバー', 100)}: {describe_dish(lunch.dish_name, lunch.category)}"
        for lunch in lunches
    )
    return f"""あなたは家族の栄養バランスを考慮した食事アドバイザーです。
家族全員の今日のランチ情報に基づいて、夜ご飯のおすすめメニューを{count}つ提案してください。

今日のランチ:
{summary}

以下の点を考慮してください:
1. 家族全員の栄養バランス
2. 味のバリエーション
3. 家族で一緒に食べられる料理
4. 日本の家庭で作りやすい料理

{_ANSWER_FORMAT}"""
