from lunchlog.core.completion import CompletionClient, CompletionError, json_schema_format
from lunchlog.core.enums import MealCategory
from lunchlog.core.prompts import describe_dish
from lunchlog.modules.pantry.service import PantryService, normalize_ingredient_name
from lunchlog.modules.shopping_list.schemas import Ingredient, ShoppingList
from pydantic import ValidationError
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "あなたは料理の材料に詳しいアシスタントです。必ずJSON形式で回答してください。"

RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "ingredients": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "amount": {"type": "string"},
                    "category": {"type": "string"},
                },
                "required": ["name", "amount", "category"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["ingredients"],
    "additionalProperties": False,
}


def shopping_list_prompt(dish_name: str, category: MealCategory) -> str:
    return f"""次の夕食を2人分作るために必要な材料の買い物リストを作成してください。

料理: {describe_dish(dish_name, category)}

各材料について、名前・分量・売り場の分類（野菜、肉、魚、調味料、その他）を答えてください。
必ず以下のJSON形式で回答してください:
{{
  "ingredients": [
    {{"name": "材料名", "amount": "分量", "category": "分類"}}
  ]
}}"""


class ShoppingListService:
    def __init__(self, completion: Optional[CompletionClient], pantry_service: PantryService):
        self.completion = completion
        self.pantry_service = pantry_service

    def _request(self, dish_name: str, category: MealCategory) -> List[Ingredient]:
        if self.completion is None:
            raise CompletionError("Completion service not available")
        content = self.completion.complete_json(
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": shopping_list_prompt(dish_name, category)},
            ],
            response_format=json_schema_format("shopping_list", RESPONSE_SCHEMA),
        )
        try:
            return ShoppingList(**content).ingredients
        except ValidationError as e:
            raise CompletionError(f"Unexpected shopping list shape: {e}") from e

    def generate_from_dinner(self, dish_name: str, category: MealCategory, user_id: int) -> ShoppingList:
        """Ingredients for a dinner, flagging the ones already in the caller's pantry"""
        try:
            ingredients = self._request(dish_name, category)
        except Exception as e:
            logger.error(f"Failed to generate shopping list: {e}")
            return ShoppingList(ingredients=[])

        pantry_names = self.pantry_service.get_ingredient_names(user_id)
        for ingredient in ingredients:
            ingredient.in_pantry = normalize_ingredient_name(ingredient.name) in pantry_names
        return ShoppingList(ingredients=ingredients)
