from pydantic import Field
from typing import List

from lunchlog.core.enums import MealCategory
from lunchlog.core.schemas import ApiModel


class ShoppingListRequest(ApiModel):
    dish_name: str = Field(..., min_length=1, max_length=255)
    category: MealCategory


class Ingredient(ApiModel):
    name: str
    amount: str = ""
    # Free-text grocery section such as 野菜 or 肉
    category: str = ""
    in_pantry: bool = False


class ShoppingList(ApiModel):
    ingredients: List[Ingredient] = []
