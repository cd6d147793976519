"""Helpers shared by every prompt builder."""
import re

from lunchlog.core.enums import MealCategory, category_label

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]+")
_WHITESPACE = re.compile(r"\s+")


def clean_text(value: str, max_length: int = 255) -> str:
    """Flatten user-supplied text to a single trimmed line before it enters a prompt."""
    value = _CONTROL_CHARS.sub(" ", value or "")
    value = _WHITESPACE.sub(" ", value).strip()
    return value[:max_length]


def describe_dish(dish_name: str, category: MealCategory) -> str:
    return f"{clean_text(dish_name)}（{category_label(category)}）"


CATEGORY_ENUM = [c.value for c in MealCategory]
