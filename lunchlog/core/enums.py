from enum import Enum


class MealType(str, Enum):
    LUNCH = "lunch"
    DINNER = "dinner"


class MealCategory(str, Enum):
    JAPANESE = "japanese"
    WESTERN = "western"
    CHINESE = "chinese"
    OTHER = "other"


class PantryCategory(str, Enum):
    VEGETABLE = "vegetable"
    MEAT = "meat"
    FISH = "fish"
    SEASONING = "seasoning"
    OTHER = "other"


class GroupRole(str, Enum):
    OWNER = "owner"
    MEMBER = "member"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


def category_label(category: MealCategory) -> str:
    """Japanese display label used in prompts."""
    if category is MealCategory.JAPANESE:
        return "和食"
    if category is MealCategory.WESTERN:
        return "洋食"
    if category is MealCategory.CHINESE:
        return "中華"
    if category is MealCategory.OTHER:
        return "その他"
    raise ValueError(f"Unhandled meal category: {category!r}")


def category_color(category: MealCategory, dark: bool = False) -> str:
    """Theme color for a category (light/dark)."""
    if category is MealCategory.JAPANESE:
        return "#FF6B6B" if dark else "#E74C3C"
    if category is MealCategory.WESTERN:
        return "#5DADE2" if dark else "#3498DB"
    if category is MealCategory.CHINESE:
        return "#F5B041" if dark else "#F39C12"
    if category is MealCategory.OTHER:
        return "#BB8FCE" if dark else "#9B59B6"
    raise ValueError(f"Unhandled meal category: {category!r}")
