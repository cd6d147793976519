from enum import Enum
from pydantic import Field

from lunchlog.core.enums import MealCategory
from lunchlog.core.schemas import ApiModel


class ImageMimeType(str, Enum):
    JPEG = "image/jpeg"
    PNG = "image/png"
    WEBP = "image/webp"


def file_extension(mime_type: ImageMimeType) -> str:
    if mime_type is ImageMimeType.JPEG:
        return "jpg"
    if mime_type is ImageMimeType.PNG:
        return "png"
    if mime_type is ImageMimeType.WEBP:
        return "webp"
    raise ValueError(f"Unhandled image type: {mime_type!r}")


class FoodImageRequest(ApiModel):
    image_base64: str = Field(..., min_length=1)
    mime_type: ImageMimeType


class FoodAnalysisResponse(ApiModel):
    image_url: str
    dish_name: str
    category: MealCategory
    description: str = ""
