from lunchlog.config.recommendations_config import IMAGE_ANALYSIS_UNKNOWN_DISH, IMAGE_ANALYSIS_FAILED_DESCRIPTION
from lunchlog.core.completion import CompletionClient, CompletionError, JSON_OBJECT_FORMAT
from lunchlog.core.enums import MealCategory
from lunchlog.modules.image_analysis.schemas import FoodAnalysisResponse, ImageMimeType, file_extension
from lunchlog.modules.image_analysis.s3_storage import S3Storage
from fastapi import HTTPException
from typing import Any, Callable, Dict, Optional
import base64
import binascii
import logging
import secrets
import time

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "あなたは食事の写真を分析する専門家です。写真から料理を特定し、JSON形式で情報を返してください。"

ANALYSIS_PROMPT = """この食事の写真を分析して、以下の情報をJSON形式で返してください:
1. 料理名（日本語で）
2. カテゴリ（japanese/western/chinese/otherのいずれか）
3. 簡単な説明（30文字以内）

必ず以下のJSON形式で回答してください:
{
  "dishName": "料理名",
  "category": "japanese/western/chinese/other",
  "description": "簡単な説明"
}"""


def decode_image(image_base64: str) -> bytes:
    """Decode base64 image data, accepting an optional data: URL prefix"""
    if image_base64.startswith("data:") and "," in image_base64:
        image_base64 = image_base64.split(",", 1)[1]
    try:
        data = base64.b64decode(image_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="imageBase64 is not valid base64")
    if not data:
        raise HTTPException(status_code=400, detail="Image is empty")
    return data


class ImageAnalysisService:
    def __init__(
        self,
        storage: Optional[S3Storage],
        completion: Optional[CompletionClient],
        clock: Callable[[], float] = time.time,
    ):
        self.storage = storage
        self.completion = completion
        self.clock = clock

    def object_key(self, user_id: int, mime_type: ImageMimeType) -> str:
        return f"meals/{user_id}/{int(self.clock() * 1000)}-{secrets.token_hex(3)}.{file_extension(mime_type)}"

    def upload(self, image: bytes, mime_type: ImageMimeType, user_id: int) -> str:
        if self.storage is None:
            raise HTTPException(status_code=503, detail="Image storage not available")
        try:
            return self.storage.upload_file(image, self.object_key(user_id, mime_type), mime_type.value)
        except Exception as e:
            raise HTTPException(status_code=502, detail=f"Image upload failed: {e}")

    def _analyze(self, image_url: str) -> Dict[str, Any]:
        if self.completion is None:
            raise CompletionError("Completion service not available")
        return self.completion.complete_json(
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": ANALYSIS_PROMPT},
                        {"type": "image_url", "image_url": {"url": image_url, "detail": "high"}},
                    ],
                },
            ],
            response_format=JSON_OBJECT_FORMAT,
            vision=True,
        )

    def analyze_food(self, image_base64: str, mime_type: ImageMimeType, user_id: int) -> FoodAnalysisResponse:
        """Store the photo, then ask the vision model what dish it shows"""
        image_url = self.upload(decode_image(image_base64), mime_type, user_id)
        try:
            parsed = self._analyze(image_url)
        except Exception as e:
            logger.error(f"Failed to analyze image: {e}")
            return FoodAnalysisResponse(
                image_url=image_url,
                dish_name="",
                category=MealCategory.OTHER,
                description=IMAGE_ANALYSIS_FAILED_DESCRIPTION,
            )

        category = parsed.get("category")
        if category not in {c.value for c in MealCategory}:
            category = MealCategory.OTHER
        dish_name = parsed.get("dishName")
        description = parsed.get("description")
        return FoodAnalysisResponse(
            image_url=image_url,
            dish_name=dish_name.strip() if isinstance(dish_name, str) and dish_name.strip() else IMAGE_ANALYSIS_UNKNOWN_DISH,
            category=category,
            description=description if isinstance(description, str) else "",
        )
