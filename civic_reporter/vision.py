import base64
import binascii
import logging

from pydantic import ValidationError

from .errors import NetworkFailure, ParseFailure, ValidationFailure
from .schemas import ImageAnalysisResult, RemoteImageAnalysis, drop_nulls

logger = logging.getLogger(__name__)

VISION_PROMPT = """You are an AI that analyzes images of civic complaints in Telangana, India.

Look at the image and identify:
1. Category: municipal or corruption
2. Subcategory for municipal: water, potholes, streetlights, trash, drainage, parks, construction, corpse
   Subcategory for corruption: bribery, misuse of power, illegal activities
3. Objects visible in the image
4. Condition/severity of the issue
5. Emergency level based on visual cues

Respond ONLY with JSON:
{
  "category": "municipal" or "corruption",
  "subcategory": "specific subcategory or null",
  "confidence": 0.0-1.0,
  "description": "what you see in the image",
  "detectedObjects": ["list", "of", "objects"],
  "severity": "low", "medium", or "high",
  "isEmergency": boolean
}"""


def fallback_image_analysis() -> ImageAnalysisResult:
    return ImageAnalysisResult(
        suggested_category="municipal",
        confidence=0.5,
        description="Unable to analyze image. Please select category manually.",
        detected_objects=[],
    )


def to_base64(image) -> str:
    """Accepts raw bytes or an already encoded string (with or without data: prefix)."""
    if isinstance(image, (bytes, bytearray)):
        return base64.b64encode(image).decode()
    if "," in image and image.startswith("data:"):
        image = image.split(",", 1)[1]
    try:
        base64.b64decode(image, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationFailure("Image is not valid base64 data") from e
    return image


def check_image_type(mime_type: str) -> str:
    mime_type = (mime_type or "").strip().lower()
    if not mime_type.startswith("image/"):
        raise ValidationFailure(f"Unsupported file type: {mime_type or 'unknown'}")
    return mime_type


def analyze_complaint_image(image, mime_type: str, llm) -> ImageAnalysisResult:
    """Suggest a category for an uploaded photo; single attempt, static fallback."""
    img_b64 = to_base64(image)
    mime_type = check_image_type(mime_type)

    content = [
        {"type": "text", "text": "Analyze this civic complaint image and categorize it:"},
        {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{img_b64}", "detail": "high"}},
    ]
    try:
        data = llm.ask_json(VISION_PROMPT, content, max_tokens=500, temperature=0.2)
        remote = RemoteImageAnalysis.model_validate(drop_nulls(data))
    except ValidationError as e:
        logger.warning("Image analysis reply had an unexpected shape: %s", e.errors()[:2])
        return fallback_image_analysis()
    except (NetworkFailure, ParseFailure) as e:
        logger.warning("Image analysis failed, using fallback: %s", e)
        return fallback_image_analysis()

    return ImageAnalysisResult(
        suggested_category=remote.category,
        suggested_subcategory=remote.subcategory,
        confidence=remote.confidence,
        description=remote.description,
        detected_objects=remote.detectedObjects,
        severity=remote.severity,
        is_emergency=remote.isEmergency,
    )
