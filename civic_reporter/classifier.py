import logging

from pydantic import ValidationError

from .errors import NetworkFailure, ParseFailure
from .keywords import combined_text, has_emergency_keyword, resolve_priority
from .schemas import ClassificationResult, RemoteClassification, drop_nulls

logger = logging.getLogger(__name__)

CLASSIFY_PROMPT = """You are an AI classifier for civic complaints in Telangana, India.

Categories and subcategories:
- municipal: water, potholes, streetlights, trash, drainage, parks, construction, corpse
- corruption: bribery, misuse of power, illegal activities

Emergency indicators (HIGH priority): accident, dead body, fire, explosion, gas leak, heavy water leakage, collapsed building, electric shock, flooding, burst pipe, sewage overflow, injured, life threatening
High priority indicators (MEDIUM priority): no water supply, power outage, road blockage, bridge damage, signal not working

Analyze the text and respond ONLY with JSON:
{
  "category": "municipal" or "corruption",
  "subcategory": "specific subcategory",
  "priority": "low", "medium", or "high",
  "confidence": 0.0-1.0,
  "reasoning": "brief explanation",
  "isEmergency": boolean
}"""

# Checked in order, first hit wins: (words, category, subcategory)
FALLBACK_RULES = [
    (("water", "supply", "pipe"), "municipal", "water"),
    (("road", "pothole", "street"), "municipal", "potholes"),
    (("light", "street light", "lamp"), "municipal", "streetlights"),
    (("garbage", "waste", "trash"), "municipal", "trash"),
    (("drain", "sewage", "drainage"), "municipal", "drainage"),
    (("bribe", "corrupt", "money"), "corruption", "other"),
]

FALLBACK_CONFIDENCE = 0.6


def remote_classification(text: str, llm) -> RemoteClassification:
    """One classification call. Raises NetworkFailure / ParseFailure."""
    data = llm.ask_json(CLASSIFY_PROMPT, f'Classify this complaint: "{text}"', max_tokens=300, temperature=0.3)
    try:
        return RemoteClassification.model_validate(drop_nulls(data))
    except ValidationError as e:
        raise ParseFailure(f"Unexpected classification shape: {e.errors()[:2]}") from e


def fallback_classification(text: str) -> ClassificationResult:
    text = text.lower()
    category, subcategory = "municipal", "other"
    for words, cat, sub in FALLBACK_RULES:
        if any(w in text for w in words):
            category, subcategory = cat, sub
            break

    return ClassificationResult(
        category=category,
        subcategory=subcategory,
        confidence=FALLBACK_CONFIDENCE,
        priority=resolve_priority(text),
        reasoning="Keyword-based fallback classification",
    )


def classify_complaint_text(title: str, description: str, llm) -> ClassificationResult:
    """Suggest category, subcategory and priority for a complaint.

    Never raises for a failed remote call: the keyword table answers instead.
    Callers skip this entirely when both title and description are blank.
    """
    text = combined_text(title, description)
    if has_emergency_keyword(text):
        logger.info("Emergency keyword found in complaint text")

    try:
        remote = remote_classification(f"{title}. {description}", llm)
    except (NetworkFailure, ParseFailure) as e:
        logger.warning("Classification call failed, using keyword fallback: %s", e)
        return fallback_classification(text)

    return ClassificationResult(
        category=remote.category,
        subcategory=remote.subcategory,
        confidence=remote.confidence,
        priority=resolve_priority(text, remote.priority),
        reasoning=remote.reasoning,
    )

