from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Category = Literal["municipal", "corruption"]
Priority = Literal["low", "medium", "high"]
Status = Literal["reported", "in-progress", "resolved"]
Step = Literal["start", "category", "description", "location", "priority", "submission"]

DIALOG_STEPS = ("start", "category", "description", "location", "priority", "submission")
STATUSES = ("reported", "in-progress", "resolved")


class CamelModel(BaseModel):
    """Python attributes in snake_case, JSON in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _lower(value):
    return value.strip().lower() if isinstance(value, str) else value


# --- CLASSIFIER RESULTS ---
class ClassificationResult(CamelModel):
    category: str
    subcategory: Optional[str] = None
    confidence: float = Field(ge=0, le=1)
    priority: Priority
    reasoning: str


class ImageAnalysisResult(CamelModel):
    suggested_category: str
    suggested_subcategory: Optional[str] = None
    confidence: float = Field(ge=0, le=1)
    description: str
    detected_objects: List[str] = Field(default_factory=list)
    severity: Optional[Priority] = None
    is_emergency: bool = False


class Guidance(CamelModel):
    message: str
    suggested_actions: List[str] = Field(default_factory=list)
    next_step: Step


# --- REMOTE MODEL REPLIES ---
# Parsed strictly: anything that does not fit is treated as a failed call.
class RemoteClassification(BaseModel):
    category: Category = "municipal"
    subcategory: Optional[str] = None
    priority: Priority = "medium"
    confidence: float = Field(0.7, ge=0, le=1)
    reasoning: str = "AI-based classification"
    isEmergency: bool = False

    @field_validator("category", "priority", mode="before")
    @classmethod
    def normalize_labels(cls, value):
        return _lower(value)


class RemoteImageAnalysis(BaseModel):
    category: Category = "municipal"
    subcategory: Optional[str] = None
    confidence: float = Field(0.6, ge=0, le=1)
    description: str = "Unable to analyze image content"
    detectedObjects: List[str] = Field(default_factory=list)
    severity: Optional[Priority] = None
    isEmergency: bool = False

    @field_validator("category", "severity", mode="before")
    @classmethod
    def normalize_labels(cls, value):
        return _lower(value)


class RemoteGuidance(BaseModel):
    message: str = Field(min_length=1)
    suggestedActions: List[str] = Field(default_factory=list)
    nextStep: Step
    categoryGuess: Optional[str] = None
    priorityGuess: Optional[str] = None

    @field_validator("nextStep", mode="before")
    @classmethod
    def normalize_labels(cls, value):
        return _lower(value)


def drop_nulls(data: dict) -> dict:
    """Models often send null for "not applicable"; treat it as missing."""
    return {k: v for k, v in data.items() if v is not None}


# --- API BODIES ---
class ClassifyRequest(CamelModel):
    title: str = ""
    description: str = ""
    text: Optional[str] = None
    sequence: Optional[int] = None


class ClassifyResponse(ClassificationResult):
    sequence: Optional[int] = None


class ImageAnalysisRequest(CamelModel):
    image: str
    image_type: str = "image/jpeg"


class GuidanceRequest(CamelModel):
    step: Step = "start"
    user_input: Optional[str] = None
    context: dict = Field(default_factory=dict)


class GuidanceResponse(Guidance):
    context: dict = Field(default_factory=dict)


class ChatRequest(CamelModel):
    message: str
    conversation_id: Optional[str] = None
    user_id: Optional[str] = None


class ChatResponse(CamelModel):
    response: str
    conversation_id: str


class StatusUpdate(BaseModel):
    status: Status


class SuggestionCreate(BaseModel):
    content: str = Field(min_length=1)


# --- STORED RECORDS ---
class IssueOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    category: str
    subcategory: Optional[str] = None
    location: Optional[str] = None
    priority: Priority
    status: Status
    image_url: Optional[str] = None
    user_id: str
    created_at: datetime
    updated_at: datetime


class SuggestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    issue_id: str
    user_id: str
    content: str
    likes: int
    created_at: datetime
    updated_at: datetime


class LikeResult(BaseModel):
    suggestion_id: str
    likes: int
    liked: bool
