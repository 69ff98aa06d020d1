"""
PureLabel AI - Analysis Pydantic Schema

This module defines the type-safe data structures handed between the
analysis engines, the orchestrator and the HTTP layer.

Field names are snake_case in Python and camelCase on the wire
(productName, humanImpact, simpleName, suggestedQuestions), matching the
JSON shape the cloud model is asked to produce.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class LabelModel(BaseModel):
    """Base model accepting both snake_case names and camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ImpactClass(str, Enum):
    """Qualitative health-effect tag attached to an ingredient."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    CAUTION = "caution"


class ChatRole(str, Enum):
    """Speaker of a conversation turn."""
    USER = "user"
    ASSISTANT = "assistant"


class TradeOff(LabelModel):
    """Paired benefit/cost description attached to select ingredients."""
    model_config = ConfigDict(frozen=True)

    benefit: str = Field(..., description="What the ingredient does for the product")
    cost: str = Field(..., description="What it costs the consumer")


class IngredientInsight(LabelModel):
    """A single human-readable finding about one ingredient."""
    category: str = Field(..., description="Grouping label (e.g., 'Ingredient Analysis')")
    title: str = Field(..., description="Human-centric title")
    explanation: str = Field(..., description="Why it matters to a human")
    impact: ImpactClass = Field(..., description="Impact class of the ingredient")


class Uncertainty(LabelModel):
    """Something the engine could not determine with confidence."""
    item: str
    reason: str
    suggestion: str


class SimpleTranslation(LabelModel):
    """Plain-language rendering of a label term."""
    original: str = Field(..., description="Term as it appears on the label")
    simple_name: str = Field(..., description="Plain-language name")
    purpose: str = Field(..., description="Functional role in the product")


class ChatMessage(LabelModel):
    """One turn of the follow-up conversation."""
    role: ChatRole
    content: str = Field(..., min_length=1)


class AnalysisResult(LabelModel):
    """
    Structured health assessment produced by either engine.

    Created per request, never persisted, owned by the caller.
    """
    product_name: str = Field(..., description="Detected or inferred product name")
    verdict: str = Field(..., description="One-line qualitative label")
    summary: str = Field(..., description="The honest truth in one sentence")
    human_impact: str = Field(..., description="How the body responds after consuming this")
    insights: list[IngredientInsight] = Field(default_factory=list)
    tradeoffs: list[TradeOff] = Field(default_factory=list)
    uncertainties: list[Uncertainty] = Field(default_factory=list)
    translations: list[SimpleTranslation] = Field(default_factory=list)
    suggested_questions: list[str] = Field(default_factory=list)


# === Engine Input Models ===

class AnalysisInput(BaseModel):
    """Input to either analysis engine: typed text or a label photo."""
    text: Optional[str] = Field(default=None, description="Typed ingredient list")
    image_bytes: Optional[bytes] = Field(default=None, description="Raw image data")
    image_format: str = Field(default="jpeg", description="Image format (jpeg, png)")

    @model_validator(mode="after")
    def _exactly_one_source(self) -> "AnalysisInput":
        if (self.text is None) == (self.image_bytes is None):
            raise ValueError("Provide exactly one of text or image_bytes")
        return self

    @property
    def is_image(self) -> bool:
        return self.image_bytes is not None

    @property
    def mime_type(self) -> str:
        fmt = self.image_format.lower()
        if fmt == "jpg":
            fmt = "jpeg"
        return f"image/{fmt}"
