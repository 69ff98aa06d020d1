"""
PureLabel AI - LocalAnalyst Agent

Offline analysis engine. Turns typed or OCR-extracted label text into a
structured verdict by:
- Matching the text against the ingredient knowledge base
- Scoring positive and negative impact
- Detecting the product from brand keywords
- Synthesizing a verdict, then deduplicating and truncating findings

No network access is needed.
"""

import asyncio
import logging
from typing import Optional

from opik import track

from purelabel.agents.text_extractor import TextExtractor
from purelabel.config import get_settings
from purelabel.core.base_agent import BaseAgent
from purelabel.core.exceptions import ExtractionError
from purelabel.core.knowledge_base import (
    DEFAULT_PRODUCT_NAME,
    KNOWLEDGE_BASE,
    PRODUCT_KEYWORDS,
)
from purelabel.core.state import (
    AnalysisInput,
    AnalysisResult,
    ImpactClass,
    IngredientInsight,
    SimpleTranslation,
    TradeOff,
)

logger = logging.getLogger(__name__)

# Score contributions per impact class
IMPACT_SCORES = {
    ImpactClass.POSITIVE: (1, 0),
    ImpactClass.NEGATIVE: (0, 2),
    ImpactClass.CAUTION: (0, 1),
    ImpactClass.NEUTRAL: (0, 0),
}

# Verdict thresholds
HIGHLY_PROCESSED_THRESHOLD = 3   # negative score strictly above this
CLEAN_NEGATIVE_CEILING = 2       # negative score strictly below this
MODERATE_NEGATIVE_FLOOR = 0      # negative score strictly above this

# Output limits
MAX_INSIGHTS = 5
MAX_TRADEOFFS = 3
MAX_TRANSLATIONS = 8

INSIGHT_CATEGORY = "Ingredient Analysis"

EXTRACTION_FAILED_MESSAGE = "Local OCR failed. Please ensure the label is well-lit."

# verdict -> (summary, human impact)
VERDICTS = {
    "Highly Processed": (
        "Detected multiple additives and industrial fats designed for shelf-life over nutrition.",
        "Expect a rapid glucose response followed by potential energy dips. "
        "High sodium/sugar may drive thirst.",
    ),
    "Cleanish Choice": (
        "Features several whole-food components with minimal industrial additives.",
        "A safer bet for regular consumption; contains recognizable nutrients.",
    ),
    "Moderately Processed": (
        "Contains some stabilizers or refined sugars common in modern snacks.",
        "Generally fine for occasional use, though sensitive guts may react to stabilizers.",
    ),
    "Balanced Choice": (
        "Standard commercial product with common ingredients.",
        "Standard metabolic response expected.",
    ),
}

SUGGESTED_QUESTIONS = (
    "Is this okay for children?",
    "Are there better alternatives?",
    "What is the main health concern here?",
)


def detect_product(normalized: str) -> str:
    """Return the product for the last matching keyword in PRODUCT_KEYWORDS order."""
    detected = DEFAULT_PRODUCT_NAME
    for keyword, product_name in PRODUCT_KEYWORDS:
        if keyword in normalized:
            detected = product_name
    return detected


def synthesize_verdict(positive_score: int, negative_score: int) -> str:
    """Apply the verdict decision list; the first satisfied branch wins."""
    if negative_score > HIGHLY_PROCESSED_THRESHOLD:
        return "Highly Processed"
    if positive_score > negative_score and negative_score < CLEAN_NEGATIVE_CEILING:
        return "Cleanish Choice"
    if negative_score > MODERATE_NEGATIVE_FLOOR:
        return "Moderately Processed"
    return "Balanced Choice"


def _unique_by(items: list, key) -> list:
    seen = set()
    unique = []
    for item in items:
        k = key(item)
        if k not in seen:
            seen.add(k)
            unique.append(item)
    return unique


def analyze_text(text: str) -> AnalysisResult:
    """
    Score label text against the knowledge base.

    Never fails: text with no known ingredients yields the
    "Balanced Choice" default with empty findings.
    """
    normalized = text.lower()

    insights: list[IngredientInsight] = []
    translations: list[SimpleTranslation] = []
    tradeoffs: list[TradeOff] = []
    positive_score = 0
    negative_score = 0

    for key, entry in KNOWLEDGE_BASE.items():
        if key not in normalized:
            continue

        insights.append(IngredientInsight(
            category=INSIGHT_CATEGORY,
            title=entry.simple_name,
            explanation=entry.explanation,
            impact=entry.impact,
        ))
        translations.append(SimpleTranslation(
            original=key,
            simple_name=entry.simple_name,
            purpose=entry.purpose,
        ))
        if entry.tradeoff:
            tradeoffs.append(entry.tradeoff)

        pos, neg = IMPACT_SCORES[entry.impact]
        positive_score += pos
        negative_score += neg

    verdict = synthesize_verdict(positive_score, negative_score)
    summary, human_impact = VERDICTS[verdict]

    logger.debug(
        f"Matched {len(insights)} ingredients: "
        f"positive={positive_score}, negative={negative_score} -> {verdict}"
    )

    return AnalysisResult(
        product_name=detect_product(normalized),
        verdict=verdict,
        summary=summary,
        human_impact=human_impact,
        insights=_unique_by(insights, lambda i: i.title)[:MAX_INSIGHTS],
        tradeoffs=tradeoffs[:MAX_TRADEOFFS],
        uncertainties=[],
        translations=_unique_by(translations, lambda t: t.simple_name)[:MAX_TRANSLATIONS],
        suggested_questions=list(SUGGESTED_QUESTIONS),
    )


class LocalAnalyst(BaseAgent[AnalysisInput, AnalysisResult]):
    """
    Offline ingredient analysis with embedded OCR.

    Example:
        analyst = LocalAnalyst()
        result = await analyst.process(AnalysisInput(text="Wheat flour, Palm oil, Salt"))
    """

    def __init__(
        self,
        extractor: Optional[TextExtractor] = None,
        simulated_delay_ms: Optional[int] = None,
    ):
        """
        Args:
            extractor: OCR backend for image input (default: Tesseract)
            simulated_delay_ms: Pause applied to typed input so callers can
                show progress (default: from settings, 0 disables)
        """
        super().__init__()
        self.settings = get_settings()
        self.extractor = extractor or TextExtractor()
        if simulated_delay_ms is None:
            simulated_delay_ms = self.settings.local_simulated_delay_ms
        self.simulated_delay_ms = simulated_delay_ms

    @property
    def name(self) -> str:
        return "LocalAnalyst"

    @track(name="local_analyst.process")
    async def process(self, input: AnalysisInput) -> AnalysisResult:
        """
        Analyze typed text or a label photo.

        Raises:
            ExtractionError: If the photo could not be read
        """
        if input.is_image:
            text = await self._extract(input.image_bytes)
        else:
            text = input.text
            if self.simulated_delay_ms:
                await asyncio.sleep(self.simulated_delay_ms / 1000)

        result = analyze_text(text)

        logger.info(
            f"LocalAnalyst verdict '{result.verdict}' for '{result.product_name}' "
            f"with {len(result.insights)} insights"
        )
        return result

    async def _extract(self, image_bytes: bytes) -> str:
        try:
            text = await self.extractor.extract_text(image_bytes)
        except Exception as e:
            logger.warning(f"Local OCR failed: {e}")
            raise ExtractionError(self.name, EXTRACTION_FAILED_MESSAGE, e) from e

        if not isinstance(text, str):
            logger.warning(f"Local OCR returned {type(text).__name__}, expected text")
            raise ExtractionError(self.name, EXTRACTION_FAILED_MESSAGE)
        return text
