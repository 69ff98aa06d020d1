"""
PureLabel AI - RemoteAnalyst Agent

Cloud analysis engine. Sends the typed ingredient list or the label photo
to Gemini and parses its JSON reply into an AnalysisResult.

There is no local retry: a single failure surfaces to the caller as a
RemoteError.
"""

import asyncio
import base64
import json
import logging
import re

import google.generativeai as genai
from opik import track
from pydantic import ValidationError

from purelabel.config import get_settings
from purelabel.core.base_agent import BaseAgent
from purelabel.core.exceptions import RemoteError
from purelabel.core.state import AnalysisInput, AnalysisResult

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """
You are the PureLabel Assistant, a world-class nutrition strategist and biological interpreter.
Instead of acting like a dictionary, you act like a trusted health advisor standing next to the user in a grocery aisle.

Core Philosophy:
- Regulatory labels are for lawyers; your interpretations are for humans.
- Focus on BIO-AVAILABILITY: Can the body actually use this?
- Focus on METABOLIC IMPACT: Will this cause a spike, a crash, or sustained energy?
- Focus on GUT HARMONY: How will the microbiome react to these stabilizers?

Respond ONLY with JSON:
{
  "productName": "Name",
  "verdict": "Short punchy label (e.g., 'Metabolic Rollercoaster', 'Pure Fuel')",
  "summary": "The 'honest' truth in one sentence.",
  "humanImpact": "A 2-3 sentence explanation of how the body feels after consuming this.",
  "insights": [
    { "category": "Metabolic/Gut/Brain", "title": "Human-centric title", "explanation": "Why it matters to a human", "impact": "positive|negative|neutral|caution" }
  ],
  "tradeoffs": [
    { "benefit": "e.g. Tastes like real fruit", "cost": "e.g. Achieved via neuro-active flavorings" }
  ],
  "uncertainties": [
    { "item": "Ingredient", "reason": "Why it is unclear", "suggestion": "What the user can check" }
  ],
  "translations": [
    { "original": "Label term", "simpleName": "Plain name", "purpose": "Role in the product" }
  ],
  "suggestedQuestions": ["Is this safe for my kids?", "How does this affect my gut health?", "What's a cleaner alternative?"]
}
"""

TEXT_PROMPT = "Analyze these ingredients: {text}"
IMAGE_PROMPT = "Analyze the ingredients in this image as a nutrition assistant."


class RemoteAnalyst(BaseAgent[AnalysisInput, AnalysisResult]):
    """
    Ingredient analysis with Gemini.

    Example:
        analyst = RemoteAnalyst()
        result = await analyst.process(AnalysisInput(image_bytes=data, image_format="png"))
    """

    def __init__(self, model_name: str | None = None, timeout_seconds: int | None = None):
        """
        Initialize RemoteAnalyst with a Gemini model.

        Args:
            model_name: Gemini model to use (default: from settings)
            timeout_seconds: Timeout for API calls (default: from settings)
        """
        super().__init__()
        self.settings = get_settings()
        self.model_name = model_name or self.settings.gemini_model
        self.timeout_seconds = timeout_seconds or self.settings.remote_timeout_seconds

        if self.settings.google_api_key:
            genai.configure(api_key=self.settings.google_api_key)
            self.model = genai.GenerativeModel(
                self.model_name,
                system_instruction=SYSTEM_INSTRUCTION,
                generation_config={"response_mime_type": "application/json"},
            )
        else:
            self.model = None
            logger.warning("Google API key not configured - RemoteAnalyst is unavailable")

    @property
    def name(self) -> str:
        return "RemoteAnalyst"

    @track(name="remote_analyst.process")
    async def process(self, input: AnalysisInput) -> AnalysisResult:
        """
        Analyze ingredients with Gemini.

        Raises:
            RemoteError: On missing configuration, timeout, transport
                failure or an unusable reply
        """
        if not self.model:
            raise RemoteError(self.name, "Google API key not configured")

        contents = self._build_contents(input)

        try:
            response = await asyncio.wait_for(
                self.model.generate_content_async(contents),
                timeout=self.timeout_seconds,
            )
            response_text = response.text
        except asyncio.TimeoutError as e:
            logger.error(f"Gemini API timed out after {self.timeout_seconds}s")
            raise RemoteError(self.name, f"Timed out after {self.timeout_seconds}s", e) from e
        except Exception as e:
            logger.error(f"Gemini analysis failed: {e}")
            raise RemoteError(self.name, f"Gemini request failed: {e}", e) from e

        return self._parse_response(response_text)

    def _build_contents(self, input: AnalysisInput) -> list:
        if not input.is_image:
            return [TEXT_PROMPT.format(text=input.text)]

        image_base64 = base64.b64encode(input.image_bytes).decode("utf-8")
        return [
            {"mime_type": input.mime_type, "data": image_base64},
            IMAGE_PROMPT,
        ]

    def _parse_response(self, response_text: str | None) -> AnalysisResult:
        """Parse Gemini's reply into an AnalysisResult."""
        if not response_text:
            raise RemoteError(self.name, "Empty response from Gemini")

        # Extract JSON from response (handle markdown code blocks)
        json_match = re.search(r'```json\s*([\s\S]*?)\s*```', response_text)
        if json_match:
            json_str = json_match.group(1)
        else:
            json_match = re.search(r'\{[\s\S]*\}', response_text)
            if not json_match:
                raise RemoteError(self.name, "No JSON found in response")
            json_str = json_match.group()

        try:
            data = json.loads(json_str)
            return AnalysisResult.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to parse Gemini response: {e}")
            raise RemoteError(self.name, "Malformed analysis from Gemini", e) from e
