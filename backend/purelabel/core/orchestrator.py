"""
PureLabel AI - Label Orchestrator

The central coordinator between the presentation boundary and the agents.
Picks the analysis engine for each request, turns engine failures into
short user-facing messages and runs the follow-up conversation.
"""

import logging
from enum import Enum
from typing import Optional

from opik import track

from purelabel.agents import CoPilot, LocalAnalyst, RemoteAnalyst
from purelabel.config import get_settings
from purelabel.core.exceptions import AnalysisFailed, ConversationError
from purelabel.core.state import AnalysisInput, AnalysisResult, ChatMessage, ChatRole

logger = logging.getLogger(__name__)


class EngineType(str, Enum):
    """Available analysis engines."""
    LOCAL = "local"
    CLOUD = "cloud"


FAILURE_MESSAGES = {
    EngineType.LOCAL: "Local analysis failed. Please ensure the image is clear.",
    EngineType.CLOUD: "Cloud analysis failed. Check your internet connection.",
}

APOLOGY_REPLY = "Sorry, I lost my connection. Try again?"


def build_product_context(result: AnalysisResult) -> str:
    """Summarize an analysis into the context string handed to the co-pilot."""
    ingredients = ", ".join(t.original for t in result.translations)
    return f"Product: {result.product_name}. Verdict: {result.verdict}. Ingredients: {ingredients}"


class LabelOrchestrator:
    """
    Central orchestrator for PureLabel requests.

    1. **Analyze**: run the selected engine on text or an image
       - LocalAnalyst for offline keyword scoring with OCR
       - RemoteAnalyst for Gemini analysis
    2. **Converse**: answer follow-up questions with CoPilot,
       degrading to a fixed apology when the model call fails

    Usage:
        orchestrator = LabelOrchestrator()
        result = await orchestrator.analyze(AnalysisInput(text="..."), EngineType.LOCAL)
        history = await orchestrator.ask(history, result=result)
    """

    def __init__(
        self,
        local_analyst: Optional[LocalAnalyst] = None,
        remote_analyst: Optional[RemoteAnalyst] = None,
        copilot: Optional[CoPilot] = None,
    ):
        self.settings = get_settings()
        self._logger = logging.getLogger("purelabel.orchestrator")

        self.engines = {
            EngineType.LOCAL: local_analyst or LocalAnalyst(),
            EngineType.CLOUD: remote_analyst or RemoteAnalyst(),
        }
        self.copilot = copilot or CoPilot()

    @track(name="orchestrator.analyze")
    async def analyze(
        self,
        input: AnalysisInput,
        engine: EngineType | str | None = None,
    ) -> AnalysisResult:
        """
        Run one analysis on the selected engine.

        Args:
            input: Typed text or label photo
            engine: Engine to use (default: from settings)

        Returns:
            AnalysisResult from the selected engine

        Raises:
            ValueError: If the engine name is unknown
            AnalysisFailed: If the engine failed; carries the user-facing message
        """
        requested = engine or self.settings.default_engine
        try:
            engine = EngineType(requested)
        except ValueError:
            raise ValueError(f"Unknown engine '{requested}'") from None
        agent = self.engines[engine]

        self._logger.info(
            f"Analyzing {'image' if input.is_image else 'text'} input with {engine.value} engine"
        )

        result = await agent.execute(input)

        if not result.success:
            self._logger.warning(f"{agent.name} failed: {result.error}")
            raise AnalysisFailed(engine.value, FAILURE_MESSAGES[engine], result.exception)

        return result.output

    @track(name="orchestrator.ask")
    async def ask(
        self,
        history: list[ChatMessage],
        result: Optional[AnalysisResult] = None,
        context: Optional[str] = None,
    ) -> list[ChatMessage]:
        """
        Answer the last user turn and return the extended history.

        The given history is not modified; a new list with the assistant
        reply appended is returned.
        """
        if context is None:
            context = build_product_context(result) if result else ""

        try:
            reply = await self.copilot.converse(history, context)
        except ConversationError as e:
            self._logger.warning(f"Follow-up failed, sending apology: {e}")
            reply = APOLOGY_REPLY

        return [*history, ChatMessage(role=ChatRole.ASSISTANT, content=reply)]
