"""
PureLabel AI - Base Agent Abstract Class

Shared request/reply contract of the label agents, plus the non-raising
execute() wrapper the orchestrator uses to tell failures apart.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

# Request and reply models of an agent
InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)


class AgentResult(BaseModel):
    """Wrapper for agent execution results with metadata."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    output: Any
    error: str | None = None
    exception: Exception | None = Field(default=None, exclude=True)
    latency_ms: int = 0
    agent_name: str = ""


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """
    Common shell of the label agents (LocalAnalyst, RemoteAnalyst, CoPilot).

    Subclasses turn one pydantic request into one pydantic reply in
    process(). A failure is never retried: it is raised from process()
    or, through execute(), kept on the AgentResult for the orchestrator
    to map onto a user-facing message.

    Usage:
        class AllergenScanner(BaseAgent[AnalysisInput, AnalysisResult]):
            @property
            def name(self) -> str:
                return "AllergenScanner"

            async def process(self, input: AnalysisInput) -> AnalysisResult:
                return analyze_text(input.text or "")
    """

    def __init__(self):
        self._logger = logging.getLogger(f"purelabel.agent.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Name used in the agent logger (purelabel.agent.<name>) and in errors."""
        pass

    @abstractmethod
    async def process(self, input: InputT) -> OutputT:
        """
        Analyze a label or answer a question.

        Raises:
            AgentError: The subclass for this agent (ExtractionError,
                RemoteError or ConversationError)
        """
        pass

    async def execute(self, input: InputT) -> AgentResult:
        """
        Execute the agent with latency tracking and error capture.

        The raised exception is kept on the result so callers can tell
        failure kinds apart without a second call.

        Returns:
            AgentResult holding either the output or the error and exception
        """
        start_time = time.time()

        self._logger.info(f"Starting {self.name} execution")
        self._log_input(input)

        try:
            output = await self.process(input)
            latency_ms = int((time.time() - start_time) * 1000)

            self._logger.info(f"{self.name} completed in {latency_ms}ms")
            self._log_output(output)

            return AgentResult(
                success=True,
                output=output,
                latency_ms=latency_ms,
                agent_name=self.name,
            )

        except Exception as e:
            latency_ms = int((time.time() - start_time) * 1000)
            error_msg = str(e)

            self._logger.error(f"{self.name} failed after {latency_ms}ms: {error_msg}")

            return AgentResult(
                success=False,
                output=None,
                error=error_msg,
                exception=e,
                latency_ms=latency_ms,
                agent_name=self.name,
            )

    def _log_input(self, input: InputT, truncate: int = 200):
        """Debug-log the request without raw image bytes."""
        input_str = str(input.model_dump(exclude={"image_bytes"}))
        if len(input_str) > truncate:
            input_str = input_str[:truncate] + "..."
        self._logger.debug(f"Input: {input_str}")

    def _log_output(self, output: OutputT, truncate: int = 200):
        """Debug-log a truncated view of the reply."""
        output_str = str(output.model_dump())
        if len(output_str) > truncate:
            output_str = output_str[:truncate] + "..."
        self._logger.debug(f"Output: {output_str}")
