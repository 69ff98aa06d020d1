"""
PureLabel AI - Error Types

Every failure is terminal for the current request: no retry and no
partial result.
"""


class AgentError(Exception):
    """Base exception for agent errors."""

    def __init__(self, agent_name: str, message: str, original_error: Exception | None = None):
        self.agent_name = agent_name
        self.message = message
        self.original_error = original_error
        super().__init__(f"[{agent_name}] {message}")


class ExtractionError(AgentError):
    """The label photo could not be turned into text (local engine only)."""


class RemoteError(AgentError):
    """The hosted model could not be reached or returned an unusable reply."""


class ConversationError(AgentError):
    """A follow-up question could not be answered."""


class AnalysisFailed(Exception):
    """Analysis failure carrying the short message shown to the user."""

    def __init__(self, engine: str, user_message: str, cause: Exception | None = None):
        self.engine = engine
        self.user_message = user_message
        self.cause = cause
        super().__init__(user_message)
