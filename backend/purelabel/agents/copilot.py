"""
PureLabel AI - CoPilot Agent

Answers follow-up questions about an analyzed product with Gemini chat.

The conversation is stateless per call: the whole ordered history is
sent every time and no session is kept between calls.
"""

import asyncio
import logging

import google.generativeai as genai
from opik import track
from pydantic import BaseModel, Field

from purelabel.config import get_settings
from purelabel.core.base_agent import BaseAgent
from purelabel.core.exceptions import ConversationError
from purelabel.core.state import ChatMessage, ChatRole

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION_TEMPLATE = (
    "You are the PureLabel Assistant. Product Context: {context}. "
    "Keep answers under 3 sentences, highly actionable, and focused on human health impact."
)

EMPTY_REPLY = "I'm having trouble interpreting that. Can you rephrase?"

# Gemini names the assistant side "model"
GEMINI_ROLES = {
    ChatRole.USER: "user",
    ChatRole.ASSISTANT: "model",
}


class ConversationRequest(BaseModel):
    """Input to the CoPilot agent."""
    history: list[ChatMessage] = Field(..., description="Ordered turns, last one from the user")
    context: str = Field(default="", description="Short textual product context")


class ConversationReply(BaseModel):
    """Output from the CoPilot agent."""
    reply: str


class CoPilot(BaseAgent[ConversationRequest, ConversationReply]):
    """
    Follow-up conversation over an analyzed product.

    Example:
        copilot = CoPilot()
        reply = await copilot.converse(history, "Product: Coca Cola. Verdict: ...")
    """

    def __init__(self, model_name: str | None = None, timeout_seconds: int | None = None):
        super().__init__()
        self.settings = get_settings()
        self.model_name = model_name or self.settings.gemini_model
        self.timeout_seconds = timeout_seconds or self.settings.remote_timeout_seconds

        if self.settings.google_api_key:
            genai.configure(api_key=self.settings.google_api_key)
        else:
            logger.warning("Google API key not configured - CoPilot is unavailable")

    @property
    def name(self) -> str:
        return "CoPilot"

    async def converse(self, history: list[ChatMessage], context: str) -> str:
        """
        Return the assistant's reply to the last user turn.

        Raises:
            ConversationError: If the reply could not be produced
        """
        output = await self.process(ConversationRequest(history=history, context=context))
        return output.reply

    @track(name="copilot.process")
    async def process(self, input: ConversationRequest) -> ConversationReply:
        if not self.settings.google_api_key:
            raise ConversationError(self.name, "Google API key not configured")
        if not input.history:
            raise ConversationError(self.name, "Conversation history is empty")

        *previous, last = input.history
        if last.role != ChatRole.USER:
            raise ConversationError(self.name, "Last turn must come from the user")

        model = self._build_model(input.context)
        chat = model.start_chat(history=[
            {"role": GEMINI_ROLES[turn.role], "parts": [turn.content]}
            for turn in previous
        ])

        try:
            response = await asyncio.wait_for(
                chat.send_message_async(last.content),
                timeout=self.timeout_seconds,
            )
            reply = response.text
        except Exception as e:
            logger.error(f"Gemini chat failed: {e}")
            raise ConversationError(self.name, f"Gemini chat failed: {e}", e) from e

        return ConversationReply(reply=reply.strip() if reply and reply.strip() else EMPTY_REPLY)

    def _build_model(self, context: str) -> genai.GenerativeModel:
        return genai.GenerativeModel(
            self.model_name,
            system_instruction=SYSTEM_INSTRUCTION_TEMPLATE.format(context=context),
        )
