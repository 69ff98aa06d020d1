"""Tests for engine selection, failure mapping and follow-up handling."""

import pytest

from conftest import FakeExtractor, FakeGeminiModel
from purelabel.agents.copilot import CoPilot
from purelabel.agents.local_analyst import LocalAnalyst, analyze_text
from purelabel.agents.remote_analyst import RemoteAnalyst
from purelabel.core.exceptions import AnalysisFailed, ConversationError, ExtractionError, RemoteError
from purelabel.core.orchestrator import (
    APOLOGY_REPLY,
    FAILURE_MESSAGES,
    EngineType,
    LabelOrchestrator,
    build_product_context,
)
from purelabel.core.state import AnalysisInput, ChatMessage, ChatRole


class StubCoPilot(CoPilot):
    def __init__(self, reply=None, error=None):
        super().__init__()
        self.reply = reply
        self.error = error
        self.calls = []

    async def converse(self, history, context):
        self.calls.append((list(history), context))
        if self.error:
            raise self.error
        return self.reply


def _orchestrator(extractor=None, remote_model=None, copilot=None) -> LabelOrchestrator:
    remote = RemoteAnalyst()
    remote.model = remote_model
    return LabelOrchestrator(
        local_analyst=LocalAnalyst(extractor=extractor or FakeExtractor(), simulated_delay_ms=0),
        remote_analyst=remote,
        copilot=copilot or StubCoPilot(reply="ok"),
    )


async def test_local_engine_text_analysis():
    result = await _orchestrator().analyze(
        AnalysisInput(text="Wheat flour, Palm oil, Salt"), EngineType.LOCAL
    )

    assert result.verdict == "Moderately Processed"


async def test_engine_accepts_string_name():
    result = await _orchestrator().analyze(AnalysisInput(text="salt"), "local")

    assert result.product_name == "Local Scan"


async def test_default_engine_from_settings(monkeypatch):
    monkeypatch.setenv("DEFAULT_ENGINE", "local")

    result = await _orchestrator().analyze(AnalysisInput(text="rice meal"))

    assert result.verdict == "Cleanish Choice"


async def test_unknown_engine_raises_value_error():
    with pytest.raises(ValueError):
        await _orchestrator().analyze(AnalysisInput(text="salt"), "quantum")


async def test_local_extraction_failure_maps_to_user_message():
    orchestrator = _orchestrator(extractor=FakeExtractor(error=RuntimeError("blurry")))

    with pytest.raises(AnalysisFailed) as exc_info:
        await orchestrator.analyze(AnalysisInput(image_bytes=b"img"), EngineType.LOCAL)

    assert exc_info.value.engine == "local"
    assert exc_info.value.user_message == FAILURE_MESSAGES[EngineType.LOCAL]
    assert isinstance(exc_info.value.cause, ExtractionError)


async def test_cloud_failure_maps_to_user_message():
    with pytest.raises(AnalysisFailed) as exc_info:
        await _orchestrator().analyze(AnalysisInput(text="salt"), EngineType.CLOUD)

    assert exc_info.value.user_message == "Cloud analysis failed. Check your internet connection."
    assert isinstance(exc_info.value.cause, RemoteError)


async def test_cloud_engine_returns_parsed_result(with_api_key):
    reply = (
        '{"productName": "Chips", "verdict": "Pure Fuel", "summary": "s", '
        '"humanImpact": "h", "insights": [], "tradeoffs": [], '
        '"uncertainties": [], "translations": []}'
    )
    orchestrator = _orchestrator(remote_model=FakeGeminiModel(text=reply))

    result = await orchestrator.analyze(AnalysisInput(text="potato"), EngineType.CLOUD)

    assert result.verdict == "Pure Fuel"
    assert result.suggested_questions == []


def test_build_product_context_lists_matched_keys():
    result = analyze_text("Kurkure: Rice meal, Salt")

    assert build_product_context(result) == (
        "Product: Kurkure Snacks. Verdict: Cleanish Choice. Ingredients: rice meal, salt"
    )


async def test_ask_appends_reply_without_mutating_history():
    copilot = StubCoPilot(reply="Yes, in moderation.")
    orchestrator = _orchestrator(copilot=copilot)
    history = [ChatMessage(role=ChatRole.USER, content="Is this okay for children?")]
    result = analyze_text("Sugar")

    updated = await orchestrator.ask(history, result=result)

    assert len(history) == 1
    assert [m.role for m in updated] == [ChatRole.USER, ChatRole.ASSISTANT]
    assert updated[-1].content == "Yes, in moderation."
    assert copilot.calls[0][1] == build_product_context(result)


async def test_ask_prefers_explicit_context():
    copilot = StubCoPilot(reply="ok")
    history = [ChatMessage(role=ChatRole.USER, content="Hi")]

    await _orchestrator(copilot=copilot).ask(history, result=analyze_text("salt"), context="Custom")

    assert copilot.calls[0][1] == "Custom"


async def test_ask_failure_degrades_to_apology():
    copilot = StubCoPilot(error=ConversationError("CoPilot", "offline"))
    history = [ChatMessage(role=ChatRole.USER, content="Is sugar bad?")]

    updated = await _orchestrator(copilot=copilot).ask(history, context="")

    assert updated[-1].content == APOLOGY_REPLY


async def test_misconfigured_default_engine_is_named(monkeypatch):
    orchestrator = _orchestrator()
    orchestrator.settings.default_engine = "psychic"

    with pytest.raises(ValueError, match="Unknown engine 'psychic'"):
        await orchestrator.analyze(AnalysisInput(text="salt"))
