"""Tests for the Gemini analysis engine with the model replaced by a double."""

import asyncio
import json

import pytest

from conftest import FakeGeminiModel
from purelabel.agents.remote_analyst import IMAGE_PROMPT, RemoteAnalyst
from purelabel.core.exceptions import RemoteError
from purelabel.core.state import AnalysisInput, ImpactClass

GEMINI_REPLY = {
    "productName": "Coca Cola",
    "verdict": "Metabolic Rollercoaster",
    "summary": "Sugar water with a caffeine kick.",
    "humanImpact": "Expect a quick energy hit followed by a crash.",
    "insights": [
        {
            "category": "Metabolic",
            "title": "Sugar spike",
            "explanation": "Refined sugar is absorbed fast.",
            "impact": "negative",
        }
    ],
    "tradeoffs": [{"benefit": "Refreshing", "cost": "Empty calories"}],
    "uncertainties": [],
    "translations": [
        {"original": "phosphoric acid", "simpleName": "Acidulant", "purpose": "Sharp Flavor"}
    ],
    "suggestedQuestions": ["Is this safe for my kids?"],
}


def _analyst(model) -> RemoteAnalyst:
    analyst = RemoteAnalyst(timeout_seconds=1)
    analyst.model = model
    return analyst


async def test_without_api_key_raises_remote_error():
    analyst = RemoteAnalyst()

    assert analyst.model is None
    with pytest.raises(RemoteError):
        await analyst.process(AnalysisInput(text="sugar"))


async def test_text_input_parses_camel_case_reply(with_api_key):
    model = FakeGeminiModel(text=json.dumps(GEMINI_REPLY))

    result = await _analyst(model).process(AnalysisInput(text="Carbonated water, Sugar"))

    assert model.contents == ["Analyze these ingredients: Carbonated water, Sugar"]
    assert result.product_name == "Coca Cola"
    assert result.human_impact.startswith("Expect")
    assert result.insights[0].impact == ImpactClass.NEGATIVE
    assert result.translations[0].simple_name == "Acidulant"
    assert result.suggested_questions == ["Is this safe for my kids?"]


async def test_image_input_sent_inline_with_mime_type(with_api_key):
    model = FakeGeminiModel(text=json.dumps(GEMINI_REPLY))

    await _analyst(model).process(AnalysisInput(image_bytes=b"\x89PNG", image_format="png"))

    image_part, prompt = model.contents
    assert image_part["mime_type"] == "image/png"
    assert image_part["data"] == "iVBORw=="
    assert prompt == IMAGE_PROMPT


async def test_reply_in_markdown_fence_is_parsed(with_api_key):
    fenced = "Here you go:\n```json\n" + json.dumps(GEMINI_REPLY) + "\n```"

    result = await _analyst(FakeGeminiModel(text=fenced)).process(AnalysisInput(text="x"))

    assert result.verdict == "Metabolic Rollercoaster"


@pytest.mark.parametrize("reply", [
    "",
    "I cannot read this label.",
    "{not valid json}",
    json.dumps({"verdict": "Missing most fields"}),
])
async def test_unusable_reply_raises_remote_error(with_api_key, reply):
    with pytest.raises(RemoteError):
        await _analyst(FakeGeminiModel(text=reply)).process(AnalysisInput(text="x"))


async def test_transport_failure_raises_remote_error(with_api_key):
    model = FakeGeminiModel(error=ConnectionError("network down"))

    with pytest.raises(RemoteError) as exc_info:
        await _analyst(model).process(AnalysisInput(text="x"))

    assert isinstance(exc_info.value.original_error, ConnectionError)


async def test_timeout_raises_remote_error(with_api_key):
    class SlowModel:
        async def generate_content_async(self, contents):
            await asyncio.sleep(5)

    analyst = _analyst(SlowModel())
    analyst.timeout_seconds = 0.01

    with pytest.raises(RemoteError, match="Timed out"):
        await analyst.process(AnalysisInput(text="x"))
