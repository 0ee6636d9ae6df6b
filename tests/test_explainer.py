import json

import pytest
from conftest import quiz_payload

from stemspark.ai import explainer, gemini
from stemspark.ai.errors import AIConfigError, InvalidQuizFormat, UpstreamError
from stemspark.schemas.generation import ExplanationRequest


class FakeGemini:
    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = []

    def __call__(self, prompt, system_instruction=None, model=None, temperature=0.7, json_mode=False):
        self.calls.append({
            "prompt": prompt, "system_instruction": system_instruction,
            "model": model, "temperature": temperature, "json_mode": json_mode,
        })
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return answer


def _req(fmt: str = "story") -> ExplanationRequest:
    return ExplanationRequest(topic="Volcanoes", ageLevel=8, format=fmt, language="English", readAloud=True)


def test_story_returns_text_and_suggestion(monkeypatch) -> None:
    fake = FakeGemini("Once upon a time a volcano woke up.", '"Earthquakes"\n')
    monkeypatch.setattr(gemini, "generate_text", fake)

    out = explainer.generate_explanation(_req())

    assert out.explanationResult == "Once upon a time a volcano woke up."
    assert out.suggestedTopic == "Earthquakes"
    assert fake.calls[0]["json_mode"] is False
    assert fake.calls[0]["system_instruction"] == explainer.SYSTEM_INSTRUCTION
    assert fake.calls[1]["temperature"] == 0.8
    assert fake.calls[1]["system_instruction"] is None


def test_quiz_uses_json_mode_and_skips_suggestion(monkeypatch) -> None:
    fake = FakeGemini("```json\n" + json.dumps(quiz_payload(3)) + "\n```")
    monkeypatch.setattr(gemini, "generate_text", fake)

    out = explainer.generate_explanation(_req("quiz"))

    assert len(out.explanationResult) == 3
    assert out.suggestedTopic is None
    assert len(fake.calls) == 1
    assert fake.calls[0]["json_mode"] is True


def test_invalid_quiz_raises(monkeypatch) -> None:
    monkeypatch.setattr(gemini, "generate_text", FakeGemini("Sorry, no quiz today."))
    with pytest.raises(InvalidQuizFormat):
        explainer.generate_explanation(_req("quiz"))


def test_suggestion_failure_is_not_fatal(monkeypatch) -> None:
    fake = FakeGemini("A plain answer.", UpstreamError(503, "Google API Error: busy"))
    monkeypatch.setattr(gemini, "generate_text", fake)

    out = explainer.generate_explanation(_req("plain"))
    assert out.explanationResult == "A plain answer."
    assert out.suggestedTopic is None


def test_blank_suggestion_becomes_none(monkeypatch) -> None:
    monkeypatch.setattr(gemini, "generate_text", FakeGemini("''"))
    assert explainer.generate_suggested_topic("Volcanoes", 8, "English") is None


def test_missing_config_propagates_from_suggestion(monkeypatch) -> None:
    monkeypatch.setattr(gemini, "generate_text", FakeGemini(AIConfigError("GEMINI_API_KEY environment variable not set.")))
    with pytest.raises(AIConfigError):
        explainer.generate_suggested_topic("Volcanoes", 8, "English")
