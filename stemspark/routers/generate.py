from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging, requests

from stemspark.ai.errors import AIConfigError, UpstreamError, EmptyResponseError, InvalidQuizFormat
from stemspark.ai.explainer import generate_explanation
from stemspark.ai.gemini import forward_prompt
from stemspark.core.settings import APP_TITLE, MIN_AGE_LEVEL, MAX_AGE_LEVEL
from stemspark.deps import get_db, get_speech_controller, get_quiz_registry
from stemspark.domain.history.service import add_entry, to_out
from stemspark.domain.quiz.engine import QuizRegistry
from stemspark.domain.speech.controller import SpeechController
from stemspark.schemas.generation import (
    ExplanationFormat, ExplanationRequest, FORMAT_LABELS, FormatOption, FormDefaults,
    OptionsOut, PromptIn, PromptOut,
)
from stemspark.schemas.history import ExplanationOut

log = logging.getLogger("generate")
router = APIRouter(prefix="/api", tags=["generate"])


def _http_error(e: Exception) -> HTTPException:
    """Maps generation failures to HTTP errors. Nothing is retried."""
    if isinstance(e, AIConfigError):
        return HTTPException(status_code=500, detail=str(e))
    if isinstance(e, UpstreamError):
        return HTTPException(status_code=e.status_code, detail=e.message)
    if isinstance(e, (InvalidQuizFormat, EmptyResponseError)):
        return HTTPException(status_code=502, detail=str(e))
    if isinstance(e, requests.RequestException):
        return HTTPException(status_code=502, detail=f"AI service error: {e}")
    return HTTPException(status_code=500, detail="Failed to generate content due to a server error.")


@router.post("/generate", response_model=PromptOut)
def generate(body: PromptIn):
    """Thin proxy: prompt in, generated text out."""
    prompt = (body.prompt or "").strip()
    if not prompt:
        raise HTTPException(status_code=400, detail="Prompt is required.")
    try:
        text = forward_prompt(prompt)
    except Exception as e:
        log.exception("Server Error in /api/generate: %s", e)
        raise _http_error(e)
    return {"text": text}


@router.get("/options", response_model=OptionsOut)
def options():
    return OptionsOut(
        appTitle=APP_TITLE,
        minAgeLevel=MIN_AGE_LEVEL,
        maxAgeLevel=MAX_AGE_LEVEL,
        formats=[FormatOption(value=f, label=FORMAT_LABELS[f]) for f in ExplanationFormat],
        defaults=FormDefaults(),
    )


@router.post("/explanations", response_model=ExplanationOut)
def create_explanation(
    body: ExplanationRequest,
    db: Session = Depends(get_db),
    speech: SpeechController = Depends(get_speech_controller),
    quizzes: QuizRegistry = Depends(get_quiz_registry),
):
    # a new topic silences the reader and drops the previous quiz
    speech.stop()
    quizzes.discard()

    try:
        result = generate_explanation(body)
    except Exception as e:
        log.exception("Error calling Gemini API: %s", e)
        raise _http_error(e)

    row = add_entry(db, body, result)
    if body.format == ExplanationFormat.QUIZ:
        quizzes.load(result.explanationResult)

    return ExplanationOut(
        explanationResult=result.explanationResult,
        suggestedTopic=result.suggestedTopic,
        historyEntry=to_out(row),
    )
