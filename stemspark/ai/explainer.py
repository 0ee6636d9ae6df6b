# stemspark/ai/explainer.py
import re, logging

from stemspark.ai import gemini
from stemspark.ai.errors import AIConfigError
from stemspark.ai.prompts import SYSTEM_INSTRUCTION, build_prompt, build_suggestion_prompt
from stemspark.ai.quiz_parser import parse_quiz
from stemspark.schemas.generation import ExplanationFormat, ExplanationRequest, GenerationOutput

log = logging.getLogger("explainer")

_QUOTES_RE = re.compile(r"""^["'`]*(.*?)["'`]*$""", re.DOTALL)

def _unquote(text: str) -> str:
    return _QUOTES_RE.sub(r"\1", text.strip()).strip()

def generate_suggested_topic(topic: str, age_level: int, language: str) -> str | None:
    """Best effort: any failure just means no suggestion."""
    try:
        text = gemini.generate_text(
            build_suggestion_prompt(topic, age_level, language),
            model=gemini.SUGGEST_MODEL_NAME,
            temperature=0.8,
        )
    except AIConfigError:
        raise
    except Exception as e:
        log.warning("suggested topic failed: %s", e)
        return None
    return _unquote(text) or None

def generate_explanation(req: ExplanationRequest) -> GenerationOutput:
    is_quiz = req.format == ExplanationFormat.QUIZ
    text = gemini.generate_text(
        build_prompt(req),
        system_instruction=SYSTEM_INSTRUCTION,
        temperature=0.7,
        json_mode=is_quiz,
    )

    if is_quiz:
        return GenerationOutput(explanationResult=parse_quiz(text), suggestedTopic=None)

    suggested = generate_suggested_topic(req.topic, req.ageLevel, req.language)
    return GenerationOutput(explanationResult=text, suggestedTopic=suggested)
