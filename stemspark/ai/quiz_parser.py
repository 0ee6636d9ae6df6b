# stemspark/ai/quiz_parser.py
import json, re, logging
from typing import List
from pydantic import ValidationError

from stemspark.ai.errors import InvalidQuizFormat
from stemspark.schemas.generation import QuizQuestion

log = logging.getLogger("quiz_parser")

INVALID_QUIZ_MESSAGE = "AI returned an invalid quiz format. Please try generating again."

# ```lang\nCODE\n```
FENCE_RE = re.compile(r"^```(\w*)?\s*\n?(.*?)\n?\s*```$", re.DOTALL)

def strip_fence(raw: str) -> str:
    t = (raw or "").strip()
    m = FENCE_RE.match(t)
    if m and m.group(2):
        log.info("Extracted JSON from fenced code block for parsing.")
        return m.group(2).strip()
    return t

def parse_quiz(raw: str) -> List[QuizQuestion]:
    """
    Parses the model answer for the quiz format.
    - Strips one fenced code block if present.
    - Requires a non-empty JSON array; every item must match QuizQuestion.
    Any failure rejects the whole quiz (no partial rendering).
    """
    text = strip_fence(raw)
    try:
        data = json.loads(text)
    except ValueError as e:
        log.error("Failed to parse JSON response for quiz: %s | raw=%r", e, (raw or "")[:400])
        raise InvalidQuizFormat(INVALID_QUIZ_MESSAGE) from e

    if not isinstance(data, list) or not data:
        log.error("Parsed data is not a non-empty array: %r", str(data)[:400])
        raise InvalidQuizFormat(INVALID_QUIZ_MESSAGE)

    questions: List[QuizQuestion] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            log.error("Quiz item %s is not an object: %r", i, item)
            raise InvalidQuizFormat(INVALID_QUIZ_MESSAGE)
        try:
            questions.append(QuizQuestion.model_validate(item))
        except ValidationError as e:
            log.error("Quiz item %s does not match the question shape: %s", i, e)
            raise InvalidQuizFormat(INVALID_QUIZ_MESSAGE) from e
    return questions
