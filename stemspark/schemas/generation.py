from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator, model_validator

from stemspark.core.settings import (
    MIN_AGE_LEVEL, MAX_AGE_LEVEL, DEFAULT_TOPIC, DEFAULT_AGE_LEVEL,
    DEFAULT_FORMAT, DEFAULT_LANGUAGE, DEFAULT_READ_ALOUD,
)

class ExplanationFormat(str, Enum):
    PLAIN = "plain"
    ANALOGY = "analogy"
    STORY = "story"
    COMIC = "comic"
    QUIZ = "quiz"

FORMAT_LABELS = {
    ExplanationFormat.PLAIN: "Plain Explanation",
    ExplanationFormat.ANALOGY: "Analogy",
    ExplanationFormat.STORY: "Story Time",
    ExplanationFormat.COMIC: "Comic Dialogue",
    ExplanationFormat.QUIZ: "Quick Quiz",
}

class QuizQuestion(BaseModel):
    question: StrictStr
    options: List[StrictStr] = Field(min_length=2)
    correctAnswerIndex: StrictInt
    explanation: StrictStr

    @field_validator("question", "explanation")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @model_validator(mode="after")
    def answer_in_bounds(self):
        if not (0 <= self.correctAnswerIndex < len(self.options)):
            raise ValueError("correctAnswerIndex out of range")
        return self

class PromptIn(BaseModel):
    prompt: Optional[str] = None

class PromptOut(BaseModel):
    text: str

class ExplanationRequest(BaseModel):
    topic: str = Field(min_length=1, max_length=200)
    ageLevel: int = Field(ge=MIN_AGE_LEVEL, le=MAX_AGE_LEVEL)
    format: ExplanationFormat
    language: str = Field(min_length=1, max_length=64)
    readAloud: bool = DEFAULT_READ_ALOUD

    @field_validator("topic", "language")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

class GenerationOutput(BaseModel):
    explanationResult: Union[str, List[QuizQuestion]]
    suggestedTopic: Optional[str] = None

class FormatOption(BaseModel):
    value: ExplanationFormat
    label: str

class FormDefaults(BaseModel):
    topic: str = DEFAULT_TOPIC
    ageLevel: int = DEFAULT_AGE_LEVEL
    format: ExplanationFormat = ExplanationFormat(DEFAULT_FORMAT)
    language: str = DEFAULT_LANGUAGE
    readAloud: bool = DEFAULT_READ_ALOUD

class OptionsOut(BaseModel):
    appTitle: str
    minAgeLevel: int
    maxAgeLevel: int
    formats: List[FormatOption]
    defaults: FormDefaults
