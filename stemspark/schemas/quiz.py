from typing import List, Optional
from pydantic import BaseModel

from stemspark.schemas.generation import QuizQuestion

class AnswerIn(BaseModel):
    index: int

class QuizStateOut(BaseModel):
    questions: List[QuizQuestion]
    currentIndex: int
    total: int
    currentQuestion: QuizQuestion
    selectedAnswerIndex: Optional[int] = None
    revealed: bool
    isCorrect: Optional[bool] = None
    feedback: Optional[str] = None
    hasNext: bool
    score: int
    finished: bool
