from datetime import datetime
from typing import List, Optional, Union
from pydantic import BaseModel

from stemspark.schemas.generation import ExplanationFormat, QuizQuestion

class HistoryEntryOut(BaseModel):
    id: str
    topic: str
    ageLevel: int
    format: ExplanationFormat
    language: str
    readAloud: bool
    output: Union[str, List[QuizQuestion]]
    suggestedTopic: Optional[str] = None
    timestamp: datetime


class ExplanationOut(BaseModel):
    explanationResult: Union[str, List[QuizQuestion]]
    suggestedTopic: Optional[str] = None
    historyEntry: HistoryEntryOut
