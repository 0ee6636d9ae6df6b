from __future__ import annotations
import threading
from dataclasses import dataclass, field
from typing import List, Optional

from stemspark.schemas.generation import QuizQuestion

CORRECT_FEEDBACK = "Correct! 🎉"
WRONG_FEEDBACK = "Not quite! 🤔"


class QuizError(ValueError):
    pass


@dataclass
class QuizSession:
    """
    Progress over an ordered list of questions.
    Per question: unanswered -> answered (feedback revealed) -> advance.
    The score moves at most once per question, on the first selection.
    """
    questions: List[QuizQuestion]
    current_index: int = 0
    selected_answer_index: Optional[int] = None
    revealed: bool = False
    score: int = 0
    finished: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.questions:
            raise QuizError("No quiz questions available for this topic. Try generating again!")

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current_question(self) -> QuizQuestion:
        return self.questions[self.current_index]

    @property
    def has_next(self) -> bool:
        return self.current_index < self.total - 1

    @property
    def is_correct(self) -> Optional[bool]:
        if not self.revealed or self.selected_answer_index is None:
            return None
        return self.selected_answer_index == self.current_question.correctAnswerIndex

    @property
    def feedback(self) -> Optional[str]:
        if self.is_correct is None:
            return None
        head = CORRECT_FEEDBACK if self.is_correct else WRONG_FEEDBACK
        return f"{head} {self.current_question.explanation}"

    # requests run on a threadpool; each transition is checked and applied atomically

    def select_answer(self, index: int) -> None:
        with self._lock:
            if self.revealed or self.finished:
                return
            if not (0 <= index < len(self.current_question.options)):
                raise QuizError(f"Answer index {index} out of range")
            self.selected_answer_index = index
            self.revealed = True
            if index == self.current_question.correctAnswerIndex:
                self.score += 1

    def advance(self) -> None:
        with self._lock:
            if self.finished:
                return
            if self.has_next:
                self.current_index += 1
                self.selected_answer_index = None
                self.revealed = False
            else:
                self.finished = True

    def restart(self) -> None:
        with self._lock:
            self.current_index = 0
            self.selected_answer_index = None
            self.revealed = False
            self.score = 0
            self.finished = False


class QuizRegistry:
    """Holds the one active quiz; a new generation replaces or discards it."""

    def __init__(self):
        self._session: Optional[QuizSession] = None
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[QuizSession]:
        return self._session

    def load(self, questions: List[QuizQuestion]) -> QuizSession:
        session = QuizSession(questions=list(questions))
        with self._lock:
            self._session = session
        return session

    def discard(self) -> None:
        with self._lock:
            self._session = None
