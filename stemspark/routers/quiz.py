from fastapi import APIRouter, Depends, HTTPException

from stemspark.deps import get_quiz_registry
from stemspark.domain.quiz.engine import QuizError, QuizRegistry, QuizSession
from stemspark.schemas.quiz import AnswerIn, QuizStateOut

router = APIRouter(prefix="/api/quiz", tags=["quiz"])

def _state(s: QuizSession) -> QuizStateOut:
    return QuizStateOut(
        questions=s.questions,
        currentIndex=s.current_index,
        total=s.total,
        currentQuestion=s.current_question,
        selectedAnswerIndex=s.selected_answer_index,
        revealed=s.revealed,
        isCorrect=s.is_correct,
        feedback=s.feedback,
        hasNext=s.has_next,
        score=s.score,
        finished=s.finished,
    )

def _active(quizzes: QuizRegistry) -> QuizSession:
    s = quizzes.current
    if s is None:
        raise HTTPException(status_code=404, detail="No active quiz")
    return s

@router.get("", response_model=QuizStateOut)
def current_quiz(quizzes: QuizRegistry = Depends(get_quiz_registry)):
    return _state(_active(quizzes))

@router.post("/answer", response_model=QuizStateOut)
def answer(body: AnswerIn, quizzes: QuizRegistry = Depends(get_quiz_registry)):
    s = _active(quizzes)
    try:
        s.select_answer(body.index)
    except QuizError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _state(s)

@router.post("/next", response_model=QuizStateOut)
def next_question(quizzes: QuizRegistry = Depends(get_quiz_registry)):
    s = _active(quizzes)
    s.advance()
    return _state(s)

@router.post("/restart", response_model=QuizStateOut)
def restart(quizzes: QuizRegistry = Depends(get_quiz_registry)):
    s = _active(quizzes)
    s.restart()
    return _state(s)
