from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from stemspark.deps import get_db, get_speech_controller, get_quiz_registry
from stemspark.domain.history.service import list_entries, get_entry, clear_history
from stemspark.domain.quiz.engine import QuizRegistry
from stemspark.domain.speech.controller import SpeechController
from stemspark.schemas.history import HistoryEntryOut

router = APIRouter(prefix="/api/history", tags=["history"])

@router.get("", response_model=list[HistoryEntryOut])
def history(db: Session = Depends(get_db)):
    """Most recent first."""
    return list_entries(db)

@router.get("/{entry_id}", response_model=HistoryEntryOut)
def view_entry(
    entry_id: int,
    db: Session = Depends(get_db),
    speech: SpeechController = Depends(get_speech_controller),
    quizzes: QuizRegistry = Depends(get_quiz_registry),
):
    entry = get_entry(db, entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="History entry not found")
    speech.stop()
    if isinstance(entry.output, list):
        quizzes.load(entry.output)
    else:
        quizzes.discard()
    return entry

@router.delete("")
def clear(
    db: Session = Depends(get_db),
    speech: SpeechController = Depends(get_speech_controller),
    quizzes: QuizRegistry = Depends(get_quiz_registry),
):
    speech.stop()
    quizzes.discard()
    removed = clear_history(db)
    return {"ok": True, "removed": removed}
