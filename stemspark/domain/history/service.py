from __future__ import annotations
import logging
from typing import List, Optional, Union

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from stemspark.core.settings import MAX_HISTORY_ITEMS, SELECTED_VOICE_KEY
from stemspark.models.history_entry import HistoryEntry
from stemspark.models.preference import Preference
from stemspark.schemas.generation import ExplanationFormat, ExplanationRequest, GenerationOutput, QuizQuestion
from stemspark.schemas.history import HistoryEntryOut

log = logging.getLogger("history")

_output_adapter = TypeAdapter(Union[str, List[QuizQuestion]])


def _dump_output(output: Union[str, List[QuizQuestion]]):
    if isinstance(output, str):
        return output
    return [q.model_dump() for q in output]


def to_out(row: HistoryEntry) -> HistoryEntryOut:
    """Raises ValueError/ValidationError when the stored row is unusable."""
    output = _output_adapter.validate_python(row.output)
    if not output:
        raise ValueError("empty output")
    return HistoryEntryOut(
        id=str(row.id),
        topic=row.topic,
        ageLevel=row.age_level,
        format=ExplanationFormat(row.format),
        language=row.language,
        readAloud=bool(row.read_aloud),
        output=output,
        suggestedTopic=row.suggested_topic,
        timestamp=row.created_at,
    )


def add_entry(db: Session, req: ExplanationRequest, result: GenerationOutput,
              cap: int = MAX_HISTORY_ITEMS) -> HistoryEntry:
    row = HistoryEntry(
        topic=req.topic,
        age_level=req.ageLevel,
        format=req.format.value,
        language=req.language,
        read_aloud=req.readAloud,
        output=_dump_output(result.explanationResult),
        suggested_topic=result.suggestedTopic,
    )
    db.add(row)
    db.flush()

    # oldest beyond the cap go first; the new entry always survives
    cap = max(1, cap)
    evicted = db.execute(
        select(HistoryEntry.id).order_by(HistoryEntry.id.desc()).offset(cap)
    ).scalars().all()
    if evicted:
        db.execute(delete(HistoryEntry).where(HistoryEntry.id.in_(evicted)))
        log.info("history cap %s reached, evicted %s entries", cap, len(evicted))

    db.commit()
    db.refresh(row)
    return row


def list_entries(db: Session) -> List[HistoryEntryOut]:
    """Most recent first. Corrupt rows are dropped instead of failing the listing."""
    rows = db.execute(select(HistoryEntry).order_by(HistoryEntry.id.desc())).scalars().all()
    out: List[HistoryEntryOut] = []
    corrupt: List[int] = []
    for row in rows:
        try:
            out.append(to_out(row))
        except (ValueError, ValidationError) as e:
            log.error("Failed to parse history entry %s, discarding it: %s", row.id, e)
            corrupt.append(row.id)
    if corrupt:
        db.execute(delete(HistoryEntry).where(HistoryEntry.id.in_(corrupt)))
        db.commit()
    return out


def get_entry(db: Session, entry_id: int) -> Optional[HistoryEntryOut]:
    row = db.get(HistoryEntry, entry_id)
    if row is None:
        return None
    try:
        return to_out(row)
    except (ValueError, ValidationError) as e:
        log.error("Failed to parse history entry %s, discarding it: %s", row.id, e)
        db.delete(row)
        db.commit()
        return None


def clear_history(db: Session) -> int:
    n = db.execute(delete(HistoryEntry)).rowcount
    db.commit()
    return n or 0


# ---------- preferences ----------

def get_selected_voice(db: Session) -> Optional[str]:
    pref = db.get(Preference, SELECTED_VOICE_KEY)
    return pref.value if pref and pref.value else None


def set_selected_voice(db: Session, voice_uri: Optional[str]) -> Optional[str]:
    pref = db.get(Preference, SELECTED_VOICE_KEY)
    voice_uri = (voice_uri or "").strip() or None
    if voice_uri is None:
        if pref is not None:
            db.delete(pref)
    elif pref is None:
        db.add(Preference(key=SELECTED_VOICE_KEY, value=voice_uri))
    else:
        pref.value = voice_uri
    db.commit()
    return voice_uri
