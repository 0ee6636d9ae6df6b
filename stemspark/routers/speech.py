from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from stemspark.deps import get_db, get_speech_controller, get_read_aloud_monitor
from stemspark.domain.history.service import get_selected_voice
from stemspark.domain.speech.controller import SpeechController, UNSUPPORTED_MESSAGE
from stemspark.domain.speech.monitor import ReadAloudMonitor
from stemspark.schemas.speech import SpeakIn, SpeechStatusOut

log = logging.getLogger("speech")
router = APIRouter(prefix="/api/speech", tags=["speech"])

def _status(speech: SpeechController, monitor: ReadAloudMonitor) -> SpeechStatusOut:
    return SpeechStatusOut(
        status=speech.status.value,
        speaking=speech.is_speaking(),
        paused=speech.is_paused(),
        lastEvent=monitor.last_event,
        lastError=monitor.last_error,
    )

@router.get("/status", response_model=SpeechStatusOut)
def status(
    speech: SpeechController = Depends(get_speech_controller),
    monitor: ReadAloudMonitor = Depends(get_read_aloud_monitor),
):
    return _status(speech, monitor)

@router.post("/speak", response_model=SpeechStatusOut)
def speak(
    body: SpeakIn,
    db: Session = Depends(get_db),
    speech: SpeechController = Depends(get_speech_controller),
    monitor: ReadAloudMonitor = Depends(get_read_aloud_monitor),
):
    if not speech.supported:
        raise HTTPException(status_code=503, detail=UNSUPPORTED_MESSAGE)
    voice_uri = body.voiceURI or get_selected_voice(db)
    monitor.started()
    speech.speak(body.text, body.language, monitor.ended, monitor.failed, voice_uri)
    return _status(speech, monitor)

@router.post("/pause", response_model=SpeechStatusOut)
def pause(
    speech: SpeechController = Depends(get_speech_controller),
    monitor: ReadAloudMonitor = Depends(get_read_aloud_monitor),
):
    speech.pause()
    return _status(speech, monitor)

@router.post("/resume", response_model=SpeechStatusOut)
def resume(
    speech: SpeechController = Depends(get_speech_controller),
    monitor: ReadAloudMonitor = Depends(get_read_aloud_monitor),
):
    speech.resume()
    return _status(speech, monitor)

@router.post("/stop", response_model=SpeechStatusOut)
def stop(
    speech: SpeechController = Depends(get_speech_controller),
    monitor: ReadAloudMonitor = Depends(get_read_aloud_monitor),
):
    speech.stop()
    monitor.reset()
    return _status(speech, monitor)
