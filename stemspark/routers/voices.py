from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from stemspark.deps import get_db, get_speech_controller, get_read_aloud_monitor
from stemspark.domain.history.service import get_selected_voice, set_selected_voice
from stemspark.domain.speech.controller import SpeechController, EXPECTED_CANCEL_ERRORS, UNSUPPORTED_MESSAGE
from stemspark.domain.speech.monitor import ReadAloudMonitor
from stemspark.domain.speech.voices import Voice
from stemspark.schemas.speech import VoiceOut, VoicesOut, VoiceSettingIn, VoiceSettingOut, VoiceTestIn

log = logging.getLogger("voices")
router = APIRouter(prefix="/api", tags=["voices"])

def _voice_out(v: Voice) -> VoiceOut:
    return VoiceOut(name=v.name, lang=v.lang, default=v.default, voiceURI=v.voice_uri)

@router.get("/voices", response_model=VoicesOut)
def list_voices(db: Session = Depends(get_db), speech: SpeechController = Depends(get_speech_controller)):
    """May be empty while the platform is still loading its catalog."""
    return VoicesOut(
        voices=[_voice_out(v) for v in speech.voices.list()],
        selectedVoiceURI=get_selected_voice(db),
    )

@router.post("/voices/test")
def test_voice(
    body: VoiceTestIn,
    speech: SpeechController = Depends(get_speech_controller),
    monitor: ReadAloudMonitor = Depends(get_read_aloud_monitor),
):
    if not speech.supported:
        raise HTTPException(status_code=503, detail=UNSUPPORTED_MESSAGE)
    voice = speech.voices.find(body.voiceURI)
    if voice is None:
        raise HTTPException(status_code=404, detail=f'Voice with URI "{body.voiceURI}" not found.')

    def on_error(code: str):
        # rapid re-tests cancel each other; that is not a failure
        if code in EXPECTED_CANCEL_ERRORS:
            log.info('Test voice playback for "%s" was %s.', voice.name, code)
            return
        monitor.failed(f"Could not play test for {voice.name}: {code}")

    monitor.reset()
    speech.test(voice.voice_uri, body.text, body.language, on_error)
    return {"ok": True, "voice": _voice_out(voice)}

@router.get("/settings/voice", response_model=VoiceSettingOut)
def get_voice_setting(db: Session = Depends(get_db)):
    return VoiceSettingOut(voiceURI=get_selected_voice(db))

@router.put("/settings/voice", response_model=VoiceSettingOut)
def put_voice_setting(body: VoiceSettingIn, db: Session = Depends(get_db)):
    return VoiceSettingOut(voiceURI=set_selected_voice(db, body.voiceURI))
