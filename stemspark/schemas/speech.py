from typing import List, Literal, Optional
from pydantic import BaseModel

from stemspark.core.settings import DEFAULT_LANGUAGE, TEST_PHRASE

class VoiceOut(BaseModel):
    name: str
    lang: str
    default: bool
    voiceURI: str

class VoiceSettingIn(BaseModel):
    voiceURI: Optional[str] = None

class VoiceSettingOut(BaseModel):
    voiceURI: Optional[str] = None

class VoiceTestIn(BaseModel):
    voiceURI: str
    text: str = TEST_PHRASE
    language: Optional[str] = None   # defaults to the voice's own locale

class SpeakIn(BaseModel):
    text: str
    language: str = DEFAULT_LANGUAGE
    voiceURI: Optional[str] = None

class SpeechStatusOut(BaseModel):
    status: Literal["idle", "playing", "paused"]
    speaking: bool
    paused: bool
    lastEvent: Optional[Literal["started", "ended", "error"]] = None
    lastError: Optional[str] = None

class VoicesOut(BaseModel):
    voices: List[VoiceOut]
    selectedVoiceURI: Optional[str] = None
