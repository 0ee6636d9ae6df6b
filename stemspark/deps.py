import threading, logging

from stemspark.core.settings import SPEECH_ENABLED
from stemspark.db import get_db
from stemspark.domain.quiz.engine import QuizRegistry
from stemspark.domain.speech.controller import SpeechController
from stemspark.domain.speech.monitor import ReadAloudMonitor

log = logging.getLogger("deps")

_speech: SpeechController | None = None
_platform = None
_speech_lock = threading.Lock()
_quizzes = QuizRegistry()
_monitor = ReadAloudMonitor()

def _build_platform():
    if not SPEECH_ENABLED:
        log.info("speech disabled (SPEECH_ENABLED=0)")
        return None
    from stemspark.ai.tts import CloudSpeechPlatform  # needs audio device + GCP credentials
    try:
        return CloudSpeechPlatform()
    except Exception as e:
        log.warning("speech platform unavailable, read-aloud disabled: %s", e)
        return None

def get_speech_controller() -> SpeechController:
    global _speech, _platform
    with _speech_lock:
        if _speech is None:
            _platform = _build_platform()
            _speech = SpeechController(_platform)
        return _speech

def shutdown_speech() -> None:
    """Stops playback and releases the audio device; the next request rebuilds it."""
    global _speech, _platform
    with _speech_lock:
        speech, platform = _speech, _platform
        _speech = _platform = None
    if speech is not None:
        speech.stop()
    if platform is not None:
        platform.shutdown()

def get_quiz_registry() -> QuizRegistry:
    return _quizzes

def get_read_aloud_monitor() -> ReadAloudMonitor:
    return _monitor

__all__ = ["get_db", "get_speech_controller", "get_quiz_registry", "get_read_aloud_monitor", "shutdown_speech"]
