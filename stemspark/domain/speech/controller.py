from __future__ import annotations
import threading, logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Protocol
from uuid import uuid4

from stemspark.domain.speech.language import map_language, base_language
from stemspark.domain.speech.voices import Voice, VoiceDirectory

log = logging.getLogger("speech")

EXPECTED_CANCEL_ERRORS = frozenset({"interrupted", "canceled"})
UNSUPPORTED_MESSAGE = "Speech synthesis is not supported on this server."

OnEnd = Callable[[], None]
OnError = Callable[[str], None]


class SpeechStatus(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass
class Utterance:
    text: str
    lang: str
    voice: Optional[Voice] = None
    id: str = field(default_factory=lambda: uuid4().hex[:12])


@dataclass
class SpeechSession:
    """Queue state owned by exactly one speak() call."""
    segments: List[Utterance] = field(default_factory=list)
    cursor: Optional[int] = None
    status: SpeechStatus = SpeechStatus.IDLE
    on_end: Optional[OnEnd] = None
    on_error: Optional[OnError] = None

    @property
    def current(self) -> Optional[Utterance]:
        if self.cursor is None or not (0 <= self.cursor < len(self.segments)):
            return None
        return self.segments[self.cursor]

    def clear(self):
        self.segments = []
        self.cursor = None
        self.status = SpeechStatus.IDLE
        self.on_end = None
        self.on_error = None


class SpeechPlatform(Protocol):
    speaking: bool
    paused: bool

    def get_voices(self) -> List[Voice]: ...
    def on_voices_changed(self, callback: Callable[[], object]) -> None: ...
    def speak(self, utterance: Utterance, on_end: OnEnd, on_error: OnError) -> None: ...
    def cancel(self) -> None: ...
    def pause(self) -> None: ...
    def resume(self) -> None: ...


class SpeechController:
    """
    Sequential utterance queue over a speech platform.

    idle -> playing <-> paused -> idle; stop() forces idle from anywhere.
    Every speak()/test() cancels whatever is playing first, so only one
    session is ever live. Platform events carry the utterance they belong to;
    events for anything but the live session's current segment are stale and
    dropped, so a late event can never reach an old caller.
    """

    def __init__(self, platform: Optional[SpeechPlatform], voices: Optional[VoiceDirectory] = None):
        self._platform = platform
        self.voices = voices or VoiceDirectory(platform)
        self._session = SpeechSession()
        self._test: Optional[Utterance] = None
        self._lock = threading.RLock()

    # ---------- state ----------
    @property
    def supported(self) -> bool:
        return self._platform is not None

    @property
    def session(self) -> SpeechSession:
        return self._session

    @property
    def status(self) -> SpeechStatus:
        return self._session.status

    def is_speaking(self) -> bool:
        p = self._platform
        return bool(p and p.speaking and not p.paused)

    def is_paused(self) -> bool:
        p = self._platform
        return bool(p and p.paused)

    # ---------- voice selection ----------
    def select_voice(self, lang: str, voice_uri: str | None = None) -> Optional[Voice]:
        voices = self.voices.list()
        if voice_uri:
            chosen = next((v for v in voices if v.voice_uri == voice_uri), None)
            if chosen:
                return chosen
            log.warning('Selected voice URI "%s" not found. Falling back to language-based selection.', voice_uri)

        exact = lang.lower()
        base = base_language(lang)

        def same_locale(v: Voice) -> bool:
            return v.lang.lower() == exact

        def same_base(v: Voice) -> bool:
            return base_language(v.lang) == base

        for match in (
            lambda v: same_locale(v) and v.local_service,
            lambda v: same_base(v) and v.local_service,
            same_locale,
            same_base,
        ):
            chosen = next((v for v in voices if match(v)), None)
            if chosen:
                return chosen
        return None

    # ---------- operations ----------
    def speak(self, text: str, language: str, on_end: OnEnd, on_error: OnError,
              voice_uri: str | None = None) -> None:
        if self._platform is None:
            on_error(UNSUPPORTED_MESSAGE)
            return

        self.stop()
        lang = map_language(language)

        if not text or not text.strip():
            on_end()
            return

        voice = self.select_voice(lang, voice_uri)
        if voice is None:
            log.warning("No suitable voice found for language %s (BCP47: %s). Using system default.", language, lang)

        session = SpeechSession(
            segments=[Utterance(text=text, lang=lang, voice=voice)],
            status=SpeechStatus.PLAYING,
            on_end=on_end,
            on_error=on_error,
        )
        with self._lock:
            self._session = session
        self._play_next(session)

    def pause(self) -> None:
        with self._lock:
            session = self._session
            if session.status != SpeechStatus.PLAYING:
                return
            p = self._platform
            if p.speaking and not p.paused:
                p.pause()
                session.status = SpeechStatus.PAUSED

    def resume(self) -> None:
        with self._lock:
            session = self._session
            if session.status != SpeechStatus.PAUSED:
                return
            if self._platform.paused:
                self._platform.resume()
            session.status = SpeechStatus.PLAYING

    def stop(self) -> None:
        with self._lock:
            old = self._session
            old.clear()
            self._session = SpeechSession()
            self._test = None
        if self._platform is not None:
            self._platform.cancel()

    def test(self, voice_uri: str, text: str, language: str | None, on_error: OnError) -> None:
        """One-shot preview bound to a voice, outside the queue lifecycle."""
        if self._platform is None:
            on_error(UNSUPPORTED_MESSAGE)
            return

        self.stop()
        voice = self.voices.find(voice_uri)
        if voice is None:
            on_error(f'Voice with URI "{voice_uri}" not found.')
            return

        utt = Utterance(text=text, lang=map_language(language or voice.lang), voice=voice)
        with self._lock:
            self._test = utt

        def _done():
            with self._lock:
                if self._test is utt:
                    self._test = None

        def _failed(code: str):
            log.warning("Test voice error for %s: %s", voice.name, code)
            _done()
            on_error(code or "Unknown error during test voice playback.")

        self._platform.speak(utt, _done, _failed)

    # ---------- platform events ----------
    def _play_next(self, session: SpeechSession) -> None:
        finished_cb: Optional[OnEnd] = None
        with self._lock:
            if session is not self._session or session.status == SpeechStatus.IDLE:
                log.info("Speech queue processing finished or was externally stopped.")
                return
            session.cursor = 0 if session.cursor is None else session.cursor + 1
            utt = session.current
            if utt is None:
                finished_cb = session.on_end
                session.clear()
        if finished_cb is not None:
            finished_cb()
            return
        if utt is None:
            return
        self._platform.speak(
            utt,
            lambda: self._on_segment_end(session, utt),
            lambda code: self._on_segment_error(session, utt, code),
        )

    def _is_live(self, session: SpeechSession, utt: Utterance) -> bool:
        return session is self._session and session.current is utt

    def _on_segment_end(self, session: SpeechSession, utt: Utterance) -> None:
        with self._lock:
            if not self._is_live(session, utt):
                log.info('Utterance ended for "%s..." but queue is no longer active.', utt.text[:30])
                return
        self._play_next(session)

    def _on_segment_error(self, session: SpeechSession, utt: Utterance, code: str) -> None:
        code = code or "Unknown error"
        with self._lock:
            # stop() and speak() swap the session out before cancelling, so the
            # "interrupted"/"canceled" they provoke always land here
            if not self._is_live(session, utt):
                if code in EXPECTED_CANCEL_ERRORS:
                    log.info("Error '%s' was an expected cancellation. Not reporting.", code)
                else:
                    log.info("Stale speech event '%s' on utterance \"%s...\" ignored.", code, utt.text[:70])
                return
            callback = session.on_error
            session.clear()
        log.warning("Speech synthesis error: %s (voice=%s lang=%s)",
                    code, utt.voice.name if utt.voice else None, utt.lang)
        if callback is not None:
            callback(f"Speech synthesis error: {code}")
