# stemspark/ai/tts.py
"""
Speech platform backed by Google Cloud Text-to-Speech (synthesis and voice
catalog) with local playback through pygame.mixer.

Each utterance plays on its own daemon thread. cancel() stops the mixer and
the in-flight utterance reports "interrupted"; the controller decides
whether that event is still relevant.
"""
import time, uuid, tempfile, threading, logging
from pathlib import Path
from typing import Callable, List, Optional

from google.cloud import texttospeech
import pygame

from stemspark.core.settings import TTS_VOICE
from stemspark.core.utils_tts import sanitize_text_for_tts, split_text, is_valid_wav
from stemspark.domain.speech.voices import Voice

log = logging.getLogger("tts")

SAMPLE_RATE = 24000
POLL_SECONDS = 0.05


class CloudSpeechPlatform:

    def __init__(self, default_voice: str = TTS_VOICE):
        self._client = texttospeech.TextToSpeechClient()
        self._default_voice = default_voice
        self._voices: List[Voice] = []
        self._listeners: List[Callable[[], object]] = []
        self._lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self.speaking = False
        self.paused = False

        pygame.mixer.init()
        log.info("Narrator mixer initialized.")
        threading.Thread(target=self._load_voices, daemon=True).start()

    # ---------- catalog ----------
    def _load_voices(self):
        try:
            res = self._client.list_voices()
        except Exception as e:
            log.warning("list_voices failed: %s", e)
            return
        voices = [
            Voice(
                name=v.name,
                lang=(v.language_codes[0] if v.language_codes else ""),
                default=(v.name == self._default_voice),
                voice_uri=v.name,
                local_service=False,
            )
            for v in res.voices
        ]
        with self._lock:
            self._voices = voices
            listeners = list(self._listeners)
        for cb in listeners:
            cb()

    def get_voices(self) -> List[Voice]:
        with self._lock:
            return list(self._voices)

    def on_voices_changed(self, callback: Callable[[], object]) -> None:
        with self._lock:
            self._listeners.append(callback)

    # ---------- synthesis ----------
    def synthesize(self, text: str, lang: str, voice: Optional[Voice]) -> bytes:
        params = texttospeech.VoiceSelectionParams(
            language_code=voice.lang if voice else lang,
            name=voice.name if voice else "",
        )
        audio_config = texttospeech.AudioConfig(
            audio_encoding=texttospeech.AudioEncoding.LINEAR16,
            sample_rate_hertz=SAMPLE_RATE,
        )
        res = self._client.synthesize_speech(
            input=texttospeech.SynthesisInput(text=text), voice=params, audio_config=audio_config
        )
        # LINEAR16 content already carries a WAV header
        return res.audio_content

    # ---------- playback ----------
    def speak(self, utterance, on_end, on_error) -> None:
        stop_event = threading.Event()
        with self._lock:
            if self._stop_event is not None:
                self._stop_event.set()
            self._stop_event = stop_event
            self.speaking = True
            self.paused = False
        threading.Thread(
            target=self._playback_worker, args=(utterance, on_end, on_error, stop_event), daemon=True
        ).start()

    def _owns_mixer(self, stop_event: threading.Event) -> bool:
        return self._stop_event is stop_event and not stop_event.is_set()

    def _play_file(self, path: Path, stop_event: threading.Event):
        # the mixer is shared: only the live utterance may load into it
        with self._lock:
            if not self._owns_mixer(stop_event):
                return
            pygame.mixer.music.load(str(path))
            pygame.mixer.music.play()
            if self.paused:
                pygame.mixer.music.pause()
        while not stop_event.is_set():
            if self.paused:
                time.sleep(POLL_SECONDS)
                continue
            if not pygame.mixer.music.get_busy():
                break
            time.sleep(POLL_SECONDS)
        with self._lock:
            if self._stop_event is stop_event or self._stop_event is None:
                pygame.mixer.music.unload()

    def _playback_worker(self, utterance, on_end, on_error, stop_event: threading.Event):
        try:
            for i, chunk in enumerate(split_text(sanitize_text_for_tts(utterance.text))):
                if stop_event.is_set():
                    break
                wav = self.synthesize(chunk, utterance.lang, utterance.voice)
                # cancel() may have run while the request was in flight
                if stop_event.is_set():
                    break
                path = Path(tempfile.gettempdir()) / f"stemspark_{uuid.uuid4().hex}_{i}.wav"
                path.write_bytes(wav)
                try:
                    if not is_valid_wav(path):
                        raise RuntimeError(f"invalid audio for chunk {i} ({len(wav)} bytes)")
                    self._play_file(path, stop_event)
                finally:
                    path.unlink(missing_ok=True)
        except Exception as e:
            log.exception("playback worker failed: %s", e)
            self._finish(stop_event)
            on_error("synthesis-failed")
            return

        self._finish(stop_event)
        if stop_event.is_set():
            on_error("interrupted")
        else:
            on_end()

    def _finish(self, stop_event: threading.Event):
        with self._lock:
            if self._stop_event is stop_event:
                self._stop_event = None
                self.speaking = False
                self.paused = False

    def cancel(self) -> None:
        with self._lock:
            if self._stop_event is not None:
                self._stop_event.set()
            self._stop_event = None
            self.speaking = False
            self.paused = False
            if pygame.mixer.get_init():
                pygame.mixer.music.stop()

    def pause(self) -> None:
        # also holds while a chunk is still synthesizing; _play_file honours it
        with self._lock:
            self.paused = True
            pygame.mixer.music.pause()

    def resume(self) -> None:
        with self._lock:
            pygame.mixer.music.unpause()
            self.paused = False

    def shutdown(self) -> None:
        self.cancel()
        pygame.mixer.quit()
