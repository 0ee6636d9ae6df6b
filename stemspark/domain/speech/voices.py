from __future__ import annotations
import threading, logging
from dataclasses import dataclass
from typing import List, Optional

log = logging.getLogger("speech")

@dataclass(frozen=True)
class Voice:
    name: str
    lang: str
    default: bool
    voice_uri: str
    local_service: bool = False


class VoiceDirectory:
    """
    Session cache over the platform voice catalog.
    The catalog may fill in asynchronously; the platform notifies changes
    and the cache is re-read then. list() never waits for it.
    """

    def __init__(self, platform):
        self._platform = platform
        self._voices: List[Voice] = []
        self._lock = threading.Lock()
        if platform is not None:
            platform.on_voices_changed(self.refresh)
            self.refresh()

    def refresh(self) -> List[Voice]:
        if self._platform is None:
            return []
        voices = list(self._platform.get_voices() or [])
        with self._lock:
            self._voices = voices
        log.info("voice catalog: %s voices", len(voices))
        return list(voices)

    def list(self) -> List[Voice]:
        with self._lock:
            cached = list(self._voices)
        if not cached:
            return self.refresh()
        return cached

    def find(self, voice_uri: str | None) -> Optional[Voice]:
        if not voice_uri:
            return None
        for v in self.list():
            if v.voice_uri == voice_uri:
                return v
        return None
