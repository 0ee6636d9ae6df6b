# stemspark/core/utils_tts.py
from pathlib import Path
import re, wave, logging

log = logging.getLogger("tts")

# Cloud TTS rejects requests above 5000 bytes
MAX_CHUNK_CHARS = 4000

def sanitize_text_for_tts(text: str) -> str:
    """Drops markdown/markup symbols that would otherwise be read out."""
    if not text:
        return ""
    s = str(text).strip()
    s = s.replace("*", "").replace("_", "").replace("#", "").replace("`", "")
    s = re.sub(r"<[^>]+>", " ", s)
    return re.sub(r"\s+", " ", s).strip()

def split_text(text: str, max_chars: int = MAX_CHUNK_CHARS) -> list[str]:
    """Splits at the last full stop (or space) under max_chars without cutting words."""
    chunks = []
    while len(text) > max_chars:
        idx = text.rfind(".", 0, max_chars)
        if idx == -1:
            idx = text.rfind(" ", 0, max_chars)
        if idx == -1:
            idx = max_chars - 1
        chunks.append(text[:idx + 1].strip())
        text = text[idx + 1:].strip()
    if text:
        chunks.append(text)
    return chunks

def is_valid_wav(path: Path) -> bool:
    try:
        if not path.exists() or path.stat().st_size < 64:
            return False
        with wave.open(str(path), "rb") as wf:
            return wf.getnframes() > 0 and wf.getframerate() >= 8000
    except (OSError, EOFError, wave.Error):
        return False
