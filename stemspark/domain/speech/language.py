import re, logging

log = logging.getLogger("speech")

DEFAULT_LOCALE = "en-US"

# name / synonym -> BCP 47 tag
LANGUAGE_TAGS = {
    "english": "en-US",
    "english (us)": "en-US",
    "english (uk)": "en-GB",
    "english (gb)": "en-GB",
    "spanish": "es-ES",
    "spanish (spain)": "es-ES",
    "spanish (mexico)": "es-MX",
    "french": "fr-FR",
    "french (france)": "fr-FR",
    "french (canada)": "fr-CA",
    "german": "de-DE",
    "japanese": "ja-JP",
    "korean": "ko-KR",
    "italian": "it-IT",
    "portuguese": "pt-BR",
    "portuguese (portugal)": "pt-PT",
    "portuguese (brazil)": "pt-BR",
    "chinese": "zh-CN",
    "mandarin": "zh-CN",
    "dutch": "nl-NL",
    "russian": "ru-RU",
    "hindi": "hi-IN",
    "arabic": "ar-XA",
    "polish": "pl-PL",
    "swedish": "sv-SE",
    "turkish": "tr-TR",
}

# bare names only, longest first so "portuguese" wins over shorter prefixes
_BASE_NAMES = sorted((k for k in LANGUAGE_TAGS if "(" not in k), key=len, reverse=True)

LOCALE_RE = re.compile(r"^([a-z]{2})(?:-([a-z0-9]{2,4}))?$", re.IGNORECASE)

def map_language(language: str | None) -> str:
    """Free-text language name -> locale tag. Never raises."""
    raw = (language or "").strip()
    key = raw.lower()

    if key in LANGUAGE_TAGS:
        return LANGUAGE_TAGS[key]

    m = LOCALE_RE.match(raw)
    if m:
        lang, region = m.group(1).lower(), m.group(2)
        return f"{lang}-{region.upper()}" if region else lang

    # "english (australia)", "spanish - latin america", ...
    for name in _BASE_NAMES:
        if key.startswith(name):
            return LANGUAGE_TAGS[name]

    log.warning('Unmapped language: "%s", defaulting to %s.', raw, DEFAULT_LOCALE)
    return DEFAULT_LOCALE

def base_language(tag: str) -> str:
    return (tag or "").split("-")[0].lower()
