import os
from dotenv import load_dotenv

load_dotenv()

APP_TITLE = "STEM Spark Kids"

# ==== Form defaults ====
DEFAULT_TOPIC = "Photosynthesis"
MIN_AGE_LEVEL = 4
MAX_AGE_LEVEL = 12
DEFAULT_AGE_LEVEL = 8
DEFAULT_FORMAT = "story"
DEFAULT_LANGUAGE = "English"
DEFAULT_READ_ALOUD = True

# ==== History ====
MAX_HISTORY_ITEMS = max(1, int(os.getenv("MAX_HISTORY_ITEMS", "20")))

# Storage key (same name the web client used for localStorage)
SELECTED_VOICE_KEY = "stemSparkSelectedVoiceURI"

# ==== Speech ====
TTS_VOICE = os.getenv("TTS_VOICE", "en-US-Standard-C").strip()
SPEECH_ENABLED = os.getenv("SPEECH_ENABLED", "1") == "1"
TEST_PHRASE = "Hello, this is a test."

# ==== HTTP ====
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
