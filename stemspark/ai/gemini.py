# stemspark/ai/gemini.py
import os, logging
import requests

from stemspark.ai.errors import AIConfigError, UpstreamError, EmptyResponseError

log = logging.getLogger("gemini")

# ------------------ Config ------------------
GEMINI_API_KEY     = os.getenv("GEMINI_API_KEY", "").strip()
MODEL_NAME         = os.getenv("MODEL_NAME", "gemini-2.5-flash").strip()
SUGGEST_MODEL_NAME = os.getenv("SUGGEST_MODEL_NAME", MODEL_NAME).strip()
GEMINI_TIMEOUT     = int(os.getenv("GEMINI_TIMEOUT", "60"))

BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

log.info("MODEL=%r KEY_SET=%s", MODEL_NAME, "YES" if GEMINI_API_KEY else "NO")

def ensure_ai_ready():
    if not GEMINI_API_KEY:
        raise AIConfigError("GEMINI_API_KEY environment variable not set.")
    if not MODEL_NAME:
        raise AIConfigError("MODEL_NAME environment variable not set.")

# Plain session: no automatic retries, recovery is always user-initiated
_session = requests.Session()

def _post_genai(model: str, payload: dict, timeout: int | None = None) -> dict:
    """model is the id (e.g. 'gemini-2.5-flash'), NOT a URL."""
    if model.startswith("http"):
        parts = model.split("/models/")
        model = parts[-1].split(":")[0] if len(parts) > 1 else model
    url = f"{BASE_URL}/{model}:generateContent"
    resp = _session.post(url, params={"key": GEMINI_API_KEY}, json=payload, timeout=timeout or GEMINI_TIMEOUT)
    if resp.status_code != 200:
        log.error("Google API Error: %s %s", resp.status_code, resp.text[:400])
        raise UpstreamError(resp.status_code, f"Google API Error: {resp.text}")
    return resp.json()

def _extract_text(data: dict) -> str:
    # response -> candidates -> content -> parts -> text
    cand = (data.get("candidates") or [{}])[0]
    parts = (cand.get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts if isinstance(p, dict)).strip()

def forward_prompt(prompt: str, model: str | None = None) -> str:
    """Sends a raw prompt upstream and returns the generated text unchanged."""
    ensure_ai_ready()
    payload = {"contents": [{"parts": [{"text": prompt}]}]}
    text = _extract_text(_post_genai((model or MODEL_NAME).strip(), payload))
    if not text:
        raise EmptyResponseError("Received an empty response from the AI.")
    return text

def generate_text(prompt: str,
                  system_instruction: str | None = None,
                  model: str | None = None,
                  temperature: float = 0.7,
                  json_mode: bool = False) -> str:
    """
    Generates text with the tutor persona.
    - json_mode asks the model for application/json (used by quizzes).
    - Raises EmptyResponseError when no candidate carries text.
    """
    ensure_ai_ready()
    generation_config = {"temperature": temperature, "topP": 0.95, "topK": 40}
    if json_mode:
        generation_config["responseMimeType"] = "application/json"

    payload = {
        "generationConfig": generation_config,
        "contents": [{"parts": [{"text": prompt}]}],
    }
    if system_instruction:
        payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

    text = _extract_text(_post_genai((model or MODEL_NAME).strip(), payload))
    if not text:
        raise EmptyResponseError("Received an empty response from the AI.")
    return text
