import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from stemspark.core.settings import APP_TITLE, CORS_ORIGINS, LOG_LEVEL
from stemspark.db import Base, engine
from stemspark.deps import shutdown_speech
from stemspark.models import history_entry, preference  # noqa: F401  (registers tables)

from stemspark.routers import generate as generate_router
from stemspark.routers import history as history_router
from stemspark.routers import quiz as quiz_router
from stemspark.routers import speech as speech_router
from stemspark.routers import voices as voices_router

load_dotenv()
logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
Base.metadata.create_all(bind=engine)

app = FastAPI(title=f"{APP_TITLE} API")

# ==== CORS ====
origins_list = [o.strip() for o in CORS_ORIGINS.split(",") if o.strip()] or ["http://localhost:5173"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==== Routers ====
app.include_router(generate_router.router)
app.include_router(history_router.router)
app.include_router(quiz_router.router)
app.include_router(speech_router.router)
app.include_router(voices_router.router)

@app.on_event("shutdown")
def release_speech():
    shutdown_speech()

@app.get("/health")
def health():
    return {"status": "ok"}
