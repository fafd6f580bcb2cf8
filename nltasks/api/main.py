"""HTTP entry point: ``uvicorn nltasks.api.main:app``."""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nltasks.api.routes.meetings import router as meetings_router
from nltasks.api.routes.tasks import router as tasks_router
from nltasks.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Natural-Language Tasks API",
    description=(
        "Parse one-line task descriptions and meeting transcripts into tasks "
        "with an assignee, a due moment and a P1-P4 priority"
    ),
    version="0.1.0",
)

# Local dev frontends on any port
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_origin_regex=r"http://localhost:\d+",
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(tasks_router)
app.include_router(meetings_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
