from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fluxvid.config import get_settings
from fluxvid.handlers import video_handler
from fluxvid.handlers.error_handler import register_exception_handlers

logging.basicConfig(level=get_settings().log_level.upper())

app = FastAPI(title="Flux Video API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(video_handler.router)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
