"""Render every failure as ``{"error": message}``."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fluxvid.services.errors import VideoPipelineError

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = {"prompt", "modelId", "model_id"}


async def pipeline_error_handler(request: Request, exc: VideoPipelineError) -> JSONResponse:
    logger.warning("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, type(exc).__name__)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(
        err.get("type") == "missing" or _REQUIRED_FIELDS.intersection(str(part) for part in err.get("loc", ()))
        for err in errors
    ):
        message = "Prompt and modelId are required"
    else:
        message = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ())[1:]) or 'body'}: {err.get('msg', 'invalid')}"
            for err in errors
        ) or "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VideoPipelineError, pipeline_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
